"""Metric catalogue: pillar membership, directionality and raw input fields."""

from enum import Enum


class Directionality(str, Enum):
    LOWER_IS_BETTER = "lower_is_better"
    HIGHER_IS_BETTER = "higher_is_better"
    PARITY = "parity"
    BOOLEAN = "boolean"


class Pillar(str, Enum):
    ENVIRONMENTAL = "environmental"
    SOCIAL = "social"
    GOVERNANCE = "governance"


PILLAR_METRICS = {
    Pillar.ENVIRONMENTAL.value: ("emission_intensity", "renewable_pct", "water_intensity", "waste_intensity"),
    Pillar.SOCIAL.value: ("injury_rate", "training_hours", "wage_ratio", "diversity_pct"),
    Pillar.GOVERNANCE.value: ("board_diversity", "board_independence", "anti_corruption", "transparency_score"),
}

METRIC_DIRECTIONS = {
    "emission_intensity": Directionality.LOWER_IS_BETTER,
    "water_intensity": Directionality.LOWER_IS_BETTER,
    "waste_intensity": Directionality.LOWER_IS_BETTER,
    "injury_rate": Directionality.LOWER_IS_BETTER,
    "renewable_pct": Directionality.HIGHER_IS_BETTER,
    "training_hours": Directionality.HIGHER_IS_BETTER,
    "diversity_pct": Directionality.HIGHER_IS_BETTER,
    "board_diversity": Directionality.HIGHER_IS_BETTER,
    "board_independence": Directionality.HIGHER_IS_BETTER,
    "transparency_score": Directionality.HIGHER_IS_BETTER,
    "wage_ratio": Directionality.PARITY,
    "anti_corruption": Directionality.BOOLEAN,
}

# All 12 scored metrics, in pillar order
SCORING_METRICS = tuple(m for metrics in PILLAR_METRICS.values() for m in metrics)

# Scored metrics that carry a numeric band (everything but the boolean)
NUMERIC_METRICS = tuple(m for m in SCORING_METRICS if METRIC_DIRECTIONS[m] is not Directionality.BOOLEAN)

# Derived intensity → raw absolute total (divided by revenue)
INTENSITY_SOURCES = {
    "emission_intensity": "emissions",
    "water_intensity": "water_usage",
    "waste_intensity": "waste_generated",
}

DIRECT_METRICS = tuple(
    m for m in NUMERIC_METRICS if m not in INTENSITY_SOURCES
)

RISK_METRICS = ("climate_risk", "geopolitical_risk", "labor_dispute_risk")

# Raw non-risk disclosures that missingness injection may blank
MCAR_FIELDS = tuple(INTENSITY_SOURCES.values()) + DIRECT_METRICS + ("anti_corruption",)

RAW_METRICS = MCAR_FIELDS + RISK_METRICS

"""
Composite Risk Scorer — blends pillar scores, derives the supplier risk factor,
applies the risk adjustment and the completeness safeguard.

RiskFactor = Σ w_r × risk_r / Σ w_r            (missing risk → 0.2)
Threshold:       Ethical = max(0, Composite − λ × max(0, RiskFactor − T) × 100)
Multiplicative:  Ethical = Composite × (1 − RiskFactor)
Final = min(Ethical, 50) when completeness < 0.70, else Ethical
"""

from typing import List, Mapping, Optional, Sequence, Tuple

from ethicscore.engine.pillar_scorer import PillarScorer
from ethicscore.models.metrics import SCORING_METRICS, Directionality, METRIC_DIRECTIONS
from ethicscore.models.scores import (
    DataQualityWarning, MetricValue, RiskLevel, ScoredSupplier, WarningKind,
)
from ethicscore.models.settings import RiskWeights, ScoringSettings
from ethicscore.models.supplier import SupplierRecord
from ethicscore.utils.helpers import clamp

DEFAULT_RISK = 0.2
COMPLETENESS_THRESHOLD = 0.70
COMPLETENESS_CAP = 50.0

# Risk level bands: risk factor below the bound → level
RISK_LEVELS = [
    (0.2, RiskLevel.LOW),
    (0.4, RiskLevel.MEDIUM),
    (0.6, RiskLevel.HIGH),
]

# Risk weight field → raw supplier metric
RISK_SOURCES = {
    "geopolitical": "geopolitical_risk",
    "climate": "climate_risk",
    "labor": "labor_dispute_risk",
}


def risk_value(raw) -> float:
    """Risk in [0, 1]; values above 1 are read as 0-100 percentages."""
    if raw is None:
        return DEFAULT_RISK
    value = float(raw)
    if value > 1:
        value = value / 100
    return clamp(value, 0.0, 1.0)


def compute_risk_factor(record: SupplierRecord, weights: RiskWeights) -> float:
    pairs = [(w, risk_value(record.raw(RISK_SOURCES[name]))) for name, w in weights.as_dict().items()]
    total = sum(w for w, _ in pairs)
    if total <= 0:
        return DEFAULT_RISK
    return sum(w * r for w, r in pairs) / total


def classify_risk(risk_factor: float) -> RiskLevel:
    for bound, level in RISK_LEVELS:
        if risk_factor < bound:
            return level
    return RiskLevel.CRITICAL


def apply_risk_adjustment(composite: float, risk_factor: float, settings: ScoringSettings) -> Tuple[float, float]:
    """Return (ethical score, penalty); the penalty is always composite minus ethical."""
    if settings.threshold_penalty:
        deduction = settings.risk_lambda * max(0.0, risk_factor - settings.risk_threshold) * 100
        ethical = max(0.0, composite - deduction)
    else:
        ethical = composite * (1 - risk_factor)
    return ethical, composite - ethical


def completeness_ratio(metrics: Mapping[str, MetricValue]) -> float:
    """Share of the 12 scoring metrics that were disclosed (anti-corruption counts only when true)."""
    present = 0
    for metric in SCORING_METRICS:
        value = metrics[metric]
        if not value.is_present:
            continue
        if METRIC_DIRECTIONS[metric] is Directionality.BOOLEAN and not value.raw:
            continue
        present += 1
    return present / len(SCORING_METRICS)


class CompositeRiskScorer:
    """Turns resolved metrics into a fully scored supplier row."""

    def __init__(self, pillar_scorer: Optional[PillarScorer] = None):
        self.pillar_scorer = pillar_scorer or PillarScorer()

    def score(
        self,
        record: SupplierRecord,
        metrics: Mapping[str, MetricValue],
        settings: ScoringSettings,
        warnings: Sequence[DataQualityWarning] = (),
    ) -> ScoredSupplier:
        pillars = self.pillar_scorer.score(metrics, settings)
        composite = pillars.composite(settings.pillar_weights)
        risk_factor = compute_risk_factor(record, settings.risk_weights)
        ethical, penalty = apply_risk_adjustment(composite, risk_factor, settings)

        completeness = completeness_ratio(metrics)
        warnings: List[DataQualityWarning] = list(warnings)
        final, capped = ethical, False
        if completeness < COMPLETENESS_THRESHOLD:
            final, capped = min(ethical, COMPLETENESS_CAP), True
            warnings.append(DataQualityWarning(
                supplier_id=record.id,
                kind=WarningKind.COMPLETENESS_CAP,
                message=f"Completeness {completeness:.2f} below {COMPLETENESS_THRESHOLD:.2f}; "
                        f"final score capped at {COMPLETENESS_CAP:g}",
            ))

        return ScoredSupplier(
            supplier_id=record.id,
            name=record.name,
            industry=record.industry,
            country=record.country,
            environmental=pillars.environmental,
            social=pillars.social,
            governance=pillars.governance,
            composite_score=composite,
            risk_factor=risk_factor,
            risk_level=classify_risk(risk_factor),
            risk_penalty=penalty,
            ethical_score=ethical,
            completeness=completeness,
            capped=capped,
            final_score=final,
            metrics=dict(metrics),
            warnings=tuple(warnings),
        )

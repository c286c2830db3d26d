"""Scoring settings: pillar, metric and risk weights plus engine switches."""

import math
from types import MappingProxyType
from pydantic import (
    BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator, model_validator,
)
from typing import Any, Dict, Iterable, Mapping

from ethicscore.exceptions import ConfigurationError
from ethicscore.models.metrics import PILLAR_METRICS

WEIGHT_SUM_TOLERANCE = 0.1       # pillar and risk weights
METRIC_WEIGHT_TOLERANCE = 1e-6   # metric weights within a pillar

DEFAULT_METRIC_WEIGHTS = {
    "environmental": {
        "emission_intensity": 0.4,
        "renewable_pct": 0.2,
        "water_intensity": 0.2,
        "waste_intensity": 0.2,
    },
    "social": {
        "injury_rate": 0.3,
        "training_hours": 0.2,
        "wage_ratio": 0.2,
        "diversity_pct": 0.3,
    },
    "governance": {
        "board_diversity": 0.25,
        "board_independence": 0.25,
        "anti_corruption": 0.2,
        "transparency_score": 0.3,
    },
}


class PillarWeights(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    environmental: float = 0.4
    social: float = 0.3
    governance: float = 0.3

    def as_dict(self) -> Dict[str, float]:
        return {
            "environmental": self.environmental,
            "social": self.social,
            "governance": self.governance,
        }


class RiskWeights(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    geopolitical: float = 0.33
    climate: float = 0.33
    labor: float = 0.34

    def as_dict(self) -> Dict[str, float]:
        return {"geopolitical": self.geopolitical, "climate": self.climate, "labor": self.labor}


def _check_weights(label: str, values: Iterable[float], tolerance: float) -> None:
    values = list(values)
    for v in values:
        if not math.isfinite(v) or v < 0:
            raise ConfigurationError(f"{label} must be finite and non-negative, got {v!r}")
    total = sum(values)
    if abs(total - 1.0) > tolerance:
        raise ConfigurationError(f"{label} must sum to 1.0 (±{tolerance:g}), got {total:.6f}")


class ScoringSettings(BaseModel):
    """Immutable scoring configuration shared by every supplier in a run.

    Validation raises ``ConfigurationError`` directly; use ``from_payload`` for
    untrusted input so structural errors are reported the same way.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    pillar_weights: PillarWeights = Field(default_factory=PillarWeights)
    environmental_weights: Mapping[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_METRIC_WEIGHTS["environmental"]), validate_default=True
    )
    social_weights: Mapping[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_METRIC_WEIGHTS["social"]), validate_default=True
    )
    governance_weights: Mapping[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_METRIC_WEIGHTS["governance"]), validate_default=True
    )
    risk_weights: RiskWeights = Field(default_factory=RiskWeights)
    risk_threshold: float = Field(0.3, description="Risk factor above which the penalty applies")
    risk_lambda: float = Field(1.0, description="Penalty multiplier")
    use_industry_bands: bool = True
    threshold_penalty: bool = Field(True, description="Threshold penalty; False = multiplicative")
    normalization_enabled: bool = True

    @field_validator("environmental_weights", "social_weights", "governance_weights")
    @classmethod
    def _read_only(cls, v):
        return MappingProxyType(dict(v))

    @field_serializer("environmental_weights", "social_weights", "governance_weights")
    def _plain_dict(self, v):
        return dict(v)

    @model_validator(mode="after")
    def _check_configuration(self):
        _check_weights("pillar weights", self.pillar_weights.as_dict().values(), WEIGHT_SUM_TOLERANCE)
        for pillar, metrics in PILLAR_METRICS.items():
            weights = self.metric_weights(pillar)
            if set(weights) != set(metrics):
                raise ConfigurationError(
                    f"{pillar} weights must cover exactly {', '.join(metrics)}; got {', '.join(sorted(weights))}"
                )
            _check_weights(f"{pillar} metric weights", weights.values(), METRIC_WEIGHT_TOLERANCE)
        _check_weights("risk weights", self.risk_weights.as_dict().values(), WEIGHT_SUM_TOLERANCE)
        if not (math.isfinite(self.risk_threshold) and 0.0 <= self.risk_threshold <= 1.0):
            raise ConfigurationError(f"risk_threshold must lie in [0, 1], got {self.risk_threshold!r}")
        if not (math.isfinite(self.risk_lambda) and self.risk_lambda > 0):
            raise ConfigurationError(f"risk_lambda must be positive, got {self.risk_lambda!r}")
        return self

    def metric_weights(self, pillar: str) -> Mapping[str, float]:
        return {
            "environmental": self.environmental_weights,
            "social": self.social_weights,
            "governance": self.governance_weights,
        }[pillar]

    def replace(self, **changes: Any) -> "ScoringSettings":
        """Validated copy with the given fields replaced."""
        return self.from_payload({**self.model_dump(), **changes})

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScoringSettings":
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise ConfigurationError(f"Invalid scoring settings: {details}") from exc

"""Pydantic models for scored suppliers and data-quality reporting."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Sequence, Tuple
from enum import Enum

from ethicscore.models.settings import PillarWeights


class MetricStatus(str, Enum):
    PRESENT = "present"
    IMPUTED = "imputed"
    ABSENT = "absent"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class WarningKind(str, Enum):
    COMPLETENESS_CAP = "completeness_cap"
    ZERO_REVENUE = "zero_revenue"


class MetricValue(BaseModel):
    """A metric as used in scoring: its raw value, provenance and [0, 1] score."""
    model_config = ConfigDict(frozen=True)

    status: MetricStatus
    raw: Optional[float] = None
    normalized: float = 0.0
    source: Optional[str] = Field(None, description="Imputation source, e.g. industry_avg or knn")

    @classmethod
    def present(cls, raw: float, normalized: float) -> "MetricValue":
        return cls(status=MetricStatus.PRESENT, raw=raw, normalized=normalized)

    @classmethod
    def imputed(cls, raw: float, normalized: float, source: str) -> "MetricValue":
        return cls(status=MetricStatus.IMPUTED, raw=raw, normalized=normalized, source=source)

    @classmethod
    def absent(cls) -> "MetricValue":
        return cls(status=MetricStatus.ABSENT)

    @property
    def is_present(self) -> bool:
        return self.status is MetricStatus.PRESENT


class DataQualityWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    supplier_id: str
    kind: WarningKind
    message: str


class PillarScores(BaseModel):
    """
    Pillar scores on 0-100.

    Composite = 100 × Σ pillar_weight × pillar_score / 100
    """
    model_config = ConfigDict(frozen=True)

    environmental: float
    social: float
    governance: float

    def composite(self, weights: PillarWeights) -> float:
        return 100 * (
            weights.environmental * self.environmental / 100
            + weights.social * self.social / 100
            + weights.governance * self.governance / 100
        )


class ScoredSupplier(BaseModel):
    model_config = ConfigDict(frozen=True)

    supplier_id: str
    name: str
    industry: str
    country: str = ""
    environmental: float
    social: float
    governance: float
    composite_score: float
    risk_factor: float
    risk_level: RiskLevel
    risk_penalty: float = Field(..., description="Composite minus ethical score")
    ethical_score: float
    completeness: float
    capped: bool = False
    final_score: float
    metrics: Dict[str, MetricValue] = Field(default_factory=dict)
    warnings: Tuple[DataQualityWarning, ...] = ()


class QualityReport(BaseModel):
    """Per-run data-quality summary; never causes a run to fail."""
    suppliers_scored: int = 0
    capped_suppliers: int = 0
    zero_revenue_suppliers: int = 0
    imputed_values: int = 0
    absent_values: int = 0
    warnings: List[DataQualityWarning] = []

    @classmethod
    def from_scores(cls, scored: Sequence[ScoredSupplier]) -> "QualityReport":
        warnings = [w for s in scored for w in s.warnings]
        statuses = [m.status for s in scored for m in s.metrics.values()]
        return cls(
            suppliers_scored=len(scored),
            capped_suppliers=sum(1 for s in scored if s.capped),
            zero_revenue_suppliers=sum(1 for w in warnings if w.kind is WarningKind.ZERO_REVENUE),
            imputed_values=sum(1 for st in statuses if st is MetricStatus.IMPUTED),
            absent_values=sum(1 for st in statuses if st is MetricStatus.ABSENT),
            warnings=warnings,
        )

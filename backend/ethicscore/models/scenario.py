"""Pydantic models for scenario parameters, results and export artifacts."""

import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Literal, Optional
from enum import Enum

from ethicscore.exceptions import ScenarioParameterError
from ethicscore.models.scores import QualityReport, ScoredSupplier
from ethicscore.models.settings import ScoringSettings
from ethicscore.models.supplier import DatasetMeta
from ethicscore.utils.helpers import percent_label, slugify


def _distinct_labels(values, what: str) -> None:
    """Values must stay distinct once rendered as percentage table names."""
    if len(set(values)) != len(values):
        raise ValueError(f"{what} must be unique")
    slugs = [slugify(percent_label(v)) for v in values]
    if len(set(slugs)) != len(slugs):
        raise ValueError(f"{what} must differ at the labelled precision, got {[percent_label(v) for v in values]}")


class ScenarioKind(str, Enum):
    S1 = "S1"   # utility: margin-constrained emission ranking
    S2 = "S2"   # sensitivity: pillar weight perturbation
    S3 = "S3"   # missingness: MCAR injection + imputation
    S4 = "S4"   # ablation: normalization off vs. on

    @classmethod
    def parse(cls, value) -> "ScenarioKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ScenarioParameterError(
                f"Unsupported scenario '{value}'; expected one of {', '.join(k.value for k in cls)}"
            ) from None


class ScenarioParams(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed: Optional[int] = Field(None, ge=0, description="Random seed; defaults to the configured seed")


class S1Params(ScenarioParams):
    min_margin_pct: float = Field(10.0, description="Minimum profit margin (percent)")

    @field_validator("min_margin_pct")
    @classmethod
    def _finite_margin(cls, v):
        if not math.isfinite(v) or not -100.0 <= v <= 100.0:
            raise ValueError("min_margin_pct must be a finite percentage in [-100, 100]")
        return v


class S2Params(ScenarioParams):
    pillar: Literal["environmental", "social", "governance"] = "environmental"
    deltas: List[float] = Field(default_factory=lambda: [-0.2, -0.1, 0.1, 0.2])

    @field_validator("deltas")
    @classmethod
    def _valid_deltas(cls, v):
        if not v:
            raise ValueError("at least one delta is required")
        for d in v:
            if not math.isfinite(d) or d <= -1.0:
                raise ValueError(f"delta must be finite and greater than -1, got {d!r}")
        _distinct_labels(v, "deltas")
        return v


class S3Params(ScenarioParams):
    rates: List[float] = Field(default_factory=lambda: [0.05, 0.10])
    k: Optional[int] = Field(None, ge=1, description="KNN neighbours")
    metric: Optional[Literal["nan_euclidean", "nan_manhattan"]] = None
    weights: Optional[Literal["uniform", "distance"]] = None

    @field_validator("rates")
    @classmethod
    def _valid_rates(cls, v):
        if not v:
            raise ValueError("at least one missingness rate is required")
        for r in v:
            if not math.isfinite(r) or not 0.0 <= r <= 1.0:
                raise ValueError(f"rate must lie in [0, 1], got {r!r}")
        _distinct_labels(v, "rates")
        return v


class S4Params(ScenarioParams):
    pass


PARAMS_BY_KIND = {
    ScenarioKind.S1: S1Params,
    ScenarioKind.S2: S2Params,
    ScenarioKind.S3: S3Params,
    ScenarioKind.S4: S4Params,
}


class RankedSupplier(BaseModel):
    rank: int
    supplier: ScoredSupplier


class ScenarioResult(BaseModel):
    """One scored-and-ranked table produced by a scenario variant."""
    scenario: ScenarioKind
    variant: str
    settings: ScoringSettings
    parameters: Dict[str, Any] = {}
    rows: List[RankedSupplier] = []
    statistics: Dict[str, Optional[float]] = {}
    quality: QualityReport = Field(default_factory=QualityReport)
    dataset: Optional[DatasetMeta] = None

    @property
    def supplier_ids(self) -> List[str]:
        return [r.supplier.supplier_id for r in self.rows]


class ExportArtifact(BaseModel):
    filename: str
    media_type: str
    content: bytes
    tables: List[str] = []

"""Pydantic models for supplier input records and dataset metadata."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, Optional, Union

from ethicscore.models.metrics import RAW_METRICS


class SupplierRecord(BaseModel):
    """One supplier and its raw sustainability disclosures.

    ``metrics`` holds only disclosed values; a missing key means the supplier
    did not report that metric.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    country: str = ""
    industry: str = "Unknown"
    revenue: Optional[float] = Field(None, description="Revenue, USD millions")
    profit_margin: Optional[float] = Field(None, description="Profit margin, percent")
    metrics: Dict[str, Union[bool, float]] = Field(default_factory=dict)

    @field_validator("metrics", mode="before")
    @classmethod
    def _known_metrics(cls, value):
        if not isinstance(value, dict):
            return value
        unknown = sorted(set(value) - set(RAW_METRICS))
        if unknown:
            raise ValueError(f"Unknown metric(s): {', '.join(unknown)}")
        return {k: v for k, v in value.items() if v is not None}

    def raw(self, metric: str) -> Optional[Union[bool, float]]:
        return self.metrics.get(metric)

    def without(self, fields) -> "SupplierRecord":
        """Copy of this record with the given raw fields removed."""
        drop = set(fields)
        return self.model_copy(
            update={"metrics": {k: v for k, v in self.metrics.items() if k not in drop}}
        )


class DatasetMeta(BaseModel):
    """Version tags stamped onto every scenario result; never used in computation."""
    version: str
    bands_version: str
    generated_at: Optional[str] = None
    supplier_count: int = 0
    seed: Optional[int] = None

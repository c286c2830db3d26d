"""Pydantic models for industry bands."""

import math
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from typing import Dict, Optional, Union


class IndustryBand(BaseModel):
    """Observed {min, avg, max} of one metric within one industry."""
    model_config = ConfigDict(frozen=True)

    min: float
    avg: float
    max: float

    @field_validator("min", "avg", "max", mode="before")
    @classmethod
    def _finite_number(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"band bound must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ValueError(f"band bound must be finite, got {value!r}")
        return float(value)

    @model_validator(mode="after")
    def _ordered(self):
        if not self.min <= self.avg <= self.max:
            raise ValueError(
                f"band must satisfy min <= avg <= max (got {self.min}, {self.avg}, {self.max})"
            )
        return self


class BandsDocument(BaseModel):
    """On-disk bands file: ``{version, seed, generated_at, bands: {industry: {metric: band}}}``."""
    version: str = "v1"
    seed: Optional[Union[int, str]] = None
    generated_at: Optional[str] = None
    bands: Dict[str, Dict[str, IndustryBand]]

"""
Industry band repository — per-industry {min, avg, max} bounds per metric,
with a global fallback band computed once at load time.

Global band: min of mins, mean of avgs, max of maxes across industries.
An explicit "global" entry in the document overrides the computed one.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from pydantic import ValidationError
from loguru import logger

from ethicscore.exceptions import BandNotFoundError, ConfigurationError
from ethicscore.models.bands import BandsDocument, IndustryBand
from ethicscore.utils.helpers import clamp

GLOBAL_KEY = "global"


class BandRepository:
    """Read-only band lookup shared by every scoring pass."""

    def __init__(
        self,
        bands: Mapping[str, Mapping[str, IndustryBand]],
        version: str = "v1",
        seed: Optional[Union[int, str]] = None,
        generated_at: Optional[str] = None,
    ):
        explicit_global: Dict[str, IndustryBand] = {}
        industry_bands: Dict[str, Dict[str, IndustryBand]] = {}
        for industry, metrics in bands.items():
            if industry.lower() == GLOBAL_KEY:
                explicit_global = dict(metrics)
            else:
                industry_bands[industry] = dict(metrics)

        self._industry = industry_bands
        self._global = self._compute_global(industry_bands)
        self._global.update(explicit_global)
        self.version = version
        self.seed = seed
        self.generated_at = generated_at

        logger.info(
            f"Loaded bands {version}: {len(industry_bands)} industries, "
            f"{len(self._global)} metrics with global fallback"
        )

    @staticmethod
    def _compute_global(industry_bands: Mapping[str, Mapping[str, IndustryBand]]) -> Dict[str, IndustryBand]:
        grouped: Dict[str, List[IndustryBand]] = {}
        for metrics in industry_bands.values():
            for metric, band in metrics.items():
                grouped.setdefault(metric, []).append(band)

        result = {}
        for metric, bands in grouped.items():
            low = min(b.min for b in bands)
            high = max(b.max for b in bands)
            avg = sum(b.avg for b in bands) / len(bands)
            result[metric] = IndustryBand(min=low, avg=clamp(avg, low, high), max=high)
        return result

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "BandRepository":
        """Build from a parsed bands document (``{"bands": {...}}`` or a bare industry map)."""
        root = dict(document) if "bands" in document else {"bands": dict(document)}
        try:
            doc = BandsDocument.model_validate(root)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid bands document: {exc}") from exc
        return cls(doc.bands, version=doc.version, seed=doc.seed, generated_at=doc.generated_at)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "BandRepository":
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Bands file not found: {path}")
        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Bands file {path} is not valid JSON: {exc}") from exc
        logger.info(f"Reading bands from {path}")
        return cls.from_document(document)

    def lookup(self, industry: str, metric: str, use_industry_bands: bool = True) -> Tuple[IndustryBand, str]:
        """Return (band, scope) where scope is "industry" or "global"."""
        if use_industry_bands:
            band = self._industry.get(industry, {}).get(metric)
            if band is not None:
                return band, "industry"
        band = self._global.get(metric)
        if band is None:
            raise BandNotFoundError(
                f"No band for metric '{metric}' (industry '{industry}') and no global fallback"
            )
        return band, "global"

    def bounds(self, industry: str, metric: str, use_industry_bands: bool = True) -> IndustryBand:
        return self.lookup(industry, metric, use_industry_bands)[0]

    def require(self, metrics: Iterable[str]) -> None:
        """Fail fast unless every metric has at least a global band."""
        missing = [m for m in metrics if m not in self._global]
        if missing:
            raise BandNotFoundError(f"Bands missing for metric(s): {', '.join(missing)}")

    @property
    def industries(self) -> List[str]:
        return sorted(self._industry)

    @property
    def metrics(self) -> List[str]:
        return sorted(self._global)

    def to_document(self) -> Dict[str, Any]:
        bands = {
            industry: {m: b.model_dump() for m, b in metrics.items()}
            for industry, metrics in self._industry.items()
        }
        bands[GLOBAL_KEY] = {m: b.model_dump() for m, b in self._global.items()}
        return {
            "version": self.version,
            "seed": self.seed,
            "generated_at": self.generated_at,
            "bands": bands,
        }

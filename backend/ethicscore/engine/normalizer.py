"""
Metric normalizer — maps raw supplier metrics onto [0, 1] using industry bands
and each metric's directionality.

Lower is better:   (max − x) / (max − min)
Higher is better:  (x − min) / (max − min)
Wage parity:       1 at or above parity, else (clamp(x, 0.6, 1.2) − 0.6) / 0.6
Boolean:           1 if true else 0

Missing values are imputed (band average, or an external estimate) and tagged
so completeness never counts an imputed value as disclosed.
"""

from typing import Dict, List, Mapping, Optional, Tuple
from loguru import logger

from ethicscore.engine.bands import BandRepository
from ethicscore.models.metrics import (
    DIRECT_METRICS, INTENSITY_SOURCES, METRIC_DIRECTIONS, SCORING_METRICS, Directionality,
)
from ethicscore.models.scores import DataQualityWarning, MetricValue, WarningKind
from ethicscore.models.settings import ScoringSettings
from ethicscore.models.supplier import SupplierRecord
from ethicscore.utils.helpers import clamp, safe_divide

PARITY_TARGET = 1.0
PARITY_FLOOR = 0.6
PARITY_CEILING = 1.2


def normalize_lower(value: float, low: float, high: float) -> float:
    if high == low:
        return 0.0
    return (high - clamp(value, low, high)) / (high - low)


def normalize_higher(value: float, low: float, high: float) -> float:
    if high == low:
        return 0.0
    return (clamp(value, low, high) - low) / (high - low)


def normalize_parity(value: float) -> float:
    if value >= PARITY_TARGET:
        return 1.0
    return (clamp(value, PARITY_FLOOR, PARITY_CEILING) - PARITY_FLOOR) / (PARITY_CEILING - PARITY_FLOOR)


def normalize_boolean(value) -> float:
    return 1.0 if value else 0.0


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def derive_metric_values(record: SupplierRecord) -> Tuple[Dict[str, Optional[float]], List[DataQualityWarning]]:
    """
    Raw scoring values for one supplier: intensities divided by revenue, other
    metrics passed through. None marks a value that is not available.
    """
    values: Dict[str, Optional[float]] = {}
    skipped = []
    for metric, source in INTENSITY_SOURCES.items():
        total = _as_float(record.raw(source))
        if total is None:
            values[metric] = None
            continue
        values[metric] = safe_divide(total, record.revenue)
        if values[metric] is None:
            skipped.append(metric)

    for metric in DIRECT_METRICS:
        values[metric] = _as_float(record.raw(metric))

    flag = record.raw("anti_corruption")
    values["anti_corruption"] = None if flag is None else normalize_boolean(flag)

    warnings = []
    if skipped:
        warnings.append(DataQualityWarning(
            supplier_id=record.id,
            kind=WarningKind.ZERO_REVENUE,
            message=f"Revenue is {record.revenue!r}; {', '.join(skipped)} treated as missing",
        ))
    return values, warnings


class Normalizer:
    """Resolves every scoring metric of a supplier into a tagged MetricValue."""

    def __init__(self, bands: BandRepository):
        self.bands = bands

    def normalize(self, metric: str, value: float, industry: str, use_industry_bands: bool = True) -> float:
        direction = METRIC_DIRECTIONS[metric]
        if direction is Directionality.BOOLEAN:
            return normalize_boolean(value)
        if direction is Directionality.PARITY:
            return normalize_parity(value)
        band = self.bands.bounds(industry, metric, use_industry_bands)
        if direction is Directionality.LOWER_IS_BETTER:
            return normalize_lower(value, band.min, band.max)
        return normalize_higher(value, band.min, band.max)

    def resolve(
        self,
        record: SupplierRecord,
        settings: ScoringSettings,
        imputations: Optional[Mapping[str, float]] = None,
        imputation_source: str = "knn",
    ) -> Tuple[Dict[str, MetricValue], List[DataQualityWarning]]:
        values, warnings = derive_metric_values(record)
        resolved: Dict[str, MetricValue] = {}

        for metric in SCORING_METRICS:
            raw = values[metric]
            if raw is not None:
                resolved[metric] = MetricValue.present(raw, self._scale(metric, raw, record.industry, settings))
            elif METRIC_DIRECTIONS[metric] is Directionality.BOOLEAN:
                resolved[metric] = MetricValue.absent()
            else:
                if imputations and metric in imputations:
                    estimate, source = float(imputations[metric]), imputation_source
                else:
                    band, scope = self.bands.lookup(record.industry, metric, settings.use_industry_bands)
                    estimate, source = band.avg, f"{scope}_avg"
                resolved[metric] = MetricValue.imputed(
                    estimate, self._scale(metric, estimate, record.industry, settings), source
                )

        imputed = sum(1 for v in resolved.values() if not v.is_present)
        if imputed:
            logger.debug(f"Supplier {record.id}: {imputed} metric(s) not disclosed")
        return resolved, warnings

    def _scale(self, metric: str, raw: float, industry: str, settings: ScoringSettings) -> float:
        if not settings.normalization_enabled:
            return float(raw)
        return self.normalize(metric, raw, industry, settings.use_industry_bands)

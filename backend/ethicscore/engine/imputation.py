"""
Missing-data synthesis and imputation for the missingness scenario.

MCAR injection blanks disclosed raw values with a seeded Bernoulli mask.
KNN imputation estimates the blanked scoring metrics from the suppliers
closest in the (standardized) space of metrics they still disclose.
"""

from typing import Dict, List, Sequence, Tuple
import numpy as np
from loguru import logger
from sklearn.impute import KNNImputer

from ethicscore.engine.normalizer import derive_metric_values
from ethicscore.exceptions import ScenarioParameterError
from ethicscore.models.metrics import MCAR_FIELDS, NUMERIC_METRICS
from ethicscore.models.supplier import SupplierRecord

KNN_METRICS = ("nan_euclidean", "nan_manhattan")
KNN_WEIGHTS = ("uniform", "distance")
DEFAULT_NEIGHBORS = 5


def mcar_seed(seed: int, rate: float) -> List[int]:
    """Seed entropy for one missingness rate; stable across strategies."""
    return [seed, int(round(rate * 1_000_000))]


def inject_mcar(
    records: Sequence[SupplierRecord], rate: float, seed
) -> Tuple[List[SupplierRecord], int]:
    """Blank each disclosed MCAR field with probability ``rate``. Returns (records, blanked)."""
    if not 0.0 <= rate <= 1.0:
        raise ScenarioParameterError(f"Missingness rate must lie in [0, 1], got {rate!r}")
    rng = np.random.default_rng(seed)
    mask = rng.random((len(records), len(MCAR_FIELDS))) < rate

    degraded = []
    blanked = 0
    for row, record in zip(mask, records):
        drop = [f for f, hit in zip(MCAR_FIELDS, row) if hit and record.raw(f) is not None]
        if drop:
            blanked += len(drop)
            record = record.without(drop)
        degraded.append(record)

    logger.debug(f"MCAR {rate:.0%}: blanked {blanked} values across {len(records)} suppliers")
    return degraded, blanked


def nan_manhattan(x, y, missing_values=np.nan, **kwds):
    """City-block distance over co-present coordinates, scaled up for missing ones."""
    present = ~(np.isnan(x) | np.isnan(y))
    if not present.any():
        return np.nan
    return float(np.abs(x[present] - y[present]).sum() * (x.shape[0] / present.sum()))


class KnnImputer:
    """Wraps scikit-learn's KNNImputer over standardized scoring metrics."""

    def __init__(self, n_neighbors: int = DEFAULT_NEIGHBORS, metric: str = "nan_euclidean", weights: str = "uniform"):
        if n_neighbors < 1:
            raise ScenarioParameterError(f"KNN neighbours must be at least 1, got {n_neighbors}")
        if metric not in KNN_METRICS:
            raise ScenarioParameterError(f"Unsupported KNN metric '{metric}'")
        if weights not in KNN_WEIGHTS:
            raise ScenarioParameterError(f"Unsupported KNN weighting '{weights}'")
        self.n_neighbors = n_neighbors
        self.metric = metric
        self.weights = weights

    def _imputer(self) -> KNNImputer:
        metric = nan_manhattan if self.metric == "nan_manhattan" else self.metric
        return KNNImputer(n_neighbors=self.n_neighbors, weights=self.weights, metric=metric)

    def matrix(self, records: Sequence[SupplierRecord]) -> np.ndarray:
        rows = []
        for record in records:
            values, _ = derive_metric_values(record)
            rows.append([np.nan if values[m] is None else values[m] for m in NUMERIC_METRICS])
        return np.array(rows, dtype=float).reshape(len(records), len(NUMERIC_METRICS))

    def estimate(self, records: Sequence[SupplierRecord]) -> List[Dict[str, float]]:
        """Per-supplier estimates for each missing numeric scoring metric."""
        X = self.matrix(records)
        estimates: List[Dict[str, float]] = [{} for _ in records]
        if X.size == 0:
            return estimates

        observed = ~np.isnan(X).all(axis=0)
        skipped = [m for m, ok in zip(NUMERIC_METRICS, observed) if not ok]
        if skipped:
            logger.warning(f"KNN imputation: no supplier discloses {', '.join(skipped)}; band average used")
        columns = np.flatnonzero(observed)
        if columns.size == 0 or not np.isnan(X[:, columns]).any():
            return estimates

        subset = X[:, columns]
        mean = np.nanmean(subset, axis=0)
        std = np.nanstd(subset, axis=0)
        std[std == 0] = 1.0
        filled = self._imputer().fit_transform((subset - mean) / std) * std + mean

        for i in range(len(records)):
            for j, col in enumerate(columns):
                if np.isnan(X[i, col]):
                    estimates[i][NUMERIC_METRICS[col]] = float(filled[i, j])
        count = sum(len(e) for e in estimates)
        logger.debug(f"KNN imputation (k={self.n_neighbors}, {self.metric}): {count} values estimated")
        return estimates

"""
Scoring orchestrator — runs normalization, pillar scoring and risk adjustment
over a supplier collection and aggregates the data-quality report.
"""

from typing import List, Mapping, Optional, Sequence, Tuple
from loguru import logger

from ethicscore.engine.bands import BandRepository
from ethicscore.engine.normalizer import Normalizer
from ethicscore.engine.pillar_scorer import PillarScorer
from ethicscore.engine.risk_scorer import CompositeRiskScorer
from ethicscore.exceptions import ConfigurationError
from ethicscore.models.metrics import NUMERIC_METRICS
from ethicscore.models.scenario import RankedSupplier
from ethicscore.models.scores import QualityReport, ScoredSupplier
from ethicscore.models.settings import ScoringSettings
from ethicscore.models.supplier import SupplierRecord


class ScoringEngine:
    """
    Scores suppliers against a fixed band repository.

    Normalizer → PillarScorer → CompositeRiskScorer

    Holds no per-run state, so one engine may serve concurrent scoring passes.
    """

    def __init__(self, bands: BandRepository):
        bands.require(NUMERIC_METRICS)
        self.bands = bands
        self.normalizer = Normalizer(bands)
        self.risk_scorer = CompositeRiskScorer(PillarScorer())

    def score_supplier(
        self,
        record: SupplierRecord,
        settings: ScoringSettings,
        imputations: Optional[Mapping[str, float]] = None,
    ) -> ScoredSupplier:
        metrics, warnings = self.normalizer.resolve(record, settings, imputations)
        return self.risk_scorer.score(record, metrics, settings, warnings)

    def score_all(
        self,
        records: Sequence[SupplierRecord],
        settings: ScoringSettings,
        imputations: Optional[Sequence[Mapping[str, float]]] = None,
    ) -> Tuple[List[ScoredSupplier], QualityReport]:
        if not isinstance(settings, ScoringSettings):
            raise ConfigurationError("settings must be a validated ScoringSettings instance")
        if imputations is not None and len(imputations) != len(records):
            raise ConfigurationError(
                f"imputations cover {len(imputations)} suppliers, expected {len(records)}"
            )

        scored = [
            self.score_supplier(record, settings, imputations[i] if imputations else None)
            for i, record in enumerate(records)
        ]
        quality = QualityReport.from_scores(scored)
        logger.info(
            f"Scored {quality.suppliers_scored} suppliers: {quality.capped_suppliers} capped, "
            f"{quality.imputed_values} imputed values, {quality.zero_revenue_suppliers} zero-revenue"
        )
        return scored, quality


def rank_by_final_score(scored: Sequence[ScoredSupplier]) -> List[RankedSupplier]:
    """Rank 1..n by final score descending; ties keep input order."""
    order = sorted(range(len(scored)), key=lambda i: -scored[i].final_score)
    return [RankedSupplier(rank=pos + 1, supplier=scored[i]) for pos, i in enumerate(order)]

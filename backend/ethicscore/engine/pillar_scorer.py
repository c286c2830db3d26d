"""Pillar scorer — weighted sum of normalized metrics per ESG pillar, on 0-100."""

from typing import Mapping

from ethicscore.models.metrics import PILLAR_METRICS
from ethicscore.models.scores import MetricValue, PillarScores
from ethicscore.models.settings import ScoringSettings


class PillarScorer:

    @staticmethod
    def pillar_score(pillar: str, metrics: Mapping[str, MetricValue], settings: ScoringSettings) -> float:
        weights = settings.metric_weights(pillar)
        return 100 * sum(weights[m] * metrics[m].normalized for m in PILLAR_METRICS[pillar])

    def score(self, metrics: Mapping[str, MetricValue], settings: ScoringSettings) -> PillarScores:
        return PillarScores(**{
            pillar: self.pillar_score(pillar, metrics, settings) for pillar in PILLAR_METRICS
        })

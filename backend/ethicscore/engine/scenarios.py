"""
Scenario runner — what-if analyses over a fixed supplier collection.

S1: utility — rank by emission intensity under a profit-margin constraint
S2: sensitivity — one pillar weight perturbed by ±10% / ±20%, renormalized
S3: missingness — MCAR 5% / 10% × band-average / KNN imputation
S4: ablation — normalization off vs. on

Variants within a scenario share no mutable state and run on a thread pool;
results are returned in variant order whatever the completion order.
"""

from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, List, Optional, Sequence, Union
from loguru import logger

from ethicscore.config import settings as app_settings
from ethicscore.engine.imputation import KnnImputer, inject_mcar, mcar_seed
from ethicscore.engine.scoring import ScoringEngine, rank_by_final_score
from ethicscore.engine.statistics import compare_rankings, industry_disparity
from ethicscore.exceptions import ScenarioParameterError
from ethicscore.models.scenario import (
    PARAMS_BY_KIND, RankedSupplier, S1Params, S2Params, S3Params, S4Params,
    ScenarioKind, ScenarioParams, ScenarioResult,
)
from ethicscore.models.settings import ScoringSettings
from ethicscore.models.supplier import DatasetMeta, SupplierRecord
from ethicscore.utils.helpers import mean_or_none, percent_label

MEAN_STRATEGY = "mean"
KNN_STRATEGY = "knn"


class ScenarioRunner:

    def __init__(
        self,
        engine: ScoringEngine,
        suppliers: Sequence[SupplierRecord],
        settings: Optional[ScoringSettings] = None,
        dataset: Optional[DatasetMeta] = None,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        self.engine = engine
        self.suppliers = tuple(suppliers)
        self.settings = settings or ScoringSettings()
        self.dataset = dataset
        self.seed = app_settings.DEFAULT_SEED if seed is None else seed
        self.max_workers = max_workers or app_settings.SCENARIO_MAX_WORKERS

    def run(self, kind: Union[ScenarioKind, str], params: Optional[ScenarioParams] = None) -> List[ScenarioResult]:
        kind = ScenarioKind.parse(kind)
        params = params or PARAMS_BY_KIND[kind]()
        if not isinstance(params, PARAMS_BY_KIND[kind]):
            raise ScenarioParameterError(f"{kind.value} expects {PARAMS_BY_KIND[kind].__name__}")
        handler = {
            ScenarioKind.S1: self.run_s1,
            ScenarioKind.S2: self.run_s2,
            ScenarioKind.S3: self.run_s3,
            ScenarioKind.S4: self.run_s4,
        }[kind]
        logger.info(f"Running scenario {kind.value} over {len(self.suppliers)} suppliers")
        results = handler(params)
        logger.info(f"Scenario {kind.value} produced {len(results)} table(s)")
        return results

    def _fan_out(self, tasks: List[Callable[[], ScenarioResult]]) -> List[ScenarioResult]:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(task) for task in tasks]
            return [f.result() for f in futures]

    def _result(self, kind, variant, settings, parameters, rows, statistics, quality) -> ScenarioResult:
        return ScenarioResult(
            scenario=kind,
            variant=variant,
            settings=settings,
            parameters=parameters,
            rows=rows,
            statistics=statistics,
            quality=quality,
            dataset=self.dataset,
        )

    def baseline(self) -> List[RankedSupplier]:
        """Ranking under the unmodified settings, the reference for comparisons."""
        scored, _ = self.engine.score_all(self.suppliers, self.settings)
        return rank_by_final_score(scored)

    # ── S1: utility ──

    def run_s1(self, params: Optional[S1Params] = None) -> List[ScenarioResult]:
        params = params or S1Params()
        scored, quality = self.engine.score_all(self.suppliers, self.settings)

        intensity = []
        for s in scored:
            metric = s.metrics["emission_intensity"]
            intensity.append(metric.raw if metric.is_present else None)

        eligible = [
            i for i, record in enumerate(self.suppliers)
            if record.profit_margin is not None and record.profit_margin >= params.min_margin_pct
        ]
        order = sorted(
            eligible,
            key=lambda i: (intensity[i] is None, intensity[i] or 0.0, -scored[i].final_score),
        )
        rows = [RankedSupplier(rank=pos + 1, supplier=scored[i]) for pos, i in enumerate(order)]

        baseline_objective = mean_or_none(v for v in intensity if v is not None)
        constrained_objective = mean_or_none(intensity[i] for i in eligible if intensity[i] is not None)
        change = None
        if baseline_objective and constrained_objective is not None:
            change = 100 * (constrained_objective - baseline_objective) / baseline_objective

        statistics = {
            "eligible_suppliers": float(len(eligible)),
            "excluded_suppliers": float(len(self.suppliers) - len(eligible)),
            "baseline_mean_emission_intensity": baseline_objective,
            "constrained_mean_emission_intensity": constrained_objective,
            "objective_change_pct": change,
        }
        logger.info(
            f"S1: {len(eligible)}/{len(self.suppliers)} suppliers meet margin >= {params.min_margin_pct:g}%"
        )
        return [self._result(
            ScenarioKind.S1, f"margin >= {params.min_margin_pct:g}%", self.settings,
            params.model_dump(), rows, statistics, quality,
        )]

    # ── S2: sensitivity ──

    def run_s2(self, params: Optional[S2Params] = None) -> List[ScenarioResult]:
        params = params or S2Params()
        baseline = self.baseline()
        return self._fan_out([
            partial(self._sensitivity_variant, params.pillar, delta, baseline) for delta in params.deltas
        ])

    def perturbed_settings(self, pillar: str, delta: float) -> ScoringSettings:
        weights = self.settings.pillar_weights.as_dict()
        weights[pillar] = weights[pillar] * (1 + delta)
        total = sum(weights.values())
        return self.settings.replace(pillar_weights={k: v / total for k, v in weights.items()})

    def _sensitivity_variant(self, pillar: str, delta: float, baseline: List[RankedSupplier]) -> ScenarioResult:
        settings = self.perturbed_settings(pillar, delta)
        scored, quality = self.engine.score_all(self.suppliers, settings)
        rows = rank_by_final_score(scored)
        label = percent_label(delta)
        if delta > 0:
            label = "+" + label
        return self._result(
            ScenarioKind.S2, f"{label} weights", settings,
            {"pillar": pillar, "delta": delta, "pillar_weights": settings.pillar_weights.as_dict()},
            rows, compare_rankings(baseline, rows), quality,
        )

    # ── S3: missingness ──

    def run_s3(self, params: Optional[S3Params] = None) -> List[ScenarioResult]:
        params = params or S3Params()
        seed = self.seed if params.seed is None else params.seed
        imputer = KnnImputer(
            n_neighbors=params.k or app_settings.KNN_NEIGHBORS,
            metric=params.metric or app_settings.KNN_METRIC,
            weights=params.weights or app_settings.KNN_WEIGHTS,
        )
        baseline = self.baseline()
        tasks = []
        for rate in params.rates:
            for strategy in (MEAN_STRATEGY, KNN_STRATEGY):
                tasks.append(partial(self._missingness_variant, rate, strategy, seed, imputer, baseline))
        return self._fan_out(tasks)

    def _missingness_variant(
        self, rate: float, strategy: str, seed: int, imputer: KnnImputer, baseline: List[RankedSupplier]
    ) -> ScenarioResult:
        degraded, blanked = inject_mcar(self.suppliers, rate, mcar_seed(seed, rate))
        imputations = imputer.estimate(degraded) if strategy == KNN_STRATEGY else None
        scored, quality = self.engine.score_all(degraded, self.settings, imputations)
        rows = rank_by_final_score(scored)

        statistics = compare_rankings(baseline, rows)
        statistics["blanked_values"] = float(blanked)
        statistics["imputed_values"] = float(quality.imputed_values)
        parameters = {"rate": rate, "strategy": strategy, "seed": seed}
        if strategy == KNN_STRATEGY:
            parameters.update({"k": imputer.n_neighbors, "metric": imputer.metric, "weights": imputer.weights})

        name = "KNN" if strategy == KNN_STRATEGY else "mean"
        return self._result(
            ScenarioKind.S3, f"MCAR {percent_label(rate)} + {name}", self.settings,
            parameters, rows, statistics, quality,
        )

    # ── S4: ablation ──

    def run_s4(self, params: Optional[S4Params] = None) -> List[ScenarioResult]:
        off, on = self._fan_out([
            partial(self._ablation_variant, False),
            partial(self._ablation_variant, True),
        ])
        off = off.model_copy(update={"statistics": {**off.statistics, **compare_rankings(on.rows, off.rows)}})
        return [off, on]

    def _ablation_variant(self, enabled: bool) -> ScenarioResult:
        settings = self.settings.replace(normalization_enabled=enabled)
        scored, quality = self.engine.score_all(self.suppliers, settings)
        rows = rank_by_final_score(scored)
        return self._result(
            ScenarioKind.S4, f"normalization {'on' if enabled else 'off'}", settings,
            {"normalization_enabled": enabled}, rows,
            {"industry_disparity": industry_disparity(rows)}, quality,
        )

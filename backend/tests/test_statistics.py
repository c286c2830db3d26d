"""
Unit tests for ranking statistics, MCAR injection and KNN imputation.
"""

import numpy as np
import pytest

from ethicscore.engine.imputation import KnnImputer, inject_mcar, mcar_seed, nan_manhattan
from ethicscore.engine.statistics import (
    kendall_tau, mean_absolute_error, rank_shifts, top_k_preservation,
)
from ethicscore.exceptions import ScenarioParameterError
from ethicscore.models.metrics import MCAR_FIELDS
from ethicscore.models.scores import MetricStatus


class TestKendallTau:
    def test_identical_rankings(self):
        ranks = {"a": 1, "b": 2, "c": 3}
        assert kendall_tau(ranks, ranks) == 1.0

    def test_reversed_rankings(self):
        assert kendall_tau({"a": 1, "b": 2, "c": 3}, {"a": 3, "b": 2, "c": 1}) == -1.0

    def test_single_swap(self):
        # 3 pairs: 2 concordant, 1 discordant
        assert kendall_tau({"a": 1, "b": 2, "c": 3}, {"a": 2, "b": 1, "c": 3}) == pytest.approx(1 / 3)

    def test_ties_count_as_neither(self):
        assert kendall_tau({"a": 1, "b": 1}, {"a": 1, "b": 2}) == 0.0

    def test_fewer_than_two_common(self):
        assert kendall_tau({"a": 1}, {"a": 1}) == 0.0
        assert kendall_tau({"a": 1, "b": 2}, {"c": 1, "d": 2}) == 0.0


class TestRankComparisons:
    def test_rank_shifts(self):
        shifts = rank_shifts({"a": 1, "b": 2, "c": 3}, {"a": 3, "b": 2, "c": 1})
        assert shifts == {"mean_rank_shift": pytest.approx(4 / 3), "max_rank_shift": 2.0}

    def test_top_k_preservation(self):
        assert top_k_preservation(["a", "b", "c", "d"], ["a", "d", "b", "c"], k=3) == pytest.approx(200 / 3)

    def test_mean_absolute_error(self):
        assert mean_absolute_error({"a": 10.0, "b": 20.0}, {"a": 12.0, "b": 16.0}) == pytest.approx(3.0)
        assert mean_absolute_error({"a": 1.0}, {"b": 1.0}) is None


class TestMcarInjection:
    def test_same_seed_same_mask(self, synthetic_suppliers):
        first, blanked_a = inject_mcar(synthetic_suppliers, 0.1, mcar_seed(42, 0.1))
        second, blanked_b = inject_mcar(synthetic_suppliers, 0.1, mcar_seed(42, 0.1))
        assert first == second
        assert blanked_a == blanked_b

    def test_zero_rate_changes_nothing(self, synthetic_suppliers):
        degraded, blanked = inject_mcar(synthetic_suppliers, 0.0, 1)
        assert blanked == 0
        assert degraded == list(synthetic_suppliers)

    def test_full_rate_keeps_only_risks(self, suppliers):
        degraded, _ = inject_mcar(suppliers, 1.0, 1)
        for record in degraded:
            assert not any(f in record.metrics for f in MCAR_FIELDS)
            assert "anti_corruption" not in record.metrics
            assert "climate_risk" in record.metrics

    def test_blanked_flag_is_absent(self, engine, default_settings, best_supplier):
        degraded, blanked = inject_mcar([best_supplier], 1.0, 1)
        assert blanked >= 1
        scored = engine.score_supplier(degraded[0], default_settings)
        assert scored.metrics["anti_corruption"].status == MetricStatus.ABSENT

    def test_rate_validated(self, suppliers):
        with pytest.raises(ScenarioParameterError):
            inject_mcar(suppliers, 1.5, 1)


class TestKnnImputer:
    def test_estimates_only_missing_metrics(self, make_supplier):
        records = [make_supplier(f"S{i}", renewable_pct=10.0 * i, training_hours=4.0 * i) for i in range(1, 7)]
        records.append(make_supplier("S7", drop=("renewable_pct",), training_hours=12.0))
        estimates = KnnImputer(n_neighbors=2).estimate(records)
        assert estimates[:6] == [{}] * 6
        assert set(estimates[6]) == {"renewable_pct"}
        # nearest on training hours are S3 (12.0) then S2 / S4
        assert 20.0 <= estimates[6]["renewable_pct"] <= 40.0

    def test_unobserved_metric_skipped(self, make_supplier):
        records = [make_supplier(f"S{i}", drop=("injury_rate",), renewable_pct=float(i)) for i in range(4)]
        estimates = KnnImputer().estimate(records)
        assert all("injury_rate" not in e for e in estimates)

    def test_manhattan_metric(self, make_supplier):
        records = [make_supplier(f"S{i}", renewable_pct=10.0 * i) for i in range(1, 5)]
        records.append(make_supplier("S5", drop=("training_hours",)))
        estimates = KnnImputer(n_neighbors=3, metric="nan_manhattan", weights="distance").estimate(records)
        assert estimates[4]["training_hours"] == pytest.approx(40.0)

    def test_invalid_configuration(self):
        with pytest.raises(ScenarioParameterError):
            KnnImputer(n_neighbors=0)
        with pytest.raises(ScenarioParameterError):
            KnnImputer(metric="cosine")

    def test_nan_manhattan_scales_for_missing(self):
        x = np.array([1.0, np.nan, 3.0, 0.0])
        y = np.array([2.0, 5.0, np.nan, 0.0])
        # co-present: |1-2| + |0-0| = 1, scaled by 4 / 2
        assert nan_manhattan(x, y) == pytest.approx(2.0)
        assert np.isnan(nan_manhattan(np.array([np.nan]), np.array([1.0])))

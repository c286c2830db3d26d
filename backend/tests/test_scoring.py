"""
Unit tests for pillar scoring, risk adjustment and the scoring engine.
"""

import pytest

from ethicscore.engine.bands import BandRepository
from ethicscore.engine.risk_scorer import (
    COMPLETENESS_CAP, DEFAULT_RISK, apply_risk_adjustment, classify_risk,
    compute_risk_factor, risk_value,
)
from ethicscore.engine.scoring import ScoringEngine, rank_by_final_score
from ethicscore.exceptions import BandNotFoundError, ConfigurationError
from ethicscore.models.scores import RiskLevel, WarningKind
from ethicscore.models.settings import PillarWeights


class TestRiskFactor:
    def test_percent_scale_rescaled(self):
        assert risk_value(70) == pytest.approx(0.7)
        assert risk_value(0.7) == pytest.approx(0.7)

    def test_out_of_range_clamped(self):
        assert risk_value(250) == 1.0
        assert risk_value(-0.5) == 0.0

    def test_missing_risk_defaults(self):
        assert risk_value(None) == DEFAULT_RISK

    def test_weighted_average(self, make_supplier, default_settings):
        record = make_supplier(climate_risk=0.5, geopolitical_risk=50, labor_dispute_risk=0.5)
        assert compute_risk_factor(record, default_settings.risk_weights) == pytest.approx(0.5)

    def test_missing_risks_keep_denominator(self, make_supplier, default_settings):
        record = make_supplier(drop=("climate_risk", "geopolitical_risk", "labor_dispute_risk"))
        assert compute_risk_factor(record, default_settings.risk_weights) == pytest.approx(DEFAULT_RISK)

    @pytest.mark.parametrize("rf,level", [
        (0.0, RiskLevel.LOW), (0.19, RiskLevel.LOW), (0.2, RiskLevel.MEDIUM),
        (0.4, RiskLevel.HIGH), (0.59, RiskLevel.HIGH), (0.6, RiskLevel.CRITICAL), (1.0, RiskLevel.CRITICAL),
    ])
    def test_risk_levels(self, rf, level):
        assert classify_risk(rf) is level


class TestRiskAdjustment:
    def test_multiplicative_example(self, default_settings):
        ethical, penalty = apply_risk_adjustment(80, 0.5, default_settings.replace(threshold_penalty=False))
        assert ethical == pytest.approx(40)
        assert penalty == pytest.approx(40)

    def test_threshold_example(self, default_settings):
        ethical, penalty = apply_risk_adjustment(80, 0.5, default_settings)
        assert penalty == pytest.approx(20)
        assert ethical == pytest.approx(60)

    def test_threshold_below_t_no_penalty(self, default_settings):
        assert apply_risk_adjustment(80, 0.25, default_settings) == (80, 0.0)

    def test_threshold_floor_at_zero(self, default_settings):
        ethical, penalty = apply_risk_adjustment(10, 1.0, default_settings.replace(risk_lambda=2.0))
        assert ethical == 0.0
        assert penalty == pytest.approx(10.0)

    def test_floored_penalty_is_the_reported_drop(self, default_settings):
        ethical, penalty = apply_risk_adjustment(10.0, 1.0, default_settings)
        assert ethical == 0.0
        assert penalty == pytest.approx(10.0)
        assert 10.0 - penalty == pytest.approx(ethical)


class TestScoringEngine:
    def test_best_supplier_scores_full_marks(self, engine, best_supplier, default_settings):
        scored = engine.score_supplier(best_supplier, default_settings)
        assert scored.environmental == pytest.approx(100)
        assert scored.social == pytest.approx(100)
        assert scored.governance == pytest.approx(100)
        assert scored.composite_score == pytest.approx(100)
        assert scored.risk_factor == pytest.approx(0.2)
        assert scored.final_score == pytest.approx(100)
        assert scored.completeness == 1.0
        assert not scored.capped

    def test_emission_example_flows_into_pillar(self, engine, make_supplier, default_settings):
        scored = engine.score_supplier(make_supplier(emissions=250.0), default_settings)
        # emission weight 0.4 × 0.75 + 0.6 × 1.0
        assert scored.environmental == pytest.approx(90)

    def test_pillar_weights_change_composite(self, engine, make_supplier, default_settings):
        record = make_supplier(emissions=1000.0)  # environmental = 60
        settings = default_settings.replace(
            pillar_weights=PillarWeights(environmental=1.0, social=0.0, governance=0.0)
        )
        assert engine.score_supplier(record, settings).composite_score == pytest.approx(60)

    def test_idempotent(self, engine, suppliers, default_settings):
        for record in suppliers:
            assert engine.score_supplier(record, default_settings) == engine.score_supplier(record, default_settings)

    def test_completeness_cap(self, engine, suppliers, default_settings):
        scored, quality = engine.score_all(suppliers, default_settings)
        capped = {s.supplier_id: s for s in scored if s.capped}
        assert set(capped) == {"SUP-6"}
        assert capped["SUP-6"].completeness == pytest.approx(7 / 12)
        assert capped["SUP-6"].final_score <= COMPLETENESS_CAP
        assert quality.capped_suppliers == 1

    def test_completeness_law_holds_for_all(self, engine, suppliers, default_settings):
        scored, _ = engine.score_all(suppliers, default_settings.replace(threshold_penalty=False))
        for s in scored:
            if s.completeness < 0.70:
                assert s.final_score <= 50

    def test_false_anti_corruption_not_counted_present(self, engine, make_supplier, default_settings):
        scored = engine.score_supplier(make_supplier(anti_corruption=False), default_settings)
        assert scored.completeness == pytest.approx(11 / 12)

    def test_imputed_values_not_counted_present(self, engine, make_supplier, default_settings):
        record = make_supplier(drop=("renewable_pct", "water_usage", "waste_generated", "injury_rate"))
        scored = engine.score_supplier(record, default_settings)
        assert scored.completeness == pytest.approx(8 / 12)
        assert scored.capped

    def test_quality_report(self, engine, suppliers, default_settings):
        _, quality = engine.score_all(suppliers, default_settings)
        kinds = [w.kind for w in quality.warnings]
        assert quality.suppliers_scored == 6
        assert quality.zero_revenue_suppliers == 1
        assert WarningKind.COMPLETENESS_CAP in kinds
        # SUP-4: 3 intensities, SUP-5: 2, SUP-6: 4
        assert quality.imputed_values == 9

    def test_penalty_reported(self, engine, suppliers, default_settings):
        scored, _ = engine.score_all(suppliers, default_settings)
        risky = next(s for s in scored if s.supplier_id == "SUP-3")
        assert risky.risk_factor == pytest.approx(0.33 * 0.7 + 0.33 * 0.6 + 0.34 * 0.5)
        assert risky.risk_penalty == pytest.approx((risky.risk_factor - 0.3) * 100)

    def test_settings_must_be_validated(self, engine, suppliers):
        with pytest.raises(ConfigurationError):
            engine.score_all(suppliers, {"risk_lambda": 1.0})

    def test_engine_requires_complete_bands(self):
        bands = BandRepository.from_document({"bands": {"Apparel": {
            "emission_intensity": {"min": 0, "avg": 5, "max": 10},
        }}})
        with pytest.raises(BandNotFoundError):
            ScoringEngine(bands)


class TestRanking:
    def test_ranks_descending_ties_in_input_order(self, engine, make_supplier, default_settings):
        records = [
            make_supplier("A", emissions=500.0),
            make_supplier("B"),
            make_supplier("C", emissions=500.0),
        ]
        scored, _ = engine.score_all(records, default_settings)
        rows = rank_by_final_score(scored)
        assert [r.supplier.supplier_id for r in rows] == ["B", "A", "C"]
        assert [r.rank for r in rows] == [1, 2, 3]

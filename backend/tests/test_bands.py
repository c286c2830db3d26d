"""
Unit tests for the industry band repository.
"""

import json
import pytest

from ethicscore.engine.bands import BandRepository
from ethicscore.exceptions import BandNotFoundError, ConfigurationError
from ethicscore.models.metrics import NUMERIC_METRICS


class TestGlobalBands:
    def test_global_band_combines_industries(self, bands):
        band, scope = bands.lookup("Unknown", "emission_intensity")
        assert scope == "global"
        assert (band.min, band.avg, band.max) == (0.0, 12.5, 30.0)

    def test_explicit_global_overrides_computed(self, bands_document):
        bands_document["bands"]["global"] = {"emission_intensity": {"min": 1, "avg": 2, "max": 3}}
        repo = BandRepository.from_document(bands_document)
        band = repo.bounds("Unknown", "emission_intensity")
        assert (band.min, band.avg, band.max) == (1.0, 2.0, 3.0)
        # other metrics keep the computed fallback
        assert repo.bounds("Unknown", "water_intensity").max == 10.0
        assert "global" not in repo.industries

    def test_bare_industry_mapping_accepted(self, bands_document):
        repo = BandRepository.from_document(bands_document["bands"])
        assert repo.industries == ["Apparel", "Electronics"]
        assert repo.version == "v1"


class TestLookup:
    def test_industry_band_preferred(self, bands):
        band, scope = bands.lookup("Electronics", "emission_intensity")
        assert scope == "industry"
        assert band.min == 10.0

    def test_industry_bands_disabled(self, bands):
        _, scope = bands.lookup("Electronics", "emission_intensity", use_industry_bands=False)
        assert scope == "global"

    def test_missing_metric_raises(self, bands):
        with pytest.raises(BandNotFoundError):
            bands.lookup("Apparel", "carbon_offsets")

    def test_band_not_found_is_configuration_error(self, bands):
        with pytest.raises(ConfigurationError):
            bands.require(["carbon_offsets"])

    def test_require_all_scoring_metrics(self, bands):
        bands.require(NUMERIC_METRICS)

    def test_metadata(self, bands):
        assert bands.version == "test-v1"
        assert bands.seed == 1
        assert bands.to_document()["bands"]["global"]["emission_intensity"]["avg"] == 12.5


class TestBandValidation:
    @pytest.mark.parametrize("band", [
        {"min": 10, "avg": 5, "max": 0},
        {"min": 0, "avg": 11, "max": 10},
        {"min": "0", "avg": 5, "max": 10},
        {"min": True, "avg": 5, "max": 10},
        {"min": float("nan"), "avg": 5, "max": 10},
        {"min": 0, "avg": 5, "max": float("inf")},
        {"min": 0, "max": 10},
    ])
    def test_invalid_band_rejected(self, band):
        with pytest.raises(ConfigurationError):
            BandRepository.from_document({"bands": {"Apparel": {"emission_intensity": band}}})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            BandRepository.from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bands.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            BandRepository.from_file(path)

    def test_from_file(self, tmp_path, bands_document):
        path = tmp_path / "bands_v1.json"
        path.write_text(json.dumps(bands_document))
        repo = BandRepository.from_file(path)
        assert repo.bounds("Apparel", "waste_intensity").max == 2.0

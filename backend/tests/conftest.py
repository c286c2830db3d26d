"""
Pytest configuration and shared fixtures.
"""

import pytest

from ethicscore.datastore import Workspace
from ethicscore.engine.bands import BandRepository
from ethicscore.engine.scoring import ScoringEngine
from ethicscore.ingestion.generator import SyntheticSupplierGenerator, derive_bands
from ethicscore.models.settings import ScoringSettings
from ethicscore.models.supplier import SupplierRecord


# metric → (min, avg, max)
APPAREL_BANDS = {
    "emission_intensity": (0, 5, 10),
    "water_intensity": (0, 5, 10),
    "waste_intensity": (0, 1, 2),
    "renewable_pct": (0, 50, 100),
    "injury_rate": (0, 2, 4),
    "training_hours": (0, 20, 40),
    "wage_ratio": (0.6, 0.9, 1.2),
    "diversity_pct": (0, 50, 100),
    "board_diversity": (0, 50, 100),
    "board_independence": (0, 50, 100),
    "transparency_score": (0, 50, 100),
}

ELECTRONICS_BANDS = {
    **APPAREL_BANDS,
    "emission_intensity": (10, 20, 30),
    "water_intensity": (2, 6, 10),
}

# All metrics at their best, lowest risk
BEST_METRICS = {
    "emissions": 0.0,
    "water_usage": 0.0,
    "waste_generated": 0.0,
    "renewable_pct": 100.0,
    "injury_rate": 0.0,
    "training_hours": 40.0,
    "wage_ratio": 1.0,
    "diversity_pct": 100.0,
    "board_diversity": 100.0,
    "board_independence": 100.0,
    "transparency_score": 100.0,
    "anti_corruption": True,
    "climate_risk": 0.2,
    "geopolitical_risk": 0.2,
    "labor_dispute_risk": 0.2,
}


def _bands(ranges):
    return {m: {"min": lo, "avg": avg, "max": hi} for m, (lo, avg, hi) in ranges.items()}


def build_supplier(sid="SUP-1", industry="Apparel", revenue=100.0, margin=15.0, drop=(), **metrics):
    values = {**BEST_METRICS, **metrics}
    for field in drop:
        values.pop(field, None)
    return SupplierRecord(
        id=sid,
        name=f"Supplier {sid}",
        country="Vietnam",
        industry=industry,
        revenue=revenue,
        profit_margin=margin,
        metrics=values,
    )


@pytest.fixture
def make_supplier():
    return build_supplier


@pytest.fixture
def bands_document():
    return {
        "version": "test-v1",
        "seed": 1,
        "generated_at": "2025-01-01T00:00:00Z",
        "bands": {
            "Apparel": _bands(APPAREL_BANDS),
            "Electronics": _bands(ELECTRONICS_BANDS),
        },
    }


@pytest.fixture
def bands(bands_document):
    return BandRepository.from_document(bands_document)


@pytest.fixture
def engine(bands):
    return ScoringEngine(bands)


@pytest.fixture
def default_settings():
    return ScoringSettings()


@pytest.fixture
def best_supplier():
    return build_supplier()


@pytest.fixture
def suppliers():
    """Small hand-built collection covering the awkward cases."""
    return [
        build_supplier("SUP-1"),
        build_supplier("SUP-2", emissions=250.0, renewable_pct=40.0, margin=8.0),
        build_supplier("SUP-3", industry="Electronics", revenue=200.0, emissions=4000.0, margin=22.0,
                      climate_risk=70, geopolitical_risk=60, labor_dispute_risk=50),
        build_supplier("SUP-4", revenue=0.0, margin=None),
        build_supplier("SUP-5", industry="Furniture", drop=("renewable_pct", "training_hours")),
        build_supplier("SUP-6", margin=30.0, anti_corruption=False, drop=(
            "water_usage", "waste_generated", "renewable_pct", "injury_rate",
        )),
    ]


@pytest.fixture(scope="session")
def synthetic_suppliers():
    return SyntheticSupplierGenerator(num_suppliers=40, missing_rate=0.15, seed=7).generate_suppliers()


@pytest.fixture(scope="session")
def synthetic_bands(synthetic_suppliers):
    return BandRepository.from_document(derive_bands(synthetic_suppliers, seed=7))


@pytest.fixture(scope="session")
def workspace(synthetic_suppliers, synthetic_bands):
    return Workspace.build(synthetic_bands, synthetic_suppliers, "synthetic-seed-7", seed=7)

"""Process-wide read-only data: bands, supplier dataset and the scoring engine."""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from loguru import logger

from ethicscore.config import settings
from ethicscore.engine.bands import BandRepository
from ethicscore.engine.scoring import ScoringEngine
from ethicscore.ingestion.generator import SyntheticSupplierGenerator, derive_bands
from ethicscore.ingestion.loader import load_suppliers
from ethicscore.models.supplier import DatasetMeta, SupplierRecord


@dataclass(frozen=True)
class Workspace:
    bands: BandRepository
    suppliers: List[SupplierRecord]
    dataset: DatasetMeta
    engine: ScoringEngine

    @classmethod
    def build(
        cls,
        bands: BandRepository,
        suppliers: List[SupplierRecord],
        version: str,
        generated_at: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> "Workspace":
        dataset = DatasetMeta(
            version=version,
            bands_version=bands.version,
            generated_at=generated_at,
            supplier_count=len(suppliers),
            seed=seed,
        )
        return cls(bands=bands, suppliers=list(suppliers), dataset=dataset, engine=ScoringEngine(bands))


def load_workspace(
    bands_path: Optional[str] = None,
    dataset_path: Optional[str] = None,
    seed: Optional[int] = None,
    synthetic_suppliers: Optional[int] = None,
) -> Workspace:
    """
    Load bands and suppliers from disk. A missing dataset (or an explicit
    ``synthetic_suppliers`` count) falls back to generated suppliers; missing
    bands are derived from whichever dataset was loaded.
    """
    bands_path = Path(bands_path or settings.BANDS_PATH)
    dataset_path = Path(dataset_path or settings.DATASET_PATH)
    seed = settings.DEFAULT_SEED if seed is None else seed

    if synthetic_suppliers is None and dataset_path.exists():
        suppliers, version = load_suppliers(dataset_path)
        version = version or settings.DATASET_VERSION
        generated_at = datetime.fromtimestamp(dataset_path.stat().st_mtime, tz=timezone.utc).isoformat()
        dataset_seed = None
    else:
        count = synthetic_suppliers or settings.SYNTHETIC_SUPPLIERS
        if synthetic_suppliers is None:
            logger.warning(f"Dataset {dataset_path} not found; generating {count} synthetic suppliers (seed={seed})")
        suppliers = SyntheticSupplierGenerator(num_suppliers=count, seed=seed).generate_suppliers()
        version, dataset_seed = f"synthetic-seed-{seed}", seed
        generated_at = None

    if bands_path.exists() and synthetic_suppliers is None:
        bands = BandRepository.from_file(bands_path)
    else:
        logger.warning(f"Deriving bands from the loaded dataset ({bands_path} not used)")
        bands = BandRepository.from_document(derive_bands(suppliers, seed=dataset_seed))

    return Workspace.build(bands, suppliers, version, generated_at=generated_at, seed=dataset_seed)


class DataStore:
    """Holds the loaded workspace for the API process."""

    _workspace: Optional[Workspace] = None
    _lock = threading.Lock()

    @classmethod
    def get(cls) -> Workspace:
        if cls._workspace is None:
            with cls._lock:
                if cls._workspace is None:
                    cls._workspace = load_workspace()
                    logger.info(
                        f"Workspace ready: {cls._workspace.dataset.supplier_count} suppliers, "
                        f"bands {cls._workspace.bands.version}"
                    )
        return cls._workspace

    @classmethod
    def set(cls, workspace: Optional[Workspace]) -> None:
        cls._workspace = workspace

    @classmethod
    def close(cls) -> None:
        cls._workspace = None
        logger.info("Workspace released")


def get_workspace() -> Workspace:
    """FastAPI dependency."""
    return DataStore.get()

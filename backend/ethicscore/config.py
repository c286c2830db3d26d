"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Central configuration for the EthicSupply scoring engine.

    Only file locations and scenario defaults live here. Scoring weights are
    never read from the process environment; they travel as explicit
    ``ScoringSettings`` values.
    """

    # Data
    BANDS_PATH: str = "./data/bands_v1.json"
    DATASET_PATH: str = "./data/suppliers.json"
    DATASET_VERSION: str = "synthetic-v1"
    SYNTHETIC_SUPPLIERS: int = 120   # used when DATASET_PATH does not exist

    # Scenarios
    DEFAULT_SEED: int = 42
    KNN_NEIGHBORS: int = 5
    KNN_METRIC: str = "nan_euclidean"
    KNN_WEIGHTS: str = "uniform"
    SCENARIO_MAX_WORKERS: int = 4

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.API_CORS_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

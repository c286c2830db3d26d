"""
FastAPI application entry point.
"""

import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from loguru import logger

from ethicscore import __version__
from ethicscore.config import settings
from ethicscore.datastore import DataStore
from ethicscore.api import bands, scenarios, scoring

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load bands and the supplier dataset once per process."""
    logger.info("Loading bands and supplier dataset...")
    DataStore.get()
    yield
    DataStore.close()


app = FastAPI(
    title="EthicSupply Scoring Engine",
    description="Supplier sustainability scoring with scenario analysis",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(scoring.router, prefix="/api/v1")
app.include_router(scenarios.router, prefix="/api/v1")
app.include_router(bands.router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"service": "EthicSupply Scoring Engine", "version": __version__}


@app.get("/health")
async def health():
    try:
        workspace = DataStore.get()
        return {
            "status": "healthy",
            "suppliers": workspace.dataset.supplier_count,
            "bands_version": workspace.bands.version,
        }
    except Exception as e:
        return {"status": "degraded", "error": str(e)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ethicscore.main:app", host=settings.API_HOST, port=settings.API_PORT)

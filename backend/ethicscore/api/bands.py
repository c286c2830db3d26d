"""
Band and dataset metadata endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from ethicscore.datastore import Workspace, get_workspace
from ethicscore.exceptions import BandNotFoundError

router = APIRouter(tags=["bands"])


@router.get("/bands")
async def get_bands(workspace: Workspace = Depends(get_workspace)):
    """Industry bands with the computed global fallback."""
    return workspace.bands.to_document()


@router.get("/bands/{industry}/{metric}")
async def get_band(industry: str, metric: str, workspace: Workspace = Depends(get_workspace)):
    """Band used for one industry and metric (falls back to global)."""
    try:
        band, scope = workspace.bands.lookup(industry, metric)
    except BandNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"industry": industry, "metric": metric, "scope": scope, **band.model_dump()}


@router.get("/dataset/meta")
async def dataset_meta(workspace: Workspace = Depends(get_workspace)):
    return {
        **workspace.dataset.model_dump(),
        "industries": sorted({s.industry for s in workspace.suppliers}),
    }

"""
Scoring API endpoints.
"""

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from ethicscore.datastore import Workspace, get_workspace
from ethicscore.engine.scoring import rank_by_final_score
from ethicscore.exceptions import ConfigurationError
from ethicscore.models.scores import QualityReport, ScoredSupplier
from ethicscore.models.settings import ScoringSettings
from ethicscore.models.supplier import SupplierRecord
from ethicscore.utils.helpers import paginate_results

router = APIRouter(prefix="/scoring", tags=["scoring"])


class ScoreRequest(BaseModel):
    suppliers: List[SupplierRecord]
    settings: Dict[str, Any] = {}


class ScoreResponse(BaseModel):
    suppliers: List[ScoredSupplier]
    quality: QualityReport


def _settings(payload: Optional[Dict[str, Any]]) -> ScoringSettings:
    try:
        return ScoringSettings.from_payload(payload or {})
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/settings/default", response_model=ScoringSettings)
async def default_settings():
    """Default scoring weights and switches."""
    return ScoringSettings()


@router.post("/score", response_model=ScoreResponse)
async def score_suppliers(
    request: ScoreRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """Score the posted suppliers against the loaded bands."""
    settings = _settings(request.settings)
    scored, quality = workspace.engine.score_all(request.suppliers, settings)
    return ScoreResponse(suppliers=scored, quality=quality)


@router.post("/ranking")
async def ranking(
    settings: Optional[Dict[str, Any]] = Body(None),
    industry: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    workspace: Workspace = Depends(get_workspace),
):
    """Rank the loaded dataset by final score."""
    validated = _settings(settings)
    scored, quality = workspace.engine.score_all(workspace.suppliers, validated)
    rows = rank_by_final_score(scored)
    if industry:
        rows = [r for r in rows if r.supplier.industry == industry]
    result = paginate_results([r.model_dump(mode="json", exclude={"supplier": {"metrics"}}) for r in rows], page, page_size)
    result["quality"] = {k: v for k, v in quality.model_dump(mode="json").items() if k != "warnings"}
    result["dataset"] = workspace.dataset.model_dump()
    return result

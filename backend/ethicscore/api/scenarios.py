"""
Scenario API endpoints — run S1-S4 and download the CSV / ZIP output.
"""

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import Response
from typing import Any, Dict, Optional

from ethicscore.datastore import Workspace, get_workspace
from ethicscore.engine.service import ScenarioService
from ethicscore.exceptions import ConfigurationError, ScenarioParameterError
from ethicscore.models.scenario import PARAMS_BY_KIND, ScenarioKind
from ethicscore.models.settings import ScoringSettings

router = APIRouter(prefix="/scenarios", tags=["scenarios"])


@router.get("")
async def list_scenarios():
    """Supported scenarios and their default parameters."""
    return {
        "scenarios": [
            {"kind": kind.value, "defaults": model().model_dump()}
            for kind, model in PARAMS_BY_KIND.items()
        ]
    }


@router.post("/{kind}")
def run_scenario(
    kind: str,
    params: Optional[Dict[str, Any]] = Body(None),
    output_name: Optional[str] = Query(None, description="Download file name"),
    workspace: Workspace = Depends(get_workspace),
):
    """Run a scenario over the loaded dataset and return the exported file."""
    try:
        scenario = ScenarioKind.parse(kind)
        service = ScenarioService(
            workspace.engine, workspace.suppliers, ScoringSettings(), dataset=workspace.dataset
        )
        artifact = service.run(scenario, params, output_name or f"{scenario.value.lower()}_results")
    except ScenarioParameterError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{artifact.filename}"',
            "X-Dataset-Version": workspace.dataset.version,
            "X-Bands-Version": workspace.dataset.bands_version,
        },
    )

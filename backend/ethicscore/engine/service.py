"""
Scenario service — validates a scenario request up front, runs it and returns
the exported artifact. Nothing is scored until kind, parameters and output
name have all been accepted.
"""

import re
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union
from pydantic import BaseModel, ValidationError
from loguru import logger

from ethicscore.engine.bands import BandRepository
from ethicscore.engine.exporter import TableExporter
from ethicscore.engine.scenarios import ScenarioRunner
from ethicscore.engine.scoring import ScoringEngine
from ethicscore.exceptions import ScenarioParameterError
from ethicscore.models.scenario import (
    PARAMS_BY_KIND, ExportArtifact, ScenarioKind, ScenarioParams, ScenarioResult,
)
from ethicscore.models.settings import ScoringSettings
from ethicscore.models.supplier import DatasetMeta, SupplierRecord

OUTPUT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def parse_params(kind: ScenarioKind, params: Union[None, Mapping[str, Any], ScenarioParams]) -> ScenarioParams:
    model = PARAMS_BY_KIND[kind]
    if isinstance(params, model):
        return params
    if isinstance(params, BaseModel):
        raise ScenarioParameterError(f"{kind.value} expects {model.__name__}, got {type(params).__name__}")
    try:
        return model.model_validate(dict(params or {}))
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ValidationError):
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'params'}: {err['msg']}" for err in exc.errors()
            )
        else:
            details = str(exc)
        raise ScenarioParameterError(f"Invalid {kind.value} parameters: {details}") from exc


def artifact_filename(output_name: str, archive: bool) -> str:
    if not output_name or not OUTPUT_NAME_PATTERN.match(output_name):
        raise ScenarioParameterError(
            f"Invalid output name '{output_name}': use letters, digits, '.', '_' or '-'"
        )
    suffix = ".zip" if archive else ".csv"
    return output_name if output_name.lower().endswith(suffix) else output_name + suffix


class ScenarioService:

    def __init__(
        self,
        engine: ScoringEngine,
        suppliers: Sequence[SupplierRecord],
        settings: Optional[ScoringSettings] = None,
        dataset: Optional[DatasetMeta] = None,
        exporter: Optional[TableExporter] = None,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        self.runner = ScenarioRunner(
            engine, suppliers, settings, dataset=dataset, seed=seed, max_workers=max_workers
        )
        self.exporter = exporter or TableExporter()

    def execute(self, kind, params=None, output_name: str = "scenario") -> Tuple[List[ScenarioResult], ExportArtifact]:
        """Validate, run and export; returns the result tables alongside the artifact."""
        scenario = ScenarioKind.parse(kind)
        parsed = parse_params(scenario, params)
        archive = scenario is not ScenarioKind.S1
        filename = artifact_filename(output_name, archive)

        logger.info(f"Scenario request {scenario.value} → {filename}")
        results = self.runner.run(scenario, parsed)
        return results, self.exporter.export(results, filename, archive=archive)

    def run(self, kind, params=None, output_name: str = "scenario") -> ExportArtifact:
        return self.execute(kind, params, output_name)[1]


def run_scenario(
    kind,
    params=None,
    output_name: str = "scenario",
    *,
    bands: BandRepository,
    suppliers: Sequence[SupplierRecord],
    settings: Optional[ScoringSettings] = None,
    dataset: Optional[DatasetMeta] = None,
    seed: Optional[int] = None,
) -> bytes:
    """Run one scenario and return the CSV or ZIP bytes."""
    service = ScenarioService(ScoringEngine(bands), suppliers, settings, dataset=dataset, seed=seed)
    return service.run(kind, params, output_name).content

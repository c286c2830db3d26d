from ethicscore.models.metrics import (
    Directionality, Pillar, PILLAR_METRICS, METRIC_DIRECTIONS, SCORING_METRICS,
    NUMERIC_METRICS, INTENSITY_SOURCES, DIRECT_METRICS, RISK_METRICS,
    MCAR_FIELDS, RAW_METRICS,
)
from ethicscore.models.supplier import SupplierRecord, DatasetMeta
from ethicscore.models.bands import IndustryBand, BandsDocument
from ethicscore.models.settings import ScoringSettings, PillarWeights, RiskWeights
from ethicscore.models.scores import (
    MetricStatus, MetricValue, RiskLevel, WarningKind, DataQualityWarning,
    PillarScores, ScoredSupplier, QualityReport,
)
from ethicscore.models.scenario import (
    ScenarioKind, ScenarioParams, S1Params, S2Params, S3Params, S4Params,
    PARAMS_BY_KIND, RankedSupplier, ScenarioResult, ExportArtifact,
)

__all__ = [
    "Directionality", "Pillar", "PILLAR_METRICS", "METRIC_DIRECTIONS", "SCORING_METRICS",
    "NUMERIC_METRICS", "INTENSITY_SOURCES", "DIRECT_METRICS", "RISK_METRICS",
    "MCAR_FIELDS", "RAW_METRICS",
    "SupplierRecord", "DatasetMeta",
    "IndustryBand", "BandsDocument",
    "ScoringSettings", "PillarWeights", "RiskWeights",
    "MetricStatus", "MetricValue", "RiskLevel", "WarningKind", "DataQualityWarning",
    "PillarScores", "ScoredSupplier", "QualityReport",
    "ScenarioKind", "ScenarioParams", "S1Params", "S2Params", "S3Params", "S4Params",
    "PARAMS_BY_KIND", "RankedSupplier", "ScenarioResult", "ExportArtifact",
]

"""Engine error taxonomy.

Configuration and parameter errors abort a whole run before any output is
produced. Per-supplier data-quality issues are never raised; they are recorded
as ``DataQualityWarning`` entries in the run's quality report.
"""


class EngineError(Exception):
    """Base class for errors raised by the scoring engine."""


class ConfigurationError(EngineError):
    """Invalid scoring settings or bands. Fatal, never retried."""


class BandNotFoundError(ConfigurationError):
    """No industry band and no global fallback exist for a metric."""


class ScenarioParameterError(EngineError):
    """Unsupported scenario kind or invalid scenario parameters."""

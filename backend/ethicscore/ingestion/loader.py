"""
Supplier dataset loader — reads JSON or CSV supplier files into validated
SupplierRecord objects.

JSON: a list of suppliers, or ``{"version": ..., "suppliers": [...]}``; each
supplier carries either a nested ``metrics`` object or flat metric fields.
CSV: one row per supplier; a blank cell means the metric was not disclosed.
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import ValidationError
from loguru import logger

from ethicscore.exceptions import ConfigurationError
from ethicscore.models.metrics import RAW_METRICS
from ethicscore.models.supplier import SupplierRecord

PROFILE_FIELDS = ("id", "name", "country", "industry", "revenue", "profit_margin")
TRUE_VALUES = {"true", "1", "yes", "y", "t"}
FALSE_VALUES = {"false", "0", "no", "n", "f"}


def _parse_cell(field: str, value: Optional[str]) -> Any:
    if value is None or value.strip() == "":
        return None
    value = value.strip()
    if field == "anti_corruption":
        lowered = value.lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"anti_corruption must be a boolean, got {value!r}")
    if field in ("id", "name", "country", "industry"):
        return value
    return float(value)


def _record_from_mapping(raw: Dict[str, Any]) -> SupplierRecord:
    payload = {k: raw[k] for k in PROFILE_FIELDS if raw.get(k) is not None}
    if "metrics" in raw:
        payload["metrics"] = raw["metrics"] or {}
    else:
        payload["metrics"] = {m: raw[m] for m in RAW_METRICS if raw.get(m) is not None}
    return SupplierRecord.model_validate(payload)


def _read_json(path: Path) -> Tuple[List[dict], Optional[str]]:
    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    if isinstance(document, dict):
        return list(document.get("suppliers", [])), document.get("version")
    return list(document), None


def _read_csv(path: Path) -> List[dict]:
    rows = []
    with open(path, newline="", encoding="utf-8") as f:
        for line, row in enumerate(csv.DictReader(f), start=2):
            try:
                rows.append({k: _parse_cell(k, v) for k, v in row.items() if k})
            except ValueError as exc:
                raise ConfigurationError(f"{path}:{line}: {exc}") from exc
    return rows


def load_suppliers(path: Union[str, Path]) -> Tuple[List[SupplierRecord], Optional[str]]:
    """Load suppliers from a .json or .csv file. Returns (records, dataset version)."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Supplier dataset not found: {path}")

    version = None
    try:
        if path.suffix.lower() == ".csv":
            raw_rows = _read_csv(path)
        else:
            raw_rows, version = _read_json(path)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Supplier dataset {path} is not valid JSON: {exc}") from exc

    records = []
    for index, raw in enumerate(raw_rows):
        try:
            records.append(_record_from_mapping(raw))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid supplier #{index + 1} in {path}: {exc}") from exc

    ids = [r.id for r in records]
    if len(set(ids)) != len(ids):
        raise ConfigurationError(f"Duplicate supplier IDs in {path}")

    logger.info(f"Loaded {len(records)} suppliers from {path}")
    return records, version

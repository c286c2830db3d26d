"""
Table exporter — fixed-column CSV tables, bundled into a ZIP archive for
multi-table scenarios. Identical inputs yield byte-identical output.
"""

import csv
import io
import zipfile
from typing import Dict, List, Sequence
from loguru import logger

from ethicscore.models.scenario import ExportArtifact, ScenarioResult
from ethicscore.utils.helpers import slugify

COLUMNS = [
    "SupplierID", "Rank", "Name", "Industry",
    "Environmental Score", "Social Score", "Governance Score",
    "Composite Score", "Risk Penalty", "Final Score",
]

# Fixed member timestamp keeps archives byte-stable
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)

CSV_MEDIA_TYPE = "text/csv"
ZIP_MEDIA_TYPE = "application/zip"


def _fmt(value: float) -> str:
    return f"{value:.2f}"


class TableExporter:

    def table_rows(self, result: ScenarioResult) -> List[Dict[str, str]]:
        rows = []
        for ranked in result.rows:
            s = ranked.supplier
            rows.append({
                "SupplierID": s.supplier_id,
                "Rank": str(ranked.rank),
                "Name": s.name,
                "Industry": s.industry,
                "Environmental Score": _fmt(s.environmental),
                "Social Score": _fmt(s.social),
                "Governance Score": _fmt(s.governance),
                "Composite Score": _fmt(s.composite_score),
                "Risk Penalty": _fmt(s.risk_penalty),
                "Final Score": _fmt(s.final_score),
            })
        return rows

    def to_csv(self, result: ScenarioResult) -> bytes:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=COLUMNS, lineterminator="\n")
        writer.writeheader()
        writer.writerows(self.table_rows(result))
        return buffer.getvalue().encode("utf-8")

    def table_name(self, result: ScenarioResult) -> str:
        return f"{result.scenario.value.lower()}_{slugify(result.variant)}.csv"

    def bundle(self, results: Sequence[ScenarioResult]) -> bytes:
        names = [self.table_name(r) for r in results]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate table names in archive: {names}")

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, result in zip(names, results):
                info = zipfile.ZipInfo(name, date_time=ZIP_TIMESTAMP)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                archive.writestr(info, self.to_csv(result))
        return buffer.getvalue()

    def export(self, results: Sequence[ScenarioResult], filename: str, archive: bool) -> ExportArtifact:
        if not results:
            raise ValueError("Nothing to export")
        if archive:
            content, media_type = self.bundle(results), ZIP_MEDIA_TYPE
        else:
            content, media_type = self.to_csv(results[0]), CSV_MEDIA_TYPE
        logger.info(f"Exported {len(results)} table(s) to {filename} ({len(content)} bytes)")
        return ExportArtifact(
            filename=filename,
            media_type=media_type,
            content=content,
            tables=[self.table_name(r) for r in results],
        )

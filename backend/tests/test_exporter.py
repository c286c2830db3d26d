"""
Table export tests.
"""

import csv
import io
import zipfile
import pytest

from ethicscore.engine.exporter import COLUMNS, TableExporter
from ethicscore.engine.scenarios import ScenarioRunner
from ethicscore.engine.service import artifact_filename
from ethicscore.exceptions import ScenarioParameterError
from ethicscore.utils.helpers import percent_label, slugify


@pytest.fixture
def results(engine, suppliers, default_settings):
    return ScenarioRunner(engine, suppliers, default_settings, seed=42).run_s2()


class TestSlugify:
    @pytest.mark.parametrize("label,slug", [
        ("+10% weights", "plus10pct_weights"),
        ("-20% weights", "minus20pct_weights"),
        ("MCAR 5% + KNN", "mcar_5pct_plus_knn"),
        ("margin >= 12.5%", "margin_12p5pct"),
        ("normalization off", "normalization_off"),
        ("***", "table"),
    ])
    def test_slugs(self, label, slug):
        assert slugify(label) == slug

    def test_percent_label(self):
        assert percent_label(0.05) == "5%"
        assert percent_label(-0.2) == "-20%"


class TestTableExporter:
    def test_columns_and_rows(self, results):
        content = TableExporter().to_csv(results[0]).decode("utf-8")
        rows = list(csv.DictReader(io.StringIO(content)))
        assert list(rows[0].keys()) == COLUMNS
        assert [r["Rank"] for r in rows] == ["1", "2", "3", "4", "5", "6"]

    def test_two_decimal_scores(self, results):
        rows = TableExporter().table_rows(results[0])
        for row in rows:
            for column in COLUMNS[4:]:
                assert len(row[column].split(".")[1]) == 2

    def test_final_scores_descending(self, results):
        rows = TableExporter().table_rows(results[0])
        finals = [float(r["Final Score"]) for r in rows]
        assert finals == sorted(finals, reverse=True)

    def test_bundle_is_deterministic(self, results):
        exporter = TableExporter()
        assert exporter.bundle(results) == exporter.bundle(results)

    def test_bundle_member_names(self, results):
        with zipfile.ZipFile(io.BytesIO(TableExporter().bundle(results))) as archive:
            names = archive.namelist()
            assert names[0] == "s2_minus20pct_weights.csv"
            assert archive.read(names[0]).startswith(b"SupplierID,")

    def test_duplicate_names_rejected(self, results):
        with pytest.raises(ValueError):
            TableExporter().bundle([results[0], results[0]])

    def test_single_table_export(self, results):
        artifact = TableExporter().export(results[:1], "one.csv", archive=False)
        assert artifact.media_type == "text/csv"
        assert artifact.tables == ["s2_minus20pct_weights.csv"]


class TestArtifactFilename:
    def test_suffix_added(self):
        assert artifact_filename("results", archive=True) == "results.zip"
        assert artifact_filename("results", archive=False) == "results.csv"

    def test_suffix_kept(self):
        assert artifact_filename("results.CSV", archive=False) == "results.CSV"

    @pytest.mark.parametrize("name", ["", "a/b", ".hidden", "name with space"])
    def test_invalid_names(self, name):
        with pytest.raises(ScenarioParameterError):
            artifact_filename(name, archive=True)

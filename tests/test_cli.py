"""
Tests for the command line entry point.
"""

import json
from pathlib import Path

import pytest

from rdf_geoindex.cli import EXIT_ERROR, EXIT_NOT_FOUND, EXIT_OK, main


NQUADS = """\
<http://example.org/S1> <http://www.opengis.net/ont/geosparql#asWKT> "POINT (30 10)" .
<http://example.org/S1> <http://www.w3.org/2000/01/rdf-schema#label> "Canal A" .
<http://example.org/S1> <http://www.w3.org/ns/locn#geometry> <http://example.org/S1_geom> .
<http://example.org/S2> <http://www.opengis.net/ont/geosparql#asWKT> "POLYGON (30 10, 40 40)" .
"""


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "data.nq"
    path.write_text(NQUADS, encoding="utf-8")
    return path


def run(capsys, *argv):
    code = main([str(a) for a in argv])
    out = capsys.readouterr().out
    return code, (json.loads(out) if out else None)


class TestCLI:
    def test_summary(self, source, capsys):
        code, output = run(capsys, source)
        assert code == EXIT_OK
        assert output["ingestion"]["features"] == 1
        assert output["ingestion"]["failed_subjects"] == ["http://example.org/S2"]

    def test_lookups(self, source, capsys):
        code, output = run(
            capsys, source,
            "--subject-of", "http://example.org/S1_geom",
            "--properties", "http://example.org/S1",
        )
        assert code == EXIT_OK
        assert output["subject"] == "http://example.org/S1"
        assert output["properties"]["http://www.w3.org/2000/01/rdf-schema#label"] == "Canal A"

    def test_subject_not_found(self, source, capsys):
        code, output = run(capsys, source, "--subject-of", "http://example.org/nope")
        assert code == EXIT_NOT_FOUND
        assert output["subject"] is None

    def test_geojson_export(self, source, tmp_path, capsys):
        out = tmp_path / "features.geojson"
        code, _ = run(capsys, source, "--geojson", out, "--target-crs", "EPSG:4326")
        assert code == EXIT_OK
        collection = json.loads(out.read_text())
        assert collection["features"][0]["geometry"] == {
            "type": "Point",
            "coordinates": [30.0, 10.0],
        }

    def test_missing_source(self, tmp_path, capsys):
        code, output = run(capsys, tmp_path / "missing.nq")
        assert code == EXIT_ERROR
        assert output is None

    def test_invalid_workers(self, source, capsys):
        code, _ = run(capsys, source, "--workers", "0")
        assert code == EXIT_ERROR

    def test_config_file(self, source, tmp_path, capsys):
        config = tmp_path / "settings.yaml"
        config.write_text("target_crs: EPSG:4326\nparse_workers: 2\n")
        out = tmp_path / "features.geojson"
        code, _ = run(capsys, source, "--config", config, "--geojson", out)
        assert code == EXIT_OK
        coords = json.loads(out.read_text())["features"][0]["geometry"]["coordinates"]
        assert coords == [30.0, 10.0]

    def test_config_file_with_string_boolean(self, source, tmp_path, capsys):
        config = tmp_path / "settings.json"
        config.write_text('{"honor_literal_crs": "false"}')
        code, output = run(capsys, source, "--config", config)
        assert code == EXIT_ERROR
        assert output is None

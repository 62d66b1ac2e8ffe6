"""Tests for configuration loading and validation."""
import json
from pathlib import Path

import pytest

from rdf_geoindex.config import (
    ConfigValidator,
    GeoIndexConfig,
)
from rdf_geoindex.errors import ConfigValidationError
from rdf_geoindex.vocab import GEO_AS_WKT, LOCN_GEOMETRY


# ========== GeoIndexConfig Tests ==========

class TestGeoIndexConfig:
    def test_defaults(self):
        config = GeoIndexConfig()
        assert config.source_crs == "EPSG:4326"
        assert config.target_crs == "EPSG:3857"
        assert config.wkt_predicate == GEO_AS_WKT
        assert config.geometry_predicate == LOCN_GEOMETRY
        assert config.parse_workers == 1
        assert config.honor_literal_crs is True

    def test_to_dict(self):
        d = GeoIndexConfig(target_crs="EPSG:28992").to_dict()
        assert d["target_crs"] == "EPSG:28992"
        assert d["log_level"] == "INFO"

    def test_from_dict(self):
        config = GeoIndexConfig.from_dict({"parse_workers": "4", "log_level": "debug"})
        assert config.parse_workers == 4
        assert config.log_level == "DEBUG"
        assert config.target_crs == "EPSG:3857"

    def test_json_roundtrip(self, tmp_path: Path):
        path = tmp_path / "config.json"
        config = GeoIndexConfig(source_crs="EPSG:31370", parse_workers=2)
        config.save(path)
        assert json.loads(path.read_text())["source_crs"] == "EPSG:31370"
        assert GeoIndexConfig.load(path) == config

    def test_yaml_roundtrip(self, tmp_path: Path):
        path = tmp_path / "nested" / "config.yaml"
        config = GeoIndexConfig(honor_literal_crs=False)
        config.save(path)
        assert "honor_literal_crs: false" in path.read_text()
        assert GeoIndexConfig.load(path) == config

    def test_load_rejects_non_mapping(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigValidationError, match="mapping"):
            GeoIndexConfig.load(path)

    def test_load_rejects_bad_json(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigValidationError):
            GeoIndexConfig.load(path)


# ========== Environment Tests ==========

class TestFromEnv:
    def test_overrides(self):
        config = GeoIndexConfig.from_env(environ={
            "GEOINDEX_TARGET_CRS": "EPSG:28992",
            "GEOINDEX_PARSE_WORKERS": "8",
            "GEOINDEX_LOG_LEVEL": "warning",
        })
        assert config.target_crs == "EPSG:28992"
        assert config.parse_workers == 8
        assert config.log_level == "WARNING"
        assert config.source_crs == "EPSG:4326"

    def test_base_kept(self):
        base = GeoIndexConfig(source_crs="EPSG:31370")
        config = GeoIndexConfig.from_env(base, environ={})
        assert config == base

    def test_invalid_workers(self):
        with pytest.raises(ConfigValidationError, match="PARSE_WORKERS"):
            GeoIndexConfig.from_env(environ={"GEOINDEX_PARSE_WORKERS": "many"})


# ========== ConfigValidator Tests ==========

class TestConfigValidator:
    def test_valid(self):
        assert ConfigValidator.validate(GeoIndexConfig()) == []

    def test_errors(self):
        config = GeoIndexConfig(target_crs="", parse_workers=0, log_level="LOUD")
        errors = ConfigValidator.validate(config)
        assert "target_crs must not be empty" in errors
        assert "parse_workers must be at least 1" in errors
        assert "Invalid log_level: LOUD" in errors

    def test_validate_or_raise(self):
        with pytest.raises(ConfigValidationError, match="parse_workers"):
            ConfigValidator.validate_or_raise(GeoIndexConfig(parse_workers=0))

    def test_string_boolean_rejected(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"honor_literal_crs": "false"}))
        config = GeoIndexConfig.load(path)
        assert config.honor_literal_crs == "false"
        with pytest.raises(ConfigValidationError, match="honor_literal_crs must be true or false"):
            ConfigValidator.validate_or_raise(config)

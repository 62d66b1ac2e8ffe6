"""
Configuration for rdf-geoindex sessions.

Provides:
- GeoIndexConfig dataclass with dict, JSON and YAML round-tripping
- Environment variable overrides
- Configuration validation
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from rdf_geoindex.errors import ConfigValidationError
from rdf_geoindex.vocab import GEO_AS_WKT, LOCN_GEOMETRY

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_PREFIX = "GEOINDEX_"


@dataclass
class GeoIndexConfig:
    """Settings for ingestion, projection and lookups."""
    source_crs: str = "EPSG:4326"
    target_crs: str = "EPSG:3857"
    wkt_predicate: str = GEO_AS_WKT
    geometry_predicate: str = LOCN_GEOMETRY
    parse_workers: int = 1
    honor_literal_crs: bool = True
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_crs": self.source_crs,
            "target_crs": self.target_crs,
            "wkt_predicate": self.wkt_predicate,
            "geometry_predicate": self.geometry_predicate,
            "parse_workers": self.parse_workers,
            "honor_literal_crs": self.honor_literal_crs,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoIndexConfig":
        return cls(
            source_crs=data.get("source_crs", "EPSG:4326"),
            target_crs=data.get("target_crs", "EPSG:3857"),
            wkt_predicate=data.get("wkt_predicate", GEO_AS_WKT),
            geometry_predicate=data.get("geometry_predicate", LOCN_GEOMETRY),
            parse_workers=int(data.get("parse_workers", 1)),
            honor_literal_crs=data.get("honor_literal_crs", True),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    @classmethod
    def from_env(
        cls,
        base: Optional["GeoIndexConfig"] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> "GeoIndexConfig":
        """
        Apply GEOINDEX_* environment overrides on top of ``base``.

        Recognised: GEOINDEX_SOURCE_CRS, GEOINDEX_TARGET_CRS,
        GEOINDEX_PARSE_WORKERS, GEOINDEX_LOG_LEVEL.
        """
        environ = os.environ if environ is None else environ
        config = base or cls()
        overrides: Dict[str, Any] = {}

        if f"{ENV_PREFIX}SOURCE_CRS" in environ:
            overrides["source_crs"] = environ[f"{ENV_PREFIX}SOURCE_CRS"]
        if f"{ENV_PREFIX}TARGET_CRS" in environ:
            overrides["target_crs"] = environ[f"{ENV_PREFIX}TARGET_CRS"]
        if f"{ENV_PREFIX}PARSE_WORKERS" in environ:
            raw = environ[f"{ENV_PREFIX}PARSE_WORKERS"]
            try:
                overrides["parse_workers"] = int(raw)
            except ValueError:
                raise ConfigValidationError(
                    f"{ENV_PREFIX}PARSE_WORKERS must be an integer, got {raw!r}"
                )
        if f"{ENV_PREFIX}LOG_LEVEL" in environ:
            overrides["log_level"] = environ[f"{ENV_PREFIX}LOG_LEVEL"].upper()

        return replace(config, **overrides)

    def save(self, path: Path) -> None:
        """Save configuration as YAML (.yaml/.yml) or JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "GeoIndexConfig":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            try:
                if path.suffix.lower() in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise ConfigValidationError(f"{path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError(f"{path}: expected a mapping at top level")
        logger.debug(f"Loaded configuration from {path}")
        return cls.from_dict(data)


class ConfigValidator:
    """Validates rdf-geoindex configuration."""

    @staticmethod
    def validate(config: GeoIndexConfig) -> List[str]:
        """
        Validate configuration.

        Returns list of error messages (empty if valid).
        """
        errors = []

        if not config.source_crs:
            errors.append("source_crs must not be empty")
        if not config.target_crs:
            errors.append("target_crs must not be empty")

        if not config.wkt_predicate:
            errors.append("wkt_predicate must not be empty")
        if not config.geometry_predicate:
            errors.append("geometry_predicate must not be empty")

        if config.parse_workers < 1:
            errors.append("parse_workers must be at least 1")

        if not isinstance(config.honor_literal_crs, bool):
            errors.append(
                f"honor_literal_crs must be true or false, got {config.honor_literal_crs!r}"
            )

        if config.log_level not in LOG_LEVELS:
            errors.append(f"Invalid log_level: {config.log_level}")

        return errors

    @staticmethod
    def validate_or_raise(config: GeoIndexConfig) -> None:
        """Validate configuration, raising on errors."""
        errors = ConfigValidator.validate(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))

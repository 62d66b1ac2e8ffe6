"""
Command line entry point: ingest an RDF file and query the result.

    rdf-geoindex output.nq --geojson features.geojson
    rdf-geoindex output.nq --subject-of http://example.org/geom/1
    rdf-geoindex output.nq --properties http://example.org/feature/1
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from rdf_geoindex import __version__
from rdf_geoindex.config import ConfigValidator, GeoIndexConfig, LOG_LEVELS
from rdf_geoindex.errors import ConfigValidationError, NotFound, SourceError
from rdf_geoindex.session import GeoSession

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rdf-geoindex",
        description="Index WKT geometries and properties from an RDF triple stream",
    )
    parser.add_argument("source", type=Path, help="RDF file (.nq, .nt, .ttl, .trig, optionally .gz)")
    parser.add_argument("--format", help="RDF format name when the suffix is ambiguous")
    parser.add_argument("--config", type=Path, help="YAML or JSON configuration file")
    parser.add_argument("--source-crs", help="CRS of WKT literals without a CRS prefix")
    parser.add_argument("--target-crs", help="CRS to project geometries into")
    parser.add_argument("--workers", type=int, help="Threads used to parse geometry literals")
    parser.add_argument("--geojson", type=Path, help="Write features as a GeoJSON FeatureCollection")
    parser.add_argument("--subject-of", metavar="GEOMETRY_ID", help="Print the subject owning a geometry id")
    parser.add_argument("--properties", metavar="SUBJECT", help="Print the properties of a subject")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Logging level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> GeoIndexConfig:
    """Configuration file, then environment, then command line flags."""
    config = GeoIndexConfig.load(args.config) if args.config else GeoIndexConfig()
    config = GeoIndexConfig.from_env(config)

    overrides = {}
    if args.source_crs:
        overrides["source_crs"] = args.source_crs
    if args.target_crs:
        overrides["target_crs"] = args.target_crs
    if args.workers is not None:
        overrides["parse_workers"] = args.workers
    if args.log_level:
        overrides["log_level"] = args.log_level
    config = replace(config, **overrides)

    ConfigValidator.validate_or_raise(config)
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except (ConfigValidationError, OSError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = GeoSession(config)
    try:
        result = session.load(args.source, format=args.format)
    except SourceError as e:
        logger.error(str(e))
        return EXIT_ERROR

    output = {"ingestion": result.summary()}

    if args.geojson:
        args.geojson.write_text(json.dumps(session.feature_collection()), encoding="utf-8")
        output["geojson"] = str(args.geojson)

    exit_code = EXIT_OK
    if args.subject_of:
        try:
            output["subject"] = session.index.subject_from_geometry_id(args.subject_of)
        except NotFound as e:
            output["subject"] = None
            logger.error(str(e))
            exit_code = EXIT_NOT_FOUND

    if args.properties:
        properties = session.index.properties_of(args.properties)
        output["properties"] = properties
        if not properties:
            logger.error(f"No properties found for {args.properties}")
            exit_code = EXIT_NOT_FOUND

    print(json.dumps(output, indent=2))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())

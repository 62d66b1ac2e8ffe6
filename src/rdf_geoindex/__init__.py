"""
rdf-geoindex: index WKT geometries and properties from RDF triple streams.

Streams triples into an in-memory store, parses geosparql:asWKT literals
into typed geometries reprojected to a target CRS, and answers reverse
geometry and property lookups.
"""

__version__ = "0.1.0"

from rdf_geoindex.errors import (
    GeoIndexError,
    MalformedGeometry,
    UnsupportedProjection,
    NotFound,
    ConfigValidationError,
    SourceError,
)
from rdf_geoindex.models import Triple, FeatureRecord, FeatureFailure
from rdf_geoindex.store import TripleStore
from rdf_geoindex.wkt import GeometryKind, Geometry, parse_wkt, to_wkt, to_geojson
from rdf_geoindex.projection import GeometryProjector, project
from rdf_geoindex.ingest import (
    IngestionPipeline,
    IngestionResult,
    PipelineState,
    CancellationToken,
)
from rdf_geoindex.index import GeoIndex
from rdf_geoindex.config import GeoIndexConfig
from rdf_geoindex.formats import iter_triples, aiter_triples
from rdf_geoindex.session import GeoSession

__all__ = [
    # Errors
    "GeoIndexError",
    "MalformedGeometry",
    "UnsupportedProjection",
    "NotFound",
    "ConfigValidationError",
    "SourceError",
    # Models
    "Triple",
    "FeatureRecord",
    "FeatureFailure",
    "TripleStore",
    # Geometry
    "GeometryKind",
    "Geometry",
    "parse_wkt",
    "to_wkt",
    "to_geojson",
    "GeometryProjector",
    "project",
    # Ingestion and lookup
    "IngestionPipeline",
    "IngestionResult",
    "PipelineState",
    "CancellationToken",
    "GeoIndex",
    "GeoIndexConfig",
    "iter_triples",
    "aiter_triples",
    "GeoSession",
]

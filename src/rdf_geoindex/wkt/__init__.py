"""
Well-Known Text geometry support: value types, parser and serializers.
"""

from rdf_geoindex.wkt.ast import (
    Coordinate,
    CoordinateSequence,
    Geometry,
    GeometryKind,
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
)
from rdf_geoindex.wkt.parser import WKTParser, parse_wkt, try_parse_wkt, crs_from_iri, crs_to_iri
from rdf_geoindex.wkt.serializer import to_wkt, to_geojson

__all__ = [
    "Coordinate",
    "CoordinateSequence",
    "Geometry",
    "GeometryKind",
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
    # Parsing
    "WKTParser",
    "parse_wkt",
    "try_parse_wkt",
    "crs_from_iri",
    "crs_to_iri",
    # Serialization
    "to_wkt",
    "to_geojson",
]

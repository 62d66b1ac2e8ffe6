"""
WKT and GeoJSON serialization of geometry values.
"""

from typing import Any

from rdf_geoindex.wkt.ast import (
    Geometry, GeometryKind, Point, LineString, Polygon,
    MultiPoint, MultiLineString, MultiPolygon, GeometryCollection,
)
from rdf_geoindex.wkt.parser import crs_to_iri


def _format_number(value: float) -> str:
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _format_coord(coord) -> str:
    return f"{_format_number(coord[0])} {_format_number(coord[1])}"


def _format_seq(seq) -> str:
    return "(" + ", ".join(_format_coord(c) for c in seq) + ")"


def _format_rings(rings) -> str:
    return "(" + ", ".join(_format_seq(ring) for ring in rings) + ")"


def _wkt_body(geometry: Geometry) -> str:
    if geometry.is_empty and not isinstance(geometry, GeometryCollection):
        return "EMPTY"
    if isinstance(geometry, Point):
        return f"({_format_coord(geometry.coordinates)})"
    if isinstance(geometry, LineString):
        return _format_seq(geometry.coordinates)
    if isinstance(geometry, Polygon):
        return _format_rings(geometry.rings)
    if isinstance(geometry, MultiPoint):
        return "(" + ", ".join(f"({_format_coord(c)})" for c in geometry.points) + ")"
    if isinstance(geometry, MultiLineString):
        return _format_rings(geometry.lines)
    if isinstance(geometry, MultiPolygon):
        return "(" + ", ".join(_format_rings(rings) for rings in geometry.polygons) + ")"
    if isinstance(geometry, GeometryCollection):
        if not geometry.geometries:
            return "EMPTY"
        return "(" + ", ".join(to_wkt(member) for member in geometry.geometries) + ")"
    raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")


def to_wkt(geometry: Geometry, include_crs: bool = False) -> str:
    """
    Serialize a geometry value to WKT.

    Args:
        geometry: Geometry to serialize
        include_crs: Prefix the literal with the geometry's CRS IRI
            (GeoSPARQL wktLiteral form) when it has one

    Returns:
        WKT string, e.g. ``POLYGON ((30 10, 40 40, 20 40, 30 10))``
    """
    text = f"{geometry.kind.keyword} {_wkt_body(geometry)}"
    if include_crs and geometry.crs:
        text = f"<{crs_to_iri(geometry.crs)}> {text}"
    return text


def _coords(seq) -> list:
    return [[c[0], c[1]] for c in seq]


def to_geojson(geometry: Geometry) -> dict[str, Any]:
    """Convert a geometry value to a GeoJSON geometry object."""
    kind = geometry.kind
    if kind is GeometryKind.GEOMETRYCOLLECTION:
        return {
            "type": kind.value,
            "geometries": [to_geojson(member) for member in geometry.geometries],
        }

    if isinstance(geometry, Point):
        coordinates = [] if geometry.coordinates is None else list(geometry.coordinates)
    elif isinstance(geometry, LineString):
        coordinates = _coords(geometry.coordinates)
    elif isinstance(geometry, MultiPoint):
        coordinates = _coords(geometry.points)
    elif isinstance(geometry, Polygon):
        coordinates = [_coords(ring) for ring in geometry.rings]
    elif isinstance(geometry, MultiLineString):
        coordinates = [_coords(line) for line in geometry.lines]
    elif isinstance(geometry, MultiPolygon):
        coordinates = [[_coords(ring) for ring in rings] for rings in geometry.polygons]
    else:
        raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")

    return {"type": kind.value, "coordinates": coordinates}

"""
Well-Known Text parser using pyparsing.

Parses the 2D subset of OGC Simple Features WKT into geometry values:

    POINT (30 10)
    LINESTRING (30 10, 10 30, 40 40)
    POLYGON ((35 10, 45 45, 15 40, 35 10), (20 30, 35 35, 20 30))
    MULTIPOINT ((10 40), (40 30))      MULTIPOINT (10 40, 40 30)
    MULTILINESTRING ((10 10, 20 20), (40 40, 30 30))
    MULTIPOLYGON (((30 20, 45 40, 30 20)), ((15 5, 40 10, 15 5)))
    GEOMETRYCOLLECTION (POINT (4 6), LINESTRING (4 6, 7 10))
    POLYGON EMPTY

GeoSPARQL literals may start with a CRS IRI:

    <http://www.opengis.net/def/crs/EPSG/0/4326> POINT (4.35 50.85)

Keywords are case-insensitive and whitespace between tokens is ignored.
"""

import re
from typing import Optional

import pyparsing as pp
from pyparsing import (
    CaselessKeyword, Suppress, Group, Forward, Regex,
    Literal as Lit, Optional as Opt, DelimitedList,
)

from rdf_geoindex.errors import MalformedGeometry
from rdf_geoindex.vocab import CRS84_IRI, OGC_CRS_PREFIX
from rdf_geoindex.wkt.ast import (
    Geometry, GeometryKind,
    Point, LineString, Polygon,
    MultiPoint, MultiLineString, MultiPolygon,
    GeometryCollection,
)


KEYWORDS = frozenset(kind.keyword for kind in GeometryKind)

_CRS_PREFIX_RE = re.compile(r"^\s*<([^<>\s]*)>")
_KEYWORD_RE = re.compile(r"\s*([A-Za-z_]\w*)")


def crs_from_iri(iri: str) -> str:
    """
    Map an OGC CRS IRI to an authority code pyproj understands.

    ``http://www.opengis.net/def/crs/EPSG/0/4326`` becomes ``EPSG:4326``
    and the CRS84 IRI becomes ``OGC:CRS84``. Other IRIs are returned as is.
    """
    if iri == CRS84_IRI:
        return "OGC:CRS84"
    if iri.startswith(OGC_CRS_PREFIX):
        parts = iri[len(OGC_CRS_PREFIX):].strip("/").split("/")
        if len(parts) == 3:
            authority, _version, code = parts
            return f"{authority}:{code}"
    return iri


def crs_to_iri(crs: str) -> str:
    """Inverse of crs_from_iri for authority codes."""
    if crs == "OGC:CRS84":
        return CRS84_IRI
    if ":" in crs and not crs.startswith(("http://", "https://")):
        authority, code = crs.split(":", 1)
        return f"{OGC_CRS_PREFIX}{authority}/0/{code}"
    return crs


def _coord(group) -> tuple:
    return (group[0], group[1])


def _seq(group) -> tuple:
    return tuple(_coord(c) for c in group)


def _is_empty(tokens) -> bool:
    return isinstance(tokens[0], str)


class WKTParser:
    """
    Parser for Well-Known Text geometry literals.

    The grammar is built once per instance; parse() may be called from
    several threads.
    """

    def __init__(self):
        self._build_grammar()

    def _build_grammar(self):
        """Build the pyparsing grammar for WKT."""

        LPAREN = Suppress(Lit("("))
        RPAREN = Suppress(Lit(")"))
        EMPTY = CaselessKeyword("EMPTY")

        def keyword(kind: GeometryKind):
            return Suppress(CaselessKeyword(kind.keyword))

        # =================================================================
        # Coordinates
        # =================================================================

        # A number must end at whitespace or punctuation, so "1-2" or
        # "1.2.3" cannot split into two coordinates
        number = Regex(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?(?![\w.+-])")
        number.set_parse_action(lambda t: float(t[0]))
        number.set_name("number")

        coord = Group(number + number).set_name("coordinate pair")
        coord_seq = Group(LPAREN + DelimitedList(coord) + RPAREN).set_name("coordinate list")
        ring_list = Group(LPAREN + DelimitedList(coord_seq) + RPAREN).set_name("ring list")
        polygon_list = Group(LPAREN + DelimitedList(ring_list) + RPAREN).set_name("polygon list")
        point_list = Group(
            LPAREN + DelimitedList((LPAREN + coord + RPAREN) | coord) + RPAREN
        ).set_name("point list")

        # =================================================================
        # Geometry kinds
        # =================================================================

        geometry = Forward()

        def make_point(tokens):
            if _is_empty(tokens):
                return Point()
            return Point(_coord(tokens[0]))

        def make_linestring(tokens):
            if _is_empty(tokens):
                return LineString()
            return LineString(_seq(tokens[0]))

        def make_polygon(tokens):
            if _is_empty(tokens):
                return Polygon()
            return Polygon(tuple(_seq(ring) for ring in tokens[0]))

        def make_multipoint(tokens):
            if _is_empty(tokens):
                return MultiPoint()
            return MultiPoint(_seq(tokens[0]))

        def make_multilinestring(tokens):
            if _is_empty(tokens):
                return MultiLineString()
            return MultiLineString(tuple(_seq(line) for line in tokens[0]))

        def make_multipolygon(tokens):
            if _is_empty(tokens):
                return MultiPolygon()
            return MultiPolygon(tuple(
                tuple(_seq(ring) for ring in rings) for rings in tokens[0]
            ))

        def make_collection(tokens):
            if _is_empty(tokens):
                return GeometryCollection()
            return GeometryCollection(tuple(tokens[0]))

        point = (
            keyword(GeometryKind.POINT) + (EMPTY | (LPAREN + coord + RPAREN))
        ).set_parse_action(make_point)
        linestring = (
            keyword(GeometryKind.LINESTRING) + (EMPTY | coord_seq)
        ).set_parse_action(make_linestring)
        polygon = (
            keyword(GeometryKind.POLYGON) + (EMPTY | ring_list)
        ).set_parse_action(make_polygon)
        multipoint = (
            keyword(GeometryKind.MULTIPOINT) + (EMPTY | point_list)
        ).set_parse_action(make_multipoint)
        multilinestring = (
            keyword(GeometryKind.MULTILINESTRING) + (EMPTY | ring_list)
        ).set_parse_action(make_multilinestring)
        multipolygon = (
            keyword(GeometryKind.MULTIPOLYGON) + (EMPTY | polygon_list)
        ).set_parse_action(make_multipolygon)
        collection = (
            keyword(GeometryKind.GEOMETRYCOLLECTION)
            + (EMPTY | Group(LPAREN + DelimitedList(geometry) + RPAREN))
        ).set_parse_action(make_collection)

        geometry <<= (
            point | linestring | polygon
            | multipoint | multilinestring | multipolygon
            | collection
        )

        crs = Regex(r"<[^<>\s]*>")("crs")
        self.wkt = Opt(crs) + geometry("geometry")

    def parse(self, text: str) -> Geometry:
        """
        Parse a WKT string into a geometry value.

        Args:
            text: WKT literal, optionally prefixed with a CRS IRI

        Returns:
            Parsed geometry; its ``crs`` is set when the literal names one

        Raises:
            MalformedGeometry: If the literal is not valid WKT
        """
        if text is None or not text.strip():
            raise MalformedGeometry("empty literal", text or "")

        self._precheck(text)

        try:
            result = self.wkt.parse_string(text, parse_all=True)
        except pp.ParseBaseException as e:
            raise MalformedGeometry(
                f"{e.msg} at column {e.column}", text
            ) from e
        except RecursionError as e:
            raise MalformedGeometry("nesting too deep", text) from e

        geometry = result["geometry"]
        if "crs" in result:
            geometry = geometry.with_crs(crs_from_iri(result["crs"][1:-1]))
        return geometry

    @staticmethod
    def _precheck(text: str) -> None:
        """Reject unknown keywords and unbalanced parentheses early."""
        rest = text
        match = _CRS_PREFIX_RE.match(rest)
        if match:
            rest = rest[match.end():]

        match = _KEYWORD_RE.match(rest)
        if not match:
            raise MalformedGeometry("missing geometry keyword", text)
        if match.group(1).upper() not in KEYWORDS:
            raise MalformedGeometry(
                f"unrecognized geometry keyword {match.group(1)!r}", text
            )

        depth = 0
        for char in rest:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth < 0:
                    break
        if depth != 0:
            raise MalformedGeometry("unbalanced parentheses", text)


# Module-level parser instance for convenience
_parser: Optional[WKTParser] = None


def parse_wkt(text: str) -> Geometry:
    """
    Parse a WKT literal using a cached parser instance.

    Raises:
        MalformedGeometry: If the literal is not valid WKT
    """
    global _parser
    if _parser is None:
        _parser = WKTParser()
    return _parser.parse(text)


def try_parse_wkt(text: str) -> "Geometry | MalformedGeometry":
    """Parse a WKT literal, returning the failure instead of raising it."""
    try:
        return parse_wkt(text)
    except MalformedGeometry as e:
        return e


__all__ = [
    "WKTParser",
    "parse_wkt",
    "try_parse_wkt",
    "crs_from_iri",
    "crs_to_iri",
    "KEYWORDS",
]

"""
Geometry values produced by the WKT parser.

Each geometry kind is its own frozen dataclass carrying tuples of
(x, y) coordinate pairs. Values are immutable; projection returns a
new value with the same structure.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, ClassVar, Optional, Tuple


Coordinate = Tuple[float, float]
CoordinateSequence = Tuple[Coordinate, ...]
SequenceMapper = Callable[[CoordinateSequence], CoordinateSequence]


class GeometryKind(Enum):
    """Geometry kinds, valued by their GeoJSON type names."""
    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"
    MULTIPOINT = "MultiPoint"
    MULTILINESTRING = "MultiLineString"
    MULTIPOLYGON = "MultiPolygon"
    GEOMETRYCOLLECTION = "GeometryCollection"

    @property
    def keyword(self) -> str:
        """WKT keyword for this kind (e.g. ``LINESTRING``)."""
        return self.name

    @classmethod
    def from_keyword(cls, keyword: str) -> "GeometryKind":
        return cls[keyword.upper()]


class Geometry:
    """
    Base class for geometry values.

    Subclasses are frozen dataclasses with a ``crs`` field holding the
    CRS the coordinates are expressed in, when known.
    """
    kind: ClassVar[GeometryKind]
    crs: Optional[str]

    @property
    def is_empty(self) -> bool:
        return not self.sequences()

    def sequences(self) -> list:
        """All coordinate sequences of this geometry, in document order."""
        raise NotImplementedError

    def map_sequences(self, fn: SequenceMapper) -> "Geometry":
        """Return a copy with ``fn`` applied to every coordinate sequence."""
        raise NotImplementedError

    def with_crs(self, crs: Optional[str]) -> "Geometry":
        return replace(self, crs=crs)

    def coordinate_count(self) -> int:
        return sum(len(seq) for seq in self.sequences())


@dataclass(frozen=True)
class Point(Geometry):
    """A single position; ``coordinates`` is None for ``POINT EMPTY``."""
    kind: ClassVar[GeometryKind] = GeometryKind.POINT
    coordinates: Optional[Coordinate] = None
    crs: Optional[str] = None

    @property
    def x(self) -> float:
        return self.coordinates[0]

    @property
    def y(self) -> float:
        return self.coordinates[1]

    def sequences(self) -> list:
        if self.coordinates is None:
            return []
        return [(self.coordinates,)]

    def map_sequences(self, fn: SequenceMapper) -> "Point":
        if self.coordinates is None:
            return self
        return replace(self, coordinates=fn((self.coordinates,))[0])


@dataclass(frozen=True)
class LineString(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.LINESTRING
    coordinates: CoordinateSequence = ()
    crs: Optional[str] = None

    def sequences(self) -> list:
        return [self.coordinates] if self.coordinates else []

    def map_sequences(self, fn: SequenceMapper) -> "LineString":
        if not self.coordinates:
            return self
        return replace(self, coordinates=fn(self.coordinates))


@dataclass(frozen=True)
class Polygon(Geometry):
    """An outer ring followed by zero or more inner rings."""
    kind: ClassVar[GeometryKind] = GeometryKind.POLYGON
    rings: Tuple[CoordinateSequence, ...] = ()
    crs: Optional[str] = None

    @property
    def exterior(self) -> Optional[CoordinateSequence]:
        return self.rings[0] if self.rings else None

    @property
    def interiors(self) -> Tuple[CoordinateSequence, ...]:
        return self.rings[1:]

    def sequences(self) -> list:
        return list(self.rings)

    def map_sequences(self, fn: SequenceMapper) -> "Polygon":
        return replace(self, rings=tuple(fn(ring) for ring in self.rings))


@dataclass(frozen=True)
class MultiPoint(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.MULTIPOINT
    points: CoordinateSequence = ()
    crs: Optional[str] = None

    def sequences(self) -> list:
        return [self.points] if self.points else []

    def map_sequences(self, fn: SequenceMapper) -> "MultiPoint":
        if not self.points:
            return self
        return replace(self, points=fn(self.points))


@dataclass(frozen=True)
class MultiLineString(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.MULTILINESTRING
    lines: Tuple[CoordinateSequence, ...] = ()
    crs: Optional[str] = None

    def sequences(self) -> list:
        return list(self.lines)

    def map_sequences(self, fn: SequenceMapper) -> "MultiLineString":
        return replace(self, lines=tuple(fn(line) for line in self.lines))


@dataclass(frozen=True)
class MultiPolygon(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.MULTIPOLYGON
    polygons: Tuple[Tuple[CoordinateSequence, ...], ...] = ()
    crs: Optional[str] = None

    def sequences(self) -> list:
        return [ring for rings in self.polygons for ring in rings]

    def map_sequences(self, fn: SequenceMapper) -> "MultiPolygon":
        return replace(
            self,
            polygons=tuple(tuple(fn(ring) for ring in rings) for rings in self.polygons),
        )


@dataclass(frozen=True)
class GeometryCollection(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.GEOMETRYCOLLECTION
    geometries: Tuple[Geometry, ...] = ()
    crs: Optional[str] = None

    def sequences(self) -> list:
        return [seq for member in self.geometries for seq in member.sequences()]

    def map_sequences(self, fn: SequenceMapper) -> "GeometryCollection":
        return replace(
            self,
            geometries=tuple(member.map_sequences(fn) for member in self.geometries),
        )

    def with_crs(self, crs: Optional[str]) -> "GeometryCollection":
        return replace(
            self,
            crs=crs,
            geometries=tuple(member.with_crs(crs) for member in self.geometries),
        )

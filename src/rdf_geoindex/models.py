"""
Core data models for rdf-geoindex.

Triples are plain immutable string tuples. Feature records tie a parsed,
reprojected geometry back to the subject it was read from.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from rdf_geoindex.wkt.ast import Geometry, GeometryKind
from rdf_geoindex.wkt.serializer import to_geojson


@dataclass(frozen=True)
class Triple:
    """
    An RDF triple.

    Objects are stored as their lexical value: IRIs as the bare IRI,
    literals without quotes or datatype.
    """
    subject: str
    predicate: str
    object: str

    def matches(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> bool:
        """Check the triple against a pattern; None matches anything."""
        return (
            (subject is None or self.subject == subject)
            and (predicate is None or self.predicate == predicate)
            and (obj is None or self.object == obj)
        )

    def __iter__(self):
        yield self.subject
        yield self.predicate
        yield self.object


@dataclass(frozen=True)
class FeatureRecord:
    """A successfully parsed and projected geometry literal."""
    subject: str
    geometry: Geometry

    @property
    def kind(self) -> GeometryKind:
        return self.geometry.kind

    def to_geojson(self, properties: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """GeoJSON Feature with the subject as its id."""
        return {
            "type": "Feature",
            "id": self.subject,
            "geometry": to_geojson(self.geometry),
            "properties": dict(properties or {}),
        }


@dataclass(frozen=True)
class FeatureFailure:
    """A geometry literal that could not be turned into a FeatureRecord."""
    subject: str
    stage: str  # "parse" or "project"
    reason: str
    literal: str = field(default="", repr=False)

    def to_dict(self) -> dict[str, str]:
        return {
            "subject": self.subject,
            "stage": self.stage,
            "reason": self.reason,
        }

"""
Lookups over an ingested TripleStore.

GeoIndex answers the two questions downstream consumers (map popups,
exports) ask about a feature:
- which subject owns a geometry id (reverse geometry lookup)
- what properties that subject carries
"""

import logging
from typing import Any, Optional

from rdf_geoindex.errors import NotFound
from rdf_geoindex.store import TripleStore
from rdf_geoindex.vocab import GEO_AS_WKT, LOCN_GEOMETRY

logger = logging.getLogger(__name__)


class GeoIndex:
    """
    Query layer over a TripleStore.

    Queries are read-only and may be issued from several threads once
    ingestion has finished.

    Args:
        store: Store to query
        geometry_predicate: Predicate linking a subject to its geometry id
        wkt_predicate: Predicate carrying WKT literals
    """

    def __init__(
        self,
        store: TripleStore,
        geometry_predicate: str = LOCN_GEOMETRY,
        wkt_predicate: str = GEO_AS_WKT,
    ):
        self.store = store
        self.geometry_predicate = geometry_predicate
        self.wkt_predicate = wkt_predicate

    def subjects_for_geometry_id(self, geometry_id: str) -> list[str]:
        """Every distinct subject linked to ``geometry_id``, in insertion order."""
        triples = self.store.query(predicate=self.geometry_predicate, obj=geometry_id)
        return list(dict.fromkeys(t.subject for t in triples))

    def subject_from_geometry_id(self, geometry_id: str) -> str:
        """
        Resolve a geometry id to the subject that owns it.

        Returns the subject of the earliest ``(subject, geometry_predicate,
        geometry_id)`` triple. When several subjects claim the same id a
        warning is logged and the earliest still wins.

        Raises:
            NotFound: If no subject links to ``geometry_id``
        """
        subjects = self.subjects_for_geometry_id(geometry_id)
        if not subjects:
            raise NotFound(geometry_id, what="subject for geometry")
        if len(subjects) > 1:
            logger.warning(
                f"Geometry {geometry_id} is claimed by {len(subjects)} subjects "
                f"({', '.join(subjects)}); using {subjects[0]}"
            )
        return subjects[0]

    def find_subject(self, geometry_id: str) -> Optional[str]:
        """Like subject_from_geometry_id, but returns None when absent."""
        try:
            return self.subject_from_geometry_id(geometry_id)
        except NotFound:
            return None

    def properties_of(self, subject: str) -> dict[str, str]:
        """
        All properties of a subject as ``{predicate: object}``.

        Computed from the store on every call. When a predicate repeats,
        the value of the latest triple wins. Unknown subjects give an
        empty mapping.
        """
        properties: dict[str, str] = {}
        for triple in self.store.query(subject=subject):
            properties[triple.predicate] = triple.object
        return properties

    def wkt_of(self, subject: str) -> str:
        """
        The first WKT literal attached to ``subject``.

        Raises:
            NotFound: If the subject has no WKT literal
        """
        triple = self.store.first(subject=subject, predicate=self.wkt_predicate)
        if triple is None:
            raise NotFound(subject, what="WKT literal")
        return triple.object

    def describe(self, geometry_id: str) -> dict[str, Any]:
        """
        Display payload for a geometry id.

        Combines the owning subject, the geometry's WKT literal and the
        subject's properties:

            {"@id": subject, <wkt_predicate>: wkt, **properties_of(subject)}

        Raises:
            NotFound: If the geometry id has no owner or no WKT literal
        """
        subject = self.subject_from_geometry_id(geometry_id)
        return {
            "@id": subject,
            self.wkt_predicate: self.wkt_of(geometry_id),
            **self.properties_of(subject),
        }

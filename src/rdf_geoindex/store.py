"""
Append-only in-memory triple store.

Triples are kept in a list in insertion order and indexed by subject,
predicate and object. Nothing is ever removed or rewritten, and
duplicates are kept: adding the same triple twice stores it twice.

Key design:
- add() is O(1) amortized and never fails
- query() resolves bound pattern positions through the indexes and
  returns matches in insertion order
- to_dataframe() materializes a Polars view, cached until the next add
- a re-entrant lock makes concurrent reads safe
"""

import threading
from typing import Any, Iterable, Iterator, Optional

import polars as pl

from rdf_geoindex.models import Triple
from rdf_geoindex.storage.indexing import IndexManager


class TripleStore:
    """
    An append-only multiset of RDF triples with pattern queries.

    Example:
        store = TripleStore()
        store.add_triple("ex:s", "rdfs:label", "Canal A")
        store.query(subject="ex:s")  # [Triple("ex:s", "rdfs:label", "Canal A")]
    """

    def __init__(self):
        """Initialize an empty triple store."""
        self._triples: list[Triple] = []
        self._indexes = IndexManager()
        self._lock = threading.RLock()

        # Cache for the DataFrame view
        self._df_cache: Optional[pl.DataFrame] = None
        self._df_cache_valid = False

    def _invalidate_cache(self):
        """Invalidate the cached DataFrame view after modifications."""
        self._df_cache_valid = False

    def add(self, triple: Triple) -> int:
        """
        Append a triple.

        Args:
            triple: Triple to store

        Returns:
            Insertion position of the triple
        """
        with self._lock:
            position = len(self._triples)
            self._triples.append(triple)
            self._indexes.add_row(triple, position)
            self._invalidate_cache()
            return position

    def add_triple(self, subject: str, predicate: str, obj: str) -> int:
        """Build and append a triple from its parts."""
        return self.add(Triple(subject, predicate, obj))

    def add_triples(self, triples: Iterable[Triple]) -> int:
        """
        Append triples in iteration order.

        Returns:
            Number of triples added
        """
        count = 0
        with self._lock:
            for triple in triples:
                self.add(triple)
                count += 1
        return count

    def query(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> list[Triple]:
        """
        Find triples matching a pattern.

        Args:
            subject: Subject to match, or None for any
            predicate: Predicate to match, or None for any
            obj: Object value to match, or None for any

        Returns:
            Matching triples in insertion order
        """
        with self._lock:
            positions = self._indexes.match(
                subject=subject, predicate=predicate, object=obj
            )
            if positions is None:
                return list(self._triples)
            return [self._triples[p] for p in positions]

    def first(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> Optional[Triple]:
        """The earliest triple matching a pattern, or None."""
        matches = self.query(subject, predicate, obj)
        return matches[0] if matches else None

    def count(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> int:
        return len(self.query(subject, predicate, obj))

    def subjects(self, predicate: Optional[str] = None) -> list[str]:
        """Distinct subjects in first-seen order, optionally for one predicate."""
        with self._lock:
            if predicate is None:
                return self._indexes.get_index("subject").keys()
            seen = dict.fromkeys(t.subject for t in self.query(predicate=predicate))
            return list(seen)

    def to_dataframe(self) -> pl.DataFrame:
        """
        Materialize the store as a Polars DataFrame.

        Columns: position, subject, predicate, object. Results are cached
        until the next add.
        """
        with self._lock:
            if self._df_cache_valid and self._df_cache is not None:
                return self._df_cache

            self._df_cache = pl.DataFrame(
                {
                    "position": list(range(len(self._triples))),
                    "subject": [t.subject for t in self._triples],
                    "predicate": [t.predicate for t in self._triples],
                    "object": [t.object for t in self._triples],
                },
                schema={
                    "position": pl.UInt64,
                    "subject": pl.Utf8,
                    "predicate": pl.Utf8,
                    "object": pl.Utf8,
                },
            )
            self._df_cache_valid = True
            return self._df_cache

    def stats(self) -> dict[str, Any]:
        """Get statistics about the triple store."""
        with self._lock:
            index_stats = self._indexes.stats()
            return {
                "total_triples": len(self._triples),
                "unique_subjects": index_stats["subject"].num_keys,
                "unique_predicates": index_stats["predicate"].num_keys,
                "unique_objects": index_stats["object"].num_keys,
            }

    def __len__(self) -> int:
        """Return the number of stored triples, duplicates included."""
        return len(self._triples)

    def __iter__(self) -> Iterator[Triple]:
        with self._lock:
            return iter(list(self._triples))

    def __contains__(self, triple: object) -> bool:
        if not isinstance(triple, Triple):
            return False
        return bool(self.query(triple.subject, triple.predicate, triple.object))

    def __repr__(self) -> str:
        stats = self.stats()
        return (
            f"TripleStore("
            f"triples={stats['total_triples']}, "
            f"subjects={stats['unique_subjects']})"
        )

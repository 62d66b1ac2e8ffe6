"""
Hash indexes from term values to triple positions.

Positions are appended in insertion order, so every position list is
already sorted and lookups preserve the order triples were added in.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass
class IndexStats:
    """Statistics for an index."""
    column_name: str
    num_keys: int
    num_entries: int


class PositionIndex:
    """
    An index from one triple column (subject, predicate or object) to the
    positions of the triples holding each value.

    Example:
        idx = PositionIndex("subject")
        idx.add("http://example.org/s1", 0)
        idx.lookup("http://example.org/s1")  # [0]
    """

    def __init__(self, column_name: str):
        """
        Initialize an empty index.

        Args:
            column_name: Name of the indexed column (e.g., "subject")
        """
        self.column_name = column_name
        self._positions: dict[str, list[int]] = {}
        self._num_entries = 0
        self._lock = threading.RLock()

    def add(self, key: str, position: int) -> None:
        """
        Add a single entry.

        Positions must be added in increasing order.
        """
        with self._lock:
            self._positions.setdefault(key, []).append(position)
            self._num_entries += 1

    def lookup(self, key: str) -> list[int]:
        """
        Look up the positions holding ``key``.

        Returns:
            Ascending list of positions (a copy), empty when absent
        """
        with self._lock:
            return list(self._positions.get(key, ()))

    def count(self, key: str) -> int:
        with self._lock:
            return len(self._positions.get(key, ()))

    def keys(self) -> list[str]:
        """Distinct keys in first-seen order."""
        with self._lock:
            return list(self._positions)

    def stats(self) -> IndexStats:
        """Get index statistics."""
        with self._lock:
            return IndexStats(
                column_name=self.column_name,
                num_keys=len(self._positions),
                num_entries=self._num_entries,
            )


class IndexManager:
    """
    Manages the subject, predicate and object indexes of a triple store.

    Example:
        manager = IndexManager()
        manager.add_row(("s", "p", "o"), 0)
        manager.match(subject="s")  # [0]
    """

    COLUMNS = ("subject", "predicate", "object")

    def __init__(self):
        """Initialize index manager."""
        self._indexes = {name: PositionIndex(name) for name in self.COLUMNS}
        self._lock = threading.RLock()

    def get_index(self, column_name: str) -> Optional[PositionIndex]:
        """Get an existing index."""
        return self._indexes.get(column_name)

    def add_row(self, values: Iterable[str], position: int) -> None:
        """Index one row; ``values`` follow COLUMNS order."""
        with self._lock:
            for name, value in zip(self.COLUMNS, values):
                self._indexes[name].add(value, position)

    def match(self, **bound: Optional[str]) -> Optional[list[int]]:
        """
        Positions matching every bound column, in ascending order.

        Columns bound to None are unconstrained.

        Returns:
            Matching positions, or None when no column is bound
            (every row matches)
        """
        keys = [(name, value) for name, value in bound.items() if value is not None]
        if not keys:
            return None

        with self._lock:
            # Start from the most selective column
            keys.sort(key=lambda kv: self._indexes[kv[0]].count(kv[1]))
            first_name, first_value = keys[0]
            positions = self._indexes[first_name].lookup(first_value)
            for name, value in keys[1:]:
                if not positions:
                    break
                allowed = set(self._indexes[name].lookup(value))
                positions = [p for p in positions if p in allowed]
            return positions

    def stats(self) -> dict[str, IndexStats]:
        """Get stats for all indexes."""
        with self._lock:
            return {name: idx.stats() for name, idx in self._indexes.items()}

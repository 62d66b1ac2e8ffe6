"""
rdf-geoindex storage layer.

In-memory position indexes backing the triple store.
"""

from rdf_geoindex.storage.indexing import (
    PositionIndex,
    IndexManager,
    IndexStats,
)

__all__ = [
    "PositionIndex",
    "IndexManager",
    "IndexStats",
]

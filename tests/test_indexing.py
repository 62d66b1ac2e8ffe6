"""
Tests for position indexes.
"""

import pytest

from rdf_geoindex.storage.indexing import PositionIndex, IndexManager, IndexStats


@pytest.fixture
def rows():
    return [
        ("s1", "p1", "o1"),
        ("s2", "p1", "o2"),
        ("s3", "p2", "o3"),
        ("s1", "p2", "o4"),
        ("s2", "p3", "o5"),
        ("s1", "p1", "o6"),
    ]


def index_column(name, rows):
    idx = PositionIndex(name)
    column = IndexManager.COLUMNS.index(name)
    for position, row in enumerate(rows):
        idx.add(row[column], position)
    return idx


@pytest.fixture
def manager(rows):
    m = IndexManager()
    for position, row in enumerate(rows):
        m.add_row(row, position)
    return m


class TestPositionIndex:
    """Tests for PositionIndex."""

    def test_add_rows(self, rows):
        idx = index_column("subject", rows)

        assert idx.stats() == IndexStats("subject", num_keys=3, num_entries=6)

    def test_lookup(self, rows):
        idx = index_column("subject", rows)

        assert idx.lookup("s1") == [0, 3, 5]
        assert idx.lookup("s2") == [1, 4]
        assert idx.lookup("s3") == [2]

    def test_lookup_missing(self):
        idx = PositionIndex("subject")
        assert idx.lookup("nope") == []
        assert idx.count("nope") == 0

    def test_lookup_returns_copy(self):
        idx = PositionIndex("object")
        idx.add("o", 0)
        idx.lookup("o").append(99)
        assert idx.lookup("o") == [0]

    def test_keys_first_seen_order(self, rows):
        idx = index_column("predicate", rows)
        assert idx.keys() == ["p1", "p2", "p3"]


class TestIndexManager:
    """Tests for IndexManager."""

    def test_single_column(self, manager):
        assert manager.match(subject="s1") == [0, 3, 5]

    def test_intersection(self, manager):
        assert manager.match(subject="s1", predicate="p1") == [0, 5]
        assert manager.match(subject="s1", predicate="p1", object="o6") == [5]

    def test_no_match(self, manager):
        assert manager.match(subject="s3", predicate="p1") == []
        assert manager.match(object="missing") == []

    def test_unbound(self, manager):
        assert manager.match() is None
        assert manager.match(subject=None, predicate=None) is None

    def test_stats(self, manager):
        stats = manager.stats()
        assert stats["subject"].num_keys == 3
        assert stats["predicate"].num_keys == 3
        assert stats["object"].num_entries == 6

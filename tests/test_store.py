"""
Tests for the append-only TripleStore.
"""

from concurrent.futures import ThreadPoolExecutor

import polars as pl
import pytest

from rdf_geoindex.models import Triple
from rdf_geoindex.store import TripleStore
from rdf_geoindex.vocab import GEO_AS_WKT, RDFS_LABEL


EX = "http://example.org/"


@pytest.fixture
def store():
    s = TripleStore()
    s.add(Triple(f"{EX}s1", GEO_AS_WKT, "POINT (30 10)"))
    s.add(Triple(f"{EX}s1", RDFS_LABEL, "Canal A"))
    s.add(Triple(f"{EX}s2", RDFS_LABEL, "Canal B"))
    s.add(Triple(f"{EX}s2", f"{EX}flows", f"{EX}s1"))
    return s


class TestAdd:
    """Tests for insertion."""

    def test_add_returns_position(self):
        store = TripleStore()
        assert store.add_triple("a", "b", "c") == 0
        assert store.add_triple("a", "b", "d") == 1
        assert len(store) == 2

    def test_duplicates_survive(self):
        store = TripleStore()
        triple = Triple("a", "b", "c")
        store.add(triple)
        store.add(triple)
        assert len(store) == 2
        assert store.query("a", "b", "c") == [triple, triple]

    def test_add_triples(self):
        store = TripleStore()
        count = store.add_triples(Triple("s", "p", str(i)) for i in range(5))
        assert count == 5
        assert [t.object for t in store] == ["0", "1", "2", "3", "4"]


class TestQuery:
    """Tests for pattern queries."""

    def test_full_pattern_matches(self, store):
        triple = Triple(f"{EX}s1", RDFS_LABEL, "Canal A")
        assert store.query(triple.subject, triple.predicate, triple.object) == [triple]
        assert triple in store

    def test_non_matching_element_excludes(self, store):
        assert store.query(f"{EX}s1", RDFS_LABEL, "Canal B") == []
        assert store.query(f"{EX}s3") == []
        assert store.query(predicate=f"{EX}missing") == []
        assert Triple(f"{EX}s1", RDFS_LABEL, "Canal B") not in store

    def test_wildcards(self, store):
        assert len(store.query()) == 4
        assert len(store.query(subject=f"{EX}s1")) == 2
        assert len(store.query(predicate=RDFS_LABEL)) == 2
        assert store.query(obj=f"{EX}s1") == [Triple(f"{EX}s2", f"{EX}flows", f"{EX}s1")]

    def test_insertion_order(self):
        store = TripleStore()
        for i in range(10):
            store.add_triple(f"s{i % 3}", "p", str(i))
        assert [t.object for t in store.query(subject="s1")] == ["1", "4", "7"]
        assert [t.object for t in store.query(predicate="p")] == [str(i) for i in range(10)]

    def test_first_and_count(self, store):
        assert store.first(predicate=RDFS_LABEL).object == "Canal A"
        assert store.first(subject=f"{EX}nobody") is None
        assert store.count(predicate=RDFS_LABEL) == 2

    def test_subjects(self, store):
        assert store.subjects() == [f"{EX}s1", f"{EX}s2"]
        assert store.subjects(GEO_AS_WKT) == [f"{EX}s1"]

    def test_query_result_is_a_copy(self, store):
        result = store.query()
        result.clear()
        assert len(store.query()) == 4

    def test_concurrent_reads(self, store):
        def read(_):
            return store.query(predicate=RDFS_LABEL)

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(read, range(50)))
        assert all(r == results[0] for r in results)


class TestDataFrameView:
    """Tests for the Polars view."""

    def test_columns(self, store):
        df = store.to_dataframe()
        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["position", "subject", "predicate", "object"]
        assert df.height == 4
        assert df["object"].to_list()[1] == "Canal A"

    def test_cached_until_add(self, store):
        first = store.to_dataframe()
        assert store.to_dataframe() is first
        store.add_triple("x", "y", "z")
        second = store.to_dataframe()
        assert second is not first
        assert second.height == 5

    def test_empty_store(self):
        df = TripleStore().to_dataframe()
        assert df.height == 0
        assert df.schema["subject"] == pl.Utf8


class TestStats:
    def test_stats(self, store):
        stats = store.stats()
        assert stats["total_triples"] == 4
        assert stats["unique_subjects"] == 2
        assert stats["unique_predicates"] == 3

    def test_repr(self, store):
        assert repr(store) == "TripleStore(triples=4, subjects=2)"

"""
Streaming ingestion of triples into a TripleStore.

Every triple is appended to the store in input order. Triples whose
predicate is the geometry-literal predicate (geosparql:asWKT by default)
are parsed and reprojected into FeatureRecords. A literal that fails to
parse or project becomes a FeatureFailure and ingestion carries on.

Pipeline states:
    PENDING -> CONSUMING -> FINISHED
                         -> CANCELLED (partial result)

Parsing and projection may run on a thread pool (parse_workers > 1);
store insertion stays sequential on the consuming thread.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import IntEnum, auto
from threading import Event
from typing import Any, AsyncIterable, Callable, Iterable, Optional, Union

from rdf_geoindex.config import GeoIndexConfig
from rdf_geoindex.errors import MalformedGeometry, UnsupportedProjection
from rdf_geoindex.formats.nquads import aiter_batches
from rdf_geoindex.models import FeatureFailure, FeatureRecord, Triple
from rdf_geoindex.projection import GeometryProjector
from rdf_geoindex.store import TripleStore
from rdf_geoindex.wkt.ast import GeometryKind
from rdf_geoindex.wkt.parser import parse_wkt

logger = logging.getLogger(__name__)

Outcome = Union[FeatureRecord, FeatureFailure]


class PipelineState(IntEnum):
    """Ingestion pipeline states."""
    PENDING = auto()     # Created but not started
    CONSUMING = auto()   # Reading the triple stream
    FINISHED = auto()    # Stream exhausted
    CANCELLED = auto()   # Stopped early via CancellationToken


class CancellationToken:
    """Token for cooperative ingestion cancellation."""

    def __init__(self):
        self._cancelled = Event()

    def cancel(self):
        """Request cancellation."""
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._cancelled.is_set()


@dataclass
class IngestionStats:
    """Counters for one ingestion run."""
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    triples_seen: int = 0
    geometry_literals: int = 0
    duplicate_literals: int = 0
    features: int = 0
    failures: int = 0

    @property
    def duration_ms(self) -> float:
        """Run duration in milliseconds."""
        if self.start_time is None:
            return 0.0
        end = self.end_time or time.time()
        return (end - self.start_time) * 1000

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "duration_ms": self.duration_ms,
            "triples_seen": self.triples_seen,
            "geometry_literals": self.geometry_literals,
            "duplicate_literals": self.duplicate_literals,
            "features": self.features,
            "failures": self.failures,
        }


@dataclass
class IngestionResult:
    """Feature records and failures produced by one ingestion run."""
    features: list[FeatureRecord] = field(default_factory=list)
    failures: list[FeatureFailure] = field(default_factory=list)
    state: PipelineState = PipelineState.FINISHED
    stats: IngestionStats = field(default_factory=IngestionStats)

    @property
    def cancelled(self) -> bool:
        return self.state == PipelineState.CANCELLED

    def by_kind(self) -> dict[GeometryKind, list[FeatureRecord]]:
        """Group feature records by geometry kind."""
        groups: dict[GeometryKind, list[FeatureRecord]] = {}
        for record in self.features:
            groups.setdefault(record.kind, []).append(record)
        return groups

    def to_feature_collection(
        self,
        properties_of: Optional[Callable[[str], dict[str, Any]]] = None,
    ) -> dict[str, Any]:
        """
        GeoJSON FeatureCollection of all feature records.

        Args:
            properties_of: Optional callable returning the properties for a
                subject (e.g. ``GeoIndex.properties_of``)
        """
        return feature_collection(self.features, properties_of)

    def summary(self) -> dict[str, Any]:
        return {
            "state": self.state.name,
            **self.stats.to_dict(),
            "kinds": {kind.value: len(records) for kind, records in self.by_kind().items()},
            "failed_subjects": [f.subject for f in self.failures],
        }


def feature_collection(
    records: Iterable[FeatureRecord],
    properties_of: Optional[Callable[[str], dict[str, Any]]] = None,
) -> dict[str, Any]:
    """GeoJSON FeatureCollection of feature records, optionally with properties."""
    return {
        "type": "FeatureCollection",
        "features": [
            record.to_geojson(properties_of(record.subject) if properties_of else None)
            for record in records
        ],
    }

def extract_feature(subject: str, literal: str, projector: GeometryProjector) -> Outcome:
    """
    Parse and project one geometry literal.

    Never raises for bad input: malformed WKT and failed projections are
    returned as FeatureFailure values.
    """
    try:
        geometry = parse_wkt(literal)
    except MalformedGeometry as e:
        return FeatureFailure(subject=subject, stage="parse", reason=e.reason, literal=literal)

    try:
        projected = projector.project(geometry)
    except UnsupportedProjection as e:
        return FeatureFailure(subject=subject, stage="project", reason=str(e), literal=literal)

    return FeatureRecord(subject=subject, geometry=projected)


class IngestionPipeline:
    """
    Feeds a triple stream into a TripleStore and collects feature records.

    The store is the only shared state and is written from the consuming
    thread only. A subject's first geometry literal is the one parsed;
    later literals for the same subject are stored but not extracted.

    Example:
        store = TripleStore()
        pipeline = IngestionPipeline(store)
        result = pipeline.ingest(iter_triples(Path("data.nq")))
        for record in result.features:
            print(record.subject, record.kind)
    """

    def __init__(
        self,
        store: TripleStore,
        projector: Optional[GeometryProjector] = None,
        config: Optional[GeoIndexConfig] = None,
    ):
        self.store = store
        self.config = config or GeoIndexConfig()
        self.projector = projector or GeometryProjector(
            target_crs=self.config.target_crs,
            source_crs=self.config.source_crs,
            honor_geometry_crs=self.config.honor_literal_crs,
        )
        self._state = PipelineState.PENDING
        self._stats = IngestionStats()
        # Subjects whose geometry literal has already been extracted
        self._claimed: set[str] = set()

    @property
    def state(self) -> PipelineState:
        return self._state

    def _executor(self) -> Optional[ThreadPoolExecutor]:
        if self.config.parse_workers > 1:
            return ThreadPoolExecutor(
                max_workers=self.config.parse_workers,
                thread_name_prefix="geoindex-parse",
            )
        return None

    def _start(self) -> None:
        self._state = PipelineState.CONSUMING
        self._stats = IngestionStats(start_time=time.time())

    def _accept(self, triple: Triple) -> Optional[tuple[str, str]]:
        """Store a triple; return (subject, literal) if it needs extraction."""
        self.store.add(triple)
        self._stats.triples_seen += 1

        if triple.predicate != self.config.wkt_predicate:
            return None

        self._stats.geometry_literals += 1
        if triple.subject in self._claimed:
            self._stats.duplicate_literals += 1
            logger.debug(f"Ignoring additional geometry literal for {triple.subject}")
            return None

        self._claimed.add(triple.subject)
        return triple.subject, triple.object

    def _finish(self, outcomes: list[Outcome], cancelled: bool) -> IngestionResult:
        result = IngestionResult(stats=self._stats)
        for outcome in outcomes:
            if isinstance(outcome, FeatureRecord):
                result.features.append(outcome)
            else:
                result.failures.append(outcome)
                logger.warning(
                    f"Feature {outcome.subject} has invalid WKT "
                    f"({outcome.stage}): {outcome.reason}"
                )

        self._stats.features = len(result.features)
        self._stats.failures = len(result.failures)
        self._stats.end_time = time.time()
        self._state = PipelineState.CANCELLED if cancelled else PipelineState.FINISHED
        result.state = self._state

        logger.info(
            f"Ingestion {self._state.name.lower()}: {self._stats.triples_seen} triples, "
            f"{self._stats.features} features, {self._stats.failures} failures "
            f"in {self._stats.duration_ms:.1f} ms"
        )
        return result

    def _extract_all(self, jobs: list[tuple[str, str]]) -> list[Outcome]:
        return [extract_feature(subject, literal, self.projector) for subject, literal in jobs]

    def ingest(
        self,
        triples: Iterable[Triple],
        cancel_token: Optional[CancellationToken] = None,
    ) -> IngestionResult:
        """
        Consume a triple stream synchronously.

        Args:
            triples: Triples in stream order
            cancel_token: Optional token; once cancelled, no further triples
                are read and a partial result is returned. Every triple
                read before that point is stored.

        Returns:
            IngestionResult with feature records and failures
        """
        self._start()
        outcomes: list[Union[Outcome, Future]] = []
        cancelled = _is_cancelled(cancel_token)

        pool = self._executor()
        try:
            if not cancelled:
                for triple in triples:
                    job = self._accept(triple)
                    if job is not None:
                        if pool is not None:
                            outcomes.append(pool.submit(extract_feature, *job, self.projector))
                        else:
                            outcomes.append(extract_feature(*job, self.projector))
                    # Checked after the triple is stored so nothing read is lost
                    if _is_cancelled(cancel_token):
                        cancelled = True
                        break

            resolved = [o.result() if isinstance(o, Future) else o for o in outcomes]
        finally:
            if pool is not None:
                pool.shutdown(wait=True)

        return self._finish(resolved, cancelled)

    async def ingest_async(
        self,
        triples: Union[Iterable[Triple], AsyncIterable[Triple]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> IngestionResult:
        """
        Consume a triple stream from an async (or plain) iterable.

        Plain iterables are read in batches on a worker thread, and WKT
        parsing runs off the event loop (one batch per worker-thread hop
        with ``parse_workers == 1``, on the pool otherwise). The token is
        checked between batches; every triple of a batch already read is
        stored.

        Returns once the stream ends; the returned result is the completion
        signal for downstream consumers. Task cancellation propagates
        after the pipeline is marked CANCELLED.
        """
        self._start()
        loop = asyncio.get_running_loop()
        outcomes: list[Union[Outcome, asyncio.Future]] = []
        cancelled = _is_cancelled(cancel_token)

        pool = self._executor()
        try:
            if not cancelled:
                async for batch in aiter_batches(triples):
                    jobs = [job for job in map(self._accept, batch) if job is not None]
                    if jobs and pool is not None:
                        outcomes.extend(
                            loop.run_in_executor(pool, extract_feature, *job, self.projector)
                            for job in jobs
                        )
                    elif jobs:
                        outcomes.extend(await asyncio.to_thread(self._extract_all, jobs))
                    if _is_cancelled(cancel_token):
                        cancelled = True
                        break

            resolved = []
            for outcome in outcomes:
                if isinstance(outcome, asyncio.Future):
                    outcome = await outcome
                resolved.append(outcome)
        except asyncio.CancelledError:
            self._state = PipelineState.CANCELLED
            raise
        finally:
            if pool is not None:
                pool.shutdown(wait=False, cancel_futures=True)

        return self._finish(resolved, cancelled)


def _is_cancelled(token: Optional[CancellationToken]) -> bool:
    return token is not None and token.is_cancelled()

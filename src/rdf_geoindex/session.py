"""
A single ingestion session: one store, one pipeline, one index.

Replaces process-wide state with an explicitly owned object whose
lifetime is the caller's.
"""

from pathlib import Path
from typing import AsyncIterable, Iterable, Optional, Union

from rdf_geoindex.config import ConfigValidator, GeoIndexConfig
from rdf_geoindex.formats.nquads import iter_triples
from rdf_geoindex.index import GeoIndex
from rdf_geoindex.ingest import (
    CancellationToken,
    IngestionPipeline,
    IngestionResult,
    feature_collection,
)
from rdf_geoindex.models import Triple
from rdf_geoindex.projection import GeometryProjector
from rdf_geoindex.store import TripleStore


class GeoSession:
    """
    Wires a TripleStore, IngestionPipeline and GeoIndex together.

    Example:
        session = GeoSession()
        result = session.load(Path("output.nq"))
        subject = session.index.subject_from_geometry_id(result.features[0].subject)
        session.index.properties_of(subject)
    """

    def __init__(self, config: Optional[GeoIndexConfig] = None):
        self.config = config or GeoIndexConfig()
        ConfigValidator.validate_or_raise(self.config)

        self.store = TripleStore()
        self.projector = GeometryProjector(
            target_crs=self.config.target_crs,
            source_crs=self.config.source_crs,
            honor_geometry_crs=self.config.honor_literal_crs,
        )
        self.pipeline = IngestionPipeline(self.store, self.projector, self.config)
        self.index = GeoIndex(
            self.store,
            geometry_predicate=self.config.geometry_predicate,
            wkt_predicate=self.config.wkt_predicate,
        )
        self.results: list[IngestionResult] = []

    def ingest(
        self,
        triples: Iterable[Triple],
        cancel_token: Optional[CancellationToken] = None,
    ) -> IngestionResult:
        result = self.pipeline.ingest(triples, cancel_token)
        self.results.append(result)
        return result

    async def ingest_async(
        self,
        triples: Union[Iterable[Triple], AsyncIterable[Triple]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> IngestionResult:
        result = await self.pipeline.ingest_async(triples, cancel_token)
        self.results.append(result)
        return result

    def load(
        self,
        path: Union[str, Path],
        format: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> IngestionResult:
        """Ingest an RDF file; see formats.iter_triples for supported formats."""
        return self.ingest(iter_triples(Path(path), format=format), cancel_token)

    @property
    def features(self) -> list:
        """Feature records from every run of this session."""
        return [record for result in self.results for record in result.features]

    def feature_collection(self) -> dict:
        """GeoJSON FeatureCollection of all features with their properties."""
        return feature_collection(self.features, self.index.properties_of)

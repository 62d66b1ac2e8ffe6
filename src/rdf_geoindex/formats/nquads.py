"""
Streaming triple sources backed by pyoxigraph.

Reads N-Quads, N-Triples, Turtle, TriG, N3 and RDF/XML lazily and yields
plain Triple values. Graph names are dropped: the triple store holds a
single default graph.
"""

import asyncio
import gzip
from io import BytesIO, StringIO
from itertools import islice
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, List, Optional, Union

from pyoxigraph import BlankNode, Literal, NamedNode, RdfFormat, parse as oxigraph_parse

from rdf_geoindex.errors import SourceError
from rdf_geoindex.models import Triple

Source = Union[str, Path, bytes, BytesIO, StringIO]

# Map suffix to Oxigraph format
FORMAT_MAP = {
    ".nq": RdfFormat.N_QUADS,
    ".nquads": RdfFormat.N_QUADS,
    ".nt": RdfFormat.N_TRIPLES,
    ".ntriples": RdfFormat.N_TRIPLES,
    ".ttl": RdfFormat.TURTLE,
    ".turtle": RdfFormat.TURTLE,
    ".trig": RdfFormat.TRIG,
    ".n3": RdfFormat.N3,
    ".rdf": RdfFormat.RDF_XML,
    ".xml": RdfFormat.RDF_XML,
}

FORMAT_NAMES = {
    "nquads": RdfFormat.N_QUADS,
    "ntriples": RdfFormat.N_TRIPLES,
    "turtle": RdfFormat.TURTLE,
    "trig": RdfFormat.TRIG,
    "n3": RdfFormat.N3,
    "rdfxml": RdfFormat.RDF_XML,
}

# Triples read per worker-thread hop when an async consumer reads a plain iterable
ASYNC_BATCH = 1000


def _term_value(term) -> str:
    """Lexical string for an oxigraph term."""
    if isinstance(term, NamedNode):
        return term.value
    if isinstance(term, BlankNode):
        return f"_:{term.value}"
    if isinstance(term, Literal):
        return term.value
    # Quoted triple (RDF-star)
    return str(term)


def resolve_format(path: Optional[Path] = None, format: Optional[str] = None) -> RdfFormat:
    """
    Pick the RDF format from an explicit name or a file suffix.

    ``file.nq.gz`` resolves through its inner suffix. Defaults to N-Quads.
    """
    if format is not None:
        key = format.lower().replace("-", "").replace("/", "")
        if key not in FORMAT_NAMES:
            raise SourceError(f"Unknown RDF format: {format}")
        return FORMAT_NAMES[key]

    if path is None:
        return RdfFormat.N_QUADS

    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = Path(path.stem).suffix.lower()
    return FORMAT_MAP.get(suffix, RdfFormat.N_QUADS)


def iter_triples(
    source: Source,
    format: Optional[str] = None,
    base_iri: Optional[str] = None,
) -> Iterator[Triple]:
    """
    Lazily parse an RDF document into triples.

    Args:
        source: File path (``Path``), RDF text (``str``), raw bytes, or a
            binary/text stream
        format: Format name (nquads, ntriples, turtle, trig, n3, rdfxml);
            inferred from the file suffix when omitted
        base_iri: Base IRI for relative references

    Yields:
        Triple objects in document order

    Raises:
        SourceError: If the document cannot be read or parsed
    """
    if isinstance(source, Path):
        if not source.exists():
            raise SourceError(f"Source file not found: {source}")
        rdf_format = resolve_format(source, format)
        base_iri = base_iri or source.absolute().as_uri()
        if source.suffix.lower() == ".gz":
            with gzip.open(source, "rb") as f:
                yield from _parse(f, rdf_format, base_iri, str(source))
        else:
            with open(source, "rb") as f:
                yield from _parse(f, rdf_format, base_iri, str(source))
        return

    rdf_format = resolve_format(None, format)
    yield from _parse(source, rdf_format, base_iri, "<input>")


def _parse(data, rdf_format: RdfFormat, base_iri: Optional[str], label: str) -> Iterator[Triple]:
    try:
        for quad in oxigraph_parse(data, rdf_format, base_iri=base_iri):
            yield Triple(
                subject=_term_value(quad.subject),
                predicate=quad.predicate.value,
                object=_term_value(quad.object),
            )
    except (SyntaxError, ValueError, OSError) as e:
        raise SourceError(f"Failed to parse {label}: {e}") from e


async def aiter_batches(
    triples: Union[Iterable[Triple], AsyncIterable[Triple]],
    size: int = ASYNC_BATCH,
) -> AsyncIterator[List[Triple]]:
    """
    Read a triple iterable as an async iterator of batches.

    Plain iterables (e.g. iter_triples over a file) are read ``size``
    triples at a time on a worker thread, so parsing never blocks the
    event loop. Async iterables are passed through one triple per batch
    and are never read ahead.
    """
    if hasattr(triples, "__aiter__"):
        async for triple in triples:
            yield [triple]
        return

    iterator = iter(triples)
    while True:
        batch = await asyncio.to_thread(lambda: list(islice(iterator, size)))
        if not batch:
            return
        yield batch


async def aiter_triples(
    triples: Union[Iterable[Triple], AsyncIterable[Triple]],
) -> AsyncIterator[Triple]:
    """Expose a triple iterable as an async iterator of single triples."""
    async for batch in aiter_batches(triples):
        for triple in batch:
            yield triple

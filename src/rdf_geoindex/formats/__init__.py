"""
RDF triple sources.

Supports (via pyoxigraph):
- N-Quads (.nq), graph names discarded
- N-Triples (.nt)
- Turtle (.ttl)
- TriG (.trig)
- N3 (.n3)
- RDF/XML (.rdf, .xml)
Gzip-compressed files (e.g. ``data.nq.gz``) are read transparently.
"""

from rdf_geoindex.formats.nquads import iter_triples, aiter_batches, aiter_triples, resolve_format

__all__ = [
    "iter_triples",
    "aiter_batches",
    "aiter_triples",
    "resolve_format",
]

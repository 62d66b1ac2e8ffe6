"""
Error kinds raised by rdf-geoindex.

Per-feature errors (MalformedGeometry, UnsupportedProjection) are caught by
the ingestion pipeline and turned into FeatureFailure values. Lookup errors
(NotFound) propagate to the caller.
"""

from typing import Optional


class GeoIndexError(Exception):
    """Base class for all rdf-geoindex errors."""
    pass


class MalformedGeometry(GeoIndexError, ValueError):
    """A WKT literal violates the well-known-text grammar."""

    def __init__(self, reason: str, text: Optional[str] = None):
        self.reason = reason
        self.text = text
        if text is not None:
            super().__init__(f"Malformed WKT ({reason}): {_shorten(text)}")
        else:
            super().__init__(f"Malformed WKT: {reason}")


class UnsupportedProjection(GeoIndexError):
    """A CRS pair cannot be transformed."""

    def __init__(self, source_crs: str, target_crs: str, reason: str = ""):
        self.source_crs = source_crs
        self.target_crs = target_crs
        self.reason = reason
        message = f"Cannot project {source_crs} -> {target_crs}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NotFound(GeoIndexError, LookupError):
    """A lookup matched no triple in the store."""

    def __init__(self, key: str, what: str = "triple"):
        self.key = key
        self.what = what
        super().__init__(f"No {what} found for {key!r}")


class ConfigValidationError(GeoIndexError):
    """Configuration validation error."""
    pass


class SourceError(GeoIndexError):
    """A triple source could not be read or parsed."""
    pass


def _shorten(text: str, limit: int = 80) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."

# app/exceptions.py
"""
Error taxonomy for the ingestion pipeline.

Propagation rules:
- ClassificationError never leaves the classifier; it degrades to an empty result.
- NormalizationError aborts a single item.
- FetchError / ParseError abort a single source and are reported per source.
- StoreError aborts an item on upsert, or the source on feed lookup/timestamp update.
"""


class ContentCollectorError(Exception):
    """Base class for all pipeline errors."""

    pass


class FetchError(ContentCollectorError):
    """Raised when every transport strategy for a URL failed."""

    def __init__(self, url: str, message: str, attempts: list[dict] | None = None, last_error: Exception | None = None):
        super().__init__(message)
        self.url = url
        self.attempts = attempts or []
        self.last_error = last_error


class ParseError(ContentCollectorError):
    """Raised when a feed payload is malformed."""

    pass


class NormalizationError(ContentCollectorError):
    """Raised when a source payload lacks its required identifier."""

    def __init__(self, source_type: str, message: str):
        super().__init__(f"{source_type}: {message}")
        self.source_type = source_type


class ClassificationError(ContentCollectorError):
    """Raised when the classification call or its response parsing fails."""

    pass


class StoreError(ContentCollectorError):
    """Raised when a backing-store operation fails."""

    pass

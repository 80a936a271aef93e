"""
Exception hierarchy for the sentiment ETL service.

Source and storage failures are normally folded into result objects by the
component that sees them; only configuration and startup storage failures
propagate to the caller.
"""

from typing import Optional


class SentimentETLError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SentimentETLError):
    """Raised when required configuration is missing or invalid."""


class StorageError(SentimentETLError):
    """Raised by storage clients when a read or write fails."""


class StorageUnavailableError(StorageError):
    """Raised when the storage backend cannot be reached at startup."""


class SourceExtractionError(SentimentETLError):
    """Raised by an extractor when its source cannot produce any items."""

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"{source}: {message}")


class SourceTransportError(SourceExtractionError):
    """
    Raised by a source client on transport failure, non-success HTTP status,
    or a response body that is not the expected JSON.
    """

    def __init__(self, source: str, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(source, message)

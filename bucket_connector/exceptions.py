"""
Exception hierarchy for the bucket connector.

Only DiscoveryError and StorageClientError escape SyncService.sync(); the
other kinds are caught where they happen and reported through the log.
"""


class ConnectorError(Exception):
    """Base class for all connector errors."""
    pass


class ConfigurationError(ConnectorError):
    """Raised when a sync payload cannot be parsed into connector options."""

    def __init__(self, message: str, issues=None):
        super().__init__(message)
        self.issues = list(issues or [])


class StorageClientError(ConnectorError):
    """Raised when the storage client cannot be built from the options."""
    pass


class DiscoveryError(ConnectorError):
    """Raised when listing the visible buckets fails."""
    pass


class PageFetchError(ConnectorError):
    """Raised when a single listing page cannot be fetched."""

    def __init__(self, bucket: str, page_index: int, cause: Exception):
        super().__init__(f"Failed to fetch page {page_index} of bucket '{bucket}': {cause}")
        self.bucket = bucket
        self.page_index = page_index
        self.cause = cause


class CallbackError(ConnectorError):
    """Raised by a sink when the host rejects or cannot receive a page."""
    pass

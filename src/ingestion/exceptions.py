"""Custom exceptions for the ingestion pipeline."""


class IngestionError(Exception):
    """Base exception for ingestion errors."""


class PageFetchError(IngestionError):
    """Raised when a linked page cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        """Initialise PageFetchError.

        :param url: The URL that failed.
        :param reason: Why the fetch failed.
        """
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")

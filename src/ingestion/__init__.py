"""Newsletter link ingestion pipeline."""

from src.ingestion.config import IngestionConfig, get_ingestion_settings
from src.ingestion.exceptions import IngestionError, PageFetchError
from src.ingestion.fetcher import FetchedPage, fetch_page
from src.ingestion.models import IngestOutcome, IngestStatus, NewsletterStats, ProcessingResult
from src.ingestion.service import IngestionService

__all__ = [
    "FetchedPage",
    "IngestOutcome",
    "IngestStatus",
    "IngestionConfig",
    "IngestionError",
    "IngestionService",
    "NewsletterStats",
    "PageFetchError",
    "ProcessingResult",
    "fetch_page",
    "get_ingestion_settings",
]

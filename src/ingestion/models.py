"""Pydantic models for ingestion results."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from src.enums import LinkType
from src.extraction.models import ParsedContent, ValidationReport
from src.summarisation.models import SummaryResult


class IngestStatus(StrEnum):
    """What happened to a single URL."""

    STORED = "stored"
    DUPLICATE = "duplicate"
    FAILED = "failed"


class IngestOutcome(BaseModel):
    """Result of ingesting a single URL."""

    url: str
    link_type: LinkType
    status: IngestStatus
    newsletter: str | None = None
    parsed: ParsedContent | None = None
    report: ValidationReport | None = None
    summary: SummaryResult | None = None
    error: str | None = None


class NewsletterStats(BaseModel):
    """Email and URL counts for one newsletter."""

    emails: int = 0
    urls: int = 0


class ProcessingResult(BaseModel):
    """Result of processing newsletter emails."""

    emails_processed: int = 0
    urls_extracted: int = 0
    urls_processed: int = 0
    urls_duplicate: int = 0
    errors: list[str] = Field(default_factory=list)
    summary: dict[str, NewsletterStats] = Field(default_factory=dict)
    latest_received_at: datetime | None = None

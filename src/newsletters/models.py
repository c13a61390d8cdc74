"""Pydantic models for newsletter emails and the links extracted from them."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class NewsletterName(StrEnum):
    """Newsletters the ingestion pipeline knows how to recognise."""

    THE_NEURON = "The Neuron"
    TLDR = "TLDR"
    THE_RUNDOWN = "The Rundown"
    FUTURETOOLS = "FutureTools"
    AI_BREAKFAST = "AI Breakfast"
    UNKNOWN = "unknown"


class NewsletterEmail(BaseModel):
    """A newsletter email with its decoded body."""

    email_id: str = Field(..., min_length=1)
    subject: str = ""
    sender_name: str = ""
    sender_email: str = ""
    received_at: datetime
    body: str = ""
    newsletter: NewsletterName = NewsletterName.UNKNOWN


class ExtractedLinks(BaseModel):
    """The cleaned, de-duplicated URLs found in one newsletter email."""

    email_id: str
    newsletter: NewsletterName
    urls: list[str] = Field(default_factory=list)

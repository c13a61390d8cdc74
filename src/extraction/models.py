"""Pydantic models for parsed article content."""

from datetime import UTC, datetime
from typing import Any, NamedTuple, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from src.enums import ContentType

UNKNOWN_LANGUAGE = "unknown"


class RawDocument(NamedTuple):
    """An HTML document awaiting parsing, with the URL it was fetched from."""

    html: str
    url: str | None = None


class ParsedContent(BaseModel):
    """Structured result of extracting metadata and body text from one document.

    Serialises with camelCase field names (``sourceUrl``, ``wordCount`` ...).
    A failed parse holds only zero values plus an error message.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    success: bool
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source_url: str = ""
    title: str = ""
    author: str | None = None
    publish_date: str | None = None
    summary: str = ""
    content: str = ""
    word_count: int = Field(default=0, ge=0)
    reading_time: int = Field(default=0, ge=0)
    language: str = UNKNOWN_LANGUAGE
    content_type: ContentType = ContentType.MINIMAL
    error: str | None = None

    @model_validator(mode="after")
    def check_outcome_consistency(self) -> Self:
        """Ensure success and error are mutually exclusive.

        :returns: The validated model.
        :raises ValueError: If the success flag and error disagree.
        """
        if self.success and self.error is not None:
            raise ValueError("A successful parse cannot carry an error")

        if not self.success:
            if not self.error:
                raise ValueError("A failed parse must carry an error message")
            if self._has_data():
                raise ValueError("A failed parse must not carry extracted data")

        return self

    def _has_data(self) -> bool:
        return bool(
            self.title
            or self.author is not None
            or self.publish_date is not None
            or self.summary
            or self.content
            or self.word_count
            or self.reading_time
            or self.language != UNKNOWN_LANGUAGE
            or self.content_type != ContentType.MINIMAL
        )

    @classmethod
    def failure(cls, error: str, source_url: str | None = None) -> "ParsedContent":
        """Build a failed result with every data field at its zero value.

        :param error: The failure message.
        :param source_url: The URL the caller supplied, if any.
        :returns: The failed result.
        """
        return cls(success=False, source_url=source_url or "", error=error)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict with camelCase keys.

        The ``error`` key is only present on failed results.

        :returns: The serialised result.
        """
        data = self.model_dump(mode="json", by_alias=True)
        if self.error is None:
            data.pop("error", None)
        return data


class ValidationReport(BaseModel):
    """Quality score for a parsed result, with issues and paired suggestions."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

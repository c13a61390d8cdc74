"""Pydantic models for summarisation requests and results."""

from pydantic import BaseModel, Field

DEFAULT_MAX_LENGTH = 150


class SummaryRequest(BaseModel):
    """Content to summarise."""

    title: str = ""
    content: str = ""
    summary: str = ""
    max_length: int = Field(default=DEFAULT_MAX_LENGTH, ge=1, description="Maximum words")

    @property
    def source_text(self) -> str:
        """The best available text to summarise."""
        return self.content or self.summary or self.title or "No content provided"


class SummaryResult(BaseModel):
    """Outcome of a summarisation attempt."""

    summary: str
    provider: str
    model: str
    error: str | None = None
    tokens_used: int | None = None

    @property
    def ok(self) -> bool:
        """Whether the result holds a usable summary."""
        return bool(self.summary) and self.error is None

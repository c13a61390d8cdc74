"""HTML metadata and main-content extraction."""

from src.extraction.content import extract_main_content
from src.extraction.metadata import PageMetadata, extract_metadata
from src.extraction.models import ParsedContent, RawDocument, ValidationReport
from src.extraction.parser import (
    batch_parse_html,
    calculate_reading_time,
    determine_content_type,
    parse_html,
)
from src.extraction.text import clean_text
from src.extraction.validator import validate_parsed_content

__all__ = [
    "PageMetadata",
    "ParsedContent",
    "RawDocument",
    "ValidationReport",
    "batch_parse_html",
    "calculate_reading_time",
    "clean_text",
    "determine_content_type",
    "extract_main_content",
    "extract_metadata",
    "parse_html",
    "validate_parsed_content",
]

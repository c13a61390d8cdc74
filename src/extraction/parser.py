"""Assemble extracted fields into a single parsed result."""

import logging
import math
from collections.abc import Iterable

from src.enums import ContentType
from src.extraction.content import extract_main_content
from src.extraction.metadata import extract_metadata
from src.extraction.models import ParsedContent, RawDocument
from src.extraction.text import make_soup

logger = logging.getLogger(__name__)

NO_HTML_ERROR = "No valid HTML content found"
UNKNOWN_ERROR = "Unknown parsing error"

WORDS_PER_MINUTE = 200
ARTICLE_MIN_WORDS = 501
SHORT_FORM_MIN_WORDS = 101


def determine_content_type(word_count: int) -> ContentType:
    """Classify content by its length.

    :param word_count: Number of words in the extracted body.
    :returns: article above 500 words, short-form above 100, else minimal.
    """
    if word_count >= ARTICLE_MIN_WORDS:
        return ContentType.ARTICLE
    if word_count >= SHORT_FORM_MIN_WORDS:
        return ContentType.SHORT_FORM
    return ContentType.MINIMAL


def calculate_reading_time(word_count: int) -> int:
    """Estimate reading time in whole minutes at 200 words per minute.

    :param word_count: Number of words.
    :returns: Minutes, rounded up.
    """
    return math.ceil(word_count / WORDS_PER_MINUTE)


def parse_html(html: str, url: str | None = None) -> ParsedContent:
    """Parse an HTML document into structured article content.

    Never raises: rejected input and unexpected extraction errors are both
    reported as a failed result.

    :param html: The raw HTML document.
    :param url: The URL the document was fetched from, if known.
    :returns: The parsed content.
    """
    if not html or "<html" not in html:
        return ParsedContent.failure(NO_HTML_ERROR, url)

    try:
        return _parse_document(html, url)
    except Exception as e:
        logger.exception(f"Failed to parse HTML from {url or 'unknown source'}")
        return ParsedContent.failure(str(e) or UNKNOWN_ERROR, url)


def batch_parse_html(
    documents: Iterable[RawDocument | tuple[str] | tuple[str, str | None]],
) -> list[ParsedContent]:
    """Parse several documents independently.

    :param documents: ``(html, url)`` pairs in the order results are wanted. The
        URL may be left off.
    :returns: One result per document, in input order.
    """
    results = [parse_html(*RawDocument(*document)) for document in documents]
    failed = sum(1 for result in results if not result.success)
    logger.info(f"Parsed {len(results)} document(s), {failed} failed")
    return results


def _parse_document(html: str, url: str | None) -> ParsedContent:
    metadata = extract_metadata(make_soup(html), url)
    content = extract_main_content(html)

    word_count = len(content.split())

    return ParsedContent(
        success=True,
        source_url=metadata.source_url,
        title=metadata.title,
        author=metadata.author,
        publish_date=metadata.publish_date,
        summary=metadata.summary,
        content=content,
        word_count=word_count,
        reading_time=calculate_reading_time(word_count),
        language=metadata.language,
        content_type=determine_content_type(word_count),
    )

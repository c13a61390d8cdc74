"""Field extractors for article metadata embedded in HTML.

Each extractor walks its own ordered fallback chain and returns the first
non-empty candidate. Extractors only read the document and never depend on
each other's output.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup, Tag

from src.extraction.models import UNKNOWN_LANGUAGE
from src.extraction.text import (
    attribute_text,
    clean_text,
    extract_json_ld,
    find_meta_content,
    restore_entities,
)

logger = logging.getLogger(__name__)

TITLE_META_NAMES = ("og:title", "twitter:title")
AUTHOR_META_NAMES = ("author", "article:author", "twitter:creator")
DATE_META_NAMES = ("article:published_time", "pubdate", "date")
SUMMARY_META_NAMES = ("description", "og:description", "twitter:description")
JSON_LD_DATE_KEYS = ("datePublished", "dateCreated", "publishedAt")

# Trailing site name after a pipe or a spaced dash
TITLE_SUFFIX_PATTERN = re.compile(r"(?:\s*\|\s*|\s+[-–—]\s+)[^|–—]+$")
AUTHOR_CLASS_PATTERN = re.compile(r"author|byline|writer", re.IGNORECASE)
SUMMARY_ATTRIBUTE_PATTERN = re.compile(
    r"^(?:speakable-summary|lead|summary|excerpt|abstract)", re.IGNORECASE
)

MAX_AUTHOR_LENGTH = 100
MIN_SUMMARY_PARAGRAPH_LENGTH = 50
MAX_SUMMARY_PARAGRAPH_LENGTH = 300


@dataclass(frozen=True)
class PageMetadata:
    """Metadata fields extracted from a single HTML document."""

    source_url: str
    title: str
    author: str | None
    publish_date: str | None
    summary: str
    language: str


def extract_metadata(soup: BeautifulSoup, url: str | None = None) -> PageMetadata:
    """Run every metadata extractor against a parsed document.

    :param soup: The parsed (unstripped) document.
    :param url: The caller-supplied URL of the document, if known.
    :returns: The extracted metadata.
    """
    return PageMetadata(
        source_url=extract_source_url(soup, url),
        title=extract_title(soup),
        author=extract_author(soup),
        publish_date=extract_publish_date(soup),
        summary=extract_summary(soup),
        language=extract_language(soup),
    )


def extract_source_url(soup: BeautifulSoup, provided_url: str | None = None) -> str:
    """Determine the canonical URL of a document.

    :param soup: The parsed document.
    :param provided_url: A URL supplied by the caller, which always wins.
    :returns: The caller URL, ``og:url``, the canonical link, or "".
    """
    if provided_url:
        return provided_url

    og_url = find_meta_content(soup, "og:url", clean=False)
    if og_url:
        return og_url

    for link in soup.find_all("link"):
        if not isinstance(link, Tag) or "canonical" not in _rel_values(link):
            continue
        href = attribute_text(link, "href").strip()
        if href:
            return href

    return ""


def extract_title(soup: BeautifulSoup) -> str:
    """Extract the article title.

    Priority: ``og:title`` > ``twitter:title`` > first ``<h1>`` > ``<title>``
    with any trailing site name removed.

    :param soup: The parsed document.
    :returns: The title, or "" if none was found.
    """
    for name in TITLE_META_NAMES:
        title = find_meta_content(soup, name)
        if title:
            return title

    h1 = soup.find("h1")
    if isinstance(h1, Tag):
        title = clean_text(h1)
        if title:
            return title

    title_tag = soup.find("title")
    if isinstance(title_tag, Tag):
        return TITLE_SUFFIX_PATTERN.sub("", clean_text(title_tag)).strip()

    return ""


def extract_author(soup: BeautifulSoup) -> str | None:
    """Extract the article author.

    Tries meta tags, then ``rel="author"`` elements, then JSON-LD, then
    elements with an author-like class name.

    :param soup: The parsed document.
    :returns: The author name, or None if nothing plausible was found.
    """
    for name in AUTHOR_META_NAMES:
        author = find_meta_content(soup, name)
        if author:
            return author

    for element in soup.find_all(_has_author_rel):
        author = clean_text(element)
        if author:
            return author

    for obj in extract_json_ld(soup):
        author = _json_ld_author_name(obj.get("author"))
        if author:
            return author

    element = soup.find(_has_author_class)
    if isinstance(element, Tag):
        author = clean_text(element)
        # Long matches are usually whole bio blocks rather than a name
        if author and len(author) < MAX_AUTHOR_LENGTH:
            return author

    return None


def extract_publish_date(soup: BeautifulSoup) -> str | None:
    """Extract the publish date as the raw string found in the document.

    :param soup: The parsed document.
    :returns: The unparsed date string, or None if not found.
    """
    for name in DATE_META_NAMES:
        publish_date = find_meta_content(soup, name)
        if publish_date:
            return publish_date

    for time_tag in soup.find_all("time"):
        if not isinstance(time_tag, Tag):
            continue
        value = attribute_text(time_tag, "datetime").strip()
        if value:
            return value

    for obj in extract_json_ld(soup):
        for key in JSON_LD_DATE_KEYS:
            value = obj.get(key)
            if value:
                return restore_entities(str(value))

    return None


def extract_summary(soup: BeautifulSoup) -> str:
    """Extract a short description of the article.

    :param soup: The parsed document.
    :returns: The summary, or "" if nothing qualified.
    """
    for name in SUMMARY_META_NAMES:
        summary = find_meta_content(soup, name)
        if summary:
            return summary

    element = soup.find(_is_summary_element)
    if isinstance(element, Tag):
        summary = clean_text(element)
        if summary:
            return summary

    for paragraph in soup.find_all("p"):
        text = clean_text(paragraph)
        if MIN_SUMMARY_PARAGRAPH_LENGTH < len(text) < MAX_SUMMARY_PARAGRAPH_LENGTH:
            return text

    return ""


def extract_language(soup: BeautifulSoup) -> str:
    """Extract the document language from ``<html lang>``.

    :param soup: The parsed document.
    :returns: The language code, or "unknown".
    """
    html = soup.find("html")
    if isinstance(html, Tag):
        language = attribute_text(html, "lang").strip()
        if language:
            return language
    return UNKNOWN_LANGUAGE


def _rel_values(tag: Tag) -> list[str]:
    return attribute_text(tag, "rel").lower().split()


def _has_author_rel(tag: Tag) -> bool:
    return "author" in _rel_values(tag)


def _has_author_class(tag: Tag) -> bool:
    return AUTHOR_CLASS_PATTERN.search(attribute_text(tag, "class")) is not None


def _is_summary_element(tag: Tag) -> bool:
    return any(
        SUMMARY_ATTRIBUTE_PATTERN.match(attribute_text(tag, attribute))
        for attribute in ("id", "class")
    )


def _json_ld_author_name(author: Any) -> str | None:
    """Read an author name from a JSON-LD ``author`` value.

    :param author: A string, a Person-like object, or a list of either.
    :returns: The cleaned name, or None.
    """
    if isinstance(author, str):
        return clean_text(author) or None
    if isinstance(author, dict):
        name = author.get("name")
        if isinstance(name, str):
            return clean_text(name) or None
        return None
    if isinstance(author, list) and author:
        return _json_ld_author_name(author[0])
    return None

"""Shared text and markup primitives for HTML extraction."""

import html as html_lib
import json
import logging
import re
from typing import Any

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"<[^>]*>")
NBSP_PATTERN = re.compile(r"&nbsp;", re.IGNORECASE)
ENTITY_PATTERN = re.compile(r"&[#a-z0-9]+;", re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")

# Entities are kept as marked names through parsing so cleaning can tell them
# apart from characters written literally in the source
ENTITY_OPEN = "\ue000"
ENTITY_CLOSE = "\ue001"
MARKED_ENTITY_PATTERN = re.compile(f"{ENTITY_OPEN}([#a-z0-9]+){ENTITY_CLOSE}", re.IGNORECASE)
MARKED_NBSP = f"{ENTITY_OPEN}nbsp{ENTITY_CLOSE}"

JSON_LD_TYPE = "application/ld+json"


def make_soup(html: str) -> BeautifulSoup:
    """Parse an HTML document into a BeautifulSoup tree.

    Entity references are marked before parsing rather than decoded, so text
    read from the tree still knows which characters came from an entity. Use
    ``restore_entities`` where the decoded value is needed.

    :param html: The raw HTML text.
    :returns: The parsed document.
    """
    marked = ENTITY_PATTERN.sub(
        lambda match: f"{ENTITY_OPEN}{match.group(0)[1:-1]}{ENTITY_CLOSE}", html
    )
    return BeautifulSoup(marked, "lxml")


def restore_entities(text: str) -> str:
    """Decode entity markers left by ``make_soup`` back into characters.

    :param text: Text read from a parsed document.
    :returns: The text with every marked entity decoded.
    """
    return MARKED_ENTITY_PATTERN.sub(
        lambda match: html_lib.unescape(f"&{match.group(1)};"), text
    )


def clean_text(fragment: str | Tag | None) -> str:
    """Reduce an HTML fragment to a single line of plain text.

    Tags are stripped, ``&nbsp;`` becomes a space, any other entity is
    collapsed to a space, and runs of whitespace are squashed. Entities
    marked by ``make_soup`` are treated the same as raw ones.

    :param fragment: Markup text, or an element whose inner HTML is cleaned.
    :returns: The cleaned text, possibly empty.
    """
    if fragment is None:
        return ""

    # No formatter so literal characters are not re-escaped into entities
    text = fragment.decode_contents(formatter=None) if isinstance(fragment, Tag) else fragment
    if not text:
        return ""

    text = TAG_PATTERN.sub("", text)
    text = text.replace(MARKED_NBSP, " ")
    text = MARKED_ENTITY_PATTERN.sub(" ", text)
    text = NBSP_PATTERN.sub(" ", text)
    text = ENTITY_PATTERN.sub(" ", text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def attribute_text(tag: Tag, attribute: str) -> str:
    """Get a decoded attribute value as a string, joining multi-valued attributes.

    :param tag: The element to read from.
    :param attribute: The attribute name.
    :returns: The attribute value, or an empty string if absent.
    """
    return restore_entities(_raw_attribute(tag, attribute))


def find_meta_content(soup: BeautifulSoup, name: str, *, clean: bool = True) -> str:
    """Find the content of a ``<meta>`` tag by its name or property.

    :param soup: The parsed document.
    :param name: The meta name or property to match (case-insensitive).
    :param clean: Whether to clean the value as text. When False the decoded
        value is returned stripped, which suits URLs.
    :returns: The content of the first matching tag, or "".
    """
    target = name.lower()

    for meta in soup.find_all("meta"):
        if not isinstance(meta, Tag):
            continue

        keys = (attribute_text(meta, "name"), attribute_text(meta, "property"))
        if not any(key.strip().lower() == target for key in keys):
            continue

        if clean:
            content = clean_text(_raw_attribute(meta, "content"))
        else:
            content = attribute_text(meta, "content").strip()
        if content:
            return content

    return ""


def extract_json_ld(soup: BeautifulSoup) -> list[dict[str, Any]]:
    """Parse every JSON-LD block in the document.

    Blocks are parsed independently and malformed ones are skipped. Top-level
    arrays and ``@graph`` arrays are flattened so callers only see objects.

    :param soup: The parsed document.
    :returns: The parsed objects in document order.
    """
    objects: list[dict[str, Any]] = []

    for script in soup.find_all("script"):
        if not isinstance(script, Tag):
            continue
        if attribute_text(script, "type").strip().lower() != JSON_LD_TYPE:
            continue

        try:
            data = json.loads(script.get_text())
        except ValueError:
            logger.debug("Skipping malformed JSON-LD block")
            continue

        objects.extend(_flatten_json_ld(data))

    return objects


def _flatten_json_ld(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return [item for entry in data for item in _flatten_json_ld(entry)]

    if not isinstance(data, dict):
        return []

    graph = data.get("@graph")
    if isinstance(graph, list):
        return [data, *_flatten_json_ld(graph)]

    return [data]


def _raw_attribute(tag: Tag, attribute: str) -> str:
    value = tag.get(attribute)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)

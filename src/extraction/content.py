"""Main-content extraction from article HTML."""

import logging
import re

from bs4 import BeautifulSoup, Tag

from src.extraction.text import attribute_text, clean_text, make_soup

logger = logging.getLogger(__name__)

BOILERPLATE_TAGS = ("script", "style", "nav", "header", "footer", "aside")
CONTENT_TAGS = ("p", "li", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote")

CMS_CONTENT_CLASS_PATTERN = re.compile(
    r"wp-block-post-content|entry-content|post-content|article-content", re.IGNORECASE
)
GENERIC_CONTENT_CLASS_PATTERN = re.compile(r"content|post|article", re.IGNORECASE)

# Fragments this short are navigation, captions or labels rather than prose
MIN_FRAGMENT_LENGTH = 40
PARAGRAPH_SEPARATOR = "\n\n"


def extract_main_content(html: str) -> str:
    """Extract the substantive body text of an article.

    Boilerplate blocks are removed, the longest candidate content container
    is chosen, and text from its paragraphs, list items, headings and
    blockquotes is kept when longer than ``MIN_FRAGMENT_LENGTH`` characters.

    :param html: The raw HTML document.
    :returns: The body text with paragraphs separated by a blank line.
    """
    soup = make_soup(html)
    strip_boilerplate(soup)

    container = find_content_container(soup)
    root: Tag = container if container is not None else soup

    fragments = collect_text_fragments(root)
    logger.debug(f"Collected {len(fragments)} content fragments")
    return PARAGRAPH_SEPARATOR.join(fragments)


def strip_boilerplate(soup: BeautifulSoup) -> None:
    """Remove scripts, styles and page chrome from the document in place.

    :param soup: The parsed document to modify.
    """
    for element in soup.find_all(BOILERPLATE_TAGS):
        if isinstance(element, Tag) and not element.decomposed:
            element.decompose()


def find_content_container(soup: BeautifulSoup) -> Tag | None:
    """Pick the element most likely to hold the article body.

    Candidates are checked in priority order and the one with the longest
    inner HTML wins. On a tie the earlier candidate is kept.

    :param soup: The boilerplate-stripped document.
    :returns: The chosen container, or None if no candidate has content.
    """
    candidates = (
        soup.find("article"),
        soup.find("main"),
        soup.find(lambda tag: _class_matches(tag, CMS_CONTENT_CLASS_PATTERN)),
        soup.find(
            lambda tag: tag.name == "div" and _class_matches(tag, GENERIC_CONTENT_CLASS_PATTERN)
        ),
    )

    best: Tag | None = None
    best_length = 0

    for candidate in candidates:
        if not isinstance(candidate, Tag):
            continue
        length = len(candidate.decode_contents())
        if length > best_length:
            best = candidate
            best_length = length

    return best


def collect_text_fragments(root: Tag) -> list[str]:
    """Collect substantive text fragments under a container.

    Only the outermost content element is used when they nest, so a ``<li>``
    wrapping a ``<p>`` yields one fragment.

    :param root: The container to search.
    :returns: Cleaned fragments in document order.
    """
    fragments: list[str] = []
    seen: set[int] = set()

    for element in root.find_all(CONTENT_TAGS):
        if not isinstance(element, Tag):
            continue
        if any(id(parent) in seen for parent in element.parents):
            continue
        seen.add(id(element))

        text = clean_text(element)
        if len(text) > MIN_FRAGMENT_LENGTH:
            fragments.append(text)

    return fragments


def _class_matches(tag: Tag, pattern: re.Pattern[str]) -> bool:
    return pattern.search(attribute_text(tag, "class")) is not None

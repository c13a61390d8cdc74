"""Extraction and cleaning of article links from newsletter email bodies."""

import logging
import re
from urllib.parse import urlsplit, urlunsplit

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"(?:[-a-zA-Z0-9()@:%_+.~#?&=/]*)",
    re.IGNORECASE,
)

# Unsubscribe links, images and tracking pixels are never articles
EXCLUDED_URL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"unsubscribe",
        r"\.(jpg|jpeg|png|gif|webp|svg|ico)(\?|$)",
        r"pixel|tracking|analytics",
        r"facebook\.com/tr",
        r"google-analytics\.com",
        r"doubleclick\.net",
        r"amazonaws\.com.*\.(jpg|png|gif)",
        r"cdn.*\.(jpg|png|gif)",
    )
)

TRACKING_PARAMS = frozenset({"gclid", "fbclid", "msclkid", "_ga", "_gl", "mc_cid", "mc_eid"})


def extract_urls(body: str) -> list[str]:
    """Find the article URLs in an email body.

    Anchor hrefs and bare URLs in the text are both considered. Excluded
    URLs are dropped, the rest are cleaned and de-duplicated in first-seen
    order.

    :param body: The decoded email body (HTML or plain text).
    :returns: The cleaned URLs.
    """
    urls: list[str] = []
    seen: set[str] = set()

    for candidate in _find_candidate_urls(body):
        if not should_include_url(candidate):
            continue
        cleaned = clean_url(candidate)
        if cleaned not in seen:
            seen.add(cleaned)
            urls.append(cleaned)

    logger.debug(f"Extracted {len(urls)} URL(s) from email body")
    return urls


def should_include_url(url: str) -> bool:
    """Check whether a URL could point at an article.

    :param url: The URL to check.
    :returns: False for unsubscribe, image and tracking URLs.
    """
    return not any(pattern.search(url) for pattern in EXCLUDED_URL_PATTERNS)


def clean_url(url: str) -> str:
    """Strip tracking parameters and the fragment from a URL.

    :param url: The URL to clean.
    :returns: The cleaned URL, or the input unchanged if it cannot be parsed.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        logger.debug(f"Failed to parse URL: {url}")
        return url

    # Remaining parameters keep their original encoding
    query = "&".join(
        pair
        for pair in parts.query.split("&")
        if pair and pair.split("=", 1)[0] not in TRACKING_PARAMS
    )
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))


def _find_candidate_urls(body: str) -> list[str]:
    if not body:
        return []

    if "<" not in body:
        return URL_PATTERN.findall(body)

    soup = BeautifulSoup(body, "lxml")
    candidates: list[str] = []

    for link in soup.find_all("a", href=True):
        if not isinstance(link, Tag):
            continue
        href = str(link["href"]).strip()
        if href.lower().startswith(("http://", "https://")):
            candidates.append(href)

    candidates.extend(URL_PATTERN.findall(soup.get_text(" ")))
    return candidates

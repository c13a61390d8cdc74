"""Database operations for newsletter sources."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from dateutil import parser as dateparser
from sqlalchemy.orm import Session

from src.database.base import compute_url_hash, record_exists_by_field
from src.database.sources.models import Source

if TYPE_CHECKING:
    from src.enums import LinkType
    from src.extraction.models import ParsedContent

logger = logging.getLogger(__name__)


def source_exists(session: Session, url: str) -> bool:
    """Check if a URL has already been stored.

    :param session: The database session.
    :param url: The source URL.
    :returns: True if a source with the same normalised URL exists.
    """
    return record_exists_by_field(session, Source, "url_hash", compute_url_hash(url))


def parse_publish_date(raw: str | None) -> datetime | None:
    """Parse an extracted publish date for storage.

    :param raw: The date string as found in the page.
    :returns: A timezone-aware datetime (UTC when no zone was given),
        or None if the string is empty or unparseable.
    """
    if not raw:
        return None

    try:
        parsed = dateparser.parse(raw)
    except (ValueError, OverflowError):
        logger.debug(f"Could not parse publish date: {raw!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def create_source(
    session: Session,
    *,
    url: str,
    link_type: LinkType,
    parsed: ParsedContent | None = None,
    newsletter: str | None = None,
    title: str | None = None,
    summary: str | None = None,
) -> Source:
    """Store a source and its parsed content.

    :param session: The database session.
    :param url: The URL linked from the newsletter.
    :param link_type: The URL classification.
    :param parsed: The parsed page content, if the page was parsed.
    :param newsletter: The newsletter the link came from.
    :param title: Title override, used when there is no parsed content.
    :param summary: Summary override, e.g. an AI-generated summary.
    :returns: The new source.
    """
    source = Source(
        url=url,
        url_hash=compute_url_hash(url),
        type=link_type,
        title=title or (parsed.title if parsed else None) or None,
        author=parsed.author if parsed else None,
        publish_date=parse_publish_date(parsed.publish_date if parsed else None),
        summary=summary or (parsed.summary if parsed else None) or None,
        content=(parsed.content if parsed else None) or None,
        newsletter=newsletter,
    )

    session.add(source)
    session.flush()

    logger.info(f"Stored {link_type} source from {newsletter or 'unknown newsletter'}: {url}")
    return source

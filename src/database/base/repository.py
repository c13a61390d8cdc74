"""Generic database repository utilities."""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compute_url_hash(url: str) -> str:
    """Compute SHA256 hash of a URL for deduplication.

    Normalises the URL by lowercasing, stripping whitespace, and removing
    trailing slashes before hashing.

    :param url: The URL to hash.
    :returns: The hex-encoded SHA256 hash (64 characters).
    """
    normalised = url.lower().strip().rstrip("/")
    return hashlib.sha256(normalised.encode()).hexdigest()


def record_exists_by_field(
    session: Session,
    model_class: type[T],
    field_name: str,
    field_value: Any,
) -> bool:
    """Check if a record exists with a specific field value.

    :param session: The database session.
    :param model_class: The SQLAlchemy model class.
    :param field_name: The name of the field to filter by.
    :param field_value: The value to match.
    :returns: True if a matching record exists.
    """
    field = getattr(model_class, field_name)
    return session.query(model_class).filter(field == field_value).first() is not None

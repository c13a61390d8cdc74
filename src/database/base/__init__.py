"""Base database utilities and repository patterns."""

from src.database.base.repository import compute_url_hash, record_exists_by_field

__all__ = [
    "compute_url_hash",
    "record_exists_by_field",
]

"""Source database models and operations."""

from src.database.sources.models import Source
from src.database.sources.operations import (
    create_source,
    parse_publish_date,
    source_exists,
)

__all__ = [
    "Source",
    "create_source",
    "parse_publish_date",
    "source_exists",
]

"""SQLAlchemy ORM model for stored newsletter sources."""

import uuid as uuid_module
from datetime import UTC, datetime

from sqlalchemy import DateTime, Enum, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base
from src.enums import LinkType


class Source(Base):
    """ORM model for the sources table.

    One row per unique URL linked from a newsletter, with the parsed content
    of the page it points to.
    """

    __tablename__ = "sources"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    url: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    url_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[LinkType] = mapped_column(
        Enum(
            LinkType,
            name="source_type",
            native_enum=False,
            create_constraint=True,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    author: Mapped[str | None] = mapped_column(Text, nullable=True)
    publish_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    newsletter: Mapped[str | None] = mapped_column(Text, nullable=True)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        Index("idx_sources_url_hash", "url_hash"),
        Index("idx_sources_newsletter", "newsletter"),
    )

    def __repr__(self) -> str:
        """Return string representation of the source."""
        return f"<Source(id={self.id}, type={self.type}, url={self.url!r})>"

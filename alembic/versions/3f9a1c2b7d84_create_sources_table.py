"""Create sources table

Revision ID: 3f9a1c2b7d84
Revises:
Create Date: 2025-08-09

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d84"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the sources table."""
    op.create_table(
        "sources",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("url_hash", sa.String(length=64), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("author", sa.Text(), nullable=True),
        sa.Column("publish_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("newsletter", sa.Text(), nullable=True),
        sa.Column("inserted_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "type IN ('pdf', 'x', 'reddit', 'job', 'advertiser', 'article')",
            name="ck_sources_source_type",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_sources"),
        sa.UniqueConstraint("url", name="uq_sources_url"),
    )
    op.create_index("idx_sources_url_hash", "sources", ["url_hash"], unique=False)
    op.create_index("idx_sources_newsletter", "sources", ["newsletter"], unique=False)


def downgrade() -> None:
    """Drop the sources table."""
    op.drop_index("idx_sources_newsletter", table_name="sources")
    op.drop_index("idx_sources_url_hash", table_name="sources")
    op.drop_table("sources")

"""membership joined_at and community artwork

Revision ID: 8d3f60b1c7e2
Revises: 5c1e9a7d2b40
Create Date: 2026-10-20 14:03:17.552910

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8d3f60b1c7e2"
down_revision: Union[str, Sequence[str], None] = "5c1e9a7d2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Track the latest join per membership; add community logo and banner."""
    with op.batch_alter_table("community_member") as batch:
        batch.add_column(sa.Column("joined_at", sa.DateTime(timezone=True), nullable=True))

    community_member = sa.table(
        "community_member",
        sa.column("joined_at", sa.DateTime(timezone=True)),
        sa.column("created_at", sa.DateTime(timezone=True)),
    )
    # Existing rows only ever had their first join.
    op.execute(
        community_member.update()
        .where(community_member.c.joined_at.is_(None))
        .values(joined_at=community_member.c.created_at)
    )
    with op.batch_alter_table("community_member") as batch:
        batch.alter_column("joined_at", existing_type=sa.DateTime(timezone=True), nullable=False)

    with op.batch_alter_table("community") as batch:
        batch.add_column(sa.Column("logo_uri", sa.String(length=255), nullable=True))
        batch.add_column(sa.Column("banner_uri", sa.String(length=255), nullable=True))


def downgrade() -> None:
    """Drop the columns added by this revision."""
    with op.batch_alter_table("community") as batch:
        batch.drop_column("banner_uri")
        batch.drop_column("logo_uri")
    with op.batch_alter_table("community_member") as batch:
        batch.drop_column("joined_at")

"""Add per-post remote reaction blob reconciled from remote feeds."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0002_remote_reactions"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None

sqlite_bigint = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    """Create remote reaction table keyed by post."""

    op.create_table(
        "remote_reactions",
        sa.Column("post_id", sqlite_bigint, primary_key=True, autoincrement=False),
        sa.Column(
            "primary_user_id",
            sqlite_bigint,
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        sa.Column("reactions", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )


def downgrade() -> None:
    """Drop remote reaction table."""

    op.drop_table("remote_reactions")

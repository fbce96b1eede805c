"""Initial schema for users and presence-only post reactions."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

sqlite_bigint = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sqlite_bigint, primary_key=True, autoincrement=True),
        sa.Column("display_name", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )

    op.create_table(
        "post_reactions",
        sa.Column("id", sqlite_bigint, primary_key=True, autoincrement=True),
        sa.Column("post_id", sqlite_bigint, nullable=False),
        sa.Column("user_id", sqlite_bigint, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint(
            "post_id",
            "user_id",
            "slug",
            name="uq_post_reactions_post_user_slug",
        ),
    )
    op.create_index("ix_post_reactions_post_id", "post_reactions", ["post_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_post_reactions_post_id", table_name="post_reactions")
    op.drop_table("post_reactions")
    op.drop_table("users")

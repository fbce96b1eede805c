"""SQLAlchemy metadata definitions for reaction tables."""

from __future__ import annotations

import sqlalchemy as sa

metadata = sa.MetaData()
sqlite_bigint = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

users = sa.Table(
    "users",
    metadata,
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

post_reactions = sa.Table(
    "post_reactions",
    metadata,
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
    sa.UniqueConstraint("post_id", "user_id", "slug", name="uq_post_reactions_post_user_slug"),
)

sa.Index("ix_post_reactions_post_id", post_reactions.c.post_id)

remote_reactions = sa.Table(
    "remote_reactions",
    metadata,
    sa.Column("post_id", sqlite_bigint, primary_key=True, autoincrement=False),
    sa.Column("primary_user_id", sqlite_bigint, sa.ForeignKey("users.id"), nullable=False),
    sa.Column("reactions", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
    sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
)

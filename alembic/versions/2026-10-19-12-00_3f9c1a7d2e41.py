"""Initial users, watchlist and recommendation tables

Revision ID: 3f9c1a7d2e41
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "3f9c1a7d2e41"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("username", sa.String(length=30), nullable=False),
        sa.Column("password_hash", sa.String, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_user"),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)

    op.create_table(
        "watchlist_entry",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("owner_user_id", sa.Integer, nullable=False),
        sa.Column("external_id", sa.String, nullable=False),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("media_type", sa.String(length=7), nullable=False),
        sa.Column("status", sa.String(length=9), nullable=False),
        sa.Column("poster", sa.String, nullable=True),
        sa.Column("year", sa.String, nullable=True),
        sa.Column("rating", sa.String, nullable=True),
        sa.Column("genres", sa.JSON, nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_user_id"],
            ["user.id"],
            name="fk_watchlist_entry_owner_user_id_user",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_watchlist_entry"),
    )
    op.create_index(
        "ix_watchlist_entry_owner_user_id", "watchlist_entry", ["owner_user_id"]
    )
    op.create_index(
        "ix_watchlist_entry_external_id", "watchlist_entry", ["external_id"]
    )
    op.create_index("ix_watchlist_entry_status", "watchlist_entry", ["status"])
    op.create_index("ix_watchlist_entry_added_at", "watchlist_entry", ["added_at"])
    op.create_index(
        "ix_watchlist_entry_owner_external",
        "watchlist_entry",
        ["owner_user_id", "external_id"],
        unique=True,
    )

    op.create_table(
        "recommendation",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("user_id", sa.Integer, nullable=False),
        sa.Column("external_id", sa.String, nullable=False),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("media_type", sa.String, nullable=False),
        sa.Column("year", sa.String, nullable=True),
        sa.Column("poster", sa.String, nullable=True),
        sa.Column("rating", sa.String, nullable=True),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("source", sa.String, nullable=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["user.id"],
            name="fk_recommendation_user_id_user",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_recommendation"),
    )
    op.create_index("ix_recommendation_user_id", "recommendation", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_recommendation_user_id", table_name="recommendation")
    op.drop_table("recommendation")

    op.drop_index("ix_watchlist_entry_owner_external", table_name="watchlist_entry")
    op.drop_index("ix_watchlist_entry_added_at", table_name="watchlist_entry")
    op.drop_index("ix_watchlist_entry_status", table_name="watchlist_entry")
    op.drop_index("ix_watchlist_entry_external_id", table_name="watchlist_entry")
    op.drop_index("ix_watchlist_entry_owner_user_id", table_name="watchlist_entry")
    op.drop_table("watchlist_entry")

    op.drop_index("ix_user_username", table_name="user")
    op.drop_table("user")

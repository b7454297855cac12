"""initial schema

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "202610190001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("avatar", sa.String(length=512), nullable=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("social_provider", sa.String(length=20), nullable=True),
        sa.Column("social_provider_id", sa.String(length=255), nullable=True),
        sa.Column("access_token", sa.String(length=1024), nullable=True),
        sa.Column("refresh_token", sa.String(length=1024), nullable=True),
        sa.Column("verification_token", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "social_provider IS NULL OR social_provider IN ('google', 'facebook')",
            name="chk_social_provider",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("idx_users_social", "users", ["social_provider", "social_provider_id"])

    op.create_table(
        "favorite_genres",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("genre_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "genre_id", name="uq_user_genre"),
    )
    op.create_index("ix_favorite_genres_id", "favorite_genres", ["id"])

    op.create_table(
        "watchlist_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("media_id", sa.String(length=64), nullable=False),
        sa.Column("media_title", sa.String(length=255), nullable=False),
        sa.Column("poster_path", sa.String(length=512), nullable=False),
        sa.Column("media_type", sa.String(length=10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("media_type IN ('movie', 'tv')", name="chk_media_type"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "media_id", name="uq_watchlist_user_media"),
    )
    op.create_index("ix_watchlist_items_id", "watchlist_items", ["id"])
    op.create_index("idx_watchlist_user_created", "watchlist_items", ["user_id", "created_at"])

    op.create_table(
        "liked_movies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("movie_id", sa.String(length=64), nullable=False),
        sa.Column("liked_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "movie_id", name="uq_liked_user_movie"),
    )
    op.create_index("ix_liked_movies_id", "liked_movies", ["id"])
    op.create_index("ix_liked_movies_user_id", "liked_movies", ["user_id"])

    op.create_table(
        "view_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("tv_shows_viewed", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("movies_viewed", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("tv_shows_viewed >= 0", name="chk_tv_shows_viewed"),
        sa.CheckConstraint("movies_viewed >= 0", name="chk_movies_viewed"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_view_history_user_date"),
    )
    op.create_index("ix_view_history_id", "view_history", ["id"])


def downgrade() -> None:
    op.drop_index("ix_view_history_id", table_name="view_history")
    op.drop_table("view_history")

    op.drop_index("ix_liked_movies_user_id", table_name="liked_movies")
    op.drop_index("ix_liked_movies_id", table_name="liked_movies")
    op.drop_table("liked_movies")

    op.drop_index("idx_watchlist_user_created", table_name="watchlist_items")
    op.drop_index("ix_watchlist_items_id", table_name="watchlist_items")
    op.drop_table("watchlist_items")

    op.drop_index("ix_favorite_genres_id", table_name="favorite_genres")
    op.drop_table("favorite_genres")

    op.drop_index("idx_users_social", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")

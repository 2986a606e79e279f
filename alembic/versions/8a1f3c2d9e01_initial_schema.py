"""initial_schema

Revision ID: 8a1f3c2d9e01
Revises:
Create Date: 2026-10-16 09:12:44.201113

"""

from alembic import op
import sqlalchemy as sa


revision = "8a1f3c2d9e01"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _user_fk(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.Uuid(as_uuid=False),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("fullname", sa.String(length=255), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=False),
        sa.Column("avatar_key", sa.Text(), nullable=True),
        sa.Column("cover_image", sa.Text(), nullable=True),
        sa.Column("cover_image_key", sa.Text(), nullable=True),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_fullname", "users", ["fullname"])

    op.create_table(
        "videos",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("video_file", sa.Text(), nullable=False),
        sa.Column("video_file_key", sa.Text(), nullable=False),
        sa.Column("thumbnail", sa.Text(), nullable=False),
        sa.Column("thumbnail_key", sa.Text(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("views", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "is_published", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        _user_fk("owner_id"),
        *_timestamps(),
    )
    op.create_index("idx_videos_owner", "videos", ["owner_id"])
    op.create_index("idx_videos_published_created", "videos", ["is_published", "created_at"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "video_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("videos.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk("owner_id"),
        *_timestamps(),
    )
    op.create_index("idx_comments_video_created", "comments", ["video_id", "created_at"])

    op.create_table(
        "tweets",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False),
        _user_fk("owner_id"),
        *_timestamps(),
    )
    op.create_index("idx_tweets_owner_created", "tweets", ["owner_id", "created_at"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("target_type", sa.String(length=20), nullable=False),
        sa.Column("target_id", sa.Uuid(as_uuid=False), nullable=False),
        _user_fk("liked_by"),
        *_timestamps(),
        sa.UniqueConstraint(
            "liked_by", "target_type", "target_id", name="uk_likes_user_target"
        ),
    )
    op.create_index("idx_likes_target", "likes", ["target_type", "target_id"])

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        _user_fk("subscriber_id"),
        _user_fk("channel_id"),
        *_timestamps(),
        sa.UniqueConstraint(
            "subscriber_id", "channel_id", name="uk_subscriptions_subscriber_channel"
        ),
    )
    op.create_index("idx_subscriptions_channel", "subscriptions", ["channel_id"])

    op.create_table(
        "playlists",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _user_fk("owner_id"),
        *_timestamps(),
    )
    op.create_index("idx_playlists_owner_created", "playlists", ["owner_id", "created_at"])

    op.create_table(
        "playlist_videos",
        sa.Column("position", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "playlist_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("playlists.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "video_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("videos.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_playlist_videos_playlist", "playlist_videos", ["playlist_id", "position"]
    )

    op.create_table(
        "watch_history",
        sa.Column("position", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk("user_id"),
        sa.Column(
            "video_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("videos.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "watched_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index("idx_watch_history_user", "watch_history", ["user_id", "position"])


def downgrade() -> None:
    op.drop_index("idx_watch_history_user", table_name="watch_history")
    op.drop_table("watch_history")
    op.drop_index("idx_playlist_videos_playlist", table_name="playlist_videos")
    op.drop_table("playlist_videos")
    op.drop_index("idx_playlists_owner_created", table_name="playlists")
    op.drop_table("playlists")
    op.drop_index("idx_subscriptions_channel", table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_index("idx_likes_target", table_name="likes")
    op.drop_table("likes")
    op.drop_index("idx_tweets_owner_created", table_name="tweets")
    op.drop_table("tweets")
    op.drop_index("idx_comments_video_created", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_videos_published_created", table_name="videos")
    op.drop_index("idx_videos_owner", table_name="videos")
    op.drop_table("videos")
    op.drop_index("ix_users_fullname", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")

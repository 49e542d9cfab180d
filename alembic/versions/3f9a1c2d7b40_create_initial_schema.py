"""create_initial_schema

Revision ID: 3f9a1c2d7b40
Revises:
Create Date: 2026-10-19 09:12:44.118203
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


LIKE_SINGLE_TARGET = (
    "(video_id IS NOT NULL AND comment_id IS NULL AND tweet_id IS NULL)"
    " OR (video_id IS NULL AND comment_id IS NOT NULL AND tweet_id IS NULL)"
    " OR (video_id IS NULL AND comment_id IS NULL AND tweet_id IS NOT NULL)"
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('avatar_url', sa.String(length=2000), nullable=False),
        sa.Column('avatar_public_id', sa.String(length=255), nullable=True),
        sa.Column('cover_image_url', sa.String(length=2000), nullable=True),
        sa.Column('cover_image_public_id', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('refresh_token', sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_full_name', 'users', ['full_name'], unique=False)

    op.create_table(
        'videos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('video_file_url', sa.String(length=2000), nullable=False),
        sa.Column('video_file_public_id', sa.String(length=255), nullable=True),
        sa.Column('thumbnail_url', sa.String(length=2000), nullable=False),
        sa.Column('thumbnail_public_id', sa.String(length=255), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('duration', sa.Float(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_videos_owner_id', 'videos', ['owner_id'], unique=False)
    # Public listing: WHERE is_published ORDER BY created_at DESC
    op.create_index(
        'ix_videos_published_created', 'videos', ['is_published', 'created_at'], unique=False
    )

    op.create_table(
        'watch_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('video_id', sa.Integer(), nullable=False),
        sa.Column('watched_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'video_id', name='uq_watch_history_user_video'),
    )
    op.create_index('ix_watch_history_user_id', 'watch_history', ['user_id'], unique=False)

    op.create_table(
        'playlists',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_playlists_owner_id', 'playlists', ['owner_id'], unique=False)

    op.create_table(
        'playlist_videos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('playlist_id', sa.Integer(), nullable=False),
        sa.Column('video_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['playlist_id'], ['playlists.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('playlist_id', 'video_id', name='uq_playlist_video'),
    )
    op.create_index(
        'ix_playlist_videos_playlist_id', 'playlist_videos', ['playlist_id'], unique=False
    )
    op.create_index('ix_playlist_videos_video_id', 'playlist_videos', ['video_id'], unique=False)

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('subscriber_id', sa.Integer(), nullable=False),
        sa.Column('channel_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['subscriber_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['channel_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscription_pair'),
    )
    op.create_index(
        'ix_subscriptions_subscriber_id', 'subscriptions', ['subscriber_id'], unique=False
    )
    op.create_index('ix_subscriptions_channel_id', 'subscriptions', ['channel_id'], unique=False)

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('video_id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_video_id', 'comments', ['video_id'], unique=False)
    op.create_index('ix_comments_owner_id', 'comments', ['owner_id'], unique=False)

    op.create_table(
        'tweets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tweets_owner_id', 'tweets', ['owner_id'], unique=False)

    op.create_table(
        'likes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('liked_by_id', sa.Integer(), nullable=False),
        sa.Column('video_id', sa.Integer(), nullable=True),
        sa.Column('comment_id', sa.Integer(), nullable=True),
        sa.Column('tweet_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['liked_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tweet_id'], ['tweets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('video_id', 'liked_by_id', name='uq_like_video'),
        sa.UniqueConstraint('comment_id', 'liked_by_id', name='uq_like_comment'),
        sa.UniqueConstraint('tweet_id', 'liked_by_id', name='uq_like_tweet'),
        sa.CheckConstraint(LIKE_SINGLE_TARGET, name='ck_like_single_target'),
    )
    op.create_index('ix_likes_liked_by_id', 'likes', ['liked_by_id'], unique=False)
    op.create_index('ix_likes_video_id', 'likes', ['video_id'], unique=False)
    op.create_index('ix_likes_comment_id', 'likes', ['comment_id'], unique=False)
    op.create_index('ix_likes_tweet_id', 'likes', ['tweet_id'], unique=False)


def downgrade() -> None:
    op.drop_table('likes')
    op.drop_table('tweets')
    op.drop_table('comments')
    op.drop_table('subscriptions')
    op.drop_table('playlist_videos')
    op.drop_table('playlists')
    op.drop_table('watch_history')
    op.drop_table('videos')
    op.drop_table('users')

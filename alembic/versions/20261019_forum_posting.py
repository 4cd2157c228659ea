"""Users, sessions, discussions and comments

Revision ID: 20261019_forum_posting
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_forum_posting'
down_revision = None
branch_labels = None
depends_on = None

Id = sa.BigInteger().with_variant(sa.Integer, "sqlite")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('user_id', Id, primary_key=True),
        sa.Column('name', sa.String(50), unique=True, nullable=False),
        sa.Column('email', sa.String(160), nullable=True, index=True),
        sa.Column('is_banned', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('last_seen_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('attributes', sa.JSON, nullable=False),
        sa.Column('count_discussions', sa.Integer, nullable=False, server_default='0'),
        sa.Column('count_comments', sa.Integer, nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_table(
        'sessions',
        sa.Column('session_id', Id, primary_key=True),
        sa.Column('token', sa.String(64), unique=True, nullable=False),
        sa.Column('user_id', Id, sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_table(
        'discussions',
        sa.Column('discussion_id', Id, primary_key=True),
        sa.Column('insert_user_id', Id, sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('body', sa.Text, nullable=False),
        sa.Column('format', sa.String(20), nullable=False, server_default='Html'),
        sa.Column('count_comments', sa.Integer, nullable=False, server_default='0'),
        sa.Column('date_last_comment', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_comment_user_id', Id, sa.ForeignKey('users.user_id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_discussions_insert_user_id', 'discussions', ['insert_user_id'])
    op.create_index('ix_discussions_date_last_comment', 'discussions', ['date_last_comment'])
    op.create_table(
        'comments',
        sa.Column('comment_id', Id, primary_key=True),
        sa.Column('discussion_id', Id, sa.ForeignKey('discussions.discussion_id', ondelete='CASCADE'), nullable=False),
        sa.Column('insert_user_id', Id, sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('body', sa.Text, nullable=False),
        sa.Column('format', sa.String(20), nullable=False, server_default='Html'),
        *_timestamps(),
    )
    op.create_index('ix_comments_discussion_id', 'comments', ['discussion_id'])
    op.create_index('ix_comments_insert_user_id', 'comments', ['insert_user_id'])


def downgrade() -> None:
    op.drop_table('comments')
    op.drop_table('discussions')
    op.drop_table('sessions')
    op.drop_table('users')

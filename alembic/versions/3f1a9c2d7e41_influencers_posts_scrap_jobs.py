"""Initial schema: influencers, posts, scrap_jobs

Revision ID: 3f1a9c2d7e41
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('influencers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('platform', sa.Text(), nullable=False),
        sa.Column('handle', sa.Text(), nullable=False),
        sa.Column('organization_id', sa.Text(), nullable=False),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('platform_user_id', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('follower_count', sa.Integer(), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_profile_sync', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_post_syncing', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_profile_syncing', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_sync_attempt', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'platform', 'handle', name='uq_influencer_org_platform_handle'),
    )
    op.create_index('ix_influencers_user_id', 'influencers', ['user_id'])
    op.create_index('ix_influencers_sync_flags', 'influencers', ['is_post_syncing', 'is_profile_syncing'])

    op.create_table('posts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('influencer_id', sa.Integer(), nullable=False),
        sa.Column('platform_post_id', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('media_urls', sa.JSON(), nullable=True),
        sa.Column('post_url', sa.Text(), nullable=True),
        sa.Column('likes', sa.Integer(), nullable=True),
        sa.Column('comments', sa.Integer(), nullable=True),
        sa.Column('shares', sa.Integer(), nullable=True),
        sa.Column('posted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['influencer_id'], ['influencers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('platform_post_id'),
    )
    op.create_index('ix_posts_influencer_posted_at', 'posts', ['influencer_id', 'posted_at'])

    op.create_table('scrap_jobs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('job_id', sa.Text(), nullable=False),
        sa.Column('organization_id', sa.Text(), nullable=False),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('influencer_id', sa.Integer(), nullable=False),
        sa.Column('platform', sa.Text(), nullable=False),
        sa.Column('job_type', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('target_url', sa.Text(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id'),
    )
    op.create_index('ix_scrap_jobs_org_status', 'scrap_jobs', ['organization_id', 'status'])
    op.create_index('ix_scrap_jobs_influencer_status', 'scrap_jobs', ['influencer_id', 'status'])
    op.create_index('ix_scrap_jobs_status_started', 'scrap_jobs', ['status', 'started_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_scrap_jobs_status_started', 'scrap_jobs')
    op.drop_index('ix_scrap_jobs_influencer_status', 'scrap_jobs')
    op.drop_index('ix_scrap_jobs_org_status', 'scrap_jobs')
    op.drop_table('scrap_jobs')
    op.drop_index('ix_posts_influencer_posted_at', 'posts')
    op.drop_table('posts')
    op.drop_index('ix_influencers_sync_flags', 'influencers')
    op.drop_index('ix_influencers_user_id', 'influencers')
    op.drop_table('influencers')

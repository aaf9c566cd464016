"""Content collector schema

Revision ID: 001_content_collector
Revises:
Create Date: 2026-10-19

Feeds, feed articles, platform imports, transformations and stored
platform credentials.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_content_collector'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'rss_feeds',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('url', sa.Text, nullable=False),
        sa.Column('title', sa.Text, nullable=False),
        sa.Column('category', sa.String(128), nullable=True),
        sa.Column('last_fetched_at', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.UniqueConstraint('user_id', 'url', name='uq_rss_feeds_user_url'),
    )
    op.create_index('ix_rss_feeds_user_id', 'rss_feeds', ['user_id'])

    op.create_table(
        'rss_articles',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('feed_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('rss_feeds.id', ondelete='CASCADE'), nullable=False),
        sa.Column('guid', sa.Text, nullable=False),
        sa.Column('title', sa.Text, nullable=False),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('content', sa.Text, nullable=False, server_default=''),
        sa.Column('link', sa.Text, nullable=False, server_default=''),
        sa.Column('published_at', sa.DateTime, nullable=True),
        sa.Column('author', sa.String(255), nullable=False),
        sa.Column('thumbnail_url', sa.Text, nullable=True),
        sa.Column('categories', postgresql.JSONB, nullable=False, server_default='[]'),
        sa.Column('ai_categories', postgresql.JSONB, nullable=False, server_default='[]'),
        sa.Column('ai_summary', sa.Text, nullable=False, server_default=''),
        sa.Column('read', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('saved', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('transformed', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('full_content_fetched', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('last_updated_at', sa.DateTime, nullable=False),
        sa.UniqueConstraint('feed_id', 'guid', name='uq_rss_articles_feed_guid'),
    )
    op.create_index('ix_rss_articles_published_at', 'rss_articles', ['published_at'])

    op.create_table(
        'external_content',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('source_type', sa.String(32), nullable=False),
        sa.Column('source_id', sa.String(512), nullable=False),
        sa.Column('title', sa.Text, nullable=False),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('content', sa.Text, nullable=False, server_default=''),
        sa.Column('link', sa.Text, nullable=False, server_default=''),
        sa.Column('published_at', sa.DateTime, nullable=True),
        sa.Column('author', sa.String(255), nullable=False),
        sa.Column('thumbnail_url', sa.Text, nullable=True),
        sa.Column('categories', postgresql.JSONB, nullable=False, server_default='[]'),
        sa.Column('metadata', postgresql.JSONB, nullable=False, server_default='{}'),
        sa.Column('ai_categories', postgresql.JSONB, nullable=False, server_default='[]'),
        sa.Column('ai_summary', sa.Text, nullable=False, server_default=''),
        sa.Column('saved', sa.Boolean, nullable=False, server_default='true'),
        sa.Column('transformed', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('last_updated_at', sa.DateTime, nullable=False),
        sa.UniqueConstraint('user_id', 'source_type', 'source_id', name='uq_external_content_natural_key'),
    )
    op.create_index('ix_external_content_user_source_type', 'external_content', ['user_id', 'source_type'])
    op.create_index('ix_external_content_published_at', 'external_content', ['published_at'])

    op.create_table(
        'transformed_content',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('original_content_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('transformation_type', sa.String(64), nullable=False),
        sa.Column('result_data', postgresql.JSONB, nullable=True),
        sa.Column('settings', postgresql.JSONB, nullable=False, server_default='{}'),
        sa.Column('title', sa.Text, nullable=False, server_default=''),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )
    op.create_index('ix_transformed_content_original', 'transformed_content', ['original_content_id'])

    op.create_table(
        'api_credentials',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('service', sa.String(32), nullable=False),
        sa.Column('api_key', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('user_id', 'service', name='uq_api_credentials_user_service'),
    )


def downgrade() -> None:
    op.drop_table('api_credentials')
    op.drop_index('ix_transformed_content_original', table_name='transformed_content')
    op.drop_table('transformed_content')
    op.drop_index('ix_external_content_published_at', table_name='external_content')
    op.drop_index('ix_external_content_user_source_type', table_name='external_content')
    op.drop_table('external_content')
    op.drop_index('ix_rss_articles_published_at', table_name='rss_articles')
    op.drop_table('rss_articles')
    op.drop_index('ix_rss_feeds_user_id', table_name='rss_feeds')
    op.drop_table('rss_feeds')

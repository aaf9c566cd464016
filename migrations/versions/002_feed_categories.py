"""Feed categories and unbounded authors

Revision ID: 002_feed_categories
Revises: 001_content_collector
Create Date: 2026-10-26

Adds the per-user feed_categories registry and widens author columns to
text, since feed and platform authors are stored uncapped.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002_feed_categories'
down_revision = '001_content_collector'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'feed_categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('color', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.UniqueConstraint('user_id', 'name', name='uq_feed_categories_user_name'),
    )

    op.alter_column('rss_articles', 'author', type_=sa.Text, existing_type=sa.String(255), existing_nullable=False)
    op.alter_column('external_content', 'author', type_=sa.Text, existing_type=sa.String(255), existing_nullable=False)


def downgrade() -> None:
    op.alter_column('external_content', 'author', type_=sa.String(255), existing_type=sa.Text, existing_nullable=False)
    op.alter_column('rss_articles', 'author', type_=sa.String(255), existing_type=sa.Text, existing_nullable=False)

    op.drop_table('feed_categories')

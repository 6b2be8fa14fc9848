"""initial schema

Revision ID: 3f1c9a7e2b10
Revises: 
Create Date: 2026-10-19 10:12:07.512334

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create keyword, settings and preset tables."""

    # ── tracked_keywords ───────────────────────────────────────────────
    op.create_table(
        'tracked_keywords',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('keyword', sa.String(512), nullable=False),
        sa.Column('expected_result', sa.String(1024), nullable=False),
        sa.Column('last_checked', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.Column('is_found', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_tracked_keywords')),
    )
    op.create_index(op.f('ix_tracked_keywords_last_checked'), 'tracked_keywords',
                    ['last_checked'])

    # ── notification_settings ──────────────────────────────────────────
    op.create_table(
        'notification_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('agency_emails', sa.JSON(), nullable=False),
        sa.Column('email_template', sa.JSON(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_notification_settings')),
    )

    # ── saved_presets ──────────────────────────────────────────────────
    op.create_table(
        'saved_presets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('website', sa.String(1024), nullable=False),
        sa.Column('keywords', sa.JSON(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_saved_presets')),
    )
    op.create_index(op.f('ix_saved_presets_created_at'), 'saved_presets',
                    ['created_at'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index(op.f('ix_saved_presets_created_at'), table_name='saved_presets')
    op.drop_table('saved_presets')
    op.drop_table('notification_settings')
    op.drop_index(op.f('ix_tracked_keywords_last_checked'), table_name='tracked_keywords')
    op.drop_table('tracked_keywords')

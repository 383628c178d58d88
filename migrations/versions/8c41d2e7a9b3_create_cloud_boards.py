"""create cloud boards

Revision ID: 8c41d2e7a9b3
Revises:
Create Date: 2026-09-28 14:12:40.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c41d2e7a9b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'cloud_boards',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('owner_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('cover_image', sa.String(), nullable=True),
        sa.Column('template_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('visibility', sa.String(), nullable=False, server_default='private'),
        sa.Column('allowed_friends', sa.JSON(), nullable=False),
        sa.Column('public_link_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('public_link_id', sa.String(), nullable=True),
        sa.Column('synced_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_cloud_boards_id', 'cloud_boards', ['id'])
    op.create_index('ix_cloud_boards_owner_id', 'cloud_boards', ['owner_id'])
    op.create_index('ix_cloud_boards_template_id', 'cloud_boards', ['template_id'])
    op.create_index('ix_cloud_boards_public_link_id', 'cloud_boards', ['public_link_id'], unique=True)


def downgrade():
    op.drop_index('ix_cloud_boards_public_link_id', table_name='cloud_boards')
    op.drop_index('ix_cloud_boards_template_id', table_name='cloud_boards')
    op.drop_index('ix_cloud_boards_owner_id', table_name='cloud_boards')
    op.drop_index('ix_cloud_boards_id', table_name='cloud_boards')
    op.drop_table('cloud_boards')

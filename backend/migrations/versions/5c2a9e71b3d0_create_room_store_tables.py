"""create room store tables

Revision ID: 5c2a9e71b3d0
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e71b3d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'rooms',
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('created_at', sa.Float(), nullable=False),
        sa.Column('expires_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('code'),
    )
    op.create_index('ix_rooms_expires_at', 'rooms', ['expires_at'])

    op.create_table(
        'player_sessions',
        sa.Column('player_id', sa.String(length=32), nullable=False),
        sa.Column('player_name', sa.String(length=64), nullable=False),
        sa.Column('room_code', sa.String(length=6), nullable=False),
        sa.Column('joined_at', sa.Float(), nullable=False),
        sa.Column('expires_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('player_id'),
    )
    op.create_index('ix_player_sessions_room_code', 'player_sessions', ['room_code'])
    op.create_index('ix_player_sessions_expires_at', 'player_sessions', ['expires_at'])

    op.create_table(
        'heartbeats',
        sa.Column('room_code', sa.String(length=6), nullable=False),
        sa.Column('player_id', sa.String(length=32), nullable=False),
        sa.Column('last_seen', sa.Float(), nullable=False),
        sa.Column('expires_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('room_code', 'player_id'),
    )
    op.create_index('ix_heartbeats_expires_at', 'heartbeats', ['expires_at'])

    op.create_table(
        'action_records',
        sa.Column('room_code', sa.String(length=6), nullable=False),
        sa.Column('player_id', sa.String(length=32), nullable=False),
        sa.Column('action_id', sa.String(length=128), nullable=False),
        sa.Column('expires_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('room_code', 'player_id'),
    )
    op.create_index('ix_action_records_expires_at', 'action_records', ['expires_at'])


def downgrade():
    op.drop_index('ix_action_records_expires_at', table_name='action_records')
    op.drop_table('action_records')
    op.drop_index('ix_heartbeats_expires_at', table_name='heartbeats')
    op.drop_table('heartbeats')
    op.drop_index('ix_player_sessions_expires_at', table_name='player_sessions')
    op.drop_index('ix_player_sessions_room_code', table_name='player_sessions')
    op.drop_table('player_sessions')
    op.drop_index('ix_rooms_expires_at', table_name='rooms')
    op.drop_table('rooms')

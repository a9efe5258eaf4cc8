"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create players table
    op.create_table('players',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('whatsapp', sa.String(length=64), nullable=False),
        sa.Column('pix_key', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_players_name'), 'players', ['name'], unique=False)

    # Create sessions table (live game rows have status "live")
    op.create_table('sessions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('game_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sessions_game_date'), 'sessions', ['game_date'], unique=False)
    op.create_index(op.f('ix_sessions_status'), 'sessions', ['status'], unique=False)

    # Create session_participants table
    op.create_table('session_participants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=False),
        sa.Column('player_name', sa.String(length=120), nullable=False),
        sa.Column('buy_in', sa.Integer(), nullable=False),
        sa.Column('rebuys', sa.Integer(), nullable=False),
        sa.Column('total_invested', sa.Integer(), nullable=False),
        sa.Column('final_chips', sa.Integer(), nullable=False),
        sa.Column('payment_status', sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ),
        sa.ForeignKeyConstraint(['player_id'], ['players.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'player_id', name='uq_participant_session_player')
    )
    op.create_index(op.f('ix_session_participants_session_id'), 'session_participants', ['session_id'], unique=False)
    op.create_index(op.f('ix_session_participants_player_id'), 'session_participants', ['player_id'], unique=False)

    # Create game_defaults table (single row, id=1)
    op.create_table('game_defaults',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('buy_in_amount', sa.Integer(), nullable=False),
        sa.Column('rebuy_amount', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Create dinners table
    op.create_table('dinners',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('dinner_date', sa.Date(), nullable=False),
        sa.Column('total_food_cost', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_drink_cost', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_dinners_dinner_date'), 'dinners', ['dinner_date'], unique=False)
    op.create_index(op.f('ix_dinners_status'), 'dinners', ['status'], unique=False)

    # Create dinner_participants table
    op.create_table('dinner_participants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('dinner_id', sa.String(length=36), nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=False),
        sa.Column('player_name', sa.String(length=120), nullable=False),
        sa.Column('is_eating', sa.Boolean(), nullable=False),
        sa.Column('is_drinking', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['dinner_id'], ['dinners.id'], ),
        sa.ForeignKeyConstraint(['player_id'], ['players.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('dinner_id', 'player_id', name='uq_dinner_participant_player')
    )
    op.create_index(op.f('ix_dinner_participants_dinner_id'), 'dinner_participants', ['dinner_id'], unique=False)


def downgrade() -> None:
    op.drop_table('dinner_participants')
    op.drop_table('dinners')
    op.drop_table('game_defaults')
    op.drop_table('session_participants')
    op.drop_table('sessions')
    op.drop_table('players')

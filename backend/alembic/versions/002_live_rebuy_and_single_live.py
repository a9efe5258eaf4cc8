"""live game rebuy amount, single live game and dinner

Revision ID: 002
Revises: 001
Create Date: 2026-10-17 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Rebuy price charged by the live game, NULL on rows from before this revision
    op.add_column('sessions', sa.Column('rebuy_amount', sa.Integer(), nullable=True))

    # Partial unique indexes: at most one row per table with status "live"
    op.create_index(
        'uq_sessions_single_live', 'sessions', ['status'], unique=True,
        sqlite_where=sa.text("status = 'live'"),
        postgresql_where=sa.text("status = 'live'"),
    )
    op.create_index(
        'uq_dinners_single_live', 'dinners', ['status'], unique=True,
        sqlite_where=sa.text("status = 'live'"),
        postgresql_where=sa.text("status = 'live'"),
    )


def downgrade() -> None:
    op.drop_index('uq_dinners_single_live', table_name='dinners')
    op.drop_index('uq_sessions_single_live', table_name='sessions')
    with op.batch_alter_table('sessions') as batch_op:
        batch_op.drop_column('rebuy_amount')

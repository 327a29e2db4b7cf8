"""Create combatants, battles and battle_restrictions tables

Revision ID: 3f2a9c1d7e4b
Revises:
Create Date: 2026-10-19 10:12:44.501237

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e4b'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'combatants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=32), nullable=False),
        sa.Column('owner_account_id', sa.String(length=64), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('wins', sa.Integer(), nullable=False),
        sa.Column('losses', sa.Integer(), nullable=False),
        sa.Column('total_battles', sa.Integer(), nullable=False),
        sa.Column('battle_text', sa.Text(), nullable=False),
        sa.Column('is_system_controlled', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('wins >= 0', name='ck_combatants_wins'),
        sa.CheckConstraint('losses >= 0', name='ck_combatants_losses'),
        sa.CheckConstraint('total_battles >= 0', name='ck_combatants_total_battles'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_combatants_owner', 'combatants', ['owner_account_id'], unique=False)
    op.create_index('idx_combatants_rating', 'combatants', ['rating'], unique=False)

    op.create_table(
        'battles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('attacker_id', sa.Integer(), nullable=False),
        sa.Column('defender_id', sa.Integer(), nullable=False),
        sa.Column('winner_id', sa.Integer(), nullable=False),
        sa.Column('attacker_score', sa.Float(), nullable=False),
        sa.Column('defender_score', sa.Float(), nullable=False),
        sa.Column('attacker_rating_delta', sa.Integer(), nullable=False),
        sa.Column('defender_rating_delta', sa.Integer(), nullable=False),
        sa.Column('attacker_analysis', sa.JSON(), nullable=False),
        sa.Column('defender_analysis', sa.JSON(), nullable=False),
        sa.Column('narrative', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('attacker_id <> defender_id', name='ck_battles_distinct'),
        sa.CheckConstraint('winner_id = attacker_id OR winner_id = defender_id', name='ck_battles_winner'),
        sa.CheckConstraint('attacker_score >= 10', name='ck_battles_attacker_score'),
        sa.CheckConstraint('defender_score >= 10', name='ck_battles_defender_score'),
        sa.ForeignKeyConstraint(['attacker_id'], ['combatants.id']),
        sa.ForeignKeyConstraint(['defender_id'], ['combatants.id']),
        sa.ForeignKeyConstraint(['winner_id'], ['combatants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_battles_attacker', 'battles', ['attacker_id', 'created_at'], unique=False)
    op.create_index('idx_battles_defender', 'battles', ['defender_id', 'created_at'], unique=False)

    op.create_table(
        'battle_restrictions',
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('last_battle_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('daily_count', sa.Integer(), nullable=False),
        sa.Column('daily_count_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('daily_count >= 0', name='ck_restrictions_daily_count'),
        sa.PrimaryKeyConstraint('account_id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('battle_restrictions')
    op.drop_index('idx_battles_defender', table_name='battles')
    op.drop_index('idx_battles_attacker', table_name='battles')
    op.drop_table('battles')
    op.drop_index('idx_combatants_rating', table_name='combatants')
    op.drop_index('idx_combatants_owner', table_name='combatants')
    op.drop_table('combatants')

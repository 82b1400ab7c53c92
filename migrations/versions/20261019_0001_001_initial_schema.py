"""Initial schema - game history tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the tables for the QuizBuzz game history:
- games: One row per game, with the final result
- rounds: Completed rounds within a game
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ### Games table ###
    op.create_table(
        'games',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('win_threshold', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('finished_at', sa.DateTime(), nullable=True),
        sa.Column('winner', sa.String(1), nullable=True),
        sa.Column('score_a', sa.Integer(), server_default='0'),
        sa.Column('score_b', sa.Integer(), server_default='0'),
    )

    # ### Rounds table ###
    op.create_table(
        'rounds',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('game_id', sa.Integer(), sa.ForeignKey('games.id'), nullable=False),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('buzzed_team', sa.String(1), nullable=True),
        sa.Column('winning_team', sa.String(1), nullable=True),
        sa.Column('points', sa.Integer(), server_default='0'),
        sa.Column('score_a', sa.Integer(), server_default='0'),
        sa.Column('score_b', sa.Integer(), server_default='0'),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )

    op.create_index('ix_rounds_game_id', 'rounds', ['game_id'])


def downgrade() -> None:
    op.drop_index('ix_rounds_game_id', 'rounds')

    # Drop tables in reverse order of creation
    op.drop_table('rounds')
    op.drop_table('games')

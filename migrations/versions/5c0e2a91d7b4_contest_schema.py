"""contest schema: users, pilots, races, votes, results, scoring config

Revision ID: 5c0e2a91d7b4
Revises:
Create Date: 2026-10-18 14:12:03.418220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c0e2a91d7b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("uid", sa.String(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "pilots",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("team", sa.String(), nullable=True),
        sa.Column("number", sa.Integer(), nullable=True),
        sa.Column("country", sa.String(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "races",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("voting_deadline", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "votes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.uid", ondelete="CASCADE"), nullable=False),
        sa.Column("race_id", sa.String(), sa.ForeignKey("races.id", ondelete="CASCADE"), nullable=False),
        sa.Column("pole", sa.String(), nullable=False),
        sa.Column("positions", sa.JSON(), nullable=False),
        sa.Column("crash_pilot", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("user_id", "race_id", name="unique_vote_user_race"),
    )
    # Bulk scoring reads group votes by race
    op.create_index("ix_votes_race", "votes", ["race_id"], unique=False)
    op.create_table(
        "results",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("race_id", sa.String(), sa.ForeignKey("races.id", ondelete="CASCADE"), nullable=False),
        sa.Column("pole", sa.String(), nullable=False),
        sa.Column("positions", sa.JSON(), nullable=False),
        sa.Column("crash_pilot", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("race_id", name="unique_result_race"),
    )
    op.create_table(
        "scoring_config",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("pole_points", sa.Integer(), nullable=True),
        sa.Column("position1_points", sa.Integer(), nullable=True),
        sa.Column("position2_points", sa.Integer(), nullable=True),
        sa.Column("position3_points", sa.Integer(), nullable=True),
        sa.Column("position4to10_points", sa.Integer(), nullable=True),
        sa.Column("crash_points", sa.Integer(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

def downgrade() -> None:
    op.drop_table("scoring_config")
    op.drop_table("results")
    op.drop_index("ix_votes_race", table_name="votes")
    op.drop_table("votes")
    op.drop_table("races")
    op.drop_table("pilots")
    op.drop_table("users")

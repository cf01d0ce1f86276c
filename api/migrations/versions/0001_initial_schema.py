"""Initial schema: entities and votes

Revision ID: 5e1f0c2a9b71
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates both tables: entities (one row per Pokémon, natural_key unique) and
votes (append-only ledger referencing entities).
Creates a composite (timestamp, id) index for the recent-vote feed.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5e1f0c2a9b71"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- entities table ---
    op.create_table(
        "entities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("natural_key", sa.Integer(), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("categories", ARRAY(sa.String(20)), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False, server_default=""),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("wins", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("losses", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_entities_natural_key", "entities", ["natural_key"], unique=True)

    # --- votes table ---
    op.create_table(
        "votes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "winner_id",
            sa.Integer(),
            sa.ForeignKey("entities.id", name="fk_votes_winner_id_entities"),
            nullable=False,
        ),
        sa.Column(
            "loser_id",
            sa.Integer(),
            sa.ForeignKey("entities.id", name="fk_votes_loser_id_entities"),
            nullable=False,
        ),
        sa.Column("winner_rating_delta", sa.Integer(), nullable=False),
        sa.Column("loser_rating_delta", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("winner_id <> loser_id", name="ck_votes_distinct_entities"),
    )
    op.create_index("ix_votes_timestamp_id", "votes", ["timestamp", "id"])


def downgrade() -> None:
    op.drop_index("ix_votes_timestamp_id", table_name="votes")
    op.drop_table("votes")
    op.drop_index("ix_entities_natural_key", table_name="entities")
    op.drop_table("entities")

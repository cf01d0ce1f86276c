from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class VoteRow(Base):
    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("winner_id <> loser_id", name="ck_votes_distinct_entities"),
        Index("ix_votes_timestamp_id", "timestamp", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    winner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("entities.id", name="fk_votes_winner_id_entities"),
        nullable=False,
    )
    loser_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("entities.id", name="fk_votes_loser_id_entities"),
        nullable=False,
    )
    winner_rating_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    loser_rating_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    # Assigned by the ledger at append time (UTC), never by the database
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

"""EntityRow ORM model: one row per ranked Pokémon.

natural_key (the pokedex number) is the upsert key used by seeding.
rating/wins/losses are written only by the vote path, the upsert override,
and the administrative reset.
"""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

# Native text[] on PostgreSQL, JSON elsewhere (SQLite in local runs and tests)
CategoryList = JSON().with_variant(ARRAY(String(20)), "postgresql")


class EntityRow(Base):
    __tablename__ = "entities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    natural_key: Mapped[int] = mapped_column(
        Integer, unique=True, nullable=False, index=True
    )
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    categories: Mapped[list[str]] = mapped_column(CategoryList, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # No column default: the storage layer always writes settings.default_rating
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

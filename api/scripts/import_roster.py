"""Import or repair roster entries from a JSON file.

Each record in the file is an object with natural_key, display_name and
categories, plus optional image_url, rating, wins and losses. Records are
sanitized exactly like seed records and upserted by natural_key.

Key behaviors:
- Existing entries keep their id; rating/wins/losses are only overwritten
  when the record supplies them (administrative correction of bad seed data)
- --only-placeholders skips entries whose stored name is already a real
  name, so a repair run never clobbers good data
- Everything is written in a single transaction

Usage:
    cd api
    DATABASE_URL="postgresql+asyncpg://..." python -m scripts.import_roster

    # With a custom file, repairing placeholders only:
    python -m scripts.import_roster --fixtures-path fixtures/roster_corrections.json --only-placeholders
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, StrictStr, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Support running from both project root and api/ directory
_api_root = Path(__file__).parent.parent  # api/
if str(_api_root) not in sys.path:
    sys.path.insert(0, str(_api_root))

from pokerank.config import settings
from pokerank.database import create_engine
from pokerank.errors import InvalidArgumentError
from pokerank.services.roster import is_placeholder_name, prepare_upsert
from pokerank.storage import EntityUpsert, SqlStorage, Storage

DEFAULT_FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "roster_corrections.json"


class RosterRecord(BaseModel):
    """One entry of a roster JSON file; JSON numbers given as strings are coerced."""

    natural_key: int
    display_name: str
    categories: list[StrictStr] = Field(min_length=1)
    image_url: str = ""
    rating: Optional[int] = None
    wins: Optional[int] = Field(default=None, ge=0)
    losses: Optional[int] = Field(default=None, ge=0)


def parse_record(raw: dict) -> EntityUpsert:
    """Build an EntityUpsert from one JSON object; raises InvalidArgumentError."""
    try:
        record = RosterRecord.model_validate(raw)
    except ValidationError as exc:
        raise InvalidArgumentError(f"invalid roster record {raw!r}: {exc}") from exc
    return EntityUpsert(
        natural_key=record.natural_key,
        display_name=record.display_name,
        categories=tuple(record.categories),
        image_url=record.image_url,
        rating=record.rating,
        wins=record.wins,
        losses=record.losses,
    )


async def import_records(
    storage: Storage,
    records: list[EntityUpsert],
    only_placeholders: bool = False,
) -> tuple[int, int]:
    """Upsert records; returns (written, skipped)."""
    written = 0
    skipped = 0

    async with storage.transaction():
        for record in records:
            if only_placeholders:
                existing = await storage.entities.get_by_natural_key(record.natural_key)
                if existing is not None and not is_placeholder_name(existing.display_name):
                    skipped += 1
                    continue
            await storage.entities.upsert(prepare_upsert(record))
            written += 1

    return written, skipped


async def import_roster(fixtures_path: Path, only_placeholders: bool) -> None:
    if not fixtures_path.exists():
        print(f"Error: fixtures file not found: {fixtures_path}", file=sys.stderr)
        sys.exit(1)
    if not settings.database_url:
        print("Error: DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)

    with open(fixtures_path, "r") as fh:
        records = [parse_record(raw) for raw in json.load(fh)]

    print(f"Loaded {len(records)} roster records from {fixtures_path}")

    # Standalone engine so this script can run without starting the app
    engine = create_engine(settings)
    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async with session_factory() as session:
        written, skipped = await import_records(
            SqlStorage(session), records, only_placeholders=only_placeholders
        )

    await engine.dispose()

    print(f"Roster import complete: {written} written, {skipped} skipped")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import or repair Pokémon roster entries in the PokeRank database"
    )
    parser.add_argument(
        "--fixtures-path",
        type=Path,
        default=DEFAULT_FIXTURES_PATH,
        help=f"Path to the roster JSON file (default: {DEFAULT_FIXTURES_PATH})",
    )
    parser.add_argument(
        "--only-placeholders",
        action="store_true",
        help="Only update entries whose stored name is still a placeholder",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(import_roster(args.fixtures_path, args.only_placeholders))

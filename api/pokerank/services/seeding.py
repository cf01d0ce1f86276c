"""Roster seeding and the administrative reset.

Seeding is best-effort enrichment: if the seed source is unusable the
starter roster is upserted instead, so matchups and rankings stay
satisfiable. The degradation is logged at warning level and counted.
"""

import asyncio
from typing import Optional

import structlog

from pokerank.errors import UpstreamSeedError
from pokerank.metrics import seed_fallbacks
from pokerank.services.roster import prepare_upsert, starter_roster
from pokerank.services.seed_source import SeedSource
from pokerank.storage.base import EntityUpsert, Storage

log = structlog.get_logger()


async def load_roster(source: SeedSource) -> list[EntityUpsert]:
    """Fetch records from the source, or the starter roster if it fails."""
    try:
        records = await source.fetch_roster()
        if len(records) < 2:
            raise UpstreamSeedError(f"seed source returned {len(records)} record(s)")
        return records
    except UpstreamSeedError as exc:
        seed_fallbacks.inc()
        log.warning("seed_source_degraded", error=str(exc), fallback="starter_roster")
        return starter_roster()


async def upsert_roster(storage: Storage, records: list[EntityUpsert]) -> int:
    """Sanitize and upsert every record in one transaction; returns the count."""
    async with storage.transaction():
        for record in records:
            await storage.entities.upsert(prepare_upsert(record))
    return len(records)


async def seed_roster(storage: Storage, source: SeedSource) -> int:
    records = await load_roster(source)
    count = await upsert_roster(storage, records)
    log.info("roster_seeded", count=count)
    return count


async def ensure_seeded(
    storage: Storage,
    source: SeedSource,
    minimum: int = 1,
    lock: Optional[asyncio.Lock] = None,
) -> int:
    """Seed when the store holds fewer than `minimum` entities.

    Callers sharing one store pass the same `lock` so concurrent first
    requests on an empty store seed once, not N times. Returns the number
    of records seeded (0 when nothing was needed).
    """
    if await storage.entities.count() >= minimum:
        return 0
    async with lock or asyncio.Lock():
        if await storage.entities.count() >= minimum:
            return 0
        return await seed_roster(storage, source)


async def reset_storage(storage: Storage) -> None:
    """Wipe the ledger, reset tallies, then remove every entity."""
    async with storage.transaction():
        await storage.votes.clear_all()
        await storage.entities.reset_tallies()
        await storage.entities.clear_all()
    log.warning("storage_reset")


async def reset_and_reseed(
    storage: Storage,
    source: SeedSource,
    lock: Optional[asyncio.Lock] = None,
) -> int:
    async with lock or asyncio.Lock():
        await reset_storage(storage)
        return await seed_roster(storage, source)

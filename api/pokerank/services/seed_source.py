"""Seed sources: where roster records come from.

PokeApiSeedSource builds a base entry for every pokedex number up to
settings.seed_roster_size (sprite URL, placeholder name, Normal type) and
enriches the first settings.seed_api_fetch_limit entries from PokeAPI.
Known corrections from pokerank.services.roster are applied afterwards by
prepare_upsert.

Design notes:
- A failed lookup for a single entry keeps that entry's placeholder and is
  logged; it never fails the whole roster.
- Anything that makes the roster as a whole unusable raises
  UpstreamSeedError, which the seeding service turns into the starter
  fallback.
"""

from typing import Optional, Protocol

import httpx
import structlog

from pokerank.config import Settings, settings
from pokerank.errors import UpstreamSeedError
from pokerank.metrics import seed_fetches
from pokerank.services.roster import placeholder_name, sprite_url
from pokerank.storage.base import EntityUpsert

log = structlog.get_logger()


class SeedSource(Protocol):
    async def fetch_roster(self) -> list[EntityUpsert]: ...


class StaticSeedSource:
    """Seed source over a fixed list of records (fixtures, tests)."""

    def __init__(self, records: list[EntityUpsert]) -> None:
        self._records = list(records)

    async def fetch_roster(self) -> list[EntityUpsert]:
        if not self._records:
            raise UpstreamSeedError("static roster is empty")
        return list(self._records)


def format_species_name(raw: str) -> str:
    """'mr-mime' -> 'Mr'; form suffixes after the first hyphen are dropped."""
    base = raw.split("-")[0]
    return base[:1].upper() + base[1:]


def parse_pokemon_payload(payload: dict) -> tuple[str, tuple[str, ...]]:
    """Extract (display name, type names) from a /pokemon/{n} response.

    Any shape other than the documented one raises UpstreamSeedError.
    """
    if not isinstance(payload, dict):
        raise UpstreamSeedError(f"PokeAPI payload is not an object: {payload!r}")
    raw_name = payload.get("name")
    raw_types = payload.get("types")
    if not isinstance(raw_name, str) or not isinstance(raw_types, list):
        raise UpstreamSeedError("PokeAPI payload missing name or types")
    try:
        slots = sorted(raw_types, key=lambda t: t.get("slot", 0))
        type_names = [t["type"]["name"] for t in slots]
    except (AttributeError, KeyError, TypeError) as exc:
        raise UpstreamSeedError(f"malformed PokeAPI types: {exc!r}") from exc
    if not all(isinstance(type_name, str) for type_name in type_names):
        raise UpstreamSeedError("PokeAPI type names must be strings")

    name = format_species_name(raw_name)
    types = tuple(format_species_name(type_name) for type_name in type_names)
    if not name or not types:
        raise UpstreamSeedError("PokeAPI payload missing name or types")
    return name, types


class PokeApiSeedSource:
    def __init__(
        self,
        app_settings: Settings = settings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = app_settings
        self._client = client

    async def fetch_entry(
        self, client: httpx.AsyncClient, natural_key: int
    ) -> tuple[str, tuple[str, ...]]:
        """Fetch one entry's name and types; raises UpstreamSeedError."""
        url = f"{self._settings.seed_api_base_url}/pokemon/{natural_key}"
        try:
            response = await client.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise UpstreamSeedError(f"PokeAPI unreachable: {exc!r}") from exc
        if response.status_code != 200:
            raise UpstreamSeedError(
                f"PokeAPI returned {response.status_code} for #{natural_key}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamSeedError(f"PokeAPI returned invalid JSON: {exc!r}") from exc
        return parse_pokemon_payload(payload)

    async def fetch_roster(self) -> list[EntityUpsert]:
        size = self._settings.seed_roster_size
        if size < 2:
            raise UpstreamSeedError(f"seed_roster_size={size} cannot form a matchup")

        log.info("seed_roster_build_started", size=size)
        fetch_limit = min(self._settings.seed_api_fetch_limit, size)
        enriched: dict[int, tuple[str, tuple[str, ...]]] = {}

        client = self._client or httpx.AsyncClient(
            timeout=self._settings.seed_api_timeout_seconds
        )
        try:
            for natural_key in range(1, fetch_limit + 1):
                try:
                    enriched[natural_key] = await self.fetch_entry(client, natural_key)
                    seed_fetches.labels(status="success").inc()
                except UpstreamSeedError as exc:
                    seed_fetches.labels(status="error").inc()
                    log.warning(
                        "seed_entry_fetch_failed",
                        natural_key=natural_key,
                        error=str(exc),
                    )
        finally:
            if self._client is None:
                await client.aclose()

        records = []
        for natural_key in range(1, size + 1):
            name, types = enriched.get(
                natural_key, (placeholder_name(natural_key), ("Normal",))
            )
            records.append(
                EntityUpsert(
                    natural_key=natural_key,
                    display_name=name,
                    categories=types,
                    image_url=sprite_url(natural_key),
                )
            )

        log.info("seed_roster_build_completed", size=len(records), enriched=len(enriched))
        return records

"""Typed error kinds raised by the rating, storage and seeding layers.

Each component raises these to its caller; the HTTP layer (pokerank.main)
maps them to status codes. Only the seeding path may catch
UpstreamSeedError and substitute a fallback roster.
"""


class PokeRankError(Exception):
    """Base class for all domain errors."""


class EntityNotFoundError(PokeRankError):
    """A referenced entity id does not exist."""

    def __init__(self, entity_id: int, role: str = "entity"):
        self.entity_id = entity_id
        self.role = role
        super().__init__(f"Pokémon not found: {role} (id={entity_id})")


class InsufficientDataError(PokeRankError):
    """Fewer than two entities exist, so no matchup can be formed."""

    def __init__(self, available: int):
        self.available = available
        super().__init__(
            f"Not enough Pokémon to create a pair (have {available}, need 2)"
        )


class InvalidArgumentError(PokeRankError):
    """Malformed input, rejected before any store mutation."""


class UpstreamSeedError(PokeRankError):
    """The external seed source is unreachable or returned unusable data."""

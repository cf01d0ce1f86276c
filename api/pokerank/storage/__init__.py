from pokerank.storage.base import (
    Entity,
    EntityStore,
    EntityUpsert,
    Storage,
    Vote,
    VoteLedger,
)
from pokerank.storage.memory import MemoryStorage
from pokerank.storage.sql import SqlStorage

__all__ = [
    "Entity",
    "EntityStore",
    "EntityUpsert",
    "Storage",
    "Vote",
    "VoteLedger",
    "MemoryStorage",
    "SqlStorage",
]

from .base import Base
from .entity import EntityRow
from .vote import VoteRow

__all__ = [
    "Base",
    "EntityRow",
    "VoteRow",
]

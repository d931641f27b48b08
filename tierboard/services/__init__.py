"""Service layer helpers."""

from .auth import authenticate, register_user
from .boards import board_to_dict, character_to_dict
from .errors import (
    BadRequest,
    Conflict,
    Forbidden,
    NotFound,
    TierBoardError,
    Unauthorized,
)
from .rankings import TIERS, tier_view, update_ranking
from .sessions import DatabaseSessionStore, InMemorySessionStore, SessionStore

__all__ = [
    "BadRequest",
    "Conflict",
    "DatabaseSessionStore",
    "Forbidden",
    "InMemorySessionStore",
    "NotFound",
    "SessionStore",
    "TIERS",
    "TierBoardError",
    "Unauthorized",
    "authenticate",
    "board_to_dict",
    "character_to_dict",
    "register_user",
    "tier_view",
    "update_ranking",
]

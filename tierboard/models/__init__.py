"""Database model exports."""

from .board import BoardCharacter, BoardMember, BoardTag, CharacterRanking, TierBoard
from .catalog import CatalogCharacter
from .login import LoginSession
from .user import User

__all__ = [
    "BoardCharacter",
    "BoardMember",
    "BoardTag",
    "CatalogCharacter",
    "CharacterRanking",
    "LoginSession",
    "TierBoard",
    "User",
]

"""Database models for tier boards and everything embedded in them."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


def _new_id() -> str:
    return uuid.uuid4().hex


class TierBoard(SQLModel, table=True):
    """Named board owned by ``creator_username``."""

    __tablename__ = "tier_board"

    id: str = ORMField(default_factory=_new_id, primary_key=True)
    name: str
    access_key: str = ORMField(index=True, unique=True)
    creator_username: str = ORMField(index=True)
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


class BoardTag(SQLModel, table=True):
    """One entry of a board's tag list."""

    __tablename__ = "board_tag"
    __table_args__ = (UniqueConstraint("board_id", "tag"),)

    id: Optional[int] = ORMField(default=None, primary_key=True)
    board_id: str = ORMField(foreign_key="tier_board.id", index=True)
    tag: str
    created_at: datetime = ORMField(default_factory=utcnow)


class BoardMember(SQLModel, table=True):
    """Allow-list entry granting a non-creator access to a board."""

    __tablename__ = "board_member"
    __table_args__ = (UniqueConstraint("board_id", "username"),)

    id: Optional[int] = ORMField(default=None, primary_key=True)
    board_id: str = ORMField(foreign_key="tier_board.id", index=True)
    username: str = ORMField(index=True)
    added_at: datetime = ORMField(default_factory=utcnow)


class BoardCharacter(SQLModel, table=True):
    """Rankable item living inside a single board."""

    __tablename__ = "board_character"

    id: str = ORMField(default_factory=_new_id, primary_key=True)
    board_id: str = ORMField(foreign_key="tier_board.id", index=True)
    name: str
    series: str = ""
    image_url: str = ""
    tags_json: str = "[]"
    created_at: datetime = ORMField(default_factory=utcnow)


class CharacterRanking(SQLModel, table=True):
    """A single user's tier for a single character.

    The unique key makes each user's ranking an independent row, so two
    users ranking the same character never overwrite each other.
    """

    __tablename__ = "character_ranking"
    __table_args__ = (UniqueConstraint("character_id", "user_id"),)

    id: Optional[int] = ORMField(default=None, primary_key=True)
    character_id: str = ORMField(foreign_key="board_character.id", index=True)
    user_id: str = ORMField(index=True)
    tier: str = ORMField(max_length=1)
    timestamp: datetime = ORMField(default_factory=utcnow)


__all__ = [
    "BoardCharacter",
    "BoardMember",
    "BoardTag",
    "CharacterRanking",
    "TierBoard",
]

"""Board lifecycle, tag lists, rosters and allow-lists.

A board is visible to a user iff the user created it or is on its
allow-list. Every mutation below refreshes the board's ``updated_at``.
Set-like fields (tags, allow-list) are written as individual rows under a
unique constraint, so concurrent additions never drop each other.
"""

from __future__ import annotations

import json
import logging
import secrets
from typing import Any, Dict, Iterable, List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from ..core import ACCESS_KEY_BYTES, isoformat, utcnow
from ..models import (
    BoardCharacter,
    BoardMember,
    BoardTag,
    CharacterRanking,
    TierBoard,
    User,
)
from .errors import BadRequest, Forbidden, NotFound

logger = logging.getLogger(__name__)

_ACCESS_KEY_ATTEMPTS = 5


# Serialisation --------------------------------------------------------------


def ranking_to_dict(ranking: CharacterRanking) -> Dict[str, Any]:
    return {
        "userId": ranking.user_id,
        "tier": ranking.tier,
        "timestamp": isoformat(ranking.timestamp),
    }


def character_to_dict(
    character: BoardCharacter, rankings: Iterable[CharacterRanking] = ()
) -> Dict[str, Any]:
    """Serialise a board character with its rankings in first-ranked order."""

    ordered = sorted(rankings, key=lambda ranking: ranking.id or 0)
    return {
        "id": character.id,
        "name": character.name,
        "series": character.series,
        "imageUrl": character.image_url,
        "tags": json.loads(character.tags_json or "[]"),
        "rankings": [ranking_to_dict(ranking) for ranking in ordered],
    }


def tag_list(session: Session, board_id: str) -> List[str]:
    return list(
        session.exec(
            select(BoardTag.tag).where(BoardTag.board_id == board_id).order_by(BoardTag.id)
        ).all()
    )


def allowed_users(session: Session, board_id: str) -> List[str]:
    return list(
        session.exec(
            select(BoardMember.username)
            .where(BoardMember.board_id == board_id)
            .order_by(BoardMember.id)
        ).all()
    )


def board_characters(session: Session, board_id: str) -> Dict[str, Dict[str, Any]]:
    """Return the board's characters keyed by id, rankings included."""

    characters = session.exec(
        select(BoardCharacter)
        .where(BoardCharacter.board_id == board_id)
        .order_by(BoardCharacter.created_at, BoardCharacter.id)
    ).all()
    if not characters:
        return {}

    by_character: Dict[str, List[CharacterRanking]] = {c.id: [] for c in characters}
    rankings = session.exec(
        select(CharacterRanking).where(
            CharacterRanking.character_id.in_(list(by_character))
        )
    ).all()
    for ranking in rankings:
        by_character[ranking.character_id].append(ranking)

    return {
        character.id: character_to_dict(character, by_character[character.id])
        for character in characters
    }


def board_to_dict(session: Session, board: TierBoard) -> Dict[str, Any]:
    """Serialise a board model to the API document shape."""

    return {
        "id": board.id,
        "name": board.name,
        "accessKey": board.access_key,
        "creatorUsername": board.creator_username,
        "tagList": tag_list(session, board.id),
        "characters": board_characters(session, board.id),
        "allowedUsers": allowed_users(session, board.id),
        "createdAt": isoformat(board.created_at),
        "updatedAt": isoformat(board.updated_at),
    }


# Validation -----------------------------------------------------------------


def normalize_board_name(name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise BadRequest("Board name is required")
    return name.strip()


def normalize_tag(tag: object) -> str:
    if not isinstance(tag, str) or not tag.strip():
        raise BadRequest("Tag is required")
    return tag.strip()


def normalize_tags(tags: object) -> List[str]:
    """Trim, drop empties and de-duplicate while keeping first-seen order."""

    if tags is None:
        return []
    if not isinstance(tags, list):
        raise BadRequest("Tags must be a list of strings")

    ordered: List[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            raise BadRequest("Tags must be a list of strings")
        cleaned = tag.strip()
        if cleaned and cleaned not in ordered:
            ordered.append(cleaned)
    return ordered


def _optional_text(value: object, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest(f"{field} must be a string")
    return value.strip()


# Access control -------------------------------------------------------------


def get_board_or_404(session: Session, board_id: str) -> TierBoard:
    board = session.get(TierBoard, board_id)
    if not board:
        raise NotFound("Board not found")
    return board


def is_member(session: Session, board_id: str, username: str) -> bool:
    return (
        session.exec(
            select(BoardMember.id).where(
                BoardMember.board_id == board_id, BoardMember.username == username
            )
        ).first()
        is not None
    )


def has_access(session: Session, board: TierBoard, username: str) -> bool:
    return board.creator_username == username or is_member(session, board.id, username)


def require_access(session: Session, board_id: str, username: str) -> TierBoard:
    """Load a board the caller may read and rank, or raise."""

    board = get_board_or_404(session, board_id)
    if not has_access(session, board, username):
        raise Forbidden("You do not have access to this board")
    return board


def require_creator(session: Session, board_id: str, username: str) -> TierBoard:
    """Load a board the caller created, or raise."""

    board = get_board_or_404(session, board_id)
    if board.creator_username != username:
        raise Forbidden("Only the board creator can do that")
    return board


# Row helpers ----------------------------------------------------------------


def _add_unique(session: Session, row: SQLModel, board: TierBoard) -> bool:
    """Insert a row guarded by a unique constraint and bump the board.

    Both writes share one commit; returns False if the row already existed.
    """

    session.add(row)
    board.updated_at = utcnow()
    session.add(board)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        return False
    session.refresh(board)
    return True


def _touch(session: Session, board: TierBoard) -> None:
    board.updated_at = utcnow()
    session.add(board)
    session.commit()
    session.refresh(board)


def generate_access_key(session: Session) -> str:
    """Return a random access key not used by any existing board."""

    for _ in range(_ACCESS_KEY_ATTEMPTS):
        key = secrets.token_urlsafe(ACCESS_KEY_BYTES)
        taken = session.exec(
            select(TierBoard.id).where(TierBoard.access_key == key)
        ).first()
        if taken is None:
            return key
        logger.warning("Access key collision, regenerating")
    raise RuntimeError("Unable to generate a unique access key")


# Board lifecycle ------------------------------------------------------------


def create_board(
    session: Session,
    *,
    name: object,
    initial_tags: object,
    creator_username: str,
) -> TierBoard:
    board_name = normalize_board_name(name)
    tags = normalize_tags(initial_tags)

    board = TierBoard(
        name=board_name,
        access_key=generate_access_key(session),
        creator_username=creator_username,
    )
    session.add(board)
    # No relationship orders these inserts; the board row must exist first.
    session.flush()
    for tag in tags:
        session.add(BoardTag(board_id=board.id, tag=tag))
    session.commit()
    session.refresh(board)

    logger.info("User %s created board %s (%s)", creator_username, board.id, board_name)
    return board


def list_boards(session: Session, username: str) -> List[TierBoard]:
    """Boards the user created or was allow-listed on, each listed once."""

    created = session.exec(
        select(TierBoard).where(TierBoard.creator_username == username)
    ).all()
    joined = session.exec(
        select(TierBoard)
        .join(BoardMember, BoardMember.board_id == TierBoard.id)
        .where(BoardMember.username == username)
    ).all()

    boards: Dict[str, TierBoard] = {}
    for board in [*created, *joined]:
        boards.setdefault(board.id, board)
    return sorted(boards.values(), key=lambda board: (board.created_at, board.id))


def join_by_access_key(session: Session, access_key: str, username: str) -> TierBoard:
    """Fetch a board by its access key, allow-listing the caller on first use."""

    board = session.exec(
        select(TierBoard).where(TierBoard.access_key == access_key)
    ).first()
    if not board:
        raise NotFound("Board not found")

    if board.creator_username == username or is_member(session, board.id, username):
        return board

    if _add_unique(session, BoardMember(board_id=board.id, username=username), board):
        logger.info("User %s joined board %s by access key", username, board.id)
    return board


def rename_board(session: Session, board_id: str, name: object, username: str) -> TierBoard:
    # Renaming is restricted to the creator, same as managing the allow-list.
    board = require_creator(session, board_id, username)
    board.name = normalize_board_name(name)
    _touch(session, board)
    logger.info("User %s renamed board %s to %s", username, board.id, board.name)
    return board


def delete_board(session: Session, board_id: str, username: str) -> None:
    """Delete a board together with its tags, members, characters and rankings."""

    board = require_creator(session, board_id, username)

    character_ids = session.exec(
        select(BoardCharacter.id).where(BoardCharacter.board_id == board.id)
    ).all()
    if character_ids:
        for ranking in session.exec(
            select(CharacterRanking).where(
                CharacterRanking.character_id.in_(list(character_ids))
            )
        ).all():
            session.delete(ranking)
        session.flush()
    for model in (BoardCharacter, BoardTag, BoardMember):
        for row in session.exec(select(model).where(model.board_id == board.id)).all():
            session.delete(row)
    # Children go first so enforced foreign keys never see an orphan.
    session.flush()

    session.delete(board)
    session.commit()
    logger.info("User %s deleted board %s", username, board_id)


# Tags, characters and members -----------------------------------------------


def add_tag(session: Session, board_id: str, tag: object, username: str) -> List[str]:
    """Add a tag to the board (no-op when present) and return the tag list."""

    board = require_access(session, board_id, username)
    tag = normalize_tag(tag)
    if tag not in tag_list(session, board.id):
        _add_unique(session, BoardTag(board_id=board.id, tag=tag), board)
    return tag_list(session, board.id)


def add_character(
    session: Session,
    board_id: str,
    payload: object,
    username: str,
) -> BoardCharacter:
    """Add a character with a fresh id and no rankings.

    Character tags missing from the board's tag list are added to it.
    """

    board = require_access(session, board_id, username)
    if not isinstance(payload, dict):
        raise BadRequest("Character payload is required")

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise BadRequest("Character name is required")
    tags = normalize_tags(payload.get("tags"))
    series = _optional_text(payload.get("series"), "series")
    image_url = _optional_text(payload.get("imageUrl"), "imageUrl")

    for attempt in range(2):
        character = BoardCharacter(
            board_id=board.id,
            name=name.strip(),
            series=series,
            image_url=image_url,
            tags_json=json.dumps(tags),
        )
        session.add(character)
        existing = set(tag_list(session, board.id))
        for tag in tags:
            if tag not in existing:
                session.add(BoardTag(board_id=board.id, tag=tag))
        board.updated_at = utcnow()
        session.add(board)
        try:
            session.commit()
            break
        except IntegrityError:
            # Another request added one of the tags first; re-read and retry.
            session.rollback()
            if attempt:
                raise
    session.refresh(character)

    logger.info("User %s added character %s to board %s", username, character.id, board.id)
    return character


def add_member(
    session: Session, board_id: str, member: object, username: str
) -> List[str]:
    """Allow-list ``member`` on a board the caller created; returns the allow-list."""

    board = require_creator(session, board_id, username)
    if not isinstance(member, str) or not member.strip():
        raise BadRequest("Username is required")
    member = member.strip()

    if session.get(User, member) is None:
        raise NotFound("User not found")

    if member != board.creator_username and not is_member(session, board.id, member):
        if _add_unique(session, BoardMember(board_id=board.id, username=member), board):
            logger.info("User %s added %s to board %s", username, member, board.id)
    return allowed_users(session, board.id)


def get_character_or_404(
    session: Session, board: TierBoard, character_id: str
) -> BoardCharacter:
    character = session.get(BoardCharacter, character_id)
    if not character or character.board_id != board.id:
        raise NotFound("Character not found")
    return character


def character_rankings(session: Session, character_id: str) -> List[CharacterRanking]:
    return list(
        session.exec(
            select(CharacterRanking)
            .where(CharacterRanking.character_id == character_id)
            .order_by(CharacterRanking.id)
        ).all()
    )


__all__ = [
    "add_character",
    "add_member",
    "add_tag",
    "allowed_users",
    "board_characters",
    "board_to_dict",
    "character_rankings",
    "character_to_dict",
    "create_board",
    "delete_board",
    "generate_access_key",
    "get_board_or_404",
    "get_character_or_404",
    "has_access",
    "is_member",
    "join_by_access_key",
    "list_boards",
    "normalize_tags",
    "rename_board",
    "require_access",
    "require_creator",
    "tag_list",
]

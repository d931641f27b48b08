"""Per-user ranking upserts and the viewer's tier grid."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core import utcnow
from ..models import BoardCharacter, CharacterRanking
from .boards import (
    board_characters,
    character_rankings,
    get_character_or_404,
    require_access,
)
from .errors import BadRequest

logger = logging.getLogger(__name__)

TIERS = ("S", "A", "B", "C", "D")


def validate_tier(tier: object) -> str:
    if not isinstance(tier, str) or tier not in TIERS:
        raise BadRequest(f"Tier must be one of {', '.join(TIERS)}")
    return tier


def _find_ranking(
    session: Session, character_id: str, user_id: str
) -> Optional[CharacterRanking]:
    return session.exec(
        select(CharacterRanking).where(
            CharacterRanking.character_id == character_id,
            CharacterRanking.user_id == user_id,
        )
    ).first()


def update_ranking(
    session: Session,
    board_id: str,
    character_id: str,
    tier: object,
    username: str,
) -> tuple[BoardCharacter, List[CharacterRanking]]:
    """Set ``username``'s tier for a character, replacing any earlier ranking.

    Only the caller's own ranking row is written, so rankings by other users
    on the same character are never touched. Returns the character and its
    rankings after the write.
    """

    board = require_access(session, board_id, username)
    character = get_character_or_404(session, board, character_id)
    tier = validate_tier(tier)

    for attempt in range(2):
        now = utcnow()
        ranking = _find_ranking(session, character.id, username)
        if ranking:
            ranking.tier = tier
            ranking.timestamp = now
        else:
            ranking = CharacterRanking(
                character_id=character.id, user_id=username, tier=tier, timestamp=now
            )
        session.add(ranking)
        board.updated_at = now
        session.add(board)
        try:
            session.commit()
            break
        except IntegrityError:
            # A concurrent first ranking by the same user won; retry as an update.
            session.rollback()
            if attempt:
                raise

    logger.debug(
        "User %s ranked character %s on board %s as %s",
        username,
        character.id,
        board.id,
        tier,
    )
    session.refresh(character)
    return character, character_rankings(session, character.id)


def tier_view(
    session: Session,
    board_id: str,
    username: str,
    tags: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """Group a board's characters by the caller's tiers.

    Characters the caller has not ranked go to ``unranked``; they are never
    folded into the lowest tier. With ``tags`` only characters carrying at
    least one of them are included.
    """

    board = require_access(session, board_id, username)
    wanted = {tag.strip() for tag in tags or [] if tag and tag.strip()}

    tiers: Dict[str, List[Dict[str, Any]]] = {tier: [] for tier in TIERS}
    unranked: List[Dict[str, Any]] = []
    for character in board_characters(session, board.id).values():
        if wanted and not wanted.intersection(character["tags"]):
            continue
        mine = next(
            (r for r in character["rankings"] if r["userId"] == username), None
        )
        if mine is None:
            unranked.append(character)
        else:
            tiers[mine["tier"]].append(character)

    return {"boardId": board.id, "tiers": tiers, "unranked": unranked}


__all__ = ["TIERS", "tier_view", "update_ranking", "validate_tier"]

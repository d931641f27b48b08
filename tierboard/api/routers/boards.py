"""Tier board endpoints.

The acting user always comes from the login session; identity fields in
request bodies (``creatorUsername``, ``userId``) are accepted for client
compatibility but never trusted.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ...core import get_session
from ...services import boards as board_service
from ...services.boards import board_to_dict, character_to_dict
from ...services.rankings import tier_view, update_ranking
from ..dependencies import current_username

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/boards", tags=["boards"])


def _ignore_claimed_identity(body: Dict[str, Any], field: str, username: str) -> None:
    claimed = body.get(field)
    if claimed is not None and claimed != username:
        logger.warning(
            "Ignoring %s=%r from request body; acting as %s", field, claimed, username
        )


@router.post("", status_code=201)
def create_board(
    body: Dict[str, Any],
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """Create a board owned by the logged-in user."""

    _ignore_claimed_identity(body, "creatorUsername", username)
    board = board_service.create_board(
        session,
        name=body.get("name"),
        initial_tags=body.get("initialTags"),
        creator_username=username,
    )
    return board_to_dict(session, board)


@router.get("")
def list_boards(
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """List boards the user created or was given access to."""

    return [
        board_to_dict(session, board)
        for board in board_service.list_boards(session, username)
    ]


@router.get("/access/{access_key}")
def get_board_by_access_key(
    access_key: str,
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """Open a board by its access key, joining it on first use."""

    board = board_service.join_by_access_key(session, access_key, username)
    return board_to_dict(session, board)


@router.get("/{board_id}")
def get_board(
    board_id: str,
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    board = board_service.require_access(session, board_id, username)
    return board_to_dict(session, board)


@router.patch("/{board_id}")
def update_board(
    board_id: str,
    body: Dict[str, Any],
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """Rename a board (creator only)."""

    board = board_service.rename_board(session, board_id, body.get("name"), username)
    return board_to_dict(session, board)


@router.delete("/{board_id}")
def delete_board(
    board_id: str,
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """Delete a board and everything on it (creator only)."""

    board_service.delete_board(session, board_id, username)
    return {"ok": True, "deleted_board": board_id}


@router.get("/{board_id}/tiers")
def get_tiers(
    board_id: str,
    tags: Optional[List[str]] = Query(default=None),
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """The caller's tier grid, optionally filtered by tags."""

    return tier_view(session, board_id, username, tags)


@router.post("/{board_id}/characters", status_code=201)
def add_character(
    board_id: str,
    body: Dict[str, Any],
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    character = board_service.add_character(
        session, board_id, body.get("character"), username
    )
    return character_to_dict(character)


@router.post("/{board_id}/characters/{character_id}/ranking")
def rank_character(
    board_id: str,
    character_id: str,
    body: Dict[str, Any],
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """Record the caller's tier for a character."""

    _ignore_claimed_identity(body, "userId", username)
    character, rankings = update_ranking(
        session, board_id, character_id, body.get("tier"), username
    )
    return character_to_dict(character, rankings)


@router.post("/{board_id}/tags")
def add_tag(
    board_id: str,
    body: Dict[str, Any],
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    return {"tagList": board_service.add_tag(session, board_id, body.get("tag"), username)}


@router.post("/{board_id}/users")
def add_user(
    board_id: str,
    body: Dict[str, Any],
    session: Session = Depends(get_session),
    username: str = Depends(current_username),
):
    """Allow-list another user on a board (creator only)."""

    allowed = board_service.add_member(session, board_id, body.get("username"), username)
    return {"ok": True, "allowedUsers": allowed}


__all__ = ["router"]

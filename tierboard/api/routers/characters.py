"""Global character catalog endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import get_session
from ...services.catalog import (
    add_catalog_character,
    catalog_character_to_dict,
    list_catalog,
)
from ..dependencies import current_username

router = APIRouter(prefix="/characters", tags=["characters"])


@router.get("")
def list_characters(
    session: Session = Depends(get_session),
    _username: str = Depends(current_username),
):
    return [catalog_character_to_dict(c) for c in list_catalog(session)]


@router.post("", status_code=201)
def create_character(
    body: Dict[str, Any],
    session: Session = Depends(get_session),
    _username: str = Depends(current_username),
):
    """Add a character to the catalog."""

    return catalog_character_to_dict(add_catalog_character(session, body))


__all__ = ["router"]

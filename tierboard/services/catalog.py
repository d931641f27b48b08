"""Helpers for the global character catalog."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from sqlmodel import Session, select

from ..core import isoformat
from ..models import CatalogCharacter
from .boards import normalize_tags
from .errors import BadRequest


def catalog_character_to_dict(character: CatalogCharacter) -> Dict[str, Any]:
    return {
        "id": character.id,
        "name": character.name,
        "series": character.series,
        "imageUrl": character.image_url,
        "tags": json.loads(character.tags_json or "[]"),
        "createdAt": isoformat(character.created_at),
    }


def list_catalog(session: Session) -> List[CatalogCharacter]:
    return list(
        session.exec(
            select(CatalogCharacter).order_by(
                CatalogCharacter.created_at, CatalogCharacter.id
            )
        ).all()
    )


def add_catalog_character(session: Session, body: Dict[str, Any]) -> CatalogCharacter:
    name = body.get("name")
    if not isinstance(name, str) or not name.strip():
        raise BadRequest("Character name is required")
    series = body.get("series") or ""
    image_url = body.get("imageUrl") or ""
    if not isinstance(series, str) or not isinstance(image_url, str):
        raise BadRequest("series and imageUrl must be strings")

    character = CatalogCharacter(
        name=name.strip(),
        series=series.strip(),
        image_url=image_url.strip(),
        tags_json=json.dumps(normalize_tags(body.get("tags"))),
    )
    session.add(character)
    session.commit()
    session.refresh(character)
    return character


__all__ = ["add_catalog_character", "catalog_character_to_dict", "list_catalog"]

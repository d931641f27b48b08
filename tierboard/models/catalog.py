"""Database model for the global character catalog."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class CatalogCharacter(SQLModel, table=True):
    """Character entered outside of any board."""

    __tablename__ = "character"

    id: str = ORMField(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    name: str
    series: str = ""
    image_url: str = ""
    tags_json: str = "[]"
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["CatalogCharacter"]

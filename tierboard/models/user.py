"""Database model for registered accounts."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class User(SQLModel, table=True):
    """Account identified by a unique, case-sensitive username."""

    __tablename__ = "users"

    username: str = ORMField(primary_key=True, max_length=40)
    password_hash: str
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["User"]

"""Database model for server-side login sessions."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class LoginSession(SQLModel, table=True):
    """Opaque login id bound to a username until ``expires_at``."""

    __tablename__ = "login_session"

    id: str = ORMField(primary_key=True)
    username: str = ORMField(index=True)
    created_at: datetime = ORMField(default_factory=utcnow)
    expires_at: datetime


__all__ = ["LoginSession"]

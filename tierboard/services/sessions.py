"""Server-side login session stores.

The signed cookie only carries an opaque login id; the mapping from that id
to a username lives in a ``SessionStore`` so it can be shared between
processes (``DatabaseSessionStore``) or kept local for tests and single
process development (``InMemorySessionStore``).
"""

from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Protocol

from sqlmodel import Session, select

from ..core.time import as_utc, utcnow
from ..models import LoginSession

logger = logging.getLogger(__name__)


def new_login_id() -> str:
    return secrets.token_urlsafe(32)


class SessionStore(Protocol):
    """Interface for login session storage."""

    def create(self, username: str) -> str:
        ...

    def resolve(self, login_id: str) -> Optional[str]:
        ...

    def destroy(self, login_id: str) -> bool:
        ...


@dataclass
class _Entry:
    username: str
    expires_at: datetime


class InMemorySessionStore:
    """Process-local store; entries vanish on restart."""

    def __init__(
        self,
        ttl_seconds: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def create(self, username: str) -> str:
        login_id = new_login_id()
        with self._lock:
            self._entries[login_id] = _Entry(username, self._clock() + self.ttl)
        return login_id

    def resolve(self, login_id: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(login_id)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[login_id]
                return None
            return entry.username

    def destroy(self, login_id: str) -> bool:
        with self._lock:
            return self._entries.pop(login_id, None) is not None


class DatabaseSessionStore:
    """Store backed by the ``login_session`` table."""

    def __init__(
        self,
        session: Session,
        ttl_seconds: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def create(self, username: str) -> str:
        now = self._clock()
        record = LoginSession(
            id=new_login_id(),
            username=username,
            created_at=now,
            expires_at=now + self.ttl,
        )
        self.session.add(record)
        self.session.commit()
        return record.id

    def resolve(self, login_id: str) -> Optional[str]:
        record = self.session.get(LoginSession, login_id)
        if record is None:
            return None
        if as_utc(record.expires_at) <= self._clock():
            self.session.delete(record)
            self.session.commit()
            return None
        return record.username

    def destroy(self, login_id: str) -> bool:
        record = self.session.get(LoginSession, login_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        return True

    def purge_expired(self) -> int:
        """Delete every expired login and return how many were removed."""

        now = self._clock()
        expired = self.session.exec(
            select(LoginSession).where(LoginSession.expires_at <= now)
        ).all()
        for record in expired:
            self.session.delete(record)
        if expired:
            self.session.commit()
            logger.info("Purged %d expired login sessions", len(expired))
        return len(expired)


__all__ = [
    "DatabaseSessionStore",
    "InMemorySessionStore",
    "SessionStore",
    "new_login_id",
]

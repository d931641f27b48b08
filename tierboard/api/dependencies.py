"""Dependency wiring for request handlers."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlmodel import Session

from ..core import SESSION_BACKEND, SESSION_TTL_SECONDS, get_session
from ..services.errors import Unauthorized
from ..services.sessions import DatabaseSessionStore, InMemorySessionStore, SessionStore

LOGIN_KEY = "lid"

_memory_store: InMemorySessionStore | None = None


def get_session_store(session: Session = Depends(get_session)) -> SessionStore:
    """Return the configured login store.

    The in-memory store is a process-wide singleton so logins persist across
    requests; the database store is bound to the request's DB session.
    """
    global _memory_store
    if SESSION_BACKEND == "memory":
        if _memory_store is None:
            _memory_store = InMemorySessionStore(SESSION_TTL_SECONDS)
        return _memory_store
    return DatabaseSessionStore(session, SESSION_TTL_SECONDS)


def current_username(
    request: Request, store: SessionStore = Depends(get_session_store)
) -> str:
    """Resolve the acting principal from the session cookie or raise 401."""

    login_id = request.session.get(LOGIN_KEY)
    if not login_id:
        raise Unauthorized("Not authenticated")
    username = store.resolve(login_id)
    if not username:
        request.session.clear()
        raise Unauthorized("Session expired")
    return username


__all__ = ["LOGIN_KEY", "current_username", "get_session_store"]

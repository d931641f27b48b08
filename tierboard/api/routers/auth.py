"""Account and login session routes."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from ...core import get_session
from ...services.auth import authenticate, register_user
from ...services.sessions import SessionStore
from ..dependencies import LOGIN_KEY, current_username, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _start_login(request: Request, store: SessionStore, username: str) -> None:
    previous = request.session.get(LOGIN_KEY)
    if previous:
        store.destroy(previous)
    request.session.clear()
    request.session[LOGIN_KEY] = store.create(username)


@router.post("/register", status_code=201)
def register(
    body: Dict[str, Any],
    request: Request,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
):
    """Create an account and log it in."""

    user = register_user(session, body.get("username"), body.get("password"))
    _start_login(request, store, user.username)
    return {"username": user.username}


@router.post("/login")
def login(
    body: Dict[str, Any],
    request: Request,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
):
    user = authenticate(session, body.get("username"), body.get("password"))
    _start_login(request, store, user.username)
    logger.info("User %s logged in", user.username)
    return {"username": user.username}


@router.post("/logout")
def logout(request: Request, store: SessionStore = Depends(get_session_store)):
    """End the current login; calling it while logged out is not an error."""

    login_id = request.session.get(LOGIN_KEY)
    request.session.clear()
    username = store.resolve(login_id) if login_id else None
    if not username or not store.destroy(login_id):
        return {"ok": True, "message": "Already logged out"}
    logger.info("User %s logged out", username)
    return {"ok": True, "message": "Logged out"}


@router.get("/me")
def me(username: str = Depends(current_username)):
    return {"username": username}


__all__ = ["router"]

"""Account registration and credential checks."""

from __future__ import annotations

import logging

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ..models import User
from .errors import BadRequest, Conflict, Unauthorized

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 40
# bcrypt only looks at the first 72 bytes.
MAX_PASSWORD_BYTES = 72
INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


def normalize_username(username: object) -> str:
    """Trim and validate an inbound username."""

    if not isinstance(username, str):
        raise BadRequest("Username is required")
    normalized = username.strip()
    if not normalized:
        raise BadRequest("Username is required")
    if len(normalized) > MAX_USERNAME_LENGTH:
        raise BadRequest(
            f"Username must be {MAX_USERNAME_LENGTH} characters or less"
        )
    return normalized


def _require_password(password: object) -> str:
    if not isinstance(password, str) or not password:
        raise BadRequest("Password is required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise BadRequest(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def register_user(session: Session, username: object, password: object) -> User:
    """Create a new account; usernames are unique and case-sensitive."""

    name = normalize_username(username)
    secret = _require_password(password)

    if session.get(User, name) is not None:
        raise Conflict("Username already exists")

    user = User(username=name, password_hash=hash_password(secret))
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise Conflict("Username already exists") from exc
    session.refresh(user)
    logger.info("Registered user %s", name)
    return user


def authenticate(session: Session, username: object, password: object) -> User:
    """Return the matching user or raise ``Unauthorized``.

    Unknown users and wrong passwords produce the same message.
    """

    if not isinstance(username, str) or not isinstance(password, str):
        raise Unauthorized(INVALID_CREDENTIALS)

    user = session.get(User, username.strip())
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", username.strip())
        raise Unauthorized(INVALID_CREDENTIALS)
    return user


__all__ = [
    "INVALID_CREDENTIALS",
    "MAX_USERNAME_LENGTH",
    "authenticate",
    "hash_password",
    "normalize_username",
    "register_user",
    "verify_password",
]

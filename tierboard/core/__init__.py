"""Core configuration and infrastructure helpers."""

from .config import (
    ACCESS_KEY_BYTES,
    ALLOWED_CORS_ORIGINS,
    APP_ENV,
    BACKEND_URL,
    COOKIE_DOMAIN,
    COOKIE_NAME,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DATABASE_URL,
    DB_RESET,
    FRONTEND_ORIGIN,
    IS_PRODUCTION,
    LOG_LEVEL,
    SECRET_KEY,
    SESSION_BACKEND,
    SESSION_TTL_SECONDS,
)
from .database import engine, get_session
from .time import as_utc, isoformat, utcnow

__all__ = [
    "ACCESS_KEY_BYTES",
    "ALLOWED_CORS_ORIGINS",
    "APP_ENV",
    "BACKEND_URL",
    "COOKIE_DOMAIN",
    "COOKIE_NAME",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "FRONTEND_ORIGIN",
    "IS_PRODUCTION",
    "LOG_LEVEL",
    "SECRET_KEY",
    "SESSION_BACKEND",
    "SESSION_TTL_SECONDS",
    "as_utc",
    "engine",
    "get_session",
    "isoformat",
    "utcnow",
]

"""Application settings and environment helpers."""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


_PROJECT_ROOT = Path(__file__).resolve().parents[2]

APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
IS_PRODUCTION = APP_ENV == "production"


# Application security -------------------------------------------------------
# Outside production a throwaway key keeps local runs and tests bootable;
# cookies signed with it do not survive a restart.
SECRET_KEY = _require_env("SECRET_KEY") if IS_PRODUCTION else (
    os.getenv("SECRET_KEY") or secrets.token_urlsafe(32)
)

_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)

FRONTEND_ORIGIN = _frontend_origins[0] if _frontend_origins else ""


# Sessions and cookies -------------------------------------------------------
COOKIE_NAME = os.getenv("COOKIE_NAME", "tierboard_sid")
COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = _env_bool("COOKIE_SECURE", IS_PRODUCTION)
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")

SESSION_TTL_SECONDS = _env_int("SESSION_TTL_SECONDS", 60 * 60 * 24 * 7)
SESSION_BACKEND = os.getenv("SESSION_BACKEND", "database").strip().lower()
if SESSION_BACKEND not in {"database", "memory"}:
    raise RuntimeError("SESSION_BACKEND must be 'database' or 'memory'")


# Storage --------------------------------------------------------------------
DATABASE_URL = os.getenv("DATABASE_URL") or (
    f"sqlite:///{_PROJECT_ROOT / 'data' / 'app.db'}"
)
DB_RESET = _env_bool("DB_RESET", False)


# Runtime behaviour ----------------------------------------------------------
BACKEND_URL = os.getenv("BACKEND_URL", "")
ACCESS_KEY_BYTES = _env_int("ACCESS_KEY_BYTES", 16)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


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
]

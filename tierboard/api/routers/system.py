"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from ...core import APP_ENV, BACKEND_URL, FRONTEND_ORIGIN, SESSION_TTL_SECONDS
from ...services.rankings import TIERS

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose frontend configuration values."""

    return {
        "backend_url": BACKEND_URL,
        "environment": APP_ENV,
        "frontend_origin": FRONTEND_ORIGIN,
        "session_ttl_seconds": SESSION_TTL_SECONDS,
        "tiers": list(TIERS),
    }


__all__ = ["router"]

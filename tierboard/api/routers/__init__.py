"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .boards import router as boards_router
from .characters import router as characters_router
from .system import router as system_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    boards_router,
    characters_router,
)

__all__ = ["ALL_ROUTERS"]

"""Domain errors raised by the service layer and rendered as ``{"error": ...}``."""

from __future__ import annotations


class TierBoardError(Exception):
    """Base class for request-level failures."""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(TierBoardError):
    status_code = 400
    default_message = "Bad request"


class Unauthorized(TierBoardError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(TierBoardError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(TierBoardError):
    status_code = 404
    default_message = "Not found"


class Conflict(TierBoardError):
    # The public contract reports duplicates as a plain 400.
    status_code = 400
    default_message = "Conflict"


__all__ = [
    "BadRequest",
    "Conflict",
    "Forbidden",
    "NotFound",
    "TierBoardError",
    "Unauthorized",
]

"""
Domain errors raised by the post engine, the store and the auth layer.

Every error carries a stable ``code`` and the HTTP status the API reports it
with. The handlers in ``main.py`` turn them into ``{"error", "detail"}`` bodies.
"""
from typing import Any, Dict, Optional

from fastapi import status


class PiazzaError(Exception):
    """Base class for all errors with a stable, client-visible signal."""

    code = "PiazzaError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Unexpected error"

    def __init__(self, detail: Optional[str] = None, **extra: Any):
        self.detail = detail or self.default_detail
        self.extra: Dict[str, Any] = extra
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.code, "detail": self.detail}
        body.update(self.extra)
        return body


class ValidationError(PiazzaError):
    """Missing or malformed required input."""

    code = "ValidationError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class Unauthorized(PiazzaError):
    code = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class SelfReactionForbidden(PiazzaError):
    """The post owner tried to like or dislike their own post."""

    code = "SelfReactionForbidden"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Post owner cannot react to their own post"


class NotFound(PiazzaError):
    code = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class PostExpired(PiazzaError):
    """An engagement action was attempted on a post that is no longer Live."""

    code = "PostExpired"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Post is expired"


class Conflict(PiazzaError):
    code = "Conflict"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class StoreFailure(PiazzaError):
    """The underlying database failed. Not retried here."""

    code = "StoreFailure"
    default_detail = "Server error"

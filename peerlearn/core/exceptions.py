# peerlearn/core/exceptions.py
"""Custom exceptions for the PeerLearn application."""
from typing import Any, Optional


class PeerLearnException(Exception):
    """Base exception for PeerLearn domain errors."""
    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: Optional[str] = None, detail: Optional[Any] = None):
        self.message = message or self.code
        self.detail = detail
        super().__init__(self.message)


class Unauthorized(PeerLearnException):
    """Missing or invalid credentials."""
    status_code = 401
    code = "unauthorized"


class Forbidden(PeerLearnException):
    """Authenticated caller is not entitled to act on the resource."""
    status_code = 403
    code = "forbidden"


class NotFound(PeerLearnException):
    """Referenced entity does not resolve."""
    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, id: Any = None):
        message = f"{resource} not found"
        super().__init__(message, detail={"resource": resource, "id": str(id) if id is not None else None})


class InvalidArgument(PeerLearnException):
    status_code = 400
    code = "invalid_argument"


class Conflict(PeerLearnException):
    status_code = 409
    code = "conflict"


class InvalidTransition(Conflict):
    """Status change out of a terminal state."""
    code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change status from {current} to {requested}",
            detail={"current": current, "requested": requested}
        )

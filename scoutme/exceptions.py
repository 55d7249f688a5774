"""
Domain Exceptions
=================

Errors raised by services and dependencies. Each carries the HTTP status and a
machine-readable code; the handlers in ``main.py`` turn them into responses.
"""

from typing import Optional


class ScoutMeError(Exception):
    """Base class for domain errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class NotFoundError(ScoutMeError):
    status_code = 404
    code = "not_found"


class UserNotRegisteredError(ScoutMeError):
    """The verified caller has no row in the users table."""

    status_code = 400
    code = "user_not_found"

    def __init__(self, uid: str) -> None:
        super().__init__("user not found!")
        self.uid = uid


class InvalidInputError(ScoutMeError):
    status_code = 400
    code = "invalid_input"


class ConflictError(ScoutMeError):
    status_code = 409
    code = "conflict"


class UpstreamError(ScoutMeError):
    """The database, secrets store or identity provider is unreachable."""

    status_code = 503
    code = "upstream_unavailable"

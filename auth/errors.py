"""
Error taxonomy for the auth API.

Every error knows its HTTP status and renders itself as the JSON body the
clients expect: ``{"success": false, <message_key>: <message>, ...details}``.
The message key differs per endpoint (``message`` for signup, ``error`` for
login, ``response`` for the session check) to stay wire-compatible.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class AuthServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_key: str = "error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, self.message_key: self.message}
        body.update(self.details)
        return body


# ── 400 ────────────────────────────────────────────────────────────────


class ValidationError(AuthServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message_key = "message"
    default_message = "Please fill in all fields"


class ConflictError(AuthServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message_key = "message"

    def __init__(self, field: str) -> None:
        label = "username" if field == "userName" else field
        super().__init__(f"User with this {label} already exists")
        self.field = field


class CreateUserError(AuthServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message_key = "message"
    default_message = "Could not create user"


# ── 401 ────────────────────────────────────────────────────────────────


class AuthError(AuthServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class MissingTokenError(AuthError):
    default_message = "Unauthorized - Access Token is missing"


class NotLoggedInError(AuthError):
    message_key = "response"
    default_message = "Please log in"


class InvalidPasswordError(AuthError):
    default_message = "Invalid password"


class SessionCheckError(AuthError):
    """Unexpected failure inside an already-authenticated handler."""

    message_key = "response"


# ── 404 / 500 ──────────────────────────────────────────────────────────


class NotFoundError(AuthServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class InternalError(AuthServiceError):
    pass


class TokenLookupError(InternalError):
    message_key = "response"

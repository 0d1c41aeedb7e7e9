"""
Auth service — signup, login and access-token authentication.

Pure application logic over a ``UserRepository``; raises the errors from
``auth.errors`` and leaves HTTP rendering to the API layer.
"""

from __future__ import annotations

import logging

from auth.errors import (
    ConflictError,
    CreateUserError,
    InternalError,
    InvalidPasswordError,
    MissingTokenError,
    NotFoundError,
    NotLoggedInError,
    TokenLookupError,
    ValidationError,
)
from auth.password import MAX_PASSWORD_BYTES, hash_password, verify_password
from auth.tokens import parse_authorization_header
from database.models import User
from database.repository import DuplicateUserError, UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repository: UserRepository, *, expose_error_details: bool = False) -> None:
        self._repository = repository
        self._expose_error_details = expose_error_details

    async def signup(self, name: str | None, user_name: str | None, password: str | None) -> User:
        """Create a user.  Raises ``ValidationError``, ``ConflictError`` or ``CreateUserError``."""
        if not name or not user_name or not password:
            raise ValidationError()
        try:
            password_bytes = password.encode()
        except UnicodeEncodeError as exc:
            raise ValidationError("Password must be valid UTF-8 text") from exc
        if len(password_bytes) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        try:
            user = await self._repository.create_user(
                name=name,
                user_name=user_name,
                password_hash=hash_password(password),
            )
        except DuplicateUserError as exc:
            logger.info("Signup rejected, %s already taken: %s", exc.field, user_name)
            raise ConflictError(exc.field) from exc
        except Exception as exc:
            logger.exception("Could not create user %s", user_name)
            raise CreateUserError(errors=self._describe(exc)) from exc

        logger.info("Registered user %s (%s)", user_name, user.id)
        return user

    async def login(self, user_name: str | None, password: str | None) -> User:
        """Check credentials and return the user; the access token is not rotated."""
        if not user_name or not password:
            raise ValidationError()

        try:
            user = await self._repository.find_user(user_name=user_name)
            matched = user is not None and verify_password(password, user.password_hash)
        except Exception as exc:
            logger.exception("Login error for %s", user_name)
            raise InternalError(response=str(exc)) from exc

        if user is None:
            raise NotFoundError()
        if not matched:
            logger.warning("Invalid password for %s", user_name)
            raise InvalidPasswordError()

        logger.info("Login: %s (%s)", user_name, user.id)
        return user

    async def authenticate(self, authorization: str | None) -> User:
        """Resolve the user owning the token in an ``Authorization`` header value."""
        token = parse_authorization_header(authorization)
        if token is None:
            raise MissingTokenError()

        try:
            user = await self._repository.find_user(access_token=token)
        except Exception as exc:
            logger.exception("Access token lookup failed")
            raise TokenLookupError(str(exc)) from exc

        if user is None:
            raise NotLoggedInError()
        return user

    def _describe(self, exc: Exception) -> str:
        return str(exc) if self._expose_error_details else type(exc).__name__

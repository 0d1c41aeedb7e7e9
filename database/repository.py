"""
User persistence — the only surface the auth service talks to.

``UserRepository`` is the interface; ``SqlUserRepository`` implements it on
top of an async SQLAlchemy session.  Uniqueness of ``name`` / ``userName``
is enforced by the table's unique constraints, so ``create_user`` is the
single place a duplicate is detected.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User

logger = logging.getLogger(__name__)

_LOOKUP_FIELDS = ("id", "name", "user_name", "access_token")


class DuplicateUserError(Exception):
    """Raised by ``create_user`` when a unique field already exists."""

    def __init__(self, field: str) -> None:
        super().__init__(f"duplicate {field}")
        self.field = field


class UserRepository(Protocol):
    async def find_user(self, **criteria: Any) -> Optional[User]:
        """Return the first user matching every ``field=value`` pair."""
        ...

    async def create_user(self, name: str, user_name: str, password_hash: str) -> User:
        """Persist a new user; ``id`` and ``access_token`` are assigned by the store."""
        ...


def _check_criteria(criteria: dict) -> None:
    if not criteria:
        raise ValueError("find_user needs at least one criterion")
    unknown = set(criteria) - set(_LOOKUP_FIELDS)
    if unknown:
        raise ValueError(f"Unknown user fields: {sorted(unknown)}")


class SqlUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_user(self, **criteria: Any) -> Optional[User]:
        _check_criteria(criteria)
        stmt = select(User).where(
            *(getattr(User, field) == value for field, value in criteria.items())
        ).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, name: str, user_name: str, password_hash: str) -> User:
        user = User(name=name, user_name=user_name, password_hash=password_hash)
        try:
            async with self._session.begin_nested():
                self._session.add(user)
                await self._session.flush()
        except IntegrityError as exc:
            field = await self._colliding_field(name, user_name)
            if field is None:
                raise
            raise DuplicateUserError(field) from exc

        logger.debug("Inserted user %s", user.id)
        return user

    async def _colliding_field(self, name: str, user_name: str) -> Optional[str]:
        # Only consulted after the constraint fired, to name the field.
        if await self.find_user(user_name=user_name) is not None:
            return "userName"
        if await self.find_user(name=name) is not None:
            return "name"
        return None

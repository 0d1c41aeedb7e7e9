"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from auth.service import AuthService
from config.settings import config
from database.models import User
from database.repository import SqlUserRepository, UserRepository
from database.session import get_db_session


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
) -> UserRepository:
    """One repository per request, bound to the request's DB session."""
    return SqlUserRepository(session)


def get_auth_service(
    repository: UserRepository = Depends(get_user_repository),
) -> AuthService:
    return AuthService(repository, expose_error_details=config.debug)


async def authenticate_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the user owning the access token in the Authorization header.
    The resolved user is handed to the route as a parameter.
    """
    return await service.authenticate(authorization)

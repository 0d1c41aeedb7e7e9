"""
REST API routes.

Routes are declared once in ``ROUTES``; the same table registers them on
the router and feeds the ``GET /`` endpoint listing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import authenticate_user, get_auth_service
from auth.errors import SessionCheckError
from auth.service import AuthService
from database.models import User

logger = logging.getLogger(__name__)


# ── Request schemas ────────────────────────────────────────────────────


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    user_name: Optional[str] = Field(None, alias="userName")
    password: Optional[str] = None


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_name: Optional[str] = Field(None, alias="userName")
    password: Optional[str] = None


# ── Endpoints ──────────────────────────────────────────────────────────


async def list_endpoints() -> Dict[str, Any]:
    """API documentation: every registered route."""
    return {"endpoints": describe_routes()}


async def signup(
    req: Optional[SignupRequest] = None,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user."""
    req = req or SignupRequest()
    user = await service.signup(req.name, req.user_name, req.password)
    return {"success": True, "id": str(user.id), "accessToken": user.access_token}


async def login(
    req: Optional[LoginRequest] = None,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with userName + password."""
    req = req or LoginRequest()
    user = await service.login(req.user_name, req.password)
    return {"userId": str(user.id), "accessToken": user.access_token}


async def logged_in(user: User = Depends(authenticate_user)) -> Dict[str, Any]:
    """Only reachable with a valid access token; the except branch is a defensive fallback."""
    try:
        logger.debug("Session check passed for %s", user.id)
        return {"success": True, "response": "On secret site"}
    except Exception as exc:
        logger.exception("Error in /logged-in endpoint")
        raise SessionCheckError(str(exc)) from exc


# ── Route table ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    endpoint: Callable[..., Any]
    status_code: int = status.HTTP_200_OK
    authenticated: bool = False


ROUTES: List[Route] = [
    Route("GET", "/", list_endpoints),
    Route("POST", "/signup", signup, status_code=status.HTTP_201_CREATED),
    Route("POST", "/login", login),
    Route("GET", "/logged-in", logged_in, authenticated=True),
]


def describe_routes() -> List[Dict[str, Any]]:
    """Group ``ROUTES`` by path, one entry per path with all its methods."""
    by_path: Dict[str, Dict[str, Any]] = {}
    for route in ROUTES:
        entry = by_path.setdefault(
            route.path, {"path": route.path, "methods": [], "middlewares": []}
        )
        entry["methods"].append(route.method)
        guard = "authenticate_user" if route.authenticated else "anonymous"
        if guard not in entry["middlewares"]:
            entry["middlewares"].append(guard)
    return list(by_path.values())


def build_router() -> APIRouter:
    router = APIRouter(tags=["auth"])
    for route in ROUTES:
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            status_code=route.status_code,
        )
    return router

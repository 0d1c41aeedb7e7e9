"""
Shared fixtures: an in-memory user repository and a TestClient wired to it.
"""

import uuid
from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_user_repository
from auth.tokens import generate_access_token
from config.settings import config
from database.models import User
from database.repository import DuplicateUserError


class InMemoryUserRepository:
    """Same contract as ``SqlUserRepository``, including unique name / userName."""

    def __init__(self) -> None:
        self.users: List[User] = []
        self.lookups: List[dict] = []

    async def find_user(self, **criteria: Any) -> Optional[User]:
        self.lookups.append(criteria)
        for user in self.users:
            if all(getattr(user, field) == value for field, value in criteria.items()):
                return user
        return None

    async def create_user(self, name: str, user_name: str, password_hash: str) -> User:
        if any(u.user_name == user_name for u in self.users):
            raise DuplicateUserError("userName")
        if any(u.name == name for u in self.users):
            raise DuplicateUserError("name")
        user = User(
            id=uuid.uuid4(),
            name=name,
            user_name=user_name,
            password_hash=password_hash,
            access_token=generate_access_token(),
        )
        self.users.append(user)
        return user


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(config, "bcrypt_rounds", 4)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def make_client():
    """Build a TestClient whose repository dependency returns ``repo``."""
    from main import create_app

    def _make(repo) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_user_repository] = lambda: repo
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, repository) -> TestClient:
    return make_client(repository)


@pytest.fixture
def signed_up(client):
    """A registered user: returns (signup body, signup response json)."""
    body = {"name": "Ada Lovelace", "userName": "ada", "password": "analytical-engine"}
    resp = client.post("/signup", json=body)
    assert resp.status_code == 201
    return body, resp.json()

"""
Tests for SqlUserRepository: mocked AsyncSession, plus one run against SQLite.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from config.settings import config
from database.models import Base, User
from database.repository import DuplicateUserError, SqlUserRepository


def _result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _session(*lookup_results) -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock(side_effect=[_result(v) for v in lookup_results])
    session.flush = AsyncMock()
    return session


class TestFindUser:
    @pytest.mark.asyncio
    async def test_returns_match(self):
        user = User(name="Ada", user_name="ada", password_hash="h")
        session = _session(user)
        found = await SqlUserRepository(session).find_user(user_name="ada")
        assert found is user
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_requires_criteria(self):
        with pytest.raises(ValueError):
            await SqlUserRepository(_session()).find_user()

    @pytest.mark.asyncio
    async def test_rejects_unknown_field(self):
        with pytest.raises(ValueError, match="password_hash"):
            await SqlUserRepository(_session()).find_user(password_hash="h")


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_adds_and_flushes(self):
        session = _session()
        user = await SqlUserRepository(session).create_user("Ada", "ada", "hash")
        session.add.assert_called_once_with(user)
        session.flush.assert_awaited_once()
        assert user.user_name == "ada"
        assert user.password_hash == "hash"

    @pytest.mark.asyncio
    async def test_username_collision_reported_first(self):
        existing = User(name="Ada", user_name="ada", password_hash="h")
        session = _session(existing)
        session.flush.side_effect = IntegrityError("INSERT INTO users", {}, Exception("unique"))

        with pytest.raises(DuplicateUserError) as exc_info:
            await SqlUserRepository(session).create_user("Ada", "ada", "hash")
        assert exc_info.value.field == "userName"

    @pytest.mark.asyncio
    async def test_name_collision(self):
        existing = User(name="Ada", user_name="someone", password_hash="h")
        session = _session(None, existing)
        session.flush.side_effect = IntegrityError("INSERT INTO users", {}, Exception("unique"))

        with pytest.raises(DuplicateUserError) as exc_info:
            await SqlUserRepository(session).create_user("Ada", "ada", "hash")
        assert exc_info.value.field == "name"

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self):
        session = _session(None, None)
        session.flush.side_effect = IntegrityError("INSERT INTO users", {}, Exception("not null"))

        with pytest.raises(IntegrityError):
            await SqlUserRepository(session).create_user("Ada", "ada", "hash")


class TestSqliteConstraints:
    """Runs the real table definition so the unique columns are what rejects duplicates."""

    @pytest.mark.asyncio
    async def test_unique_columns_and_savepoint_recovery(self):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(engine, expire_on_commit=False)

        try:
            async with factory() as session:
                repo = SqlUserRepository(session)
                ada = await repo.create_user("Ada", "ada", "hash")
                assert ada.id is not None
                assert len(ada.access_token) == config.access_token_bytes * 2

                with pytest.raises(DuplicateUserError) as by_user_name:
                    await repo.create_user("Someone Else", "ada", "hash")
                assert by_user_name.value.field == "userName"

                with pytest.raises(DuplicateUserError) as by_name:
                    await repo.create_user("Ada", "ada2", "hash")
                assert by_name.value.field == "name"

                grace = await repo.create_user("Grace", "grace", "hash")
                await session.commit()

            async with factory() as session:
                repo = SqlUserRepository(session)
                assert (await repo.find_user(user_name="grace")).id == grace.id
                assert (await repo.find_user(access_token=ada.access_token)).user_name == "ada"
                assert await repo.find_user(name="Someone Else") is None
        finally:
            await engine.dispose()

"""Tests for AuthService register, authenticate and terminate_session."""

import asyncio
from dataclasses import fields
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import Response
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from acquisitions.domain.services import (
    AuthFailure,
    AuthFailureKind,
    AuthService,
    AuthSuccess,
    StoreFailure,
)
from acquisitions.infrastructure.auth import HashingFailure, verify_password
from acquisitions.infrastructure.persistence.database import Base
from acquisitions.infrastructure.persistence.models import UserModel
from acquisitions.infrastructure.persistence.repositories import UserRepository


@pytest.fixture
def auth_service(db_session, cookie_manager) -> AuthService:
    return AuthService(db_session, cookie_manager)


@pytest.mark.asyncio
async def test_register_then_authenticate(auth_service):
    registered = await auth_service.register("Alice", "alice@x.com", "secret1")
    assert isinstance(registered, AuthSuccess)

    result = await auth_service.authenticate("alice@x.com", "secret1")

    assert isinstance(result, AuthSuccess)
    assert result.user.id == registered.user.id
    assert "password" not in {f.name for f in fields(result.user)}


@pytest.mark.asyncio
async def test_register_normalises_email_and_hashes_password(auth_service, db_session):
    result = await auth_service.register("Alice", "  ALICE@X.com ", "secret1")

    assert result.ok is True
    assert result.user.email == "alice@x.com"
    assert result.user.role == "user"

    stored = await UserRepository(db_session).get_by_email("alice@x.com")
    assert stored.password != "secret1"
    assert verify_password("secret1", stored.password) is True


@pytest.mark.asyncio
async def test_register_admin_role(auth_service):
    result = await auth_service.register("Root", "root@x.com", "secret1", role="admin")

    assert result.user.role == "admin"


@pytest.mark.asyncio
async def test_register_duplicate_email(auth_service):
    await auth_service.register("Alice", "alice@x.com", "secret1")

    result = await auth_service.register("Other Alice", "Alice@X.com", "different1")

    assert isinstance(result, AuthFailure)
    assert result.kind is AuthFailureKind.DUPLICATE_EMAIL
    assert result.message == "User with this email already exists"


@pytest.mark.asyncio
async def test_unique_constraint_decides_when_precheck_misses(auth_service):
    await auth_service.register("Alice", "alice@x.com", "secret1")

    with patch.object(auth_service.user_repo, "email_exists", AsyncMock(return_value=False)):
        result = await auth_service.register("Alice Again", "alice@x.com", "secret1")

    assert isinstance(result, AuthFailure)
    assert result.kind is AuthFailureKind.DUPLICATE_EMAIL

    # The session is usable again after the rollback.
    assert await auth_service.user_repo.email_exists("alice@x.com") is True


@pytest.mark.asyncio
async def test_concurrent_registrations_yield_one_success(tmp_path, cookie_manager):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'concurrent.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def attempt(index: int):
        async with session_factory() as session:
            service = AuthService(session, cookie_manager)
            return await service.register(f"User {index}", " Racer@X.com ", "secret1")

    try:
        results = await asyncio.gather(*(attempt(i) for i in range(5)))
    finally:
        await engine.dispose()

    successes = [r for r in results if isinstance(r, AuthSuccess)]
    failures = [r for r in results if isinstance(r, AuthFailure)]
    assert len(successes) == 1
    assert len(failures) == 4
    assert all(f.kind is AuthFailureKind.DUPLICATE_EMAIL for f in failures)


@pytest.mark.asyncio
async def test_other_store_errors_raise_store_failure(auth_service):
    error = OperationalError("INSERT", {}, Exception("disk I/O error"))

    with patch.object(auth_service.user_repo, "create", AsyncMock(side_effect=error)):
        with pytest.raises(StoreFailure):
            await auth_service.register("Alice", "alice@x.com", "secret1")


@pytest.mark.asyncio
async def test_non_email_integrity_error_is_store_failure(auth_service):
    error = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: users.name"))

    with patch.object(auth_service.user_repo, "create", AsyncMock(side_effect=error)):
        with pytest.raises(StoreFailure):
            await auth_service.register("Alice", "alice@x.com", "secret1")


@pytest.mark.asyncio
async def test_hashing_failure_propagates(auth_service, db_session):
    with patch(
        "acquisitions.domain.services.auth_service.hash_password",
        side_effect=HashingFailure("Hashing error"),
    ):
        with pytest.raises(HashingFailure):
            await auth_service.register("Alice", "alice@x.com", "secret1")

    assert await UserRepository(db_session).email_exists("alice@x.com") is False


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_fail_identically(auth_service):
    await auth_service.register("Alice", "alice@x.com", "secret1")

    wrong_password = await auth_service.authenticate("alice@x.com", "wrong-password")
    unknown_email = await auth_service.authenticate("nobody@x.com", "secret1")

    assert wrong_password == unknown_email
    assert wrong_password.kind is AuthFailureKind.INVALID_CREDENTIALS
    assert wrong_password.message == "Invalid email or password"


@pytest.mark.asyncio
async def test_authenticate_normalises_email(auth_service):
    await auth_service.register("Alice", "alice@x.com", "secret1")

    result = await auth_service.authenticate("  ALICE@x.COM", "secret1")

    assert isinstance(result, AuthSuccess)


@pytest.mark.asyncio
async def test_unreadable_stored_hash_is_invalid_credentials(auth_service, db_session):
    db_session.add(UserModel(name="Broken", email="broken@x.com", password="plaintext"))
    await db_session.commit()

    result = await auth_service.authenticate("broken@x.com", "plaintext")

    assert isinstance(result, AuthFailure)
    assert result.kind is AuthFailureKind.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_lookup_error_raises_store_failure(auth_service):
    error = OperationalError("SELECT", {}, Exception("database is locked"))

    with patch.object(auth_service.user_repo, "get_by_email", AsyncMock(side_effect=error)):
        with pytest.raises(StoreFailure):
            await auth_service.authenticate("alice@x.com", "secret1")


@pytest.mark.asyncio
async def test_terminate_session_clears_cookie(auth_service):
    response = Response()

    auth_service.terminate_session(response)

    assert "max-age=0" in response.headers["set-cookie"].lower()

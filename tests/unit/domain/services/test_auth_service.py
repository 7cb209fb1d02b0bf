"""Unit tests for AuthService."""

import asyncio
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from notekeep.core.exceptions import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenNotRecognizedError,
)
from notekeep.domain.services import AuthService
from notekeep.infrastructure.auth import REFRESH_TOKEN_TTL, hash_password
from notekeep.infrastructure.persistence.models import RefreshTokenModel, UserModel


@pytest.fixture
def auth_service(db_session, jwt_service):
    return AuthService(db_session, jwt_service)


async def count_refresh_tokens(db_session) -> int:
    result = await db_session.execute(select(func.count()).select_from(RefreshTokenModel))
    return result.scalar_one()


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_stores_hashed_password(self, auth_service, db_session):
        user = await auth_service.register("a@x.com", "pw1")

        stored = await db_session.get(UserModel, user.id)
        assert user.email == "a@x.com"
        assert stored.password_hash.startswith("$argon2id$")
        assert stored.password_hash != "pw1"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_service):
        await auth_service.register("a@x.com", "pw1")

        with pytest.raises(DuplicateIdentityError):
            await auth_service.register("a@x.com", "pw2")

    @pytest.mark.asyncio
    async def test_register_after_duplicate_still_works(self, auth_service):
        """A rejected registration leaves the session usable."""
        await auth_service.register("a@x.com", "pw1")
        with pytest.raises(DuplicateIdentityError):
            await auth_service.register("a@x.com", "pw2")

        user = await auth_service.register("b@x.com", "pw1")

        assert user.email == "b@x.com"


class TestLogin:
    @pytest.mark.asyncio
    async def test_register_then_login(self, auth_service, jwt_service):
        user = await auth_service.register("a@x.com", "pw1")

        pair = await auth_service.login("a@x.com", "pw1")

        assert jwt_service.parse_access_token(pair.access_token).subject == user.id
        assert jwt_service.parse_refresh_token(pair.refresh_token).subject == user.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service):
        await auth_service.register("a@x.com", "pw1")

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("a@x.com", "wrong")

    @pytest.mark.asyncio
    async def test_login_unknown_email_looks_like_wrong_password(self, auth_service):
        await auth_service.register("a@x.com", "pw1")

        with pytest.raises(InvalidCredentialsError) as unknown:
            await auth_service.login("nobody@x.com", "pw1")
        with pytest.raises(InvalidCredentialsError) as wrong:
            await auth_service.login("a@x.com", "wrong")

        assert unknown.value.message == wrong.value.message
        assert unknown.value.status_code == wrong.value.status_code

    @pytest.mark.asyncio
    async def test_login_stores_only_digest(self, auth_service, db_session):
        await auth_service.register("a@x.com", "pw1")

        pair = await auth_service.login("a@x.com", "pw1")

        result = await db_session.execute(select(RefreshTokenModel.token_hash))
        hashes = result.scalars().all()
        assert len(hashes) == 1
        assert pair.refresh_token not in hashes

    @pytest.mark.asyncio
    async def test_login_revokes_previous_refresh_tokens(self, auth_service, db_session):
        await auth_service.register("a@x.com", "pw1")
        first = await auth_service.login("a@x.com", "pw1")

        await auth_service.login("a@x.com", "pw1")

        assert await count_refresh_tokens(db_session) == 1
        with pytest.raises(TokenNotRecognizedError):
            await auth_service.refresh(first.refresh_token)


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_rotates_token(self, auth_service, db_session):
        await auth_service.register("a@x.com", "pw1")
        first = await auth_service.login("a@x.com", "pw1")

        second = await auth_service.refresh(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        assert await count_refresh_tokens(db_session) == 1

    @pytest.mark.asyncio
    async def test_refresh_token_is_single_use(self, auth_service):
        await auth_service.register("a@x.com", "pw1")
        first = await auth_service.login("a@x.com", "pw1")
        await auth_service.refresh(first.refresh_token)

        with pytest.raises(TokenNotRecognizedError):
            await auth_service.refresh(first.refresh_token)

    @pytest.mark.asyncio
    async def test_rotated_token_works(self, auth_service):
        await auth_service.register("a@x.com", "pw1")
        first = await auth_service.login("a@x.com", "pw1")
        second = await auth_service.refresh(first.refresh_token)

        third = await auth_service.refresh(second.refresh_token)

        assert third.refresh_token not in (first.refresh_token, second.refresh_token)

    @pytest.mark.asyncio
    async def test_refresh_with_access_token(self, auth_service):
        await auth_service.register("a@x.com", "pw1")
        pair = await auth_service.login("a@x.com", "pw1")

        with pytest.raises(InvalidTokenError):
            await auth_service.refresh(pair.access_token)

    @pytest.mark.asyncio
    async def test_refresh_with_garbage(self, auth_service):
        with pytest.raises(InvalidTokenError):
            await auth_service.refresh("invalid.token.here")

    @pytest.mark.asyncio
    async def test_refresh_after_expiry(self, auth_service, clock):
        await auth_service.register("a@x.com", "pw1")
        pair = await auth_service.login("a@x.com", "pw1")

        clock.advance(REFRESH_TOKEN_TTL + timedelta(seconds=1))

        with pytest.raises(InvalidTokenError):
            await auth_service.refresh(pair.refresh_token)

    @pytest.mark.asyncio
    async def test_refresh_never_issued(self, auth_service, jwt_service):
        """A validly signed token with no stored record is not recognized."""
        user = await auth_service.register("a@x.com", "pw1")
        forged = jwt_service.create_refresh_token(user.id)

        with pytest.raises(TokenNotRecognizedError):
            await auth_service.refresh(forged)

    @pytest.mark.asyncio
    async def test_refresh_for_deleted_user(self, auth_service, jwt_service):
        token = jwt_service.create_refresh_token("00000000-0000-0000-0000-000000000000")

        with pytest.raises(InvalidTokenError):
            await auth_service.refresh(token)


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_revokes_token(self, auth_service, db_session):
        await auth_service.register("a@x.com", "pw1")
        pair = await auth_service.login("a@x.com", "pw1")

        await auth_service.logout(pair.refresh_token)

        assert await count_refresh_tokens(db_session) == 0
        with pytest.raises(TokenNotRecognizedError):
            await auth_service.refresh(pair.refresh_token)

    @pytest.mark.asyncio
    async def test_logout_twice_is_harmless(self, auth_service):
        await auth_service.register("a@x.com", "pw1")
        pair = await auth_service.login("a@x.com", "pw1")

        await auth_service.logout(pair.refresh_token)
        await auth_service.logout(pair.refresh_token)

    @pytest.mark.asyncio
    async def test_logout_with_invalid_token_is_ignored(self, auth_service):
        await auth_service.logout("invalid.token.here")


class InMemoryRefreshTokenRepository:
    """Token store whose consume is a single atomic dict pop.

    Each method yields to the event loop first so concurrent callers
    interleave the way separate database connections would.
    """

    def __init__(self) -> None:
        self.records: dict[tuple[str, str], object] = {}

    async def create(self, user_id, token_hash, expires_at):
        await asyncio.sleep(0)
        self.records[(user_id, token_hash)] = expires_at

    async def consume(self, user_id, token_hash, now):
        await asyncio.sleep(0)
        expires_at = self.records.get((user_id, token_hash))
        if expires_at is None or expires_at <= now:
            return False
        del self.records[(user_id, token_hash)]
        return True

    async def delete(self, user_id, token_hash):
        await asyncio.sleep(0)
        return self.records.pop((user_id, token_hash), None) is not None

    async def delete_all_for_user(self, user_id):
        await asyncio.sleep(0)
        keys = [key for key in self.records if key[0] == user_id]
        for key in keys:
            del self.records[key]
        return len(keys)


class StaticUserRepository:
    def __init__(self, user) -> None:
        self.user = user

    async def get_by_id(self, user_id):
        await asyncio.sleep(0)
        return self.user if user_id == self.user.id else None

    async def get_by_email(self, email):
        await asyncio.sleep(0)
        return self.user if email == self.user.email else None


@pytest.mark.asyncio
async def test_concurrent_refresh_with_same_token_succeeds_once(jwt_service):
    user = SimpleNamespace(id="user-1", email="a@x.com", password_hash=hash_password("pw1"))
    store = InMemoryRefreshTokenRepository()
    auth_service = AuthService(
        AsyncMock(),
        jwt_service,
        user_repo=StaticUserRepository(user),
        refresh_token_repo=store,
    )
    pair = await auth_service.login("a@x.com", "pw1")

    results = await asyncio.gather(
        *(auth_service.refresh(pair.refresh_token) for _ in range(5)),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert all(isinstance(f, TokenNotRecognizedError) for f in failures)

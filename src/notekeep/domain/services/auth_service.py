"""Service for registration, login and refresh-token rotation.

Token lifecycle:

- ``login`` revokes every outstanding refresh token of the user and issues
  a fresh access/refresh pair.
- ``refresh`` consumes the presented refresh token (one-time use) and
  issues a replacement pair in the same transaction.
- ``logout`` deletes the presented refresh token if it is still stored.

Only the SHA-256 digest of a refresh token is persisted; the plaintext is
returned to the client and forgotten.
"""

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.core.exceptions import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenNotRecognizedError,
)
from notekeep.core.logging import get_logger
from notekeep.domain.entities import User
from notekeep.infrastructure.auth.jwt_service import JWTService
from notekeep.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    hash_token,
    needs_rehash,
    verify_password,
)
from notekeep.infrastructure.auth.token_types import TokenPair
from notekeep.infrastructure.persistence.models import UserModel
from notekeep.infrastructure.persistence.repositories import (
    RefreshTokenRepository,
    UserRepository,
)

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    """Orchestrates credentials, the token codec and the token store."""

    def __init__(
        self,
        session: AsyncSession,
        jwt_service: JWTService,
        user_repo: UserRepository | None = None,
        refresh_token_repo: RefreshTokenRepository | None = None,
    ) -> None:
        """Initialize the authentication service.

        Args:
            session: SQLAlchemy async session; the service commits it.
            jwt_service: Token codec holding the signing key.
            user_repo: Repository for users. Built from ``session`` if omitted.
            refresh_token_repo: Repository for refresh tokens. Built from
                ``session`` if omitted.
        """
        self.session = session
        self.jwt_service = jwt_service
        self.user_repo = user_repo or UserRepository(session)
        self.refresh_token_repo = refresh_token_repo or RefreshTokenRepository(session)

    async def register(self, email: str, password: str) -> User:
        """Create a user with a hashed password.

        Raises:
            DuplicateIdentityError: If the email is already registered. The
                unique index decides, so concurrent registrations of the
                same email cannot both succeed.
        """
        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self.user_repo.create(user)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Registration failed: email already registered", email=email)
            raise DuplicateIdentityError() from None

        logger.info("User registered", user_id=user.id)
        return User(id=user.id, email=user.email, created_at=_as_utc(user.created_at))

    async def login(self, email: str, password: str) -> TokenPair:
        """Verify credentials and issue a new token pair.

        Raises:
            InvalidCredentialsError: For an unknown email or a wrong
                password; both cases look identical to the caller.
        """
        user = await self.user_repo.get_by_email(email)

        if user is None:
            # Same Argon2 cost as a real check, so timing does not reveal the miss
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed: user not found", email=email)
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("Login failed: invalid password", user_id=user.id)
            raise InvalidCredentialsError()

        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            logger.info("Password hash upgraded", user_id=user.id)

        revoked = await self.refresh_token_repo.delete_all_for_user(user.id)
        pair = await self._issue_pair(user.id)
        await self.session.commit()

        logger.info("User logged in", user_id=user.id, revoked_refresh_tokens=revoked)
        return pair

    async def refresh(self, raw_refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair.

        Raises:
            InvalidTokenError: If the token does not parse, is not a refresh
                token, has expired, or its user no longer exists.
            TokenNotRecognizedError: If no live stored record matches the
                token (never issued, already used, or revoked).
        """
        claims = self.jwt_service.parse_refresh_token(raw_refresh_token)
        if claims is None:
            logger.info("Refresh failed: invalid token")
            raise InvalidTokenError()

        subject = self.jwt_service.subject_of(claims)
        user = await self.user_repo.get_by_id(subject)
        if user is None:
            logger.info("Refresh failed: user not found", user_id=subject)
            raise InvalidTokenError()

        # Rollback expires loaded instances, so only the plain id is used below
        user_id = user.id
        consumed = await self.refresh_token_repo.consume(
            user_id, hash_token(raw_refresh_token), self.jwt_service.now()
        )
        if not consumed:
            await self.session.rollback()
            logger.warning("Refresh failed: token not recognized", user_id=user_id)
            raise TokenNotRecognizedError()

        pair = await self._issue_pair(user_id)
        await self.session.commit()

        logger.info("Refresh token rotated", user_id=user_id)
        return pair

    async def logout(self, raw_refresh_token: str) -> None:
        """Revoke a refresh token. Unknown or invalid tokens are ignored."""
        claims = self.jwt_service.parse_refresh_token(raw_refresh_token)
        if claims is None:
            logger.debug("Logout with invalid refresh token ignored")
            return

        subject = self.jwt_service.subject_of(claims)
        deleted = await self.refresh_token_repo.delete(subject, hash_token(raw_refresh_token))
        await self.session.commit()
        logger.info("User logged out", user_id=subject, revoked=deleted)

    async def _issue_pair(self, user_id: str) -> TokenPair:
        """Mint an access/refresh pair and store the refresh digest."""
        access_token = self.jwt_service.create_access_token(user_id)
        refresh_token = self.jwt_service.create_refresh_token(user_id)

        await self.refresh_token_repo.create(
            user_id=user_id,
            token_hash=hash_token(refresh_token),
            expires_at=self.jwt_service.refresh_expiry(),
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

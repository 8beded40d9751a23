"""Trainer accounts: registration, password login and token rotation."""
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.core.redis import TokenBlacklist
from src.core.security import create_token_pair, decode_token, hash_password, verify_password
from src.domains.users.models import User

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(Exception):
    """Another account already uses this email."""

    def __init__(self, email: str):
        super().__init__(f"Email {email} is already registered")
        self.email = email


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _access_ttl_seconds() -> int:
    return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def _refresh_ttl_seconds() -> int:
    return settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60


class AuthService:
    """Account lookups and the token lifecycle."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def register(self, email: str, password: str, name: str) -> User:
        """Create an active trainer account.

        Raises:
            EmailAlreadyRegisteredError: the email is taken.
        """
        if await self.get_user_by_email(email) is not None:
            raise EmailAlreadyRegisteredError(normalize_email(email))

        user = User(
            email=normalize_email(email),
            password_hash=hash_password(password),
            name=name.strip(),
            is_active=True,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info("Registered trainer %s", user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User | None:
        """The account matching the credentials, active or not; None on mismatch."""
        user = await self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def issue_tokens(self, user: User) -> tuple[str, str]:
        """(access_token, refresh_token) for the user."""
        return create_token_pair(str(user.id))

    async def rotate_refresh_token(self, refresh_token: str) -> tuple[str, str] | None:
        """Swap a refresh token for a fresh pair.

        A refresh token works once: it is revoked as soon as it is exchanged.
        Returns None for revoked, expired or malformed tokens and for
        accounts that no longer exist or were disabled.
        """
        if await TokenBlacklist.is_blacklisted(refresh_token):
            return None

        token_data = decode_token(refresh_token, is_refresh=True)
        if token_data is None:
            return None

        try:
            user = await self.get_user_by_id(uuid.UUID(token_data.user_id))
        except ValueError:
            return None
        if user is None or not user.is_active:
            return None

        await TokenBlacklist.add_to_blacklist(refresh_token, _refresh_ttl_seconds())
        return self.issue_tokens(user)

    async def revoke(self, access_token: str, refresh_token: str | None = None) -> None:
        """Log out: neither token is accepted again."""
        await TokenBlacklist.add_to_blacklist(access_token, _access_ttl_seconds())
        if refresh_token:
            await TokenBlacklist.add_to_blacklist(refresh_token, _refresh_ttl_seconds())

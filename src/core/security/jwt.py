"""Password hashing (bcrypt) and JWT access/refresh tokens (PyJWT)."""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from src.config.settings import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass
class TokenData:
    """Decoded token payload."""

    user_id: str
    token_type: str
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a password with a random bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


def _create_token(
    user_id: str,
    token_type: str,
    secret: str,
    expires_delta: timedelta,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a short-lived access token."""
    return _create_token(
        user_id,
        ACCESS_TOKEN_TYPE,
        settings.JWT_SECRET_KEY,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a long-lived refresh token signed with the refresh secret."""
    return _create_token(
        user_id,
        REFRESH_TOKEN_TYPE,
        settings.JWT_REFRESH_SECRET_KEY,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def create_token_pair(user_id: str) -> tuple[str, str]:
    """Create (access_token, refresh_token) for a user."""
    return create_access_token(user_id), create_refresh_token(user_id)


def decode_token(token: str, is_refresh: bool = False) -> TokenData | None:
    """Decode and validate a token.

    Returns None when the signature, expiry or token type does not match.
    """
    secret = settings.JWT_REFRESH_SECRET_KEY if is_refresh else settings.JWT_SECRET_KEY
    expected_type = REFRESH_TOKEN_TYPE if is_refresh else ACCESS_TOKEN_TYPE

    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None

    if payload.get("type") != expected_type or not payload.get("sub"):
        return None

    return TokenData(
        user_id=payload["sub"],
        token_type=payload["type"],
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )

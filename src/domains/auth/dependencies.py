"""Authentication dependencies.

Resolves the bearer token into the signed-in trainer. Route handlers receive
the user explicitly and pass ``current_user.id`` down to services.
"""
import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.core.observability import set_user_context
from src.core.redis import TokenBlacklist
from src.core.security import decode_token
from src.domains.auth.service import AuthService
from src.domains.users.models import User

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Return the authenticated user or raise 401."""
    if credentials is None:
        raise _unauthorized("Authentication required")

    token = credentials.credentials
    token_data = decode_token(token, is_refresh=False)
    if token_data is None:
        raise _unauthorized("Invalid or expired token")

    if await TokenBlacklist.is_blacklisted(token):
        raise _unauthorized("Token has been revoked")

    try:
        user_id = uuid.UUID(token_data.user_id)
    except ValueError:
        raise _unauthorized("Invalid token subject")

    user = await AuthService(db).get_user_by_id(user_id)
    if user is None:
        raise _unauthorized("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    set_user_context(str(user.id), email=user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]

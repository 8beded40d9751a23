"""Security helpers: password hashing and JWT tokens."""
from src.core.security.jwt import (
    TokenData,
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    "TokenData",
    "create_access_token",
    "create_refresh_token",
    "create_token_pair",
    "decode_token",
    "hash_password",
    "verify_password",
]

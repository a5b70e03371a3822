"""Authentication infrastructure components.

This module provides password hashing, JWT token signing, and
other authentication-related utilities.
"""

from storefront.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    generate_random_password,
    hash_password,
    hash_password_async,
    needs_rehash,
    verify_password,
    verify_password_async,
)
from storefront.infrastructure.auth.token_signer import (
    InvalidOrExpiredTokenError,
    TokenError,
    TokenSigner,
    token_signer,
)
from storefront.infrastructure.auth.token_types import TokenClaims, TokenPurpose

__all__ = [
    "DUMMY_PASSWORD_HASH",
    "InvalidOrExpiredTokenError",
    "TokenClaims",
    "TokenError",
    "TokenPurpose",
    "TokenSigner",
    "generate_random_password",
    "hash_password",
    "hash_password_async",
    "needs_rehash",
    "token_signer",
    "verify_password",
    "verify_password_async",
]

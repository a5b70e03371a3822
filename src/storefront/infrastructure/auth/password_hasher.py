"""Password hashing utility using Argon2.

Provides secure hashing and verification using the Argon2id algorithm,
which is the winner of the Password Hashing Competition and recommended by OWASP.
The same hasher protects stored passwords and stored refresh tokens.
"""

import asyncio
import secrets

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

# Argon2id with library defaults
_hasher = PasswordHasher()

# Verified against when an account does not exist so that login timing
# does not reveal whether an email is registered.
DUMMY_PASSWORD_HASH = _hasher.hash("storefront-dummy-password")


def hash_password(password: str) -> str:
    """Hash a secret using Argon2id.

    Args:
        password: The plaintext secret to hash.

    Returns:
        The hashed secret string.

    Example:
        >>> hashed = hash_password("Secret123")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a secret against a hash.

    Uses constant-time comparison to prevent timing attacks. A malformed
    hash is treated as a mismatch.

    Args:
        password: The plaintext secret to verify.
        hashed: The hash to verify against.

    Returns:
        True if the secret matches, False otherwise.
    """
    try:
        return _hasher.verify(hashed, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a hash was produced with outdated parameters."""
    return _hasher.check_needs_rehash(hashed)


async def hash_password_async(password: str) -> str:
    """Hash a secret in a worker thread so the event loop is not blocked."""
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(password: str, hashed: str) -> bool:
    """Verify a secret in a worker thread so the event loop is not blocked."""
    return await asyncio.to_thread(verify_password, password, hashed)


def generate_random_password(length: int = 32) -> str:
    """Generate a random password of at least ``length`` characters."""
    return secrets.token_urlsafe(length)

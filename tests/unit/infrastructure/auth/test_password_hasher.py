"""Unit tests for password hashing utilities."""

import pytest

from storefront.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    generate_random_password,
    hash_password,
    hash_password_async,
    needs_rehash,
    verify_password,
    verify_password_async,
)


class TestHashPassword:
    """Tests for hash_password function."""

    def test_hash_password_returns_argon2_hash(self):
        hashed = hash_password("SecureP@ss123!")

        assert hashed.startswith("$argon2id$")

    def test_hash_password_different_for_same_input(self):
        """Hashing the same secret twice produces different hashes (random salt)."""
        assert hash_password("SecureP@ss123!") != hash_password("SecureP@ss123!")

    def test_hash_accepts_long_token_strings(self):
        """Refresh tokens are hashed with the same hasher."""
        token = "eyJhbGciOiJIUzI1NiJ9." + "a" * 400 + ".sig"
        hashed = hash_password(token)

        assert verify_password(token, hashed) is True


class TestVerifyPassword:
    """Tests for verify_password function."""

    def test_verify_password_correct(self):
        hashed = hash_password("SecureP@ss123!")

        assert verify_password("SecureP@ss123!", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("SecureP@ss123!")

        assert verify_password("WrongPassword", hashed) is False

    def test_verify_password_case_sensitive(self):
        hashed = hash_password("SecureP@ss123!")

        assert verify_password("securep@ss123!", hashed) is False

    @pytest.mark.parametrize("digest", ["", "not-a-hash", "$argon2id$v=19$broken"])
    def test_verify_malformed_digest_returns_false(self, digest):
        """A malformed digest is a mismatch, never an exception."""
        assert verify_password("anything", digest) is False

    def test_dummy_hash_never_matches_guesses(self):
        assert DUMMY_PASSWORD_HASH.startswith("$argon2id$")
        assert verify_password("password123", DUMMY_PASSWORD_HASH) is False


class TestAsyncWrappers:
    """Tests for the thread-offloaded variants."""

    @pytest.mark.asyncio
    async def test_async_round_trip(self):
        hashed = await hash_password_async("SecureP@ss123!")

        assert await verify_password_async("SecureP@ss123!", hashed) is True
        assert await verify_password_async("other", hashed) is False


class TestNeedsRehash:
    def test_fresh_hash_does_not_need_rehash(self):
        assert needs_rehash(hash_password("SecureP@ss123!")) is False


class TestGenerateRandomPassword:
    """Tests for generate_random_password function."""

    def test_generate_random_password_length(self):
        assert len(generate_random_password()) >= 32

    def test_generate_random_password_uniqueness(self):
        passwords = [generate_random_password() for _ in range(10)]

        assert len(set(passwords)) == 10

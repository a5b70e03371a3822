"""Encryption of sensitive values in transit."""

from storefront.infrastructure.security.token_cipher import DecryptionError, TokenCipher

__all__ = ["DecryptionError", "TokenCipher"]

"""Symmetric encryption of refresh tokens for cookie transport.

Tokens are encrypted with AES-256-GCM. Each call draws a fresh random nonce,
which travels with the ciphertext as ``ivHex:cipherHex`` so decryption needs
no out-of-band state. GCM authenticates the ciphertext, so tampering or a
wrong key fails decryption instead of producing garbage.
"""

import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from storefront.core.config import get_settings


class DecryptionError(Exception):
    """Raised when a ciphertext cannot be decrypted."""

    pass


class TokenCipher:
    """Encrypts and decrypts token strings."""

    SEPARATOR = ":"
    NONCE_SIZE = 12

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the cipher.

        The secret key is hashed using SHA-256 to obtain a 32-byte AES key.

        Args:
            secret_key: Key material. Defaults to the configured encryption key.
        """
        key_material = secret_key or get_settings().token_encryption_key
        self._aesgcm = AESGCM(hashlib.sha256(key_material.encode("utf-8")).digest())

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string and return ``ivHex:cipherHex``."""
        nonce = os.urandom(self.NONCE_SIZE)
        ciphertext = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None)
        return f"{nonce.hex()}{self.SEPARATOR}{ciphertext.hex()}"

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt an ``ivHex:cipherHex`` string.

        Raises:
            DecryptionError: If the input is malformed, truncated, tampered
                with, or was encrypted under a different key.
        """
        if not ciphertext or ciphertext.count(self.SEPARATOR) != 1:
            raise DecryptionError("Malformed ciphertext")

        iv_hex, cipher_hex = ciphertext.split(self.SEPARATOR)
        try:
            nonce = bytes.fromhex(iv_hex)
            data = bytes.fromhex(cipher_hex)
        except ValueError as e:
            raise DecryptionError("Malformed ciphertext") from e

        if len(nonce) != self.NONCE_SIZE or not data:
            raise DecryptionError("Malformed ciphertext")

        try:
            plaintext = self._aesgcm.decrypt(nonce, data, None)
            return plaintext.decode("utf-8")
        except (InvalidTag, UnicodeDecodeError) as e:
            raise DecryptionError("Ciphertext could not be decrypted") from e

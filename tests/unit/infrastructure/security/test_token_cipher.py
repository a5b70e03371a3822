import pytest

from storefront.infrastructure.security import DecryptionError, TokenCipher


def test_round_trip():
    cipher = TokenCipher(secret_key="test-secret-key")
    plaintext = "eyJhbGciOiJIUzI1NiJ9.payload.signature"

    ciphertext = cipher.encrypt(plaintext)

    assert ciphertext != plaintext
    assert cipher.decrypt(ciphertext) == plaintext


def test_ciphertext_format():
    cipher = TokenCipher(secret_key="test-secret-key")

    iv_hex, cipher_hex = cipher.encrypt("hello").split(":")

    assert len(bytes.fromhex(iv_hex)) == 12
    assert len(bytes.fromhex(cipher_hex)) > 0


def test_fresh_iv_per_call():
    cipher = TokenCipher(secret_key="test-secret-key")

    first = cipher.encrypt("same plaintext")
    second = cipher.encrypt("same plaintext")

    assert first != second
    assert first.split(":")[0] != second.split(":")[0]
    assert cipher.decrypt(first) == cipher.decrypt(second) == "same plaintext"


def test_wrong_key_fails_closed():
    ciphertext = TokenCipher(secret_key="key-1").encrypt("Sensitive data")

    with pytest.raises(DecryptionError):
        TokenCipher(secret_key="key-2").decrypt(ciphertext)


def test_tampered_ciphertext_fails():
    cipher = TokenCipher(secret_key="test-key")
    iv_hex, cipher_hex = cipher.encrypt("Sensitive data").split(":")
    flipped = format(int(cipher_hex[0], 16) ^ 1, "x") + cipher_hex[1:]

    with pytest.raises(DecryptionError):
        cipher.decrypt(f"{iv_hex}:{flipped}")


def test_truncated_ciphertext_fails():
    cipher = TokenCipher(secret_key="test-key")
    ciphertext = cipher.encrypt("Sensitive data")

    with pytest.raises(DecryptionError):
        cipher.decrypt(ciphertext[:-4])


@pytest.mark.parametrize(
    "ciphertext",
    [
        "",
        "no-separator",
        "zz:zz",
        "00:",
        ":abcd",
        "a:b:c",
        "0011:aabbccdd",
    ],
)
def test_malformed_input_fails(ciphertext):
    cipher = TokenCipher(secret_key="test-key")

    with pytest.raises(DecryptionError):
        cipher.decrypt(ciphertext)


def test_default_key_comes_from_settings(monkeypatch):
    monkeypatch.setenv("STOREFRONT_TOKEN_ENCRYPTION_KEY", "configured-key")

    ciphertext = TokenCipher().encrypt("value")

    assert TokenCipher(secret_key="configured-key").decrypt(ciphertext) == "value"

try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from syndicaster.services.token_cipher import TokenCipherService


def test_token_cipher_roundtrip() -> None:
    cipher = TokenCipherService(secret="super-secret-key")

    encrypted = cipher.encrypt("sensitive-token")

    assert encrypted != "sensitive-token"
    assert cipher.decrypt(encrypted) == "sensitive-token"


def test_token_cipher_rejects_bad_ciphertext() -> None:
    cipher = TokenCipherService(secret="another-secret")

    with pytest.raises(ValueError):
        cipher.decrypt("not-valid")


def test_token_cipher_requires_secret() -> None:
    with pytest.raises(ValueError):
        TokenCipherService(secret="")


def test_seal_record_encrypts_secret_fields_only() -> None:
    cipher = TokenCipherService(secret="record-secret")
    record = {
        "access_token": "access",
        "refresh_token": None,
        "token_type": "bearer",
        "expires_at": "2030-01-01T00:00:00Z",
    }

    sealed = cipher.seal_record(record)

    assert set(sealed) == {"access_token_encrypted", "token_type", "expires_at"}
    assert cipher.open_record(sealed) == {
        "access_token": "access",
        "token_type": "bearer",
        "expires_at": "2030-01-01T00:00:00Z",
    }
    assert record["access_token"] == "access"


def test_open_record_leaves_plaintext_records_alone() -> None:
    cipher = TokenCipherService(secret="record-secret")
    record = {"access_token": "plain", "expires_at": "2030-01-01T00:00:00Z"}

    assert cipher.open_record(record) == record

"""Symmetric encryption of the secret fields in stored token records."""

from __future__ import annotations

import base64
import hashlib
from typing import Any, Iterable

from cryptography.fernet import Fernet, InvalidToken

SECRET_TOKEN_FIELDS: tuple[str, ...] = ("access_token", "refresh_token")
ENCRYPTED_SUFFIX = "_encrypted"


class TokenCipherService:
    """Encrypt and decrypt token strings using a Fernet key derived from a secret."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        try:
            plaintext = self._fernet.decrypt(ciphertext.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError(
                "Failed to decrypt token; invalid ciphertext or wrong secret."
            ) from exc
        return plaintext.decode("utf-8")

    def seal_record(
        self, record: dict[str, Any], fields: Iterable[str] = SECRET_TOKEN_FIELDS
    ) -> dict[str, Any]:
        """Return a copy of ``record`` with each secret field replaced by its ciphertext.

        ``access_token`` becomes ``access_token_encrypted``; ``None`` values are
        dropped.
        """
        sealed = dict(record)
        for field in fields:
            value = sealed.pop(field, None)
            if value is not None:
                sealed[f"{field}{ENCRYPTED_SUFFIX}"] = self.encrypt(str(value))
        return sealed

    def open_record(
        self, record: dict[str, Any], fields: Iterable[str] = SECRET_TOKEN_FIELDS
    ) -> dict[str, Any]:
        """Inverse of :meth:`seal_record`. Plaintext fields are left untouched."""
        opened = dict(record)
        for field in fields:
            ciphertext = opened.pop(f"{field}{ENCRYPTED_SUFFIX}", None)
            if ciphertext is not None:
                opened[field] = self.decrypt(ciphertext)
        return opened


__all__ = ["SECRET_TOKEN_FIELDS", "TokenCipherService"]

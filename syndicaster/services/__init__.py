"""Service layer exports."""

from .normalize import format_records
from .token_cipher import TokenCipherService

__all__ = ["TokenCipherService", "format_records"]

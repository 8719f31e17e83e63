"""Exception taxonomy for .ppk handling.

User-input problems derive from `PPKError` (and `ValueError`, so callers that
only care about bad input can catch that). `CryptoUnavailable` is an
environment failure and deliberately sits outside that hierarchy.
"""
from __future__ import annotations


class PPKError(Exception):
    """Base class for problems with a .ppk container or its conversion."""


class PPKFormatError(PPKError, ValueError):
    """Container is malformed: missing payload, bad base64, truncated field."""


class UnsupportedKeyTypeError(PPKError, ValueError):
    def __init__(self, algorithm):
        super().__init__(f"Unrecognized key type: {algorithm}")
        self.algorithm = algorithm


class UnsupportedCipherError(PPKError, ValueError):
    def __init__(self, cipher):
        super().__init__(f"Unsupported encryption: {cipher}")
        self.cipher = cipher


class PassphraseRequiredError(PPKError, ValueError):
    """Container is encrypted but no passphrase was supplied."""


class CryptoUnavailable(RuntimeError):
    """Raised when SHA-1 or AES-CBC cannot be obtained from the crypto backend."""


__all__ = [
    "PPKError",
    "PPKFormatError",
    "UnsupportedKeyTypeError",
    "UnsupportedCipherError",
    "PassphraseRequiredError",
    "CryptoUnavailable",
]

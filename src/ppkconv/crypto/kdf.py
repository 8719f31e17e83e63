"""Passphrase -> AES-256 key, following PuTTY's v2 key-file convention.

key = SHA1(00000000 || pass)[:20] || SHA1(00000001 || pass)[:12]
"""
from __future__ import annotations

import struct

from cryptography.hazmat.primitives import hashes

from ..config import load_config

KEY_LEN = 32


def _digest(counter: int, secret: bytes) -> bytes:
    h = hashes.Hash(hashes.SHA1())
    h.update(struct.pack(">I", counter))
    h.update(secret)
    return h.finalize()


def derive_key(passphrase: str, encoding: str | None = None) -> bytes:
    secret = passphrase.encode(encoding or load_config().passphrase_encoding)
    return _digest(0, secret)[:20] + _digest(1, secret)[:12]


__all__ = ["derive_key", "KEY_LEN"]

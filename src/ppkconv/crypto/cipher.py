"""AES-256-CBC decryption of the private blob.

The .ppk format fixes the IV at sixteen zero bytes and pads the plaintext to
a whole number of blocks itself, so there is no padding to strip here. A wrong
passphrase yields garbage rather than an error; nothing in this module can
tell the difference.
"""
from __future__ import annotations

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..errors import CryptoUnavailable

CIPHER_NAME = "aes256-cbc"
BLOCK_SIZE = 16
ZERO_IV = bytes(BLOCK_SIZE)


def ensure_primitives() -> None:
    """Fail fast if the backend cannot give us SHA-1 or AES-CBC."""
    try:
        hashes.Hash(hashes.SHA1())
        Cipher(algorithms.AES(bytes(32)), modes.CBC(ZERO_IV)).decryptor()
    except UnsupportedAlgorithm as e:
        raise CryptoUnavailable(f"crypto backend lacks SHA-1 or AES-CBC: {e}") from e


ensure_primitives()


def decrypt_private_blob(ciphertext: bytes, key: bytes) -> bytes:
    whole = len(ciphertext) // BLOCK_SIZE * BLOCK_SIZE
    dec = Cipher(algorithms.AES(key), modes.CBC(ZERO_IV)).decryptor()
    plain = dec.update(bytes(ciphertext[:whole])) + dec.finalize()
    # a trailing partial block is passed through untouched
    return plain + bytes(ciphertext[whole:])


__all__ = ["CIPHER_NAME", "BLOCK_SIZE", "ensure_primitives", "decrypt_private_blob"]

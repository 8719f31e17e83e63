import hashlib
import os

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ppkconv.crypto.cipher import BLOCK_SIZE, decrypt_private_blob, ensure_primitives
from ppkconv.crypto.kdf import KEY_LEN, derive_key


def test_derive_key_known_vector():
    # independently computed: sha1(00000000||p)[:20] + sha1(00000001||p)[:12]
    assert derive_key("correct horse").hex() == (
        "6ad70b10ad17156275ce9fb91122b4b8559b5d622fff8e634def25a5c0a63648"
    )


@pytest.mark.parametrize("passphrase", ["", "a", "correct horse", "x" * 1000, "pässwörd"])
def test_derive_key_matches_hashlib(passphrase):
    pw = passphrase.encode("utf-8")
    expected = (
        hashlib.sha1(b"\x00\x00\x00\x00" + pw).digest()[:20]
        + hashlib.sha1(b"\x00\x00\x00\x01" + pw).digest()[:12]
    )
    key = derive_key(passphrase)
    assert key == expected
    assert len(key) == KEY_LEN
    assert derive_key(passphrase) == key


def test_derive_key_distinct_for_distinct_passphrases():
    sample = ["", " ", "a", "b", "ab", "ba", "secret", "Secret", "secret "]
    keys = {derive_key(p) for p in sample}
    assert len(keys) == len(sample)


def test_passphrase_encoding_from_config(monkeypatch):
    monkeypatch.setenv("PPKCONV_PASSPHRASE_ENCODING", "latin-1")
    expected = hashlib.sha1(b"\x00\x00\x00\x00" + "é".encode("latin-1")).digest()[:20]
    assert derive_key("é")[:20] == expected


def _encrypt(plain: bytes, key: bytes) -> bytes:
    enc = Cipher(algorithms.AES(key), modes.CBC(bytes(16))).encryptor()
    return enc.update(plain) + enc.finalize()


def test_decrypt_whole_blocks():
    key = derive_key("pw")
    plain = os.urandom(BLOCK_SIZE * 5)
    assert decrypt_private_blob(_encrypt(plain, key), key) == plain


def test_trailing_partial_block_untouched():
    key = derive_key("pw")
    plain = os.urandom(BLOCK_SIZE * 2)
    tail = b"\x01\x02\x03"
    out = decrypt_private_blob(_encrypt(plain, key) + tail, key)
    assert len(out) == BLOCK_SIZE * 2 + 3
    assert out == plain + tail


def test_decrypt_does_not_mutate_input():
    key = derive_key("pw")
    ct = bytearray(_encrypt(bytes(BLOCK_SIZE * 3), key))
    before = bytes(ct)
    decrypt_private_blob(ct, key)
    assert bytes(ct) == before


def test_wrong_key_gives_garbage_not_error():
    plain = bytes(BLOCK_SIZE * 2)
    ct = _encrypt(plain, derive_key("right"))
    out = decrypt_private_blob(ct, derive_key("wrong"))
    assert len(out) == len(plain)
    assert out != plain


def test_primitives_available():
    ensure_primitives()

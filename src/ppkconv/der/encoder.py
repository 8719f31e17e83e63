"""Just enough DER to write PKCS#1-style private keys: INTEGER and SEQUENCE.

Usage::

    body = DEREncoder().write(0, n, e, d, p, q, dmp1, dmq1, iqmp).to_bytes()
    pem = pem_armor(DEREncoder().write_sequence(body).to_bytes(), "RSA PRIVATE KEY")
"""
from __future__ import annotations

import base64

from ..ppk.wire import int_to_bytes

TAG_INTEGER = 0x02
TAG_SEQUENCE = 0x30
PEM_LINE_WIDTH = 64


def encode_length(n: int) -> bytes:
    if n < 0:
        raise ValueError("negative DER length")
    if n <= 0x7F:
        return bytes([n])
    body = n.to_bytes((n.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(body)]) + body


def encode_tlv(tag: int, value: bytes) -> bytes:
    return bytes([tag]) + encode_length(len(value)) + value


def encode_integer(v: int) -> bytes:
    # minimal two's complement keeps a 0x00 in front of a set top bit
    return encode_tlv(TAG_INTEGER, int_to_bytes(v))


def wrap_base64(data: bytes, width: int = PEM_LINE_WIDTH) -> str:
    text = base64.b64encode(data).decode("ascii")
    return "".join(text[i:i + width] + "\n" for i in range(0, len(text), width))


class DEREncoder:
    def __init__(self):
        self._buf = bytearray()

    def write(self, *values: int) -> "DEREncoder":
        for v in values:
            self._buf += encode_integer(v)
        return self

    def write_sequence(self, inner: bytes) -> "DEREncoder":
        self._buf += encode_tlv(TAG_SEQUENCE, inner)
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def to_base64(self) -> str:
        return wrap_base64(self.to_bytes())


def pem_armor(der: bytes, label: str) -> str:
    return f"-----BEGIN {label}-----\n{wrap_base64(der)}-----END {label}-----\n"


__all__ = [
    "DEREncoder",
    "encode_length",
    "encode_integer",
    "encode_tlv",
    "wrap_base64",
    "pem_armor",
]

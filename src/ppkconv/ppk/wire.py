"""SSH wire-format fields: uint32 length prefix followed by that many bytes.

Integers (mpint) are big-endian two's complement; an empty field is zero.
"""
from __future__ import annotations

import struct

from ..errors import PPKFormatError

_U32 = struct.Struct(">I")


class WireReader:
    """Forward-only cursor over a blob of length-prefixed fields."""

    def __init__(self, blob: bytes):
        self._blob = bytes(blob)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._blob) - self._pos

    def _take(self, n: int) -> bytes:
        if n > self.remaining:
            raise PPKFormatError(
                f"field at offset {self._pos} wants {n} bytes, only {self.remaining} left"
            )
        out = self._blob[self._pos:self._pos + n]
        self._pos += n
        return out

    def read_string(self) -> bytes:
        (n,) = _U32.unpack(self._take(_U32.size))
        return self._take(n)

    def skip(self) -> None:
        self.read_string()

    def read_int(self) -> int:
        return int.from_bytes(self.read_string(), "big", signed=True)


def int_to_bytes(v: int) -> bytes:
    """Minimal big-endian two's complement bytes of ``v`` (0 -> one zero byte)."""
    return v.to_bytes((v if v >= 0 else ~v).bit_length() // 8 + 1, "big", signed=True)


def encode_string(data: bytes) -> bytes:
    return _U32.pack(len(data)) + data


def encode_int(v: int) -> bytes:
    if v == 0:
        return encode_string(b"")
    return encode_string(int_to_bytes(v))


__all__ = ["WireReader", "int_to_bytes", "encode_string", "encode_int"]

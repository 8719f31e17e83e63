"""Line-oriented parser for PuTTY .ppk containers.

A line of the form ``Name: value`` sets a header. Any other line is payload
and is appended to the block of the most recently seen header, so the base64
lines following ``Public-Lines: 4`` end up under ``payloads["Public-Lines"]``.

Sample::

    PuTTY-User-Key-File-2: ssh-rsa
    Encryption: none
    Comment: rsa-key-20080514
    Public-Lines: 4
    AAAAB3NzaC1yc2EAAAABJQAAAIEAiPVUpONjGeVrwgRPOqy3Ym6kF/f8bltnmjA2
    ...
    Private-Lines: 8
    AAAAgGtYgJzpktzyFjBIkSAmgeVdozVhgKmF6WsDMUID9HKwtU8cn83h6h7ug8qA
    ...
    Private-MAC: 50c45751d18d74c00fca395deb7b7695e3ed6f77
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional

from ..errors import PPKFormatError
from ..utils.logging import get_logger

log = get_logger()

HEADER_DELIM = ": "
SIGNATURE_PREFIX = "PuTTY-User-Key-File-"


class HeaderName(str, Enum):
    ALGORITHM = "PuTTY-User-Key-File-2"
    ENCRYPTION = "Encryption"
    COMMENT = "Comment"
    PUBLIC_LINES = "Public-Lines"
    PRIVATE_LINES = "Private-Lines"
    PRIVATE_MAC = "Private-MAC"


_KNOWN = {h.value for h in HeaderName}


@dataclass(frozen=True)
class ParsedContainer:
    headers: Dict[str, str] = field(default_factory=dict)
    payloads: Dict[str, str] = field(default_factory=dict)

    def header(self, name: HeaderName) -> Optional[str]:
        return self.headers.get(name.value)

    def payload(self, name: HeaderName) -> Optional[str]:
        return self.payloads.get(name.value)


def split_header(line: str):
    """Return ``(name, value)`` for a header line, ``None`` for payload."""
    idx = line.find(HEADER_DELIM)
    if idx > 0:
        return line[:idx], line[idx + len(HEADER_DELIM):]
    return None


def parse_lines(lines: Iterable[str]) -> ParsedContainer:
    headers: Dict[str, str] = {}
    payloads: Dict[str, str] = {}
    current: Optional[str] = None
    for raw in lines:
        line = raw.rstrip("\r\n")
        hdr = split_header(line)
        if hdr is not None:
            current, value = hdr
            if current not in _KNOWN:
                log.debug("ignoring unrecognized header %r", current)
            headers[current] = value
            continue
        if current is None:
            # payload before any header has nowhere to go
            continue
        payloads[current] = payloads.get(current, "") + line
    return ParsedContainer(headers=headers, payloads=payloads)


def decode_payload(container: ParsedContainer, name: HeaderName) -> bytes:
    text = container.payload(name)
    if text is None:
        raise PPKFormatError(f"missing {name.value} payload")
    try:
        # editors and transfers sometimes leave trailing blanks on lines
        return base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise PPKFormatError(f"invalid base64 in {name.value} payload: {e}") from e


__all__ = [
    "HeaderName",
    "ParsedContainer",
    "SIGNATURE_PREFIX",
    "split_header",
    "parse_lines",
    "decode_payload",
]

"""Turning the various input shapes into an iterator of text lines.

Accepted sources: a filesystem path (``str`` / ``os.PathLike``), a text
stream, or a binary stream. Files opened here are always closed; streams
handed in by the caller are left open.
"""
from __future__ import annotations

import io
import os
from contextlib import contextmanager
from typing import Iterator, Union

from ..config import load_config
from .parser import SIGNATURE_PREFIX

# only the comment may hold non-ASCII text; bad bytes must not block parsing
DECODE_ERRORS = "replace"

Source = Union[str, "os.PathLike[str]", io.IOBase]


def _is_text_stream(stream) -> bool:
    if isinstance(stream, io.TextIOBase):
        return True
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return False
    return isinstance(stream.read(0), str)


@contextmanager
def open_lines(source: Source) -> Iterator[Iterator[str]]:
    encoding = load_config().file_encoding
    if isinstance(source, (str, os.PathLike)):
        with open(source, "r", encoding=encoding, errors=DECODE_ERRORS) as f:
            yield iter(f)
        return
    if not hasattr(source, "read"):
        raise TypeError(f"expected a path or a stream, got {type(source).__name__}")
    if _is_text_stream(source):
        yield iter(source)
        return
    wrapper = io.TextIOWrapper(source, encoding=encoding, errors=DECODE_ERRORS)
    try:
        yield iter(wrapper)
    finally:
        # hand the caller's buffer back without closing it
        wrapper.detach()


def is_putty_key_file(source: Source) -> bool:
    """True if any line of ``source`` starts with ``PuTTY-User-Key-File-``."""
    with open_lines(source) as lines:
        return any(line.startswith(SIGNATURE_PREFIX) for line in lines)


__all__ = ["open_lines", "is_putty_key_file"]

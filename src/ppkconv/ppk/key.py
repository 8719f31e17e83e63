"""PuTTY ``.ppk`` (v2) private key and its conversion to OpenSSH PEM.

Construction reads the whole container, base64-decodes both blobs and, when
``Encryption: aes256-cbc`` is declared, decrypts the private blob. After that
the object is read-only; ``to_openssh()`` can be called any number of times.

Known gap: the ``Private-MAC`` line is recorded (``has_mac``) but never
checked. A wrong passphrase therefore either fails later as a
``PPKFormatError`` (a length prefix points past the end of the blob) or
produces a PEM block holding nonsense numbers.
"""
from __future__ import annotations

import io
import os
from typing import Optional

from ..config import load_config
from ..crypto.cipher import CIPHER_NAME, decrypt_private_blob
from ..crypto.kdf import derive_key
from ..der.encoder import DEREncoder, pem_armor
from ..errors import (
    PassphraseRequiredError,
    UnsupportedCipherError,
    UnsupportedKeyTypeError,
)
from ..utils.logging import get_logger
from .model import KeyInfo
from .parser import HeaderName, ParsedContainer, decode_payload, parse_lines
from .source import Source, open_lines
from .wire import WireReader

log = get_logger()

ALG_RSA = "ssh-rsa"
ALG_DSA = "ssh-dss"
NO_ENCRYPTION = "none"


class PuTTYKey:
    def __init__(self, source: Source, passphrase: Optional[str] = None):
        with open_lines(source) as lines:
            container = parse_lines(lines)
        self._load(container, passphrase)

    @classmethod
    def from_string(cls, text: str, passphrase: Optional[str] = None) -> "PuTTYKey":
        return cls(io.StringIO(text), passphrase)

    def _load(self, container: ParsedContainer, passphrase: Optional[str]) -> None:
        self._headers = dict(container.headers)
        encryption = self.encryption
        if encryption not in (NO_ENCRYPTION, CIPHER_NAME):
            raise UnsupportedCipherError(encryption)

        self._public_blob = decode_payload(container, HeaderName.PUBLIC_LINES)
        private_blob = decode_payload(container, HeaderName.PRIVATE_LINES)

        if encryption == CIPHER_NAME:
            if passphrase is None:
                raise PassphraseRequiredError("key is encrypted; a passphrase is required")
            private_blob = decrypt_private_blob(private_blob, derive_key(passphrase))
        self._private_blob = private_blob
        log.debug(
            "loaded %s key (encryption=%s, public=%d bytes, private=%d bytes)",
            self.algorithm, encryption, len(self._public_blob), len(self._private_blob),
        )

    # -- header views -------------------------------------------------

    @property
    def algorithm(self) -> Optional[str]:
        """Key type as declared: ``ssh-rsa`` or ``ssh-dss`` for supported keys."""
        return self._headers.get(HeaderName.ALGORITHM.value)

    @property
    def encryption(self) -> str:
        return self._headers.get(HeaderName.ENCRYPTION.value, NO_ENCRYPTION)

    @property
    def comment(self) -> Optional[str]:
        return self._headers.get(HeaderName.COMMENT.value)

    @property
    def encrypted(self) -> bool:
        return self.encryption == CIPHER_NAME

    @property
    def has_mac(self) -> bool:
        return HeaderName.PRIVATE_MAC.value in self._headers

    @property
    def public_blob(self) -> bytes:
        return self._public_blob

    @property
    def private_blob(self) -> bytes:
        return self._private_blob

    def info(self) -> KeyInfo:
        return KeyInfo(
            algorithm=self.algorithm,
            encryption=self.encryption,
            comment=self.comment,
            encrypted=self.encrypted,
            has_mac=self.has_mac,
            public_blob_len=len(self._public_blob),
            private_blob_len=len(self._private_blob),
        )

    # -- conversion ---------------------------------------------------

    def _rsa_pem(self) -> str:
        r = WireReader(self._public_blob)
        r.skip()  # algorithm name, duplicated from the header
        e = r.read_int()
        n = r.read_int()

        r = WireReader(self._private_blob)
        d = r.read_int()
        p = r.read_int()
        q = r.read_int()
        iqmp = r.read_int()

        dmp1 = d % (p - 1)
        dmq1 = d % (q - 1)

        body = DEREncoder().write(0, n, e, d, p, q, dmp1, dmq1, iqmp).to_bytes()
        return pem_armor(DEREncoder().write_sequence(body).to_bytes(), "RSA PRIVATE KEY")

    def _dsa_pem(self) -> str:
        r = WireReader(self._public_blob)
        r.skip()
        p = r.read_int()
        q = r.read_int()
        g = r.read_int()
        y = r.read_int()

        x = WireReader(self._private_blob).read_int()

        body = DEREncoder().write(0, p, q, g, y, x).to_bytes()
        return pem_armor(DEREncoder().write_sequence(body).to_bytes(), "DSA PRIVATE KEY")

    def to_openssh(self) -> str:
        """Convert to a traditional OpenSSH (PKCS#1 / OpenSSL DSA) PEM block."""
        alg = self.algorithm
        if alg == ALG_RSA:
            return self._rsa_pem()
        if alg == ALG_DSA:
            return self._dsa_pem()
        raise UnsupportedKeyTypeError(alg)

    def write_openssh(self, path) -> None:
        """Convert, then write the PEM text to ``path`` with owner-only permissions."""
        pem = self.to_openssh()
        mode = load_config().output_mode
        # the key must never sit on disk with looser permissions than `mode`
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        if os.name == "posix":
            # O_CREAT leaves an existing file's mode alone
            os.fchmod(fd, mode)
        with os.fdopen(fd, "w", encoding="ascii", newline="\n") as f:
            f.write(pem)
        log.info("wrote %s private key to %s", self.algorithm, path)


__all__ = ["PuTTYKey", "ALG_RSA", "ALG_DSA"]

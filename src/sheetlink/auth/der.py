"""Minimal ASN.1 DER reader for RSA private keys.

Only the subset needed to pull RSA key material out of a service account
``private_key`` is supported:

    PrivateKeyInfo ::= SEQUENCE {          -- PKCS#8
        version              INTEGER,
        privateKeyAlgorithm  AlgorithmIdentifier,
        privateKey           OCTET STRING  -- holds RSAPrivateKey
    }

    RSAPrivateKey ::= SEQUENCE {           -- PKCS#1
        version, modulus, publicExponent, privateExponent,
        prime1, prime2, exponent1, exponent2, coefficient   -- all INTEGER
    }

Encrypted and non-RSA keys are rejected with ``KeyFormatError``.
"""

import base64
import binascii
import re
from dataclasses import dataclass, fields

from ..errors import KeyFormatError

TAG_INTEGER = 0x02
TAG_OCTET_STRING = 0x04
TAG_OID = 0x06
TAG_SEQUENCE = 0x30

# 1.2.840.113549.1.1.1
RSA_ENCRYPTION_OID = bytes.fromhex("2a864886f70d010101")

_PEM_RE = re.compile(
    r"-----BEGIN ([A-Z0-9 ]+)-----(.*?)-----END \1-----",
    re.DOTALL,
)


@dataclass(frozen=True)
class RSAKeyMaterial:
    """RSA private key components as big-endian unsigned byte strings."""

    modulus: bytes
    public_exponent: bytes
    private_exponent: bytes
    prime_p: bytes
    prime_q: bytes
    exponent_dp: bytes
    exponent_dq: bytes
    inverse_q: bytes

    def as_ints(self) -> dict[str, int]:
        """Return every component as a Python int, keyed by field name."""
        return {f.name: int.from_bytes(getattr(self, f.name), "big") for f in fields(self)}


class DerReader:
    """Sequential cursor over a DER byte string."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def read_byte(self) -> int:
        if self.pos >= len(self.data):
            raise KeyFormatError("Unexpected end of DER data")
        value = self.data[self.pos]
        self.pos += 1
        return value

    def read_bytes(self, count: int) -> bytes:
        if count > self.remaining:
            raise KeyFormatError(
                f"DER length {count} exceeds remaining {self.remaining} bytes"
            )
        chunk = self.data[self.pos : self.pos + count]
        self.pos += count
        return chunk

    def read_length(self) -> int:
        """Read a short-form (< 0x80) or long-form length."""
        first = self.read_byte()
        if first < 0x80:
            return first
        count = first & 0x7F
        if count == 0:
            raise KeyFormatError("Indefinite DER lengths are not allowed")
        length = 0
        for _ in range(count):
            length = (length << 8) | self.read_byte()
        return length

    def expect(self, tag: int, name: str) -> int:
        """Consume ``tag`` and return the content length that follows it."""
        actual = self.read_byte()
        if actual != tag:
            raise KeyFormatError(f"Expected {name} (0x{tag:02x}), found 0x{actual:02x}")
        return self.read_length()

    def read_integer(self) -> bytes:
        """Read an INTEGER, dropping a single leading 0x00 sign pad."""
        length = self.expect(TAG_INTEGER, "INTEGER")
        if length == 0:
            raise KeyFormatError("Empty INTEGER")
        value = self.read_bytes(length)
        if len(value) > 1 and value[0] == 0x00:
            value = value[1:]
        return value

    def skip(self, tag: int, name: str) -> bytes:
        length = self.expect(tag, name)
        return self.read_bytes(length)


def decode_pkcs1(der: bytes) -> RSAKeyMaterial:
    """Decode a PKCS#1 ``RSAPrivateKey`` SEQUENCE."""
    reader = DerReader(der)
    reader.expect(TAG_SEQUENCE, "RSAPrivateKey SEQUENCE")
    reader.read_integer()  # version
    return RSAKeyMaterial(
        modulus=reader.read_integer(),
        public_exponent=reader.read_integer(),
        private_exponent=reader.read_integer(),
        prime_p=reader.read_integer(),
        prime_q=reader.read_integer(),
        exponent_dp=reader.read_integer(),
        exponent_dq=reader.read_integer(),
        inverse_q=reader.read_integer(),
    )


def decode_pkcs8(der: bytes) -> RSAKeyMaterial:
    """Decode a PKCS#8 ``PrivateKeyInfo`` wrapping an RSA key."""
    reader = DerReader(der)
    reader.expect(TAG_SEQUENCE, "PrivateKeyInfo SEQUENCE")
    reader.read_integer()  # version

    algorithm = DerReader(reader.skip(TAG_SEQUENCE, "AlgorithmIdentifier SEQUENCE"))
    oid = algorithm.skip(TAG_OID, "algorithm OID")
    if oid != RSA_ENCRYPTION_OID:
        raise KeyFormatError(f"Unsupported key algorithm OID {oid.hex()}")

    inner = reader.skip(TAG_OCTET_STRING, "OCTET STRING")
    return decode_pkcs1(inner)


def pem_to_der(pem: str) -> tuple[str, bytes]:
    """Strip PEM armor and return ``(label, der_bytes)``."""
    match = _PEM_RE.search(pem)
    if not match:
        raise KeyFormatError("No PEM block found in private key")
    label, body = match.group(1), match.group(2)
    try:
        der = base64.b64decode("".join(body.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyFormatError(f"Private key is not valid base64: {e}") from e
    return label, der


def load_private_key(pem: str) -> RSAKeyMaterial:
    """Decode PEM text into RSA key material."""
    label, der = pem_to_der(pem)
    if label == "PRIVATE KEY":
        return decode_pkcs8(der)
    if label == "RSA PRIVATE KEY":
        return decode_pkcs1(der)
    raise KeyFormatError(f"Unsupported PEM block '{label}'")

"""Compact JWT assertions for the OAuth2 JWT-bearer grant."""

import base64
import json
import logging
import time
from typing import Callable, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..errors import KeyFormatError
from .der import RSAKeyMaterial, load_private_key
from .models import ServiceAccountCredential

logger = logging.getLogger(__name__)

JWT_HEADER = {"alg": "RS256", "typ": "JWT"}


def base64url_encode(data: bytes) -> str:
    """URL-safe base64 without ``=`` padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _encode_json(obj: dict) -> str:
    return base64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


def build_private_key(material: RSAKeyMaterial) -> rsa.RSAPrivateKey:
    """Turn decoded key material into a signing key."""
    n = material.as_ints()
    try:
        public = rsa.RSAPublicNumbers(n["public_exponent"], n["modulus"])
        private = rsa.RSAPrivateNumbers(
            p=n["prime_p"],
            q=n["prime_q"],
            d=n["private_exponent"],
            dmp1=n["exponent_dp"],
            dmq1=n["exponent_dq"],
            iqmp=n["inverse_q"],
            public_numbers=public,
        )
        return private.private_key()
    except ValueError as e:
        raise KeyFormatError(f"Decoded RSA components are inconsistent: {e}") from e


def sign_rs256(signing_input: bytes, key: rsa.RSAPrivateKey) -> bytes:
    """RSASSA-PKCS1-v1_5 signature over SHA-256."""
    return key.sign(signing_input, padding.PKCS1v15(), hashes.SHA256())


class JWTSigner:
    """Builds signed service account assertions.

    Key material is decoded on first use and kept for the signer's lifetime.
    """

    def __init__(
        self,
        credential: ServiceAccountCredential,
        scope: str,
        audience: str,
        lifetime_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.credential = credential
        self.scope = scope
        self.audience = audience
        self.lifetime_seconds = lifetime_seconds
        self._clock = clock
        self._key: Optional[rsa.RSAPrivateKey] = None

    @property
    def key(self) -> rsa.RSAPrivateKey:
        if self._key is None:
            logger.debug(f"Decoding private key for {self.credential.client_email}")
            self._key = build_private_key(load_private_key(self.credential.private_key))
        return self._key

    def claims(self, now: int) -> dict:
        return {
            "iss": self.credential.client_email,
            "scope": self.scope,
            "aud": self.audience,
            "exp": now + self.lifetime_seconds,
            "iat": now,
        }

    def assertion(self, now: Optional[int] = None) -> str:
        """Return ``header.payload.signature`` for the current time."""
        if now is None:
            now = int(self._clock())
        signing_input = f"{_encode_json(JWT_HEADER)}.{_encode_json(self.claims(now))}"
        signature = sign_rs256(signing_input.encode("ascii"), self.key)
        return f"{signing_input}.{base64url_encode(signature)}"

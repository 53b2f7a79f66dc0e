"""Service account authentication: DER key decoding, JWT signing, token exchange."""

from .der import RSAKeyMaterial, decode_pkcs1, decode_pkcs8, load_private_key, pem_to_der
from .jwt import JWTSigner, base64url_decode, base64url_encode
from .models import CachedAccessToken, ServiceAccountCredential, TokenResponse
from .token import TokenProvider

__all__ = [
    "RSAKeyMaterial",
    "decode_pkcs1",
    "decode_pkcs8",
    "load_private_key",
    "pem_to_der",
    "JWTSigner",
    "base64url_decode",
    "base64url_encode",
    "CachedAccessToken",
    "ServiceAccountCredential",
    "TokenResponse",
    "TokenProvider",
]

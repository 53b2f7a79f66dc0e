"""Error taxonomy shared by the auth, sheets and sync layers."""

from typing import Optional


class SheetLinkError(Exception):
    """Base class for all sheetlink errors."""


class ConfigurationError(SheetLinkError):
    """A required setting (spreadsheet id, key or credential) is missing or malformed."""


class KeyFormatError(SheetLinkError):
    """The private key bytes are not a PKCS#8/PKCS#1 RSA key we can decode."""


class AuthError(SheetLinkError):
    """A signed access token could not be obtained."""


class TransportError(SheetLinkError):
    """An HTTP request failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseError(SheetLinkError):
    """A response body did not have the expected shape."""

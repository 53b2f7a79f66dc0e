"""Google Sheets grid sync over a service-account JWT bearer flow."""

from .errors import (
    SheetLinkError,
    ConfigurationError,
    KeyFormatError,
    AuthError,
    TransportError,
    ParseError,
)

__version__ = "0.1.0"

__all__ = [
    "SheetLinkError",
    "ConfigurationError",
    "KeyFormatError",
    "AuthError",
    "TransportError",
    "ParseError",
]

"""HTTP API for sheetlink."""

from .app import create_app

__all__ = ["create_app"]

"""Configuration management for sheetlink."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .errors import ConfigurationError

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


def _optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


class Settings(BaseModel):
    """Application settings."""

    # Spreadsheet to sync
    spreadsheet_id: str = os.getenv("SPREADSHEET_ID", "")
    sheet_name: str = os.getenv("SHEET_NAME", "Sheet1")
    cell_range: str = os.getenv("SHEET_RANGE", "A1:Z100")

    # Read-only access with a bare API key
    api_key: Optional[str] = os.getenv("GOOGLE_API_KEY")

    # Service account (required for writes). Inline JSON wins over the file.
    service_account_json: Optional[str] = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON")
    service_account_file: Optional[Path] = _optional_path("GOOGLE_SERVICE_ACCOUNT_FILE")

    # Google endpoints
    sheets_api_base: str = os.getenv(
        "SHEETS_API_BASE", "https://sheets.googleapis.com/v4/spreadsheets"
    )
    token_uri: str = os.getenv("GOOGLE_TOKEN_URI", "https://oauth2.googleapis.com/token")
    scope: str = os.getenv("GOOGLE_SHEETS_SCOPE", "https://www.googleapis.com/auth/spreadsheets")
    token_lifetime_seconds: int = int(os.getenv("TOKEN_LIFETIME_SECONDS", "3600"))

    # Write-back behaviour
    sync_delay_seconds: float = float(os.getenv("SYNC_DELAY_SECONDS", "1.0"))
    write_retries: int = int(os.getenv("WRITE_RETRIES", "1"))
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30.0"))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def has_service_account(self) -> bool:
        if self.service_account_json:
            return True
        return self.service_account_file is not None and self.service_account_file.is_file()

    def service_account_text(self) -> Optional[str]:
        """Return the service account JSON text, or None if none is configured.

        Raises:
            ConfigurationError: If the key file exists but cannot be read.
        """
        if self.service_account_json:
            return self.service_account_json
        if self.service_account_file is not None and self.service_account_file.is_file():
            try:
                return self.service_account_file.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot read service account file {self.service_account_file}: {e}"
                ) from e
        return None


settings = Settings()

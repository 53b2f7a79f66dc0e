"""Tests for the config module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from sheetlink.config import Settings, _parse_cors_origins
from sheetlink.errors import ConfigurationError


class TestParseCorsOrigins:
    """Test CORS origins parsing."""

    def test_parse_cors_origins_with_value(self, monkeypatch):
        """Test parsing CORS origins from environment variable."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://localhost:8080")
        result = _parse_cors_origins()
        assert result == ["http://localhost:3000", "http://localhost:8080"]

    def test_parse_cors_origins_without_value(self, monkeypatch):
        """Test default CORS origins when not set."""
        monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
        result = _parse_cors_origins()
        assert result == ["*"]


class TestSettings:
    """Test Settings configuration."""

    def test_explicit_values(self):
        """Test Settings with explicit parameters."""
        settings = Settings(
            spreadsheet_id="abc",
            sheet_name="Tasks",
            cell_range="A1:F50",
            api_key="key-1",
            sync_delay_seconds=0.5,
            write_retries=3,
        )

        assert settings.spreadsheet_id == "abc"
        assert settings.sheet_name == "Tasks"
        assert settings.cell_range == "A1:F50"
        assert settings.api_key == "key-1"
        assert settings.sync_delay_seconds == 0.5
        assert settings.write_retries == 3

    def test_endpoint_defaults(self):
        settings = Settings()
        assert settings.token_uri == "https://oauth2.googleapis.com/token"
        assert settings.scope == "https://www.googleapis.com/auth/spreadsheets"
        assert settings.sheets_api_base == "https://sheets.googleapis.com/v4/spreadsheets"

    def test_has_api_key(self):
        assert Settings(api_key="k").has_api_key is True
        assert Settings(api_key=None).has_api_key is False
        assert Settings(api_key="").has_api_key is False

    def test_inline_service_account(self):
        settings = Settings(service_account_json='{"client_email": "a"}', service_account_file=None)

        assert settings.has_service_account is True
        assert settings.service_account_text() == '{"client_email": "a"}'

    def test_service_account_file(self, tmp_path):
        """Test the key file is read when no inline JSON is given."""
        key_file = tmp_path / "sa.json"
        key_file.write_text('{"client_email": "from-file"}')

        settings = Settings(service_account_json=None, service_account_file=key_file)

        assert isinstance(settings.service_account_file, Path)
        assert settings.has_service_account is True
        assert settings.service_account_text() == '{"client_email": "from-file"}'

    def test_inline_wins_over_file(self, tmp_path):
        key_file = tmp_path / "sa.json"
        key_file.write_text("file")

        settings = Settings(service_account_json="inline", service_account_file=key_file)

        assert settings.service_account_text() == "inline"

    def test_missing_service_account_file(self, tmp_path):
        settings = Settings(service_account_json=None, service_account_file=tmp_path / "nope.json")

        assert settings.has_service_account is False
        assert settings.service_account_text() is None

    def test_service_account_path_is_directory(self, tmp_path):
        """Test a directory is not mistaken for a key file."""
        settings = Settings(service_account_json=None, service_account_file=tmp_path)

        assert settings.has_service_account is False
        assert settings.service_account_text() is None

    def test_unreadable_service_account_file(self, tmp_path):
        """Test a read error surfaces as a ConfigurationError."""
        key_file = tmp_path / "sa.json"
        key_file.write_text("{}")
        settings = Settings(service_account_json=None, service_account_file=key_file)

        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            with pytest.raises(ConfigurationError, match="Cannot read service account file"):
                settings.service_account_text()

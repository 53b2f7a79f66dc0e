"""Pytest configuration and shared fixtures."""

import json
from typing import Callable

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from sheetlink.config import Settings
from helpers import CLIENT_EMAIL, TOKEN_URI, FakeClock


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    """A 2048-bit RSA key shared by the whole session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def pkcs8_pem(rsa_key) -> str:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def pkcs1_pem(rsa_key) -> str:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def service_account_json(pkcs8_pem) -> str:
    """Service account key file content, shaped like the Cloud Console download."""
    return json.dumps(
        {
            "type": "service_account",
            "project_id": "test-project",
            "private_key_id": "abc123",
            "private_key": pkcs8_pem,
            "client_email": CLIENT_EMAIL,
            "client_id": "1234567890",
            "token_uri": TOKEN_URI,
        }
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_settings(service_account_json) -> Callable[..., Settings]:
    """Build Settings with test values; keyword arguments override them."""

    def _make(**overrides) -> Settings:
        values = dict(
            spreadsheet_id="S1",
            sheet_name="Sheet1",
            cell_range="A1:B2",
            api_key=None,
            service_account_json=service_account_json,
            service_account_file=None,
            sync_delay_seconds=0.05,
            write_retries=1,
            request_timeout_seconds=5.0,
        )
        values.update(overrides)
        return Settings(**values)

    return _make


# Configure pytest-asyncio
def pytest_configure(config):
    """Configure pytest with asyncio settings."""
    config.addinivalue_line("markers", "asyncio: mark test as async")

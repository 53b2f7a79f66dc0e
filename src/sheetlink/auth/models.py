"""Data models for service account authentication."""

import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import ConfigurationError

# Seconds before expiry at which a cached token is treated as stale.
EXPIRY_MARGIN_SECONDS = 60


class ServiceAccountCredential(BaseModel):
    """The fields of a Google service account key file that we use."""

    model_config = ConfigDict(extra="ignore")

    client_email: str
    private_key: str  # PEM text
    token_uri: Optional[str] = None

    @classmethod
    def from_json(cls, text: str) -> "ServiceAccountCredential":
        """Parse service account JSON, as downloaded from the Cloud Console."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Service account JSON is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("Service account JSON must be an object")

        # Keys pasted through env vars often arrive with literal "\n"
        if isinstance(data.get("private_key"), str):
            data["private_key"] = data["private_key"].replace("\\n", "\n")

        try:
            credential = cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Service account JSON is missing fields: {e}") from e
        if not credential.client_email or not credential.private_key:
            raise ConfigurationError("Service account JSON has an empty client_email or private_key")
        return credential


class TokenResponse(BaseModel):
    """Successful response body from the OAuth2 token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    expires_in: int
    token_type: str = "Bearer"


class CachedAccessToken(BaseModel):
    """An access token and the wall-clock time (epoch seconds) it expires."""

    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at - EXPIRY_MARGIN_SECONDS

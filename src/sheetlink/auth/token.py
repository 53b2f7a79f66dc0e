"""Exchange signed assertions for short-lived access tokens."""

import asyncio
import logging
import time
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from ..errors import AuthError, ConfigurationError, KeyFormatError
from .jwt import JWTSigner
from .models import CachedAccessToken, ServiceAccountCredential, TokenResponse

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"


class TokenProvider:
    """Caches an access token and refreshes it when it nears expiry.

    Concurrent callers that find the cache stale share a single in-flight
    refresh rather than each posting their own assertion.
    """

    def __init__(
        self,
        credential: ServiceAccountCredential,
        http_client: httpx.AsyncClient,
        scope: str,
        token_uri: str,
        lifetime_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.token_uri = credential.token_uri or token_uri
        self.signer = JWTSigner(
            credential,
            scope=scope,
            audience=self.token_uri,
            lifetime_seconds=lifetime_seconds,
            clock=clock,
        )
        self._http = http_client
        self._clock = clock
        self._cached: Optional[CachedAccessToken] = None
        self._inflight: Optional[asyncio.Task] = None

    @property
    def cached(self) -> Optional[CachedAccessToken]:
        return self._cached

    def invalidate(self):
        self._cached = None

    async def get_token(self) -> str:
        """Return a valid access token, refreshing if needed.

        Raises:
            AuthError: If the assertion cannot be signed or the exchange fails.
        """
        cached = self._cached
        if cached is not None and cached.is_valid(self._clock()):
            return cached.token

        if self._inflight is None:
            self._inflight = asyncio.get_running_loop().create_task(self._refresh())
            self._inflight.add_done_callback(self._clear_inflight)

        # A cancelled caller must not cancel the refresh other callers await
        token = await asyncio.shield(self._inflight)
        return token.token

    def _clear_inflight(self, task: asyncio.Task):
        if self._inflight is task:
            self._inflight = None

    async def _refresh(self) -> CachedAccessToken:
        logger.info("Refreshing access token using service account")
        try:
            assertion = self.signer.assertion()
        except (KeyFormatError, ConfigurationError) as e:
            raise AuthError(f"Could not sign service account assertion: {e}") from e

        try:
            response = await self._http.post(
                self.token_uri,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Token request failed: {e}") from e

        if response.status_code != 200:
            raise AuthError(
                f"Token endpoint returned {response.status_code}: {response.text}"
            )

        try:
            body = TokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise AuthError(f"Unexpected token response: {e}") from e

        self._cached = CachedAccessToken(
            token=body.access_token,
            expires_at=self._clock() + body.expires_in,
        )
        logger.info(f"Obtained access token valid for {body.expires_in}s")
        return self._cached

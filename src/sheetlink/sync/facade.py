"""Single entry point for reading a sheet grid and writing edits back."""

import logging
import time
from typing import Callable, Optional

import httpx

from ..config import Settings, settings as default_settings
from ..errors import AuthError, ConfigurationError, ParseError, TransportError
from ..auth import ServiceAccountCredential, TokenProvider
from ..sheets import SheetsClient, SyncResult, format_cell, qualify_range, range_origin
from .queue import FailureCallback, WriteBackQueue

logger = logging.getLogger(__name__)


class SheetSync:
    """Owns the credential, token cache, HTTP client and write-back queue.

    Reads work with either a service account or a bare API key; writes need a
    service account. Network and parse failures never escape: reads return an
    empty ``SyncResult`` and writes return ``False``.

    Use as ``async with SheetSync() as sync:`` or call ``aclose()`` when done.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        on_write_failure: Optional[FailureCallback] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = config or default_settings
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self.settings.request_timeout_seconds
        )
        self._clock = clock
        self.client = SheetsClient(self._http, self.settings.sheets_api_base)
        self.queue = WriteBackQueue(
            self.update_cell,
            quiet_period=self.settings.sync_delay_seconds,
            retries=self.settings.write_retries,
            on_failure=on_write_failure,
        )
        self._tokens: Optional[TokenProvider] = None

    async def __aenter__(self) -> "SheetSync":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        """Write pending edits, then release the HTTP client if we created it."""
        await self.queue.aclose()
        if self._owns_http:
            await self._http.aclose()

    @property
    def has_write_access(self) -> bool:
        return self.settings.has_service_account

    @property
    def qualified_range(self) -> str:
        return qualify_range(self.settings.sheet_name, self.settings.cell_range)

    @property
    def tokens(self) -> TokenProvider:
        """Token provider for the configured service account, created on first use.

        Raises:
            ConfigurationError: If no service account is configured or it is malformed.
        """
        if self._tokens is None:
            text = self.settings.service_account_text()
            if not text:
                raise ConfigurationError("No service account configured")
            credential = ServiceAccountCredential.from_json(text)
            self._tokens = TokenProvider(
                credential,
                self._http,
                scope=self.settings.scope,
                token_uri=self.settings.token_uri,
                lifetime_seconds=self.settings.token_lifetime_seconds,
                clock=self._clock,
            )
        return self._tokens

    async def access_token(self) -> str:
        """Return a valid bearer token.

        Raises:
            AuthError: If no token can be obtained.
        """
        try:
            tokens = self.tokens
        except ConfigurationError as e:
            raise AuthError(str(e)) from e
        return await tokens.get_token()

    async def _read_auth(self) -> tuple[Optional[str], Optional[str]]:
        """Pick ``(token, api_key)`` for a read, falling back to the API key."""
        if self.settings.has_service_account:
            try:
                return await self.access_token(), None
            except AuthError as e:
                if not self.settings.has_api_key:
                    raise
                logger.warning(f"Service account auth failed, falling back to API key: {e}")
        if self.settings.has_api_key:
            return None, self.settings.api_key
        raise ConfigurationError("Neither an API key nor a service account is configured")

    def _check_spreadsheet_id(self):
        if not self.settings.spreadsheet_id:
            raise ConfigurationError("Spreadsheet ID is missing")

    async def fetch_grid_with_validation(self) -> SyncResult:
        """Fetch the configured range with per-cell dropdown options."""
        try:
            self._check_spreadsheet_id()
            token, api_key = await self._read_auth()
            logger.info(
                f"Fetching grid data for {self.qualified_range} "
                f"(using {'service account' if token else 'API key'})"
            )
            result = await self.client.get_grid(
                self.settings.spreadsheet_id, self.qualified_range, token=token, api_key=api_key
            )
        except ConfigurationError as e:
            logger.error(f"Cannot fetch grid: {e}")
            return SyncResult()
        except AuthError as e:
            logger.error(f"Cannot fetch grid, authentication failed: {e}")
            return SyncResult()
        except TransportError as e:
            logger.error(f"Error fetching grid: {e}\nBody: {e.body}")
            return SyncResult()
        except ParseError as e:
            logger.error(f"Could not parse grid response: {e}")
            return SyncResult()

        if result.is_empty:
            logger.warning("No rows found. Is the sheet empty or is the sheet name/range incorrect?")
        else:
            logger.info(f"Fetched {len(result.rows)} rows")
        return result

    async def fetch_values(self) -> list[list[str]]:
        """Fetch the configured range as plain formatted values."""
        try:
            self._check_spreadsheet_id()
            token, api_key = await self._read_auth()
            return await self.client.get_values(
                self.settings.spreadsheet_id, self.qualified_range, token=token, api_key=api_key
            )
        except ConfigurationError as e:
            logger.error(f"Cannot fetch values: {e}")
        except AuthError as e:
            logger.error(f"Cannot fetch values, authentication failed: {e}")
        except TransportError as e:
            logger.error(f"Error fetching values: {e}\nBody: {e.body}")
        except ParseError as e:
            logger.error(f"Could not parse values response: {e}")
        return []

    async def update_cell(self, range_a1: str, value: str) -> bool:
        """Write one value immediately. ``range_a1`` is relative to the configured sheet."""
        if not self.has_write_access:
            logger.error("Writing data requires a service account. Configure one in settings.")
            return False
        try:
            self._check_spreadsheet_id()
            token = await self.access_token()
            await self.client.update_value(
                self.settings.spreadsheet_id,
                qualify_range(self.settings.sheet_name, range_a1),
                value,
                token=token,
            )
        except ConfigurationError as e:
            logger.error(f"Cannot update {range_a1}: {e}")
            return False
        except AuthError as e:
            logger.error(f"Cannot update {range_a1}, authentication failed: {e}")
            return False
        except TransportError as e:
            logger.error(f"Error updating {range_a1}: {e}\n{e.body}")
            return False
        return True

    def cell_range(self, row: int, col: int) -> str:
        """A1 cell for a 0-based grid position relative to the configured range."""
        origin_col, origin_row = range_origin(self.settings.cell_range)
        return format_cell(origin_col + col, origin_row + row)

    def queue_edit(self, range_a1: str, value: str):
        self.queue.queue_edit(range_a1, value)

    def queue_cell_edit(self, row: int, col: int, value: str) -> str:
        range_a1 = self.cell_range(row, col)
        self.queue.queue_edit(range_a1, value)
        return range_a1

    async def flush(self) -> dict[str, bool]:
        return await self.queue.flush()

"""Google Sheets v4 REST client over httpx."""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from ..errors import TransportError
from .models import SyncResult
from .parser import parse_grid_response, parse_values_response

logger = logging.getLogger(__name__)

FORBIDDEN_HINT = (
    "This usually means the spreadsheet is not shared with the service account "
    "(or with 'Anyone with the link' for API key access), or the Google Sheets API "
    "is not enabled for this project."
)


def _auth(token: Optional[str], api_key: Optional[str]) -> tuple[dict, dict]:
    headers = {}
    params = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    elif api_key:
        params["key"] = api_key
    return headers, params


class SheetsClient:
    """Thin async wrapper around the spreadsheet endpoints sheetlink uses.

    Every method raises ``TransportError`` on network failure or a
    non-success status, and ``ParseError`` on an unexpected body.
    """

    def __init__(self, http_client: httpx.AsyncClient, api_base: str):
        self._http = http_client
        self.api_base = api_base.rstrip("/")

    def _values_url(self, spreadsheet_id: str, range_a1: str) -> str:
        return f"{self.api_base}/{spreadsheet_id}/values/{quote(range_a1, safe='!:$')}"

    async def get_grid(
        self,
        spreadsheet_id: str,
        range_a1: str,
        token: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> SyncResult:
        """Fetch cell values and data validation for a range."""
        headers, params = _auth(token, api_key)
        params.update({"ranges": range_a1, "includeGridData": "true"})
        response = await self._send(
            "GET", f"{self.api_base}/{spreadsheet_id}", headers=headers, params=params
        )
        return parse_grid_response(response.content)

    async def get_values(
        self,
        spreadsheet_id: str,
        range_a1: str,
        token: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> list[list[str]]:
        """Fetch formatted values only."""
        headers, params = _auth(token, api_key)
        response = await self._send(
            "GET", self._values_url(spreadsheet_id, range_a1), headers=headers, params=params
        )
        return parse_values_response(response.content)

    async def update_value(
        self, spreadsheet_id: str, range_a1: str, value: str, token: str
    ) -> None:
        """Write a single RAW value."""
        headers, _ = _auth(token, None)
        await self._send(
            "PUT",
            self._values_url(spreadsheet_id, range_a1),
            headers=headers,
            params={"valueInputOption": "RAW"},
            json={"values": [[value]]},
        )

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.is_success:
            return response

        if response.status_code == 403:
            logger.error(f"Error 403 Forbidden from Google Sheets. {FORBIDDEN_HINT}")
        raise TransportError(
            f"{method} {url} returned {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

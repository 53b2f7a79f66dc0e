"""Builders for HTTP and grid fixtures used across tests."""

import httpx

CLIENT_EMAIL = "sync-bot@test-project.iam.gserviceaccount.com"
TOKEN_URI = "https://oauth2.googleapis.com/token"


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def mock_http(handler) -> httpx.AsyncClient:
    """An AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def token_response(token: str = "ya29.test-token", expires_in: int = 3600) -> httpx.Response:
    return httpx.Response(
        200, json={"access_token": token, "expires_in": expires_in, "token_type": "Bearer"}
    )


def cell(value=None, options=None, condition_type="ONE_OF_LIST") -> dict:
    """Build a grid CellData dict with the formatting noise Google adds."""
    data = {
        "userEnteredFormat": {"backgroundColor": {"red": 1, "green": 1, "blue": 1}},
        "effectiveFormat": {
            "textFormat": {"fontFamily": "Arial", "fontSize": 10, "bold": False},
            "padding": {"top": 2, "right": 3, "bottom": 2, "left": 3},
        },
    }
    if value is not None:
        data["formattedValue"] = value
        data["userEnteredValue"] = {"stringValue": value}
        data["effectiveValue"] = {"stringValue": value}
    if options is not None:
        data["dataValidation"] = {
            "condition": {
                "type": condition_type,
                "values": [{"userEnteredValue": option} for option in options],
            },
            "strict": True,
            "showCustomUi": True,
        }
    return data


def grid_response(rows: list[list[dict]]) -> dict:
    """Wrap rows of cell dicts in a spreadsheets.get response."""
    return {
        "spreadsheetId": "S1",
        "properties": {"title": "Test", "locale": "en_US"},
        "sheets": [
            {
                "properties": {"sheetId": 0, "title": "Sheet1", "index": 0},
                "data": [
                    {
                        "rowData": [{"values": row} if row else {} for row in rows],
                        "rowMetadata": [{"pixelSize": 21} for _ in rows],
                        "columnMetadata": [{"pixelSize": 100}],
                    }
                ],
            }
        ],
    }

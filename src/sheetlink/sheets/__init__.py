"""Google Sheets API integration."""

from .a1 import (
    format_cell,
    index_to_letter,
    letter_to_index,
    parse_cell,
    qualify_range,
    range_origin,
    split_range,
)
from .client import SheetsClient
from .models import Spreadsheet, SyncResult, ValueRange
from .parser import parse_grid_response, parse_values_response

__all__ = [
    "format_cell",
    "index_to_letter",
    "letter_to_index",
    "parse_cell",
    "qualify_range",
    "range_origin",
    "split_range",
    "SheetsClient",
    "Spreadsheet",
    "SyncResult",
    "ValueRange",
    "parse_grid_response",
    "parse_values_response",
]

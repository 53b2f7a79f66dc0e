"""A1 notation helpers.

Columns are 0-based internally (A=0, Z=25, AA=26); A1 row numbers are 1-based.
"""

import re
from typing import Optional

_CELL_RE = re.compile(r"^\$?([A-Za-z]+)\$?(\d+)$")
_PLAIN_SHEET_RE = re.compile(r"^[A-Za-z0-9_]+$")


def index_to_letter(index: int) -> str:
    """Convert 0-based index to column letter(s)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    letter = ""
    while index >= 0:
        letter = chr(ord("A") + index % 26) + letter
        index = index // 26 - 1
    return letter


def letter_to_index(col: str) -> int:
    """Convert column letter(s) to 0-based index. A=0, B=1, ..., Z=25, AA=26, etc."""
    if not col or not col.isalpha():
        raise ValueError(f"Invalid column letters: {col!r}")
    result = 0
    for char in col.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def parse_cell(cell: str) -> tuple[int, int]:
    """Parse an A1 cell into 0-based ``(column, row)``."""
    match = _CELL_RE.match(cell.strip())
    if not match:
        raise ValueError(f"Invalid cell notation: {cell}")
    row = int(match.group(2))
    if row < 1:
        raise ValueError(f"Row numbers start at 1: {cell}")
    return letter_to_index(match.group(1)), row - 1


def format_cell(col: int, row: int) -> str:
    """Format 0-based ``(column, row)`` as A1 notation."""
    return f"{index_to_letter(col)}{row + 1}"


def split_range(cell_range: str) -> tuple[str, Optional[str]]:
    """Split ``"A1:B2"`` into ``("A1", "B2")``; a single cell gives ``(cell, None)``."""
    if "!" in cell_range:
        cell_range = cell_range.rsplit("!", 1)[1]
    start, _, end = cell_range.partition(":")
    return start, end or None


def range_origin(cell_range: str) -> tuple[int, int]:
    """0-based ``(column, row)`` of a range's top-left cell."""
    start, _ = split_range(cell_range)
    start = start.replace("$", "")
    if start.isalpha():
        # Whole-column range such as "B:D"
        return letter_to_index(start), 0
    if start.isdigit():
        # Whole-row range such as "3:5"
        return 0, int(start) - 1
    return parse_cell(start)


def qualify_range(sheet_name: str, cell_range: str) -> str:
    """Prefix a range with its sheet, quoting names that need it."""
    if not sheet_name:
        return cell_range
    if _PLAIN_SHEET_RE.match(sheet_name):
        return f"{sheet_name}!{cell_range}"
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{cell_range}"

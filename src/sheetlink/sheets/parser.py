"""Extract rows and dropdown validation from Sheets API responses."""

import logging
from typing import Any, Union

from pydantic import ValidationError

from ..errors import ParseError
from .models import Spreadsheet, SyncResult, ValueRange, validation_key

logger = logging.getLogger(__name__)


def parse_grid_response(body: Union[str, bytes, dict]) -> SyncResult:
    """Parse a ``includeGridData=true`` response into a ``SyncResult``.

    Rows come from the first sheet's first grid block, in order. A cell
    without ``formattedValue`` becomes ``""``. Validation entries are only
    recorded for non-empty ``ONE_OF_LIST`` rules, keyed ``"row:col"``
    relative to the requested range.

    Raises:
        ParseError: If the body is not JSON or does not match the expected shape.
    """
    spreadsheet = _validate(Spreadsheet, body)
    result = SyncResult()

    if not spreadsheet.sheets or not spreadsheet.sheets[0].data:
        logger.warning("Grid response contained no sheet data")
        return result

    grid = spreadsheet.sheets[0].data[0]
    for row_index, row in enumerate(grid.row_data):
        cells = []
        for col_index, cell in enumerate(row.values):
            cells.append(cell.formatted_value or "")
            if cell.data_validation is None:
                continue
            options = cell.data_validation.list_options()
            if options:
                result.validation[validation_key(row_index, col_index)] = options
        result.rows.append(cells)

    logger.debug(
        f"Parsed {len(result.rows)} rows with {len(result.validation)} validation rules"
    )
    return result


def parse_values_response(body: Union[str, bytes, dict]) -> list[list[str]]:
    """Parse a ``values.get`` response into rows of strings."""
    value_range = _validate(ValueRange, body)
    return [["" if value is None else str(value) for value in row] for row in value_range.values]


def _validate(model: Any, body: Union[str, bytes, dict]):
    try:
        if isinstance(body, dict):
            return model.model_validate(body)
        return model.model_validate_json(body)
    except ValidationError as e:
        raise ParseError(f"Unexpected {model.__name__} response: {e}") from e

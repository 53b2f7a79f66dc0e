"""Data models for Google Sheets API responses.

Only the handful of fields sheetlink reads are declared; everything else in
a grid response (formatting, effective values, sheet properties) is ignored.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ONE_OF_LIST = "ONE_OF_LIST"


class ApiModel(BaseModel):
    """Base for response models: camelCase on the wire, unknown keys dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ConditionValue(ApiModel):
    user_entered_value: Optional[str] = None

    @field_validator("user_entered_value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class BooleanCondition(ApiModel):
    type: Optional[str] = None
    values: list[ConditionValue] = Field(default_factory=list)


class DataValidationRule(ApiModel):
    condition: Optional[BooleanCondition] = None

    def list_options(self) -> Optional[list[str]]:
        """Dropdown options if this is a ONE_OF_LIST rule, otherwise None."""
        if self.condition is None or self.condition.type != ONE_OF_LIST:
            return None
        return [
            v.user_entered_value
            for v in self.condition.values
            if v.user_entered_value is not None
        ]


class CellData(ApiModel):
    formatted_value: Optional[str] = None
    data_validation: Optional[DataValidationRule] = None


class RowData(ApiModel):
    values: list[CellData] = Field(default_factory=list)


class GridData(ApiModel):
    row_data: list[RowData] = Field(default_factory=list)


class Sheet(ApiModel):
    data: list[GridData] = Field(default_factory=list)


class Spreadsheet(ApiModel):
    """Response of ``spreadsheets.get`` with ``includeGridData=true``."""

    spreadsheet_id: Optional[str] = None
    sheets: list[Sheet] = Field(default_factory=list)


class ValueRange(ApiModel):
    """Response of ``spreadsheets.values.get``."""

    range: Optional[str] = None
    major_dimension: Optional[str] = None
    values: list[list[Any]] = Field(default_factory=list)


class SyncResult(BaseModel):
    """Rows of formatted cell strings plus dropdown options keyed "row:col"."""

    rows: list[list[str]] = Field(default_factory=list)
    validation: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def options_for(self, row: int, col: int) -> Optional[list[str]]:
        return self.validation.get(validation_key(row, col))


def validation_key(row: int, col: int) -> str:
    return f"{row}:{col}"

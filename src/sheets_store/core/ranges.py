"""Range notation helpers for the backing spreadsheet."""

import re
from typing import Optional

from .error_handler import IntegrityError

# e.g. "'transfers'!A1:C42", "transfers!A1:C42" or a single cell "ids!A1"
TABLE_RANGE_PATTERN = re.compile(r"^.*![A-Z]+(\d+)(?::[A-Z]+(\d+))?$")


def quote_sheet(title: str) -> str:
    return "'" + title.replace("'", "''") + "'"


def cell_range(sheet: str, row: int = 1, column: int = 1) -> str:
    """R1C1 reference to a single cell."""
    return f"{quote_sheet(sheet)}!R{row}C{column}"


def rows_range(sheet: str, start_row: int, row_count: int, column_count: int) -> str:
    """R1C1 range covering row_count full-width rows starting at start_row."""
    end_row = start_row + row_count - 1
    return f"{quote_sheet(sheet)}!R{start_row}C1:R{end_row}C{column_count}"


def parse_table_end_row(table_range: Optional[str]) -> int:
    """Return the last occupied row of an append response's table range.

    Raises:
        IntegrityError: The range is missing or not in A1 notation.
    """
    if table_range is None:
        raise IntegrityError("Append response is missing the table range")
    match = TABLE_RANGE_PATTERN.match(table_range)
    if match is None:
        raise IntegrityError(
            f"Unexpected table range in append response: {table_range}",
            details={"table_range": table_range}
        )
    return int(match.group(2) or match.group(1))

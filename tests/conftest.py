import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

# Get the project root directory
project_root = Path(__file__).parent.parent

# Add the source directory to the Python path
sys.path.insert(0, str(project_root / "src"))

from sheets_store import Database, Numeric, String, Table, column  # noqa: E402
from sheets_store.backend.models.sheets import (  # noqa: E402
    AppendValuesResponse,
    GridProperties,
    Sheet,
    SheetProperties,
    Spreadsheet,
    ValueRange,
)
from sheets_store.backend.services.sheets_service import SheetsService  # noqa: E402
from sheets_store.core.error_handler import SheetsServiceError  # noqa: E402

RANGE_PATTERN = re.compile(r"^'((?:[^']|'')*)'(?:!R(\d+)C(\d+)(?::R(\d+)C(\d+))?)?$")


def column_letter(index: int) -> str:
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class FakeSheet:
    def __init__(self, sheet_id: int, title: str, row_count: int, column_count: int):
        self.sheet_id = sheet_id
        self.title = title
        self.row_count = row_count
        self.column_count = column_count
        self.cells: Dict[Tuple[int, int], Any] = {}
        self.formats: Dict[int, str] = {}

    def last_row(self) -> int:
        rows = [r for (r, _), v in self.cells.items() if v not in (None, "")]
        return max(rows, default=0)

    def data_rows(self) -> List[List[Any]]:
        """Rows below the header, as lists of cell values."""
        return [
            [self.cells.get((r, c)) for c in range(1, self.column_count + 1)]
            for r in range(2, self.last_row() + 1)
        ]


class FakeSheetsService(SheetsService):
    """In-memory spreadsheet recording every call it receives."""

    def __init__(self):
        self.sheets: Dict[str, FakeSheet] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.fail_on: Set[str] = set()
        self.omit_table_range = False
        self.closed = False

    def add_sheet(self, title: str, sheet_id: Optional[int] = None, column_count: int = 1) -> FakeSheet:
        if sheet_id is None:
            sheet_id = max((s.sheet_id for s in self.sheets.values()), default=0) + 1
        sheet = FakeSheet(sheet_id, title, 1, column_count)
        self.sheets[title] = sheet
        return sheet

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def _record(self, name: str, payload: Any) -> None:
        self.calls.append((name, payload))
        if name in self.fail_on:
            raise SheetsServiceError(f"{name} failed", status_code=500)

    def _resolve(self, range: str) -> Tuple[FakeSheet, int, int]:
        match = RANGE_PATTERN.match(range)
        if match is None:
            raise SheetsServiceError(f"Unable to parse range: {range}", status_code=400)
        title = match.group(1).replace("''", "'")
        if title not in self.sheets:
            raise SheetsServiceError(f"Unable to parse range: {range}", status_code=400)
        row = int(match.group(2) or 1)
        col = int(match.group(3) or 1)
        return self.sheets[title], row, col

    def _write(self, range: str, values: List[List[Any]]) -> None:
        sheet, start_row, start_col = self._resolve(range)
        for r, row in enumerate(values):
            for c, value in enumerate(row):
                if value is not None:
                    sheet.cells[(start_row + r, start_col + c)] = value

    async def get_spreadsheet(self) -> Spreadsheet:
        self._record("get_spreadsheet", None)
        return Spreadsheet(
            spreadsheetId="fake",
            sheets=[
                Sheet(properties=SheetProperties(
                    sheetId=s.sheet_id,
                    title=s.title,
                    gridProperties=GridProperties(rowCount=s.row_count, columnCount=s.column_count)
                ))
                for s in self.sheets.values()
            ]
        )

    async def batch_update(self, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        self._record("batch_update", requests)
        titles = [r["addSheet"]["properties"]["title"] for r in requests if "addSheet" in r]
        if any(t in self.sheets for t in titles) or len(set(titles)) != len(titles):
            raise SheetsServiceError("A sheet with that name already exists", status_code=400)
        for request in requests:
            if "addSheet" in request:
                properties = request["addSheet"]["properties"]
                grid = properties.get("gridProperties", {})
                sheet = self.add_sheet(
                    properties["title"],
                    sheet_id=properties.get("sheetId"),
                    column_count=grid.get("columnCount", 1)
                )
                sheet.row_count = grid.get("rowCount", 1)
            elif "updateCells" in request:
                update = request["updateCells"]
                sheet = next(s for s in self.sheets.values() if s.sheet_id == update["range"]["sheetId"])
                for c, cell in enumerate(update["rows"][0]["values"], start=1):
                    sheet.cells[(1, c)] = cell["userEnteredValue"]["stringValue"]
                    sheet.formats[c] = cell["userEnteredFormat"]["numberFormat"]["type"]
        return {"replies": [{} for _ in requests]}

    async def get_values(self, range: str) -> ValueRange:
        self._record("get_values", range)
        sheet, row, col = self._resolve(range)
        value = sheet.cells.get((row, col))
        return ValueRange(range=range, values=None if value is None else [[str(value)]])

    async def update_values(self, range, values, value_input_option="USER_ENTERED"):
        self._record("update_values", (range, values))
        self._write(range, values)
        return {"updatedRange": range}

    async def append_values(self, range, values, value_input_option="RAW"):
        self._record("append_values", range)
        sheet, _, _ = self._resolve(range)
        last_row = sheet.last_row()
        table_range = None
        if last_row and not self.omit_table_range:
            end_cell = f"{column_letter(max(sheet.column_count, 1))}{last_row}"
            # A table occupying a single cell is reported without a colon
            table_range = f"{sheet.title}!A1" if end_cell == "A1" else f"{sheet.title}!A1:{end_cell}"
        return AppendValuesResponse(spreadsheetId="fake", tableRange=table_range)

    async def batch_update_values(self, data, value_input_option="USER_ENTERED"):
        self._record("batch_update_values", data)
        for value_range in data:
            self._resolve(value_range.range)
        for value_range in data:
            self._write(value_range.range, value_range.values or [])
        return {"totalUpdatedRows": sum(len(d.values or []) for d in data)}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def sheets_service():
    """Create an empty in-memory spreadsheet."""
    return FakeSheetsService()


@pytest.fixture
def transfers_table():
    return Table("transfers", {
        "id": column(Numeric()),
        "name": column(String(), nullable=True),
    })


@pytest.fixture
def database(sheets_service, transfers_table):
    """Create a Database over the in-memory spreadsheet."""
    return Database({"transfers": transfers_table}, sheets_service)

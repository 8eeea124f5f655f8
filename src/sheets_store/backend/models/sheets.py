"""Payload models for the spreadsheet service."""

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from ...model.column_schema import Column


class GridProperties(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rowCount: Optional[int] = None
    columnCount: Optional[int] = None


class SheetProperties(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sheetId: Optional[int] = None
    title: Optional[str] = None
    gridProperties: Optional[GridProperties] = None


class Sheet(BaseModel):
    model_config = ConfigDict(extra="ignore")

    properties: Optional[SheetProperties] = None


class Spreadsheet(BaseModel):
    model_config = ConfigDict(extra="ignore")

    spreadsheetId: Optional[str] = None
    sheets: List[Sheet] = []

    def find_sheet(self, title: str) -> Optional[SheetProperties]:
        for sheet in self.sheets:
            if sheet.properties is not None and sheet.properties.title == title:
                return sheet.properties
        return None

    def sheet_ids(self) -> Dict[str, int]:
        """Lookup table of sheet title to sheet id."""
        return {
            sheet.properties.title: sheet.properties.sheetId
            for sheet in self.sheets
            if sheet.properties is not None
            and sheet.properties.title is not None
            and sheet.properties.sheetId is not None
        }


class ValueRange(BaseModel):
    model_config = ConfigDict(extra="ignore")

    range: str
    values: Optional[List[List[Any]]] = None

    def first_cell(self) -> Any:
        if not self.values or not self.values[0]:
            return None
        return self.values[0][0]


class AppendValuesResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    spreadsheetId: Optional[str] = None
    tableRange: Optional[str] = None


def add_sheet_request(
    title: str,
    row_count: int,
    column_count: int,
    sheet_id: Optional[int] = None
) -> Dict[str, Any]:
    """Build an addSheet request for a spreadsheet batch update."""
    properties = SheetProperties(
        sheetId=sheet_id,
        title=title,
        gridProperties=GridProperties(rowCount=row_count, columnCount=column_count)
    )
    return {"addSheet": {"properties": properties.model_dump(exclude_none=True)}}


def header_cells_request(sheet_id: int, columns: Sequence[Column]) -> Dict[str, Any]:
    """Build an updateCells request writing the header row of a table sheet.

    Each header cell carries the column name and its type's number format.
    """
    return {
        "updateCells": {
            "range": {
                "sheetId": sheet_id,
                "startColumnIndex": 0,
                "endColumnIndex": len(columns),
                "startRowIndex": 0,
                "endRowIndex": 1
            },
            "rows": [
                {
                    "values": [
                        {
                            "userEnteredValue": {"stringValue": col.name},
                            "userEnteredFormat": {"numberFormat": {"type": col.format_type}}
                        }
                        for col in columns
                    ]
                }
            ],
            "fields": "userEnteredValue(stringValue),userEnteredFormat(numberFormat)"
        }
    }

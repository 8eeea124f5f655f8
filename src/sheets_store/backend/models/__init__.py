"""Models package for the spreadsheet service payloads."""

from .sheets import (
    GridProperties,
    SheetProperties,
    Sheet,
    Spreadsheet,
    ValueRange,
    AppendValuesResponse
)

__all__ = [
    "GridProperties",
    "SheetProperties",
    "Sheet",
    "Spreadsheet",
    "ValueRange",
    "AppendValuesResponse"
]

"""Sheets Store - a checkpointed, append-only table store on spreadsheets."""

__version__ = "0.1.0"

from .model.types import (
    Type,
    Primitive,
    String,
    Numeric,
    Float,
    DateTime,
    Boolean
)

from .model.column_schema import Column, ColumnData, column
from .model.table_schema import Table, TableWriter

from .core.error_handler import (
    StoreError,
    SchemaViolationError,
    TransactionClosedError,
    IntegrityError,
    SheetsServiceError,
    NotConnectedError
)

from .core.store import Store, StoreWriter
from .core.database import Database, UNINITIALIZED

from .backend.services.sheets_service import SheetsService, HttpSheetsService
from .backend.config import Settings, get_settings

__all__ = [
    "Type",
    "Primitive",
    "String",
    "Numeric",
    "Float",
    "DateTime",
    "Boolean",
    "Column",
    "ColumnData",
    "column",
    "Table",
    "TableWriter",
    "StoreError",
    "SchemaViolationError",
    "TransactionClosedError",
    "IntegrityError",
    "SheetsServiceError",
    "NotConnectedError",
    "Store",
    "StoreWriter",
    "Database",
    "UNINITIALIZED",
    "SheetsService",
    "HttpSheetsService",
    "Settings",
    "get_settings"
]

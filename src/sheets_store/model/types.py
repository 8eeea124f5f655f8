"""Column types and their serialization to spreadsheet cell values."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Union

from ..core.error_handler import SchemaViolationError

Primitive = Union[str, int, float, bool]

# Largest integer a spreadsheet cell (an IEEE double) represents exactly
MAX_SAFE_INTEGER = 2 ** 53

# Spreadsheet serial day number of 1970-01-01
UNIX_EPOCH_SERIAL = 25569
MILLIS_PER_DAY = 86_400_000


@dataclass(frozen=True)
class Type:
    """A serialization contract for one kind of column value.

    Attributes:
        name: Type name used in error messages
        format_type: Number format hint for the remote column
        serializer: Function turning a value into a cell primitive
    """
    name: str
    format_type: str
    serializer: Callable[[Any], Primitive]

    def serialize(self, value: Any) -> Primitive:
        return self.serializer(value)


def _violation(type_name: str, value: Any) -> SchemaViolationError:
    return SchemaViolationError(
        f"Invalid {type_name} value: {value!r}",
        details={"type": type_name, "value_type": type(value).__name__}
    )


def _serialize_string(value: Any) -> Primitive:
    if not isinstance(value, str):
        raise _violation("String", value)
    return value


def _serialize_numeric(value: Any) -> Primitive:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        raise _violation("Numeric", value)
    if isinstance(value, int):
        if abs(value) > MAX_SAFE_INTEGER:
            return str(value)
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise _violation("Numeric", value)
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise _violation("Numeric", value)
        return str(value)
    raise _violation("Numeric", value)


def _serialize_float(value: Any) -> Primitive:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _violation("Float", value)
    try:
        result = float(value)
    except OverflowError:
        raise _violation("Float", value)
    if not math.isfinite(result):
        raise _violation("Float", value)
    return result


def _serialize_datetime(value: Any) -> Primitive:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        millis = value.timestamp() * 1000
    elif isinstance(value, date):
        millis = datetime(
            value.year, value.month, value.day, tzinfo=timezone.utc
        ).timestamp() * 1000
    else:
        raise _violation("DateTime", value)
    return millis / MILLIS_PER_DAY + UNIX_EPOCH_SERIAL


def _serialize_boolean(value: Any) -> Primitive:
    if not isinstance(value, bool):
        raise _violation("Boolean", value)
    return value


def String() -> Type:
    return Type("String", "TEXT", _serialize_string)


def Numeric() -> Type:
    """Integer or decimal numbers.

    Integers beyond the exactly representable range and Decimal values are
    written as strings so no precision is lost in the cell.
    """
    return Type("Numeric", "TEXT", _serialize_numeric)


def Float() -> Type:
    return Type("Float", "NUMBER", _serialize_float)


def DateTime() -> Type:
    """Timestamps stored as spreadsheet serial day numbers (naive values are UTC)."""
    return Type("DateTime", "DATE_TIME", _serialize_datetime)


def Boolean() -> Type:
    return Type("Boolean", "TEXT", _serialize_boolean)

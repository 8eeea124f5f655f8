from dataclasses import dataclass

from .types import Type


@dataclass(frozen=True)
class ColumnData:
    type: Type          # Serialization contract, e.g. Numeric()
    nullable: bool      # Whether this column can be left empty


@dataclass(frozen=True)
class Column:
    name: str           # Column name, also the header cell text
    data: ColumnData

    @property
    def format_type(self) -> str:
        """Number format hint of the column's type."""
        return self.data.type.format_type


def column(type: Type, nullable: bool = False) -> ColumnData:
    """Declare a column of the given type for a table schema."""
    return ColumnData(type=type, nullable=nullable)

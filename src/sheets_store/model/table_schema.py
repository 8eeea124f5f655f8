from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..core.error_handler import SchemaViolationError
from .column_schema import Column, ColumnData
from .types import Primitive

Record = Mapping[str, Any]
Row = List[Optional[Primitive]]


class Table:
    """A named, ordered set of typed columns.

    The column order fixes both the serialization order of every row and the
    remote column layout, so it must not change once rows exist.
    """

    def __init__(
        self,
        name: str,
        schema: Mapping[str, ColumnData],
        sheet_id: Optional[int] = None
    ):
        self.name = name
        self.sheet_id = sheet_id
        self.columns: Tuple[Column, ...] = tuple(
            Column(name=column_name, data=data)
            for column_name, data in schema.items()
        )

    def create_writer(self) -> "TableWriter":
        return TableWriter(self)

    def __repr__(self) -> str:
        return f"Table({self.name!r}, columns={[c.name for c in self.columns]})"


class TableWriter:
    """Append buffer for one table within one transaction."""

    def __init__(self, table: Table):
        self.table = table
        self._records: List[Record] = []

    def __len__(self) -> int:
        return len(self._records)

    def insert(self, record: Record) -> "TableWriter":
        self._records.append(record)
        return self

    def insert_many(self, records: Iterable[Record]) -> "TableWriter":
        self._records.extend(records)
        return self

    def flush(self) -> List[Row]:
        """Serialize buffered records into rows, in insertion order.

        The buffer is left untouched.

        Raises:
            SchemaViolationError: A value has the wrong type or a
                non-nullable column has no value.
        """
        rows: List[Row] = []
        for index, record in enumerate(self._records):
            row: Row = []
            for col in self.table.columns:
                value = record.get(col.name)
                if value is None:
                    if not col.data.nullable:
                        raise SchemaViolationError(
                            f"Missing value for non-nullable column "
                            f"'{self.table.name}.{col.name}' in record {index}",
                            details={"table": self.table.name, "column": col.name, "record": index}
                        )
                    row.append(None)
                    continue
                try:
                    row.append(col.data.type.serialize(value))
                except SchemaViolationError as e:
                    raise SchemaViolationError(
                        f"Column '{self.table.name}.{col.name}' in record {index}: {e}",
                        details={**e.details, "table": self.table.name, "column": col.name, "record": index}
                    ) from e
            rows.append(row)
        return rows

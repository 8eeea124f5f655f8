"""Checkpointed, append-only table store on top of a spreadsheet."""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Union

from ..backend.config import Settings, get_settings
from ..backend.models.sheets import ValueRange, add_sheet_request, header_cells_request
from ..backend.services.sheets_service import HttpSheetsService, SheetsService
from ..model.table_schema import Table
from .error_handler import IntegrityError, NotConnectedError
from .ranges import cell_range, parse_table_end_row, quote_sheet, rows_range
from .store import Store, Transaction

logger = logging.getLogger(__name__)

# Checkpoint value meaning "nothing committed yet"
UNINITIALIZED = -1

Callback = Callable[[Store], Union[Awaitable[Any], Any]]


class Database:
    """Persists rows of declared tables in checkpointed transactions.

    Every table lives in its own sheet with a header row; the highest
    committed height is kept in the single cell of the status sheet. A
    single writer process is assumed.
    """

    def __init__(
        self,
        tables: Mapping[str, Table],
        service: SheetsService,
        status_sheet: str = "squid_status",
        value_input_option: str = "USER_ENTERED",
        owns_service: bool = False
    ):
        """Initialize the database.

        Args:
            tables: Declared tables keyed by alias
            service: Transport for the backing spreadsheet
            status_sheet: Title of the sheet holding the checkpoint cell
            value_input_option: How the service interprets written values
            owns_service: Close the service when the database is closed
        """
        self.tables: Dict[str, Table] = dict(tables)
        self.service = service
        self.status_sheet = status_sheet
        self.value_input_option = value_input_option
        self._owns_service = owns_service
        self._last_committed = UNINITIALIZED
        self._connected = False
        self._sheet_ids: Dict[str, int] = {}

    @classmethod
    def from_settings(
        cls,
        tables: Mapping[str, Table],
        settings: Optional[Settings] = None
    ) -> "Database":
        """Create a database talking to the Sheets API described by settings."""
        settings = settings or get_settings()
        return cls(
            tables,
            HttpSheetsService.from_settings(settings),
            status_sheet=settings.status_sheet,
            value_input_option=settings.value_input_option,
            owns_service=True
        )

    @property
    def last_committed(self) -> int:
        return self._last_committed

    @property
    def sheet_ids(self) -> Dict[str, int]:
        """Known sheet ids by sheet title."""
        return dict(self._sheet_ids)

    async def connect(self) -> int:
        """Discover the checkpoint and create missing sheets.

        Returns:
            The last committed height, or -1 if nothing was committed.
        """
        spreadsheet = await self.service.get_spreadsheet()

        if spreadsheet.find_sheet(self.status_sheet) is None:
            logger.info(f"Creating status sheet '{self.status_sheet}'")
            await self.service.batch_update([
                add_sheet_request(self.status_sheet, row_count=1, column_count=1)
            ])
            self._last_committed = UNINITIALIZED
        else:
            value_range = await self.service.get_values(cell_range(self.status_sheet))
            self._last_committed = self._parse_height(value_range.first_cell())

        await self.migrate()

        self._connected = True
        logger.info(f"Connected, last committed height: {self._last_committed}")
        return self._last_committed

    def _parse_height(self, raw: Any) -> int:
        if raw is None or raw == "":
            return UNINITIALIZED
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise IntegrityError(
                f"Status cell of '{self.status_sheet}' does not hold a height: {raw!r}",
                details={"value": raw}
            ) from e

    async def migrate(self) -> List[str]:
        """Create the sheets of declared tables that do not exist yet.

        Sheet creation and header rows go out in one batch update.

        Returns:
            Names of the tables that were created.
        """
        spreadsheet = await self.service.get_spreadsheet()
        self._sheet_ids = spreadsheet.sheet_ids()

        new_tables: List[Table] = []
        for table in self.tables.values():
            if table.name in self._sheet_ids or any(t.name == table.name for t in new_tables):
                continue
            new_tables.append(table)
        if not new_tables:
            return []

        sheet_ids = self._allocate_sheet_ids(new_tables)
        requests = []
        for table in new_tables:
            sheet_id = sheet_ids[table.name]
            requests.append(add_sheet_request(
                table.name,
                row_count=1,
                column_count=len(table.columns),
                sheet_id=sheet_id
            ))
            requests.append(header_cells_request(sheet_id, table.columns))

        logger.info(f"Creating sheets for tables: {', '.join(t.name for t in new_tables)}")
        await self.service.batch_update(requests)

        self._sheet_ids.update(sheet_ids)
        return [t.name for t in new_tables]

    def _allocate_sheet_ids(self, new_tables: List[Table]) -> Dict[str, int]:
        used: Set[int] = set(self._sheet_ids.values())
        allocated: Dict[str, int] = {}

        for table in new_tables:
            if table.sheet_id is None:
                continue
            if table.sheet_id in used:
                raise IntegrityError(
                    f"Sheet id {table.sheet_id} of table '{table.name}' is already in use",
                    details={"table": table.name, "sheet_id": table.sheet_id}
                )
            used.add(table.sheet_id)
            allocated[table.name] = table.sheet_id

        next_id = 1
        for table in new_tables:
            if table.sheet_id is not None:
                continue
            while next_id in used:
                next_id += 1
            used.add(next_id)
            allocated[table.name] = next_id

        return allocated

    async def transact(self, from_height: int, to_height: int, callback: Callback) -> None:
        """Run callback against a fresh store and commit its rows at to_height.

        from_height is informational; it is not checked against the
        current checkpoint.

        Args:
            from_height: First height covered by the transaction
            to_height: Height recorded as committed on success
            callback: Receives the Store; may be a plain or async function
        """
        if not self._connected:
            raise NotConnectedError("Database is not connected")

        transaction = Transaction(
            {alias: table.create_writer() for alias, table in self.tables.items()}
        )
        try:
            result = callback(transaction.store)
            if inspect.isawaitable(result):
                await result

            aliases = list(self.tables)
            rows = {alias: transaction.chunk[alias].flush() for alias in aliases}

            start_rows = await asyncio.gather(
                *(self._reserve_row(self.tables[alias]) for alias in aliases)
            )

            data: List[ValueRange] = []
            for alias, start_row in zip(aliases, start_rows):
                table = self.tables[alias]
                if not rows[alias]:
                    continue
                data.append(ValueRange(
                    range=rows_range(table.name, start_row, len(rows[alias]), len(table.columns)),
                    values=rows[alias]
                ))
            data.append(ValueRange(
                range=cell_range(self.status_sheet),
                values=[[to_height]]
            ))

            await self.service.batch_update_values(data, self.value_input_option)

            self._last_committed = to_height
            logger.info(
                f"Committed heights {from_height}..{to_height}: "
                f"{sum(len(r) for r in rows.values())} rows"
            )
        except Exception as e:
            logger.error(f"Transaction {from_height}..{to_height} failed: {str(e)}")
            raise
        finally:
            transaction.close()

    async def _reserve_row(self, table: Table) -> int:
        """Return the first free row of a table's sheet."""
        response = await self.service.append_values(
            quote_sheet(table.name), [[""]], value_input_option="RAW"
        )
        row = parse_table_end_row(response.tableRange) + 1
        logger.debug(f"Reserved row {row} of '{table.name}'")
        return row

    async def advance(self, height: int) -> None:
        """Record height as committed without writing any rows."""
        if not self._connected:
            raise NotConnectedError("Database is not connected")
        if height == self._last_committed:
            return

        await self.service.update_values(
            cell_range(self.status_sheet), [[height]], self.value_input_option
        )
        self._last_committed = height
        logger.info(f"Advanced to height {height}")

    async def close(self) -> None:
        self._last_committed = UNINITIALIZED
        self._connected = False
        if self._owns_service:
            await self.service.close()

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

"""Per-transaction view of the table writers handed to caller logic."""

from typing import Callable, Dict, Iterable, Iterator, Mapping

from ..model.table_schema import Record, TableWriter
from .error_handler import TransactionClosedError

Chunk = Dict[str, TableWriter]


class StoreWriter:
    """Insert-only capability for one table of an open transaction."""

    def __init__(self, alias: str, chunk: Callable[[], Chunk]):
        self._alias = alias
        self._chunk = chunk

    def insert(self, record: Record) -> "StoreWriter":
        self._chunk()[self._alias].insert(record)
        return self

    def insert_many(self, records: Iterable[Record]) -> "StoreWriter":
        self._chunk()[self._alias].insert_many(records)
        return self

    def __repr__(self) -> str:
        return f"StoreWriter({self._alias!r})"


class Store(Mapping[str, StoreWriter]):
    """Read-only mapping of table alias to its StoreWriter.

    Writers resolve the chunk through a guard that raises
    TransactionClosedError once the owning transaction has settled.
    """

    def __init__(self, aliases: Iterable[str], chunk: Callable[[], Chunk]):
        self._writers = {alias: StoreWriter(alias, chunk) for alias in aliases}

    def __getitem__(self, alias: str) -> StoreWriter:
        return self._writers[alias]

    def __iter__(self) -> Iterator[str]:
        return iter(self._writers)

    def __len__(self) -> int:
        return len(self._writers)


class Transaction:
    """Owns the chunk and open flag of one transaction attempt."""

    def __init__(self, chunk: Chunk):
        self.chunk = chunk
        self.open = True
        self.store = Store(chunk.keys(), self._guard)

    def _guard(self) -> Chunk:
        if not self.open:
            raise TransactionClosedError("Transaction was already closed")
        return self.chunk

    def close(self) -> None:
        self.open = False

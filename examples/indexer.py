import asyncio
from datetime import datetime, timezone

from sheets_store import Boolean, Database, DateTime, Numeric, String, Table, column
from sheets_store.utils.logger import setup_logger

TABLES = {
    "blocks": Table("blocks", {
        "height": column(Numeric()),
        "timestamp": column(DateTime()),
    }),
    "transfers": Table("transfers", {
        "block": column(Numeric()),
        "sender": column(String()),
        "receiver": column(String()),
        "amount": column(Numeric()),
        "memo": column(String(), nullable=True),
        "success": column(Boolean()),
    }),
}


def fetch_blocks(start: int, end: int):
    """Stand-in for a chain client returning blocks with their transfers."""
    for height in range(start, end + 1):
        transfers = []
        if height % 3 == 0:
            transfers.append({
                "block": height,
                "sender": "alice",
                "receiver": "bob",
                "amount": 10 ** 20 + height,
                "success": True,
            })
        yield {
            "height": height,
            "timestamp": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "transfers": transfers,
        }


async def main():
    """Index blocks in batches of ten, resuming from the stored checkpoint."""
    setup_logger("sheets_store")

    # Reads SHEETS_SPREADSHEET_ID and friends from the environment or .env
    async with Database.from_settings(TABLES) as database:
        start = database.last_committed + 1
        for batch_start in range(start, start + 50, 10):
            batch_end = batch_start + 9

            async def handler(store):
                for block in fetch_blocks(batch_start, batch_end):
                    store["blocks"].insert({"height": block["height"], "timestamp": block["timestamp"]})
                    store["transfers"].insert_many(block["transfers"])

            await database.transact(batch_start, batch_end, handler)
            print(f"Committed up to {database.last_committed}")


if __name__ == "__main__":
    asyncio.run(main())

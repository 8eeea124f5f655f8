import argparse
import asyncio
import importlib
import sys
from typing import Dict, List, Optional

from .backend.config import get_settings
from .core.database import Database
from .core.error_handler import StoreError
from .model.table_schema import Table
from .utils.logger import setup_logger


def load_tables(target: Optional[str]) -> Dict[str, Table]:
    """Load a table mapping given as "package.module:attribute".

    Args:
        target: Import path of a dict of alias to Table, or None

    Returns:
        The table mapping, empty when target is None
    """
    if not target:
        return {}
    module_name, _, attribute = target.partition(":")
    if not attribute:
        raise ValueError(f"Expected 'module:attribute', got {target!r}")
    tables = getattr(importlib.import_module(module_name), attribute)
    for alias, table in tables.items():
        if not isinstance(table, Table):
            raise ValueError(f"{target}[{alias!r}] is not a Table")
    return dict(tables)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="sheets-store",
        description="Inspect and maintain a checkpointed spreadsheet store"
    )
    parser.add_argument(
        "--schema",
        type=str,
        default=None,
        help="Tables to migrate, as 'module:attribute' naming a dict of Table",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("status", help="Print the last committed height")
    subparsers.add_parser("migrate", help="Create sheets for declared tables")
    advance = subparsers.add_parser("advance", help="Record a height as committed")
    advance.add_argument("height", type=int)
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    database = Database.from_settings(load_tables(args.schema))
    try:
        if args.command == "migrate":
            created = await database.migrate()
            print(f"Created tables: {', '.join(created) or '-'}")
        height = await database.connect()
        if args.command == "advance":
            await database.advance(args.height)
            height = database.last_committed
        print(f"Last committed height: {height}")
    finally:
        await database.close()
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    setup_logger("sheets_store", "DEBUG" if args.debug else get_settings().log_level)

    try:
        sys.exit(asyncio.run(run(args)))
    except StoreError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

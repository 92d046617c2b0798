"""
Expense Export

Produces the pretty-printed JSON file a user can download. Pure
serialization: nothing here touches the ledger.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from spendwise.models.ledger import Expense, utc_now
from spendwise.services.storage.interface import StorageConnectionError
from spendwise.services.storage.snapshot import dump_expenses_json


def export_expenses_json(expenses: list[Expense], indent: int = 2) -> str:
    """
    Serialize all expenses as an indented JSON array.

    Field names and order match what the snapshot repository stores,
    so an export can be inspected next to the saved data.
    """
    return dump_expenses_json(expenses, indent=indent)


def default_export_filename(now: Optional[datetime] = None) -> str:
    """Suggested file name, e.g. "expenses-2024-12-31.json"."""
    now = now or utc_now()
    return f"expenses-{now:%Y-%m-%d}.json"


def write_export(
    expenses: list[Expense],
    destination: Union[str, Path],
    indent: int = 2,
) -> Path:
    """
    Write the export to a file, creating parent directories.

    If `destination` is an existing directory, the default file name
    is used inside it.

    Returns:
        Path of the written file

    Raises:
        StorageConnectionError: If the file cannot be written
    """
    path = Path(destination)
    if path.is_dir():
        path = path / default_export_filename()
    text = export_expenses_json(expenses, indent=indent) + "\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise StorageConnectionError(f"Failed to write export {path}: {e}") from e
    return path

"""
Process-wide store handles.

init_store builds the SQLite repositories and applies migrations once;
later calls return the same handle.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .migrator import SQLiteMigrator
from .repos import SQLiteKeyValueStore, SQLiteLoadRepo

logger = logging.getLogger(__name__)

DB_FILENAME = "loadrush.db"


@dataclass(frozen=True)
class StoreHandle:
    """Repositories bound to one database file."""

    db_path: str
    loads: SQLiteLoadRepo
    kv: SQLiteKeyValueStore


_handle: StoreHandle | None = None


def db_path_for(data_dir: str) -> str:
    return os.path.join(data_dir, DB_FILENAME)


def init_store(db_path: str) -> StoreHandle:
    """
    Initialize the store once per process.

    Subsequent calls return the existing handle, even with a different path.
    """
    global _handle
    if _handle is not None:
        if _handle.db_path != db_path:
            logger.warning(
                "Store already initialized at %s, ignoring %s", _handle.db_path, db_path
            )
        return _handle

    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    SQLiteMigrator(db_path).run_migrations()
    _handle = StoreHandle(
        db_path=db_path,
        loads=SQLiteLoadRepo(db_path),
        kv=SQLiteKeyValueStore(db_path),
    )
    logger.info("Store initialized at %s", db_path)
    return _handle


def get_store() -> StoreHandle:
    """
    Get the store handle (must call init_store first).

    Raises:
        RuntimeError: If the store has not been initialized.
    """
    if _handle is None:
        raise RuntimeError("Store not initialized. Call init_store() at startup.")
    return _handle


def reset_store() -> None:
    """Reset the store handle (for testing only)."""
    global _handle
    _handle = None

"""Opening a catalog database and the managers working on it."""

from __future__ import annotations

import os
import sqlite3

from procyon.folder_manager import FolderManager
from procyon.memo_manager import MemoManager
from procyon.settings_store import SettingsManager
from procyon.sqlstore import SqlError


def _setup(conn: sqlite3.Connection) -> None:
    try:
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as exc:
        raise SqlError(f"Failed to enable foreign keys.\n\n{exc}") from exc

    try:
        conn.execute("BEGIN")
    except sqlite3.Error as exc:
        raise SqlError(
            f"Failed to begin transaction for setup database structure.\n\n{exc}"
        ) from exc

    try:
        FolderManager(conn).prepare()
        MemoManager(conn).prepare()
        SettingsManager(conn).prepare()
    except BaseException:
        if conn.in_transaction:
            conn.rollback()
        raise
    conn.execute("COMMIT")


def open_database(file_name: str | os.PathLike[str]) -> sqlite3.Connection:
    """Open or create a catalog database and make sure its tables exist."""
    try:
        conn = sqlite3.connect(os.fspath(file_name), isolation_level=None)
    except sqlite3.Error as exc:
        raise SqlError(f"Unable to open database connection.\n\n{exc}") from exc
    try:
        _setup(conn)
    except BaseException:
        conn.close()
        raise
    return conn


class CatalogStore:
    """An open catalog database with its folder, memo and settings managers."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.folder_manager = FolderManager(conn)
        self.memo_manager = MemoManager(conn)
        self.settings_manager = SettingsManager(conn)

    @classmethod
    def open(cls, file_name: str | os.PathLike[str]) -> CatalogStore:
        return cls(open_database(file_name))

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> CatalogStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
"""Storage of catalog folders."""

from __future__ import annotations

import sqlite3
from typing import Any

from procyon.items import FolderItem
from procyon.sqlstore import SqlError, TableDef, create_table

_TABLE = TableDef(
    "Folder",
    "CREATE TABLE IF NOT EXISTS Folder (Id INTEGER PRIMARY KEY, Parent, Title)",
)
_SQL_INSERT = "INSERT INTO Folder (Id, Parent, Title) VALUES (:Id, :Parent, :Title)"
_SQL_RENAME = "UPDATE Folder SET Title = :Title WHERE Id = :Id"
_SQL_DELETE = "DELETE FROM Folder WHERE Id = :Id"
_SAVEPOINT = "folder_remove"


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class FolderManager:
    """Creates, renames, removes and loads folders of a catalog database."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def prepare(self) -> None:
        create_table(self._conn, _TABLE)

    def create(self, folder: FolderItem) -> None:
        """Give the folder a fresh id and insert it."""
        sql = _TABLE.sql_select_max_id()
        try:
            row = self._conn.execute(sql).fetchone()
        except sqlite3.Error as exc:
            raise SqlError(
                f"Unable to generate id for new folder.\n\n{sql}\n\n{exc}"
            ) from exc

        folder.id = _as_int(row[0] if row else None) + 1

        params = {
            "Id": folder.id,
            "Parent": folder.parent.id if folder.parent is not None else 0,
            "Title": folder.title,
        }
        try:
            self._conn.execute(_SQL_INSERT, params)
        except sqlite3.Error as exc:
            raise SqlError(
                f"Failed to create new folder.\n\n{_SQL_INSERT}\n\n{exc}"
            ) from exc

    def rename(self, folder_id: int, title: str) -> None:
        try:
            self._conn.execute(_SQL_RENAME, {"Id": folder_id, "Title": title})
        except sqlite3.Error as exc:
            raise SqlError(f"{_SQL_RENAME}\n\n{exc}") from exc

    def remove(self, folder: FolderItem) -> None:
        """Delete the folder and all its subfolders in one transaction."""
        try:
            self._conn.execute(f"SAVEPOINT {_SAVEPOINT}")
        except sqlite3.Error as exc:
            raise SqlError(
                f"Unable to start transaction for removing folder #{folder.id}.\n\n{exc}"
            ) from exc
        try:
            self._remove_branch(folder, "")
        except SqlError:
            self._conn.execute(f"ROLLBACK TO {_SAVEPOINT}")
            self._conn.execute(f"RELEASE {_SAVEPOINT}")
            raise
        self._conn.execute(f"RELEASE {_SAVEPOINT}")

    def _remove_branch(self, folder: FolderItem, path: str) -> None:
        this_path = f"{path}/{folder.title}"
        for child in folder.children:
            if isinstance(child, FolderItem):
                self._remove_branch(child, this_path)
        try:
            self._conn.execute(_SQL_DELETE, {"Id": folder.id})
        except sqlite3.Error as exc:
            raise SqlError(
                f"Failed to delete folder '{this_path}'.\n\n{_SQL_DELETE}\n\n{exc}"
            ) from exc

    def select_all(self) -> dict[int, FolderItem]:
        """Load all folders linked into their tree, keyed by id in id order."""
        sql = _TABLE.sql_select_all()
        try:
            cursor = self._conn.execute(sql)
            names = [column[0] for column in cursor.description]
            rows = [dict(zip(names, values)) for values in cursor]
        except sqlite3.Error as exc:
            raise SqlError(f"Unable to load folder list.\n\n{sql}\n\n{exc}") from exc

        items: dict[int, FolderItem] = {}
        for record in rows:
            folder_id = _as_int(record.get("Id"))
            item = items.setdefault(folder_id, FolderItem())
            item.id = folder_id
            title = record.get("Title")
            item.title = "" if title is None else str(title)
            parent_id = _as_int(record.get("Parent"))
            if parent_id > 0:
                parent = items.setdefault(parent_id, FolderItem())
                parent.children.append(item)
                item.parent = parent

        return dict(sorted(items.items()))
"""Storage of memos and their options."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from procyon.items import PLAIN_TEXT_MEMO_TYPE, MemoItem, MemoUpdate, get_memo_type
from procyon.sqlstore import SqlError, TableDef, add_column_if_not_exist, create_table

log = logging.getLogger(__name__)

_MEMO_TABLE = TableDef(
    "Memo",
    "CREATE TABLE IF NOT EXISTS Memo ("
    "Id INTEGER PRIMARY KEY, "
    "Parent REFERENCES Folder(Id) ON DELETE CASCADE, "
    "Title, Type, Data, Created, Updated, Station)",
)
_OPTIONS_TABLE = TableDef(
    "MemoOptions",
    "CREATE TABLE IF NOT EXISTS MemoOptions ("
    "MemoId REFERENCES Memo(Id) ON DELETE CASCADE, "
    "Name, Value)",
)

_SQL_SELECT_ALL_NO_DATA = (
    "SELECT Id, Parent, Title, Type, Created, Updated, Station FROM Memo"
)
_SQL_SELECT_DATA = "SELECT Data FROM Memo WHERE Id = ?"
_SQL_INSERT = (
    "INSERT INTO Memo (Id, Parent, Title, Type, Data, Created, Updated, Station) "
    "VALUES (:Id, :Parent, :Title, :Type, :Data, :Created, :Updated, :Station)"
)
_SQL_UPDATE = (
    "UPDATE Memo SET Title = :Title, Data = :Data, Updated = :Updated, "
    "Station = :Station WHERE Id = :Id"
)
_SQL_DELETE = "DELETE FROM Memo WHERE Id = :Id"
_SQL_SELECT_OPTIONS = "SELECT Name, Value FROM MemoOptions WHERE MemoId = ?"
_SQL_UPDATE_OPTION = (
    "REPLACE INTO MemoOptions (MemoId, Name, Value) VALUES (:MemoId, :Name, :Value)"
)


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _format_moment(moment: datetime | None) -> str | None:
    return None if moment is None else moment.isoformat(timespec="milliseconds")


def _parse_moment(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


@dataclass
class MemosResult:
    """Memos loaded without their data."""

    items: dict[int, list[MemoItem]] = field(default_factory=dict)
    """Folder id to the memos in that folder."""
    all_memos: dict[int, MemoItem] = field(default_factory=dict)
    """Memo id to memo."""
    warnings: list[str] = field(default_factory=list)


class MemoManager:
    """Creates, updates, removes and loads memos of a catalog database."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def prepare(self) -> None:
        create_table(self._conn, _MEMO_TABLE)
        for column in ("Updated", "Created", "Station"):
            add_column_if_not_exist(self._conn, _MEMO_TABLE.table_name, column)
        create_table(self._conn, _OPTIONS_TABLE)

    def create(self, item: MemoItem) -> None:
        """Give the memo a fresh id and insert it."""
        sql = _MEMO_TABLE.sql_select_max_id()
        try:
            row = self._conn.execute(sql).fetchone()
        except sqlite3.Error as exc:
            raise SqlError(
                f"Unable to generate id for new memo.\n\n{sql}\n\n{exc}"
            ) from exc

        item.id = _as_int(row[0] if row else None) + 1

        params = {
            "Id": item.id,
            "Parent": item.parent.id if item.parent is not None else 0,
            "Title": item.title,
            "Type": (item.type or PLAIN_TEXT_MEMO_TYPE).name,
            "Data": item.data,
            "Created": _format_moment(item.created),
            "Updated": _format_moment(item.updated),
            "Station": item.station,
        }
        try:
            self._conn.execute(_SQL_INSERT, params)
        except sqlite3.Error as exc:
            raise SqlError(
                f"Failed to create new memo.\n\n{_SQL_INSERT}\n\n{exc}"
            ) from exc

    def select_all(self) -> MemosResult:
        """Load every memo without its data, grouped by folder id."""
        try:
            rows = self._conn.execute(_SQL_SELECT_ALL_NO_DATA).fetchall()
        except sqlite3.Error as exc:
            raise SqlError(
                f"Unable to load memos.\n\n{_SQL_SELECT_ALL_NO_DATA}\n\n{exc}"
            ) from exc

        result = MemosResult()
        for memo_id, parent_id, title, type_name, created, updated, station in rows:
            item = MemoItem(
                id=_as_int(memo_id),
                title=_as_str(title),
                type=get_memo_type(_as_str(type_name)),
                created=_parse_moment(created),
                updated=_parse_moment(updated),
                station=_as_str(station),
            )
            result.items.setdefault(_as_int(parent_id), []).append(item)
            result.all_memos[item.id] = item

        result.items = dict(sorted(result.items.items()))
        result.all_memos = dict(sorted(result.all_memos.items()))
        return result

    def load(self, memo: MemoItem) -> None:
        """Read the memo's data and mark it loaded."""
        try:
            row = self._conn.execute(_SQL_SELECT_DATA, (memo.id,)).fetchone()
        except sqlite3.Error as exc:
            raise SqlError(
                f"Unable to load memo #{memo.id}.\n\n{_SQL_SELECT_DATA}\n\n{exc}"
            ) from exc
        if row is None:
            raise SqlError(f"Memo #{memo.id} does not exist.")
        memo.data = _as_str(row[0])
        memo.is_loaded = True

    def update(self, item: MemoItem, update: MemoUpdate) -> None:
        params = {
            "Id": item.id,
            "Title": update.title,
            "Data": update.data,
            "Updated": _format_moment(update.moment),
            "Station": update.station,
        }
        try:
            self._conn.execute(_SQL_UPDATE, params)
        except sqlite3.Error as exc:
            raise SqlError(f"{_SQL_UPDATE}\n\n{exc}") from exc

    def remove(self, item: MemoItem) -> None:
        try:
            self._conn.execute(_SQL_DELETE, {"Id": item.id})
        except sqlite3.Error as exc:
            raise SqlError(f"{_SQL_DELETE}\n\n{exc}") from exc

    def count_all(self) -> int:
        sql = _MEMO_TABLE.sql_count_all()
        try:
            row = self._conn.execute(sql).fetchone()
        except sqlite3.Error as exc:
            raise SqlError(f"{sql}\n\n{exc}") from exc
        return _as_int(row[0] if row else None)

    def select_options(self, memo_id: int) -> dict[str, Any]:
        """Options of a memo by name; empty when they cannot be read."""
        try:
            rows = self._conn.execute(_SQL_SELECT_OPTIONS, (memo_id,)).fetchall()
        except sqlite3.Error as exc:
            log.warning("Unable to select options for memo %s: %s", memo_id, exc)
            return {}
        options: dict[str, Any] = {}
        for name, value in rows:
            options[_as_str(name)] = value
        return dict(sorted(options.items()))

    def update_option(self, memo_id: int, name: str, value: Any) -> None:
        params = {"MemoId": memo_id, "Name": name, "Value": value}
        try:
            self._conn.execute(_SQL_UPDATE_OPTION, params)
        except sqlite3.Error as exc:
            raise SqlError(f"{_SQL_UPDATE_OPTION}\n\n{exc}") from exc
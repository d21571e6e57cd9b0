"""Key/value settings stored inside a catalog database."""

from __future__ import annotations

import enum
import logging
import re
import sqlite3
from collections.abc import Iterable
from typing import Any

from procyon.sqlstore import SqlError, TableDef, create_table

log = logging.getLogger(__name__)

_TABLE = TableDef("Settings", "CREATE TABLE IF NOT EXISTS Settings (Id, Value)")
_SQL_INSERT = "INSERT INTO Settings (Id, Value) VALUES (:Id, :Value)"
_SQL_UPDATE = "UPDATE Settings SET Value = :Value WHERE Id = :Id"
_SQL_SELECT = "SELECT Value FROM Settings WHERE Id = ?"
_SQL_CHECK = "SELECT Id FROM Settings WHERE Id = ? LIMIT 1"
_SQL_DELETE = "DELETE FROM Settings WHERE Id = ?"
_SQL_LIKE = "SELECT Id, Value FROM Settings WHERE Id LIKE ?"

_MISSING = object()
_INT_RE = re.compile(r"[+-]?\d+")


class TrackChanges(enum.Enum):
    """How an integer array is compared with the stored one before writing."""

    IGNORE_VALUES_ORDER = enum.auto()
    RESPECT_VALUES_ORDER = enum.auto()


def _parse_int(text: str) -> int | None:
    text = text.strip()
    return int(text) if _INT_RE.fullmatch(text) else None


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _to_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, bytes)):
        return _to_str(value).lower() not in ("", "0", "false")
    return bool(value)


def _to_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, float):
        return round(value)
    if isinstance(value, int):
        return int(value)
    parsed = _parse_int(_to_str(value))
    return 0 if parsed is None else parsed


class SettingsManager:
    """Reads and writes values of the Settings table."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def prepare(self) -> None:
        create_table(self._conn, _TABLE)

    def read_settings(self, id_pattern: str) -> dict[str, Any]:
        """Return all settings whose ids match a LIKE pattern, sorted by id."""
        try:
            rows = self._conn.execute(_SQL_LIKE, (id_pattern,)).fetchall()
        except sqlite3.Error as exc:
            log.warning("Unable to select setting %s: %s", id_pattern, exc)
            return {}
        return dict(sorted((_to_str(key), value) for key, value in rows))

    def remove(self, id: str) -> None:
        try:
            self._conn.execute(_SQL_DELETE, (id,))
        except sqlite3.Error as exc:
            log.warning("Error while delete setting %s: %s", id, exc)
            raise SqlError(f"{_SQL_DELETE}\n\n{exc}") from exc

    def _lookup(self, id: str) -> Any:
        try:
            row = self._conn.execute(_SQL_SELECT, (id,)).fetchone()
        except sqlite3.Error as exc:
            log.warning("Unable to read setting %s: %s", id, exc)
            return _MISSING
        return _MISSING if row is None else row[0]

    def write_value(self, id: str, value: Any) -> None:
        try:
            exists = self._conn.execute(_SQL_CHECK, (id,)).fetchone() is not None
        except sqlite3.Error as exc:
            log.warning("Unable to write setting %s: %s", id, exc)
            raise SqlError(f"{_SQL_CHECK}\n\n{exc}") from exc
        sql = _SQL_UPDATE if exists else _SQL_INSERT
        try:
            self._conn.execute(sql, {"Id": id, "Value": value})
        except sqlite3.Error as exc:
            log.warning("Error while write setting %s: %s", id, exc)
            raise SqlError(f"{sql}\n\n{exc}") from exc

    def read_value(self, id: str, default: Any = None) -> Any:
        value = self._lookup(id)
        return default if value is _MISSING else value

    def write_string(self, id: str, value: str) -> None:
        old = self._lookup(id)
        if old is _MISSING or _to_str(old) != value:
            self.write_value(id, value)

    def read_string(self, id: str, default: str = "") -> str:
        return _to_str(self.read_value(id, default))

    def write_bool(self, id: str, value: bool) -> None:
        old = self._lookup(id)
        if old is _MISSING or _to_bool(old) != value:
            self.write_value(id, bool(value))

    def read_bool(self, id: str, default: bool = False) -> bool:
        return _to_bool(self.read_value(id, default))

    def write_int(self, id: str, value: int) -> None:
        old = self._lookup(id)
        if old is _MISSING or _to_int(old) != value:
            self.write_value(id, int(value))

    def read_int(self, id: str, default: int = 0) -> int:
        return _to_int(self.read_value(id, default))

    def write_int_array(
        self,
        id: str,
        values: Iterable[int],
        track_changes: TrackChanges = TrackChanges.IGNORE_VALUES_ORDER,
    ) -> None:
        """Store integers joined by ';', skipping the write when nothing changed."""
        values = list(values)
        if track_changes is TrackChanges.IGNORE_VALUES_ORDER:
            if set(self.read_int_array(id)) == set(values):
                return

        value_str = ";".join(str(value) for value in values)

        if track_changes is TrackChanges.RESPECT_VALUES_ORDER:
            if _to_str(self.read_value(id)) == value_str:
                return

        self.write_value(id, value_str)

    def read_int_array(self, id: str) -> list[int]:
        text = _to_str(self.read_value(id))
        if not text:
            return []
        parsed = (_parse_int(part) for part in text.split(";"))
        return [value for value in parsed if value is not None]
"""SQLite helpers shared by the catalog storage managers."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass


class SqlError(Exception):
    """Raised when a catalog database operation fails."""


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _id_literal(id: int | str) -> str:
    return _quote(id) if isinstance(id, str) else str(int(id))


def _describe(sql: str, exc: BaseException) -> str:
    return f"{sql}\n\n{exc}"


def _rollback(conn: sqlite3.Connection) -> None:
    if conn.in_transaction:
        conn.rollback()


@dataclass(frozen=True)
class TableDef:
    """Name and creation statement of a table, with the common queries on it."""

    table_name: str
    create_sql: str

    def sql_create(self) -> str:
        return self.create_sql

    def sql_select_all(self) -> str:
        return f"SELECT * FROM {self.table_name}"

    def sql_count_all(self) -> str:
        return f"SELECT COUNT(Id) FROM {self.table_name}"

    def sql_select_by_id(self, id: int | str) -> str:
        return f"SELECT * FROM {self.table_name} WHERE Id = {_id_literal(id)}"

    def sql_select_max_id(self) -> str:
        return f"SELECT MAX(Id) FROM {self.table_name}"

    def sql_check_id(self, id: int | str) -> str:
        return f"SELECT Id FROM {self.table_name} WHERE Id = {_id_literal(id)} LIMIT 1"


def create_table(conn: sqlite3.Connection, table: TableDef) -> None:
    """Create the table if it does not exist yet; roll back and raise on failure."""
    sql = table.sql_create()
    try:
        conn.execute(sql)
    except sqlite3.Error as exc:
        _rollback(conn)
        raise SqlError(
            f"Unable to create table '{table.table_name}'.\n\n{_describe(sql, exc)}"
        ) from exc


def add_column_if_not_exist(
    conn: sqlite3.Connection, table_name: str, column_name: str
) -> None:
    """Add a column to a table unless its creation statement already mentions it."""
    check_sql = (
        "SELECT * FROM sqlite_master WHERE type = 'table' "
        "AND name = ? AND sql LIKE ?"
    )
    try:
        row = conn.execute(check_sql, (table_name, f"%{column_name}%")).fetchone()
    except sqlite3.Error as exc:
        _rollback(conn)
        raise SqlError(
            f"Failed to check if column '{table_name}' exists in table "
            f"'{column_name}'.\n\n{_describe(check_sql, exc)}"
        ) from exc

    # The table's CREATE statement names the column already.
    if row is not None:
        return

    alter_sql = f"ALTER TABLE {table_name} ADD COLUMN {column_name}"
    try:
        conn.execute(alter_sql)
    except sqlite3.Error as exc:
        _rollback(conn)
        raise SqlError(
            f"Unable to add column '{column_name}' into table '{table_name}'."
            f"\n\n{_describe(alter_sql, exc)}"
        ) from exc
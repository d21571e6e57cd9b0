import sqlite3
from datetime import datetime

import pytest

from procyon.folder_manager import FolderManager
from procyon.items import (
    MARKDOWN_MEMO_TYPE,
    PLAIN_TEXT_MEMO_TYPE,
    FolderItem,
    MemoItem,
    MemoUpdate,
)
from procyon.memo_manager import MemoManager
from procyon.sqlstore import SqlError


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:", isolation_level=None)
    connection.execute("PRAGMA foreign_keys = ON")
    yield connection
    connection.close()


@pytest.fixture
def folders(conn):
    m = FolderManager(conn)
    m.prepare()
    return m


@pytest.fixture
def manager(conn, folders):
    m = MemoManager(conn)
    m.prepare()
    return m


@pytest.fixture
def folder(folders):
    item = FolderItem(title="Notes")
    folders.create(item)
    return item


def _memo(manager, parent, title="Memo", data="text", memo_type=MARKDOWN_MEMO_TYPE):
    moment = datetime(2021, 5, 6, 7, 8, 9, 123000)
    item = MemoItem(
        title=title,
        parent=parent,
        type=memo_type,
        data=data,
        station="desk",
        created=moment,
        updated=moment,
    )
    manager.create(item)
    return item


def test_prepare_creates_tables(conn, folders):
    MemoManager(conn).prepare()
    names = {
        row[0]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }
    assert {"Memo", "MemoOptions", "Folder"} <= names


def test_prepare_adds_missing_columns(conn, folders):
    conn.execute("CREATE TABLE Memo (Id INTEGER PRIMARY KEY, Parent, Title, Type, Data)")
    MemoManager(conn).prepare()
    columns = {row[1] for row in conn.execute("PRAGMA table_info(Memo)")}
    assert {"Created", "Updated", "Station"} <= columns


def test_ids_increase(manager, folder):
    first = _memo(manager, folder)
    second = _memo(manager, folder)
    assert second.id == first.id + 1


def test_select_all_round_trip(manager, folder):
    created = _memo(manager, folder, title="First")
    result = manager.select_all()
    assert list(result.items) == [folder.id]
    [loaded] = result.items[folder.id]
    assert result.all_memos == {created.id: loaded}
    assert loaded.title == "First"
    assert loaded.type == MARKDOWN_MEMO_TYPE
    assert loaded.station == "desk"
    assert loaded.created == created.created
    assert loaded.updated == created.updated
    assert loaded.is_loaded is False
    assert loaded.data == ""
    assert result.warnings == []


def test_select_all_groups_by_folder(manager, folders, folder):
    other = FolderItem(title="Other")
    folders.create(other)
    a = _memo(manager, folder, title="a")
    b = _memo(manager, other, title="b")
    c = _memo(manager, folder, title="c")
    result = manager.select_all()
    assert [m.id for m in result.items[folder.id]] == [a.id, c.id]
    assert [m.id for m in result.items[other.id]] == [b.id]
    assert list(result.all_memos) == sorted([a.id, b.id, c.id])


def test_unknown_type_loads_as_plain_text(conn, manager, folder):
    item = _memo(manager, folder)
    conn.execute("UPDATE Memo SET Type = 'mystery' WHERE Id = ?", (item.id,))
    [loaded] = manager.select_all().items[folder.id]
    assert loaded.type == PLAIN_TEXT_MEMO_TYPE


def test_load_reads_data(manager, folder):
    item = _memo(manager, folder, data="hello world")
    [loaded] = manager.select_all().items[folder.id]
    manager.load(loaded)
    assert loaded.data == "hello world"
    assert loaded.is_loaded is True
    assert item.id == loaded.id


def test_load_missing_memo_raises(manager):
    with pytest.raises(SqlError, match="does not exist"):
        manager.load(MemoItem(id=42))


def test_update_changes_stored_values(manager, folder):
    item = _memo(manager, folder)
    moment = datetime(2022, 1, 2, 3, 4, 5)
    manager.update(item, MemoUpdate(title="New", data="new data", moment=moment, station="laptop"))
    [loaded] = manager.select_all().items[folder.id]
    manager.load(loaded)
    assert loaded.title == "New"
    assert loaded.data == "new data"
    assert loaded.updated == moment
    assert loaded.station == "laptop"
    assert loaded.created == item.created


def test_remove_and_count(manager, folder):
    a = _memo(manager, folder)
    _memo(manager, folder)
    assert manager.count_all() == 2
    manager.remove(a)
    assert manager.count_all() == 1
    assert a.id not in manager.select_all().all_memos


def test_count_empty(manager):
    assert manager.count_all() == 0


def test_removing_folder_cascades_to_memos(manager, folders, folder):
    _memo(manager, folder)
    folders.remove(folder)
    assert manager.count_all() == 0


def test_options_round_trip(manager, folder):
    item = _memo(manager, folder)
    manager.update_option(item.id, "wordWrap", 1)
    manager.update_option(item.id, "font", "Arial")
    assert manager.select_options(item.id) == {"font": "Arial", "wordWrap": 1}


def test_option_last_write_wins(manager, folder):
    item = _memo(manager, folder)
    manager.update_option(item.id, "font", "Arial")
    manager.update_option(item.id, "font", "Courier")
    assert manager.select_options(item.id) == {"font": "Courier"}


def test_options_are_per_memo(manager, folder):
    a = _memo(manager, folder)
    b = _memo(manager, folder)
    manager.update_option(a.id, "font", "Arial")
    assert manager.select_options(b.id) == {}


def test_select_options_failure_returns_empty(conn, manager, folder):
    item = _memo(manager, folder)
    manager.update_option(item.id, "font", "Arial")
    conn.execute("DROP TABLE MemoOptions")
    assert manager.select_options(item.id) == {}


def test_create_without_table_raises(conn, manager, folder):
    conn.execute("DROP TABLE Memo")
    with pytest.raises(SqlError, match="Unable to generate id for new memo"):
        manager.create(MemoItem(title="x", parent=folder, type=PLAIN_TEXT_MEMO_TYPE))


def test_select_all_without_table_raises(conn, manager):
    conn.execute("DROP TABLE MemoOptions")
    conn.execute("DROP TABLE Memo")
    with pytest.raises(SqlError, match="Unable to load memos"):
        manager.select_all()
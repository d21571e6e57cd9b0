import sqlite3

import pytest

from procyon.folder_manager import FolderManager
from procyon.items import FolderItem
from procyon.sqlstore import SqlError


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:", isolation_level=None)
    yield connection
    connection.close()


@pytest.fixture
def manager(conn):
    m = FolderManager(conn)
    m.prepare()
    return m


def _new(manager, title, parent=None):
    folder = FolderItem(title=title, parent=parent)
    manager.create(folder)
    if parent is not None:
        parent.children.append(folder)
    return folder


def test_prepare_creates_table(conn):
    FolderManager(conn).prepare()
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'Folder'"
    ).fetchone()
    assert row == ("Folder",)


def test_prepare_twice_keeps_data(manager):
    a = _new(manager, "A")
    manager.prepare()
    assert list(manager.select_all()) == [a.id]


def test_first_id_is_one(manager):
    assert _new(manager, "A").id == 1


def test_ids_increase(manager):
    a = _new(manager, "A")
    b = _new(manager, "B")
    assert b.id == a.id + 1


def test_create_stores_parent_and_title(conn, manager):
    a = _new(manager, "A")
    b = _new(manager, "B", a)
    top = conn.execute("SELECT Parent, Title FROM Folder WHERE Id = ?", (a.id,)).fetchone()
    child = conn.execute("SELECT Parent, Title FROM Folder WHERE Id = ?", (b.id,)).fetchone()
    assert top == (0, "A")
    assert child == (a.id, "B")


def test_select_all_builds_tree(manager):
    a = _new(manager, "A")
    b = _new(manager, "B", a)
    c = _new(manager, "C")
    items = manager.select_all()
    assert list(items) == sorted([a.id, b.id, c.id])
    loaded_a = items[a.id]
    loaded_b = items[b.id]
    assert loaded_a.title == "A"
    assert loaded_a.parent is None
    assert loaded_a.children == [loaded_b]
    assert loaded_b.parent is loaded_a
    assert loaded_b.path() == "A"
    assert items[c.id].children == []


def test_select_all_empty(manager):
    assert manager.select_all() == {}


def test_rename(manager):
    a = _new(manager, "A")
    manager.rename(a.id, "Renamed")
    assert manager.select_all()[a.id].title == "Renamed"


def test_remove_deletes_subfolders(manager):
    a = _new(manager, "A")
    b = _new(manager, "B", a)
    _new(manager, "C", b)
    other = _new(manager, "Other")
    manager.remove(a)
    assert list(manager.select_all()) == [other.id]


def test_remove_failure_reports_path(conn, manager):
    a = _new(manager, "A")
    conn.execute("DROP TABLE Folder")
    with pytest.raises(SqlError, match="Failed to delete folder '/A'"):
        manager.remove(a)
    assert conn.in_transaction is False


def test_remove_rolls_back_on_failure(conn, manager):
    a = _new(manager, "A")
    b = _new(manager, "B", a)
    conn.execute(
        "CREATE TRIGGER block BEFORE DELETE ON Folder WHEN old.Id = %d "
        "BEGIN SELECT RAISE(ABORT, 'blocked'); END" % a.id
    )
    with pytest.raises(SqlError, match="blocked"):
        manager.remove(a)
    assert sorted(manager.select_all()) == sorted([a.id, b.id])


def test_create_without_table_raises(conn, manager):
    conn.execute("DROP TABLE Folder")
    with pytest.raises(SqlError, match="Unable to generate id for new folder"):
        manager.create(FolderItem(title="A"))


def test_rename_without_table_raises(conn, manager):
    conn.execute("DROP TABLE Folder")
    with pytest.raises(SqlError):
        manager.rename(1, "X")


def test_select_all_without_table_raises(conn, manager):
    conn.execute("DROP TABLE Folder")
    with pytest.raises(SqlError, match="Unable to load folder list"):
        manager.select_all()
"""A notebook: the tree of folders and memos stored in one database file."""

from __future__ import annotations

import enum
import logging
import os
import uuid
from collections.abc import Callable
from datetime import datetime

from procyon.items import CatalogItem, FolderItem, MemoItem, MemoType, MemoUpdate
from procyon.sqlstore import SqlError
from procyon.store import CatalogStore

log = logging.getLogger(__name__)

_KEY_UID = "UID"


class CatalogEvent(enum.Enum):
    """Changes of memos that listeners of a catalog are told about."""

    MEMO_CREATED = "memo_created"
    MEMO_REMOVED = "memo_removed"
    MEMO_UPDATED = "memo_updated"


class Catalog:
    """An open notebook holding its folder and memo tree in memory."""

    FILE_FILTER = "Procyon Notebooks (*.enot);;All files (*.*)"
    DEFAULT_FILE_EXT = "enot"

    def __init__(self, store: CatalogStore, file_name: str | os.PathLike[str]):
        self._store = store
        self.file_name = os.fspath(file_name)
        self.station = ""
        self.top_items: list[CatalogItem] = []
        self._all_memos: dict[int, MemoItem] = {}
        self._all_folders: dict[int, FolderItem] = {}
        self._listeners: dict[CatalogEvent, list[Callable[[MemoItem], None]]] = {
            event: [] for event in CatalogEvent
        }

    @classmethod
    def open(cls, file_name: str | os.PathLike[str]) -> Catalog:
        """Open an existing notebook and load its folders and memos."""
        store = CatalogStore.open(file_name)
        try:
            catalog = cls(store, file_name)
            catalog._load()
        except BaseException:
            store.close()
            raise
        return catalog

    @classmethod
    def create(cls, file_name: str | os.PathLike[str]) -> Catalog:
        """Create an empty notebook, replacing any file of that name."""
        if os.path.exists(file_name):
            try:
                os.remove(file_name)
            except OSError as exc:
                raise SqlError(
                    "Unable to overwrite existing file, probably it is locked."
                ) from exc
        return cls(CatalogStore.open(file_name), file_name)

    def _load(self) -> None:
        folders = self._store.folder_manager.select_all()
        for folder in folders.values():
            self._all_folders[folder.id] = folder
            if folder.parent is None:
                self.top_items.append(folder)

        memos = self._store.memo_manager.select_all()
        for warning in memos.warnings:
            log.warning("%s", warning)

        for folder_id, items in memos.items.items():
            if folder_id > 0:
                parent = folders.get(folder_id)
                if parent is None:
                    log.warning(
                        "Some memos are stored in folder #%d but that "
                        "is not found in the directory.",
                        folder_id,
                    )
                    continue
                for item in items:
                    item.parent = parent
                    parent.children.append(item)
                    self._all_memos[item.id] = item
            else:
                for item in items:
                    self.top_items.append(item)
                    self._all_memos[item.id] = item

    def close(self) -> None:
        self._store.close()

    def __enter__(self) -> Catalog:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def connect(self, event: CatalogEvent, callback: Callable[[MemoItem], None]) -> None:
        """Call `callback` with the memo whenever `event` happens."""
        self._listeners[event].append(callback)

    def _emit(self, event: CatalogEvent, item: MemoItem) -> None:
        for callback in list(self._listeners[event]):
            callback(item)

    def _siblings(self, item: CatalogItem) -> list[CatalogItem]:
        return item.parent.children if item.parent is not None else self.top_items

    def _detach(self, item: CatalogItem) -> None:
        siblings = self._siblings(item)
        if item in siblings:
            siblings.remove(item)

    @staticmethod
    def _find(container: dict, id: int):
        if id <= 0:
            log.error("Invalid folder or memo id %s", id)
            return None
        if id not in container:
            log.error("Inconsistent state! Catalog does not contain folder or memo %s", id)
            return None
        return container[id]

    def find_memo_by_id(self, id: int) -> MemoItem | None:
        return self._find(self._all_memos, id)

    def find_folder_by_id(self, id: int) -> FolderItem | None:
        return self._find(self._all_folders, id)

    def uid(self) -> str:
        """Unique id of the notebook, empty if none was made yet."""
        return self._store.settings_manager.read_string(_KEY_UID)

    def get_or_make_uid(self) -> str:
        uid = self.uid()
        if not uid:
            uid = "{" + str(uuid.uuid4()) + "}"
            self._store.settings_manager.write_string(_KEY_UID, uid)
        return uid

    def count_memos(self) -> int:
        return self._store.memo_manager.count_all()

    def rename_folder(self, item: FolderItem, title: str) -> None:
        self._store.folder_manager.rename(item.id, title)
        item.title = title

    def create_folder(self, parent: FolderItem | None, title: str) -> FolderItem:
        folder = FolderItem(title=title, parent=parent)
        self._store.folder_manager.create(folder)
        self._siblings(folder).append(folder)
        self._all_folders[folder.id] = folder
        return folder

    def remove_folder(self, item: FolderItem) -> None:
        """Remove a folder with everything in it."""
        subitems = self.subitems_flat(item)

        # Subfolders go too; their memos are removed by the foreign key cascade.
        self._store.folder_manager.remove(item)

        self._detach(item)
        for subitem in subitems:
            if isinstance(subitem, FolderItem):
                self._all_folders.pop(subitem.id, None)
            elif isinstance(subitem, MemoItem):
                self._emit(CatalogEvent.MEMO_REMOVED, subitem)
                self._all_memos.pop(subitem.id, None)
        self._all_folders.pop(item.id, None)

    def create_memo(self, parent: FolderItem | None, memo_type: MemoType) -> MemoItem:
        now = datetime.now()
        item = MemoItem(
            parent=parent,
            created=now,
            updated=now,
            station=self.station,
            type=memo_type,
        )
        self._store.memo_manager.create(item)
        self._siblings(item).append(item)
        self._all_memos[item.id] = item
        self._emit(CatalogEvent.MEMO_CREATED, item)
        return item

    def update_memo(self, item: MemoItem, title: str, data: str) -> None:
        update = MemoUpdate(title=title, data=data, moment=datetime.now(), station=self.station)
        self._store.memo_manager.update(item, update)
        item.title = update.title
        item.data = update.data
        item.updated = update.moment
        item.station = update.station
        self._emit(CatalogEvent.MEMO_UPDATED, item)

    def load_memo(self, item: MemoItem) -> None:
        self._store.memo_manager.load(item)

    def remove_memo(self, item: MemoItem) -> None:
        self._store.memo_manager.remove(item)
        self._detach(item)
        self._all_memos.pop(item.id, None)
        self._emit(CatalogEvent.MEMO_REMOVED, item)

    def subitems_flat(self, root: FolderItem) -> list[CatalogItem]:
        """All items below `root`, depth first, each followed by its own subitems."""
        result: list[CatalogItem] = []
        for item in root.children:
            result.append(item)
            if isinstance(item, FolderItem):
                result.extend(self.subitems_flat(item))
        return result

    def memo_ids_flat(self, root: FolderItem) -> list[int]:
        """Ids of all memos below `root`, depth first."""
        ids: list[int] = []
        for item in root.children:
            if isinstance(item, FolderItem):
                ids.extend(self.memo_ids_flat(item))
            else:
                ids.append(item.id)
        return ids
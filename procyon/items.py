"""Memo types and the items that make up a catalog tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class MemoType:
    """Kind of memo content."""

    name: str
    title: str
    icon_path: str


PLAIN_TEXT_MEMO_TYPE = MemoType("plain_text", "Plain Text", ":/icon/memo_plain_text")
MARKDOWN_MEMO_TYPE = MemoType("markdown", "Markdown", ":/icon/memo_markdown")
RICH_TEXT_MEMO_TYPE = MemoType("rich_text", "Rich Text", ":/icon/memo_rich_text")

_MEMO_TYPES = {
    memo_type.name: memo_type
    for memo_type in sorted(
        (PLAIN_TEXT_MEMO_TYPE, MARKDOWN_MEMO_TYPE, RICH_TEXT_MEMO_TYPE),
        key=lambda t: t.name,
    )
}


def memo_types() -> dict[str, MemoType]:
    """All known memo types keyed by name, in name order."""
    return dict(_MEMO_TYPES)


def get_memo_type(name: str) -> MemoType:
    """Memo type of the given name; plain text when the name is unknown."""
    return _MEMO_TYPES.get(name, PLAIN_TEXT_MEMO_TYPE)


@dataclass(eq=False)
class CatalogItem:
    """A node of the catalog tree."""

    id: int = 0
    title: str = ""
    parent: FolderItem | None = field(default=None, repr=False)

    def path(self) -> str:
        """Titles of the ancestors from the top down, joined with '/'."""
        titles = []
        node = self.parent
        while node is not None:
            titles.append(node.title)
            node = node.parent
        return "/".join(reversed(titles))

    def is_folder(self) -> bool:
        return isinstance(self, FolderItem)

    def is_memo(self) -> bool:
        return isinstance(self, MemoItem)


@dataclass(eq=False)
class FolderItem(CatalogItem):
    """A folder holding other folders and memos."""

    children: list[CatalogItem] = field(default_factory=list)


@dataclass(eq=False)
class MemoItem(CatalogItem):
    """A memo; its data is only present once loaded."""

    type: MemoType | None = None
    data: str = ""
    station: str = ""
    is_loaded: bool = False
    created: datetime | None = None
    updated: datetime | None = None


@dataclass
class MemoUpdate:
    """New content of a memo together with when and where it was changed."""

    title: str
    data: str
    moment: datetime | None = None
    station: str = ""
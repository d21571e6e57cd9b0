"""Notebook storage: folders and memos in one SQLite file, with app settings and style sheets."""

__version__ = "0.1.0"
__all__ = [
    "app_settings",
    "catalog",
    "folder_manager",
    "items",
    "memo_manager",
    "settings_store",
    "sqlstore",
    "store",
    "theme",
]
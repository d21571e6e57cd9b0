# procyon

A notebook of memos organised in nested folders, stored in one SQLite
file. Such files conventionally have the `.enot` extension
(`Catalog.DEFAULT_FILE_EXT`).

## Install

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Notebooks

`procyon.catalog.Catalog` is the in-memory tree of a notebook file. Opening
a notebook loads all folders and the memo headers. A memo's text is read
only when `load_memo` is called.

```python
from procyon.catalog import Catalog, CatalogEvent
from procyon.items import get_memo_type

catalog = Catalog.create("notes.enot")   # replaces an existing file
catalog.connect(CatalogEvent.MEMO_CREATED, lambda memo: print("new memo", memo.id))

work = catalog.create_folder(None, "Work")
ideas = catalog.create_folder(work, "Ideas")

memo = catalog.create_memo(ideas, get_memo_type("markdown"))
catalog.update_memo(memo, "Plans", "# Plans\n\n- write more")

print(memo.path())            # "Work/Ideas"
print(catalog.count_memos())  # 1
catalog.close()

with Catalog.open("notes.enot") as catalog:
    memo = catalog.find_memo_by_id(1)
    catalog.load_memo(memo)
    print(memo.data)
```

The catalog can also:

- rename a folder with `rename_folder`;
- remove a folder with everything inside it with `remove_folder`;
- remove a memo with `remove_memo`;
- list items below a folder with `subitems_flat` and `memo_ids_flat`.

Listeners registered with `connect` are called with the memo for
`MEMO_CREATED`, `MEMO_UPDATED` and `MEMO_REMOVED`. Removing a folder reports
every memo it contained as removed.

A failing database operation raises `procyon.sqlstore.SqlError` with the
database message.

Memo types are `plain_text`, `markdown` and `rich_text`. They are listed by
`procyon.items.memo_types()`. `get_memo_type` falls back to plain text for
an unknown name.

Every notebook can carry a unique id. `Catalog.uid()` returns it, or an
empty string if there is none. `Catalog.get_or_make_uid()` creates and
stores it on first use.

## Lower-level storage

`procyon.store.CatalogStore` opens the database, enables foreign keys and
creates the tables or adds missing columns to them. It exposes the managers
as `folder_manager`, `memo_manager` and `settings_manager`, and it works as
a context manager:

```python
from procyon.store import CatalogStore
from procyon.settings_store import TrackChanges

with CatalogStore.open("notes.enot") as store:
    settings = store.settings_manager
    settings.write_int_array("recent", [3, 1, 2], TrackChanges.RESPECT_VALUES_ORDER)
    print(settings.read_int_array("recent"))   # [3, 1, 2]
    settings.write_bool("pinned", True)
    print(settings.read_bool("pinned"))        # True
```

The memo manager also keeps named per-memo options through
`update_option` and `select_options`.

## Application settings and style sheets

`procyon.app_settings.AppSettings` holds the user options: `memo_font`,
`memo_word_wrap` and `use_native_menu_bar`. `load` and `save` read them from
and write them to a `configparser.ConfigParser`, one section per category.
If `markdown_css_path` is set, `markdown_css()` reads the markdown style
sheet from that file the first time it is called. `update_markdown_css`
replaces the style sheet and tells registered listeners
`AppSettingsOption.MARKDOWN_CSS`.

`procyon.theme.make_style_sheet(raw, platform)` expands `$variable: value;`
definitions in a style sheet. Lines prefixed with `windows:`, `linux:` or
`macos:` keep their content only for the given platform, which defaults to
the running one. Lines for the other platforms are removed.
`load_raw_style_sheet` and `save_raw_style_sheet` read and overwrite a
style sheet file.

## What it does not do

This package is storage and settings only. It has no window, no editor, no
command-line program, no markdown rendering, no PDF export, no spell
checking and no syntax highlighting. Applying a style sheet and showing
memos is left to the program that uses it.
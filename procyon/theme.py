"""Preprocessing of the application style sheet."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

from procyon.app_settings import load_text

_VAR_RE = re.compile(r"(\$[a-zA-Z_][a-zA-Z_-]*)\s*:\s*(.+);")
_PLATFORMS = ("windows", "linux", "macos")
_PLATFORM_RE = {
    name: re.compile(rf"^\s*{name}:(.*)$", re.IGNORECASE | re.MULTILINE)
    for name in _PLATFORMS
}


def _current_platform() -> str | None:
    if sys.platform.startswith("win"):
        return "windows"
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        return "macos"
    return None


def make_style_sheet(raw_style_sheet: str, platform: str | None = None) -> str:
    """Interpolate `$var: value;` definitions and resolve platform-prefixed lines.

    `platform` is one of "windows", "linux" or "macos"; by default the running one.
    Lines prefixed with the chosen platform keep their content, those of other
    platforms are dropped. For any other platform such lines are left untouched.
    """
    if platform is None:
        platform = _current_platform()

    variables = {m.group(1): m.group(2) for m in _VAR_RE.finditer(raw_style_sheet)}
    style_sheet = _VAR_RE.sub("", raw_style_sheet)
    for name in sorted(variables):
        style_sheet = style_sheet.replace(name, variables[name])

    if platform in _PLATFORMS:
        style_sheet = _PLATFORM_RE[platform].sub(r"\1", style_sheet)
        for other in _PLATFORMS:
            if other != platform:
                style_sheet = _PLATFORM_RE[other].sub("", style_sheet)

    return style_sheet


def load_raw_style_sheet(path: str | os.PathLike[str]) -> str:
    """Text of the unprocessed style sheet; empty if it cannot be read."""
    return load_text(path)


def save_raw_style_sheet(path: str | os.PathLike[str], text: str) -> None:
    """Overwrite an existing style sheet file with `text`."""
    file = Path(path)
    if not file.exists():
        raise FileNotFoundError(f"File doesn't exist: {file}")
    file.write_bytes(text.encode("utf-8"))
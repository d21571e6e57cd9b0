"""Application-wide settings and their persistence in an INI configuration."""

from __future__ import annotations

import enum
import logging
import os
import sys
from collections.abc import Callable
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

DEFAULT_MEMO_FONT = "Arial,12"


def load_text(path: str | os.PathLike[str]) -> str:
    """UTF-8 text of a file; empty, with a warning logged, if it cannot be read."""
    try:
        return Path(path).read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        log.warning("Unable to open resource file %s: %s", path, exc)
        return ""


class AppSettingsOption(enum.Enum):
    """Individual settings whose change is announced to listeners."""

    MARKDOWN_CSS = "markdown_css"


@dataclass
class Option:
    """Description of one stored setting, bound to the attribute holding it."""

    category: str
    name: str
    title: str
    description: str
    default: Any
    owner: Any = field(repr=False)
    attribute: str = field(repr=False)

    @property
    def value(self) -> Any:
        return getattr(self.owner, self.attribute)

    @value.setter
    def value(self, value: Any) -> None:
        setattr(self.owner, self.attribute, value)


def _parse(text: str, default: Any) -> Any:
    if isinstance(default, bool):
        return text.strip().lower() not in ("", "0", "false")
    if isinstance(default, int):
        try:
            return int(text.strip())
        except ValueError:
            return default
    return text


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class AppSettings:
    """Settings of the application as a whole."""

    def __init__(self) -> None:
        self.use_native_menu_bar: bool = sys.platform != "win32"
        self.is_dev_mode: bool = False
        self.memo_font: str = DEFAULT_MEMO_FONT
        self.memo_word_wrap: bool = False
        self.markdown_css_path: Path | None = None
        self._markdown_css = ""
        self._listeners: list[Callable[[AppSettingsOption], None]] = []

    def options(self) -> list[Option]:
        return [
            Option(
                "Memo",
                "defaultFont",
                "Default memo font",
                "Default font used for displaying memo content",
                DEFAULT_MEMO_FONT,
                self,
                "memo_font",
            ),
            Option(
                "Memo",
                "defaultWordWrap",
                "Word-wrap memo by default",
                "Whether memo texts should be wrapped by default",
                False,
                self,
                "memo_word_wrap",
            ),
            Option(
                "View",
                "useNativeMenuBar",
                "Use native menu bar",
                "Use menu bar specific to Ubuntu Unity or MacOS (on screen's top)",
                sys.platform != "win32",
                self,
                "use_native_menu_bar",
            ),
        ]

    def load(self, config: ConfigParser) -> None:
        """Take every option from the configuration, or its default if absent."""
        for option in self.options():
            if config.has_option(option.category, option.name):
                text = config.get(option.category, option.name, raw=True)
                option.value = _parse(text, option.default)
            else:
                option.value = option.default

    def save(self, config: ConfigParser) -> None:
        for option in self.options():
            if not config.has_section(option.category):
                config.add_section(option.category)
            config.set(option.category, option.name, _format(option.value))

    def markdown_css(self) -> str:
        """Style sheet for rendered markdown, read from its file on first use."""
        if not self._markdown_css and self.markdown_css_path is not None:
            self._markdown_css = load_text(self.markdown_css_path)
        return self._markdown_css

    def update_markdown_css(self, css: str) -> None:
        self._markdown_css = css
        for listener in list(self._listeners):
            listener(AppSettingsOption.MARKDOWN_CSS)

    def register_listener(self, listener: Callable[[AppSettingsOption], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister_listener(self, listener: Callable[[AppSettingsOption], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
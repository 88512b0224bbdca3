"""Menu config loading/saving with change detection."""

from __future__ import annotations

import logging as py_logging
import math
import os
import re
import shutil
import sys
from collections.abc import Callable, Iterator
from contextlib import suppress
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from sshmenu.errors import ConfigReadError, ConfigWriteError
from sshmenu.menu.items import (
    DEFAULT_FACTORIES,
    HostItem,
    Item,
    ItemFactories,
    MenuItem,
    each_item,
    host_from_text,
    iter_items,
    tree_from_records,
    tree_to_records,
)

logger = py_logging.getLogger(__name__)

CONFIG_PATH_ENV = "SSHMENU_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/sshmenu/sshmenu.toml")
DEFAULT_TOOLTIP = "Open an SSH session in a new window"
DEFAULT_ENTRY_WIDTH = 70
BACKUP_SUFFIX = ".bak"

_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

RecordImporter = Callable[[], list[dict[str, Any]]]


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        override = os.getenv(CONFIG_PATH_ENV, "").strip()
        return Path(override or DEFAULT_CONFIG_PATH).expanduser()
    return Path(path).expanduser()


class ConfigState(BaseModel):
    """Menu tree plus the ``global`` option table and opaque ``classes`` table."""

    model_config = ConfigDict(validate_assignment=True)

    items: list[Item] = Field(default_factory=list)
    globals: dict[str, Any] = Field(default_factory=lambda: {"tooltip": DEFAULT_TOOLTIP})
    classes: dict[str, Any] = Field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self.globals:
            return default
        return self.globals[key]

    def set(self, key: str, value: Any) -> None:
        self.globals[key] = value

    def _flag(self, key: str) -> bool:
        value = self.get(key)
        if value is None or value is False:
            return False
        return value != 0

    def _set_flag(self, key: str, value: bool) -> None:
        self.set(key, 1 if value else 0)

    @property
    def tooltip_text(self) -> str:
        return str(self.globals.get("tooltip") or DEFAULT_TOOLTIP)

    @property
    def entry_width(self) -> int:
        value = self.get("entry_width", DEFAULT_ENTRY_WIDTH)
        return value if isinstance(value, int) and not isinstance(value, bool) else DEFAULT_ENTRY_WIDTH

    @property
    def hide_border(self) -> bool:
        return self._flag("hide_border")

    @hide_border.setter
    def hide_border(self, value: bool) -> None:
        self._set_flag("hide_border", value)

    @property
    def menus_tearoff(self) -> bool:
        return self._flag("menus_tearoff")

    @menus_tearoff.setter
    def menus_tearoff(self, value: bool) -> None:
        self._set_flag("menus_tearoff", value)

    @property
    def menus_open_all(self) -> bool:
        return self._flag("menus_open_all")

    @menus_open_all.setter
    def menus_open_all(self, value: bool) -> None:
        self._set_flag("menus_open_all", value)

    @property
    def menus_open_tabs(self) -> bool:
        return self._flag("menus_open_tabs")

    @menus_open_tabs.setter
    def menus_open_tabs(self, value: bool) -> None:
        self._set_flag("menus_open_tabs", value)

    @property
    def show_entry(self) -> bool:
        return self._flag("show_entry")

    @show_entry.setter
    def show_entry(self, value: bool) -> None:
        self._set_flag("show_entry", value)

    @property
    def back_up_config(self) -> bool:
        return self._flag("back_up_config")

    @back_up_config.setter
    def back_up_config(self, value: bool) -> None:
        self._set_flag("back_up_config", value)


def _escape(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return _CONTROL_CHARS.sub(lambda match: f"\\u{ord(match.group(0)):04x}", escaped)


def _toml_key(key: str) -> str:
    if _BARE_KEY.match(key):
        return key
    return f'"{_escape(key)}"'


def _toml_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(item) for item in value if item is not None) + "]"
    if isinstance(value, dict):
        pairs = [
            f"{_toml_key(str(key))} = {_toml_value(item)}"
            for key, item in value.items()
            if item is not None
        ]
        return "{ " + ", ".join(pairs) + " }" if pairs else "{}"
    raise TypeError(f"Unsupported TOML value type: {type(value)!r}")


def _table_lines(name: str, table: dict[str, Any]) -> list[str]:
    lines = ["", f"[{name}]"]
    for key, value in table.items():
        if value is None:
            continue
        lines.append(f"{_toml_key(str(key))} = {_toml_value(value)}")
    return lines


def dump_config(state: ConfigState) -> str:
    """Render the state as TOML; one inline table per top-level item."""
    records = tree_to_records(state.items)
    if records:
        lines = ["items = ["]
        lines.extend(f"    {_toml_value(record)}," for record in records)
        lines.append("]")
    else:
        lines = ["items = []"]
    lines.extend(_table_lines("global", state.globals))
    if state.classes:
        lines.extend(_table_lines("classes", state.classes))
    return "\n".join(lines) + "\n"


def parse_config(text: str, factories: ItemFactories | None = None) -> ConfigState:
    raw = tomllib.loads(text)
    globals_raw = raw.get("global")
    classes_raw = raw.get("classes")
    records = raw.get("items", raw.get("item", []))
    if not isinstance(records, list):
        records = []
    state = ConfigState(
        items=tree_from_records(records, factories),
        globals=dict(globals_raw) if isinstance(globals_raw, dict) else {},
        classes=dict(classes_raw) if isinstance(classes_raw, dict) else {},
    )
    if not state.globals.get("tooltip"):
        state.globals["tooltip"] = DEFAULT_TOOLTIP
    return state


class ConfigStore:
    """Owns the menu tree for one config file.

    ``load`` is cheap to call before every menu display: the file is only
    parsed again when its modification time changes.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        factories: ItemFactories | None = None,
        importer: RecordImporter | None = None,
    ) -> None:
        self.path = get_config_path(path)
        self.factories = factories or DEFAULT_FACTORIES
        self.importer = importer
        self.state = ConfigState()
        self._mtime: float | None = None

    def not_configured(self) -> bool:
        return not self.path.exists()

    def load(self) -> ConfigState:
        if self.not_configured():
            logger.info("config first-run path=%s", self.path)
            self.state = ConfigState(items=self._initial_items())
            self.save()
            return self.state

        mtime = self.path.stat().st_mtime
        if self._mtime is not None and mtime == self._mtime:
            return self.state

        try:
            text = self.path.read_text(encoding="utf-8")
            state = parse_config(text, self.factories)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError, TypeError, ValueError) as exc:
            logger.error("config read-failed path=%s detail=%s", self.path, exc)
            raise ConfigReadError(self.path, str(exc)) from exc

        self.state = state
        self._mtime = mtime
        logger.debug("config loaded path=%s items=%s", self.path, len(state.items))
        return self.state

    def _initial_items(self) -> list[Item]:
        if self.importer is None:
            return []
        return tree_from_records(self.importer(), self.factories)

    def save(self, state: ConfigState | None = None) -> Path:
        if state is not None:
            self.state = state
        if self.state.back_up_config:
            self.make_backup_copy()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(dump_config(self.state), encoding="utf-8")
        except OSError as exc:
            logger.error("config write-failed path=%s detail=%s", self.path, exc)
            raise ConfigWriteError(self.path, str(exc)) from exc
        with suppress(OSError):
            self.path.chmod(0o600)
        self._mtime = self.path.stat().st_mtime
        return self.path

    def make_backup_copy(self) -> Path | None:
        if not self.path.exists():
            return None
        backup = self.path.with_name(self.path.name + BACKUP_SUFFIX)
        try:
            shutil.copyfile(self.path, backup)
        except OSError:
            logger.warning("config backup-failed path=%s", backup, exc_info=True)
            return None
        return backup

    def append_host(self, host: HostItem) -> None:
        self.state.items.append(host)
        self.save()

    def host_from_text(self, text: str) -> HostItem:
        return host_from_text(text, self.factories)

    def host_by_title(self, name: str) -> HostItem:
        """First host whose title is ``name``; otherwise ``name`` as a hostname."""
        for _parents, item in iter_items(self.state.items):
            if isinstance(item, HostItem) and item.title == name:
                return item
        return self.host_from_text(name)

    def menu_by_title(self, name: str) -> MenuItem | None:
        for _parents, item in iter_items(self.state.items):
            if isinstance(item, MenuItem) and item.title == name:
                return item
        return None

    def each_item(self, visit: Callable[[list[MenuItem], Item], None]) -> None:
        each_item(self.state.items, visit)

    def iter_items(self) -> Iterator[tuple[tuple[MenuItem, ...], Item]]:
        return iter_items(self.state.items)

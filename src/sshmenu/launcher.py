"""Glue between menu selections and the launch callback."""

from __future__ import annotations

import logging as py_logging
import re
from collections.abc import Callable, Iterable

from sshmenu.commands import TerminalFamily, build_tabs_command, build_window_command
from sshmenu.config import ConfigStore
from sshmenu.errors import MenuItemError
from sshmenu.history import HistoryStore
from sshmenu.menu.items import HostItem, MenuItem

logger = py_logging.getLogger(__name__)

LaunchCallback = Callable[[str], None]

_BACKSLASH_ESCAPE = re.compile(r"\\(.)")


def _log_launch(command: str) -> None:
    logger.info("launch command=%s", command)


class Launcher:
    """Turns hosts and menus into command lines and hands them to ``launch``.

    Spawning the terminal is the caller's business; ``launch`` only ever
    receives finished command strings.
    """

    def __init__(
        self,
        config: ConfigStore,
        *,
        launch: LaunchCallback | None = None,
        family: TerminalFamily = TerminalFamily.PLAIN,
        history: HistoryStore | None = None,
    ) -> None:
        self.config = config
        self.launch = launch or _log_launch
        self.family = family
        self.history = history

    def open_host(self, host: HostItem) -> str:
        command = build_window_command(host, self.family)
        self.launch(command)
        return command

    def open_all(self, menu: MenuItem) -> list[str]:
        return [self.open_host(host) for host in menu.host_children()]

    def open_tabs(self, menu: MenuItem) -> str:
        if not menu.host_children():
            raise MenuItemError(
                f"Menu '{menu.title}' has no hosts to open.",
                hint="Add a host to the menu first.",
            )
        command = build_tabs_command(menu.items, self.family)
        self.launch(command)
        return command

    def open_by_name(self, names: Iterable[str]) -> list[str]:
        self.config.load()
        return [self.open_host(self.config.host_by_title(name)) for name in names]

    def open_text(self, text: str) -> str:
        """Connect to a string typed in the entry box and remember it."""
        value = text.strip()
        if not value:
            raise MenuItemError("No host name given.")
        self.config.load()
        command = self.open_host(self.config.host_by_title(value))
        if self.history is not None:
            self.history.add_line(value)
        return command

    def list_completions(self, prefix: str) -> list[str]:
        """Host titles starting with ``prefix``, then prefix matches from history."""
        unescaped = _unescape(prefix)
        self.config.load()
        seen: dict[str, None] = {}
        for _parents, item in self.config.iter_items():
            if isinstance(item, HostItem) and item.title.startswith(unescaped):
                seen.setdefault(item.title, None)
        if self.history is not None:
            self.history.freshen()
            for line in self.history.each_match(unescaped, prefix_only=True):
                seen.setdefault(line, None)
        return list(seen)


def _unescape(value: str) -> str:
    return _BACKSLASH_ESCAPE.sub(r"\1", value)

"""History of host strings typed into the quick-connect entry."""

from __future__ import annotations

import logging as py_logging
import re
from collections.abc import Iterator
from pathlib import Path

logger = py_logging.getLogger(__name__)

DEFAULT_HISTORY_PATH = Path("~/.sshmenu_history")


class HistoryStore:
    """Most-recent-first list of previously submitted host strings."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path if path is not None else DEFAULT_HISTORY_PATH).expanduser()
        self.lines: list[str] = []
        self._mtime: float | None = None
        self.load()

    def load(self) -> list[str]:
        self.lines = []
        self._mtime = None
        try:
            raw = self.path.read_bytes()
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return self.lines
        except OSError:
            logger.warning("history read-failed path=%s", self.path, exc_info=True)
            return self.lines
        # Only "\n" ends an entry; other line-break characters belong to the text.
        text = raw.decode("utf-8", errors="replace")
        self.lines = [line.removesuffix("\r") for line in text.split("\n")]
        if self.lines and self.lines[-1] == "":
            self.lines.pop()
        self._mtime = mtime
        return self.lines

    def freshen(self) -> bool:
        """Reload when the file changed on disk; returns True if reloaded."""
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            return False
        if mtime == self._mtime:
            return False
        self.load()
        return True

    def add_line(self, line: str) -> None:
        self.lines = [line, *(existing for existing in self.lines if existing != line)]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("".join(f"{entry}\n" for entry in self.lines), encoding="utf-8")
        self._mtime = self.path.stat().st_mtime
        logger.debug("history added entries=%s", len(self.lines))

    def each_match(self, text: str, prefix_only: bool = False) -> Iterator[str]:
        """Yield case-insensitive prefix matches, then (optionally) other substring matches."""
        pattern = re.compile(re.escape(text), re.IGNORECASE)
        snapshot = list(self.lines)
        for line in snapshot:
            if pattern.match(line):
                yield line
        if prefix_only:
            return
        for line in snapshot:
            if not pattern.match(line) and pattern.search(line):
                yield line

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.lines))

    def __len__(self) -> int:
        return len(self.lines)

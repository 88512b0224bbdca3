from __future__ import annotations

import io
import logging as py_logging
from pathlib import Path

import pytest

import sshmenu.logging as sshmenu_logging


def test_default_log_path_is_expanded() -> None:
    path = sshmenu_logging.default_log_path()

    assert path.is_absolute()
    assert path.name == "sshmenu.log"


def test_warning_alias_maps_to_warn_level() -> None:
    logger = sshmenu_logging.configure_logging("warning")

    assert logger.level == sshmenu_logging.LOG_LEVELS["WARN"]


def test_unknown_log_level_falls_back_to_warn() -> None:
    logger = sshmenu_logging.configure_logging("not-a-level")

    assert logger.level == py_logging.WARNING


def test_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSHMENU_LOG_LEVEL", "debug")

    assert sshmenu_logging.resolve_level(None) == py_logging.DEBUG
    assert sshmenu_logging.resolve_level("ERROR") == py_logging.ERROR


def test_configure_logging_resets_existing_handlers() -> None:
    logger = sshmenu_logging.configure_logging("INFO")
    assert len(logger.handlers) == 1

    logger = sshmenu_logging.configure_logging("INFO")

    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_console_handler_respects_level() -> None:
    stream = io.StringIO()
    logger = sshmenu_logging.configure_logging("ERROR", stream=stream)

    py_logging.getLogger("sshmenu.config").warning("quiet")
    py_logging.getLogger("sshmenu.config").error("loud")

    assert logger.name == "sshmenu"
    assert "quiet" not in stream.getvalue()
    assert "loud" in stream.getvalue()


def test_configure_logging_adds_debug_file_handler(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "sshmenu.log"

    logger = sshmenu_logging.configure_logging("ERROR", stream=io.StringIO(), log_file=log_file)
    file_handlers = [
        handler for handler in logger.handlers if isinstance(handler, py_logging.FileHandler)
    ]
    py_logging.getLogger("sshmenu.history").debug("history detail")
    file_handlers[0].flush()

    assert len(file_handlers) == 1
    assert file_handlers[0].level == py_logging.DEBUG
    assert logger.level == py_logging.DEBUG
    assert "history detail" in log_file.read_text(encoding="utf-8")


def test_unwritable_log_file_is_skipped(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    logger = sshmenu_logging.configure_logging("INFO", log_file=blocker / "sshmenu.log")

    assert len(logger.handlers) == 1

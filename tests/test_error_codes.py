from __future__ import annotations

import warnings

from sshmenu.errors import (
    ConfigReadError,
    ConfigWriteError,
    ExitCode,
    MenuItemError,
    SSHMenuError,
    UnknownItemTypeWarning,
    user_facing_error,
)
from sshmenu.logging import LOG_LEVELS, configure_logging


def test_exit_codes_are_deterministic() -> None:
    assert int(ExitCode.SUCCESS) == 0
    assert int(ExitCode.INVALID_ARGS) == 2
    assert int(ExitCode.CONFIG_ERROR) == 3
    assert int(ExitCode.RUNTIME_ERROR) == 4
    assert int(ExitCode.MENU_ERROR) == 5


def test_error_string_contains_hint() -> None:
    err = SSHMenuError("terminal missing", hint="Install xterm")

    assert err.code == ExitCode.RUNTIME_ERROR
    assert str(err) == "terminal missing Hint: Install xterm"
    assert str(SSHMenuError("plain")) == "plain"


def test_config_errors_carry_path_and_detail() -> None:
    read = ConfigReadError("/tmp/sshmenu.toml", "Expected value (at line 1)")
    write = ConfigWriteError("/tmp/sshmenu.toml", "Permission denied")

    assert read.message == "Error reading config file: /tmp/sshmenu.toml"
    assert read.code == ExitCode.CONFIG_ERROR
    assert read.hint == read.detail == "Expected value (at line 1)"
    assert write.message == "Error writing config file: /tmp/sshmenu.toml"
    assert str(write.path) == "/tmp/sshmenu.toml"
    assert isinstance(read, SSHMenuError)


def test_menu_item_error_code() -> None:
    err = MenuItemError("No hosts", hint="Add one")

    assert err.code == ExitCode.MENU_ERROR
    assert err.hint == "Add one"


def test_unknown_item_warning_names_the_type() -> None:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        warnings.warn(UnknownItemTypeWarning("launcher"))

    assert str(caught[0].message) == "Ignoring item of unknown type 'launcher'"
    assert caught[0].message.item_type == "launcher"


def test_user_facing_error_template() -> None:
    text = user_facing_error("Menu not found: Work", hint="Check the menu title.")

    assert text == "Error: Menu not found: Work. Next step: Check the menu title."
    assert user_facing_error("Oops") == "Error: Oops."


def test_logging_levels() -> None:
    logger = configure_logging("WARN")

    assert logger.level == LOG_LEVELS["WARN"]

"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    MENU_ERROR = 5


@dataclass
class SSHMenuError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


class ConfigReadError(SSHMenuError):
    """The config file exists but could not be parsed."""

    def __init__(self, path: str | Path, detail: str) -> None:
        super().__init__(
            f"Error reading config file: {path}",
            code=ExitCode.CONFIG_ERROR,
            hint=detail,
        )
        self.path = Path(path)
        self.detail = detail


class ConfigWriteError(SSHMenuError):
    """The config file could not be written."""

    def __init__(self, path: str | Path, detail: str) -> None:
        super().__init__(
            f"Error writing config file: {path}",
            code=ExitCode.CONFIG_ERROR,
            hint=detail,
        )
        self.path = Path(path)
        self.detail = detail


class MenuItemError(SSHMenuError):
    def __init__(self, message: str, *, hint: str = "") -> None:
        super().__init__(message, code=ExitCode.MENU_ERROR, hint=hint)


class UnknownItemTypeWarning(UserWarning):
    """An item record with an unrecognised ``type`` was dropped."""

    def __init__(self, item_type: str) -> None:
        super().__init__(f"Ignoring item of unknown type '{item_type}'")
        self.item_type = item_type


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."

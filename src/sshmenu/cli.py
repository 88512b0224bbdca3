"""Command line entrypoint: resolve hosts and emit terminal command lines."""

from __future__ import annotations

import argparse
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from importlib import metadata
from pathlib import Path

from .commands import PLAIN_TERMINAL, PROFILE_TERMINAL, TerminalFamily
from .config import ConfigStore
from .errors import ExitCode, MenuItemError, SSHMenuError, user_facing_error
from .history import HistoryStore
from .known_hosts import known_hosts_importer
from .launcher import Launcher
from .logging import configure_logging, default_log_path
from .menu.items import HostItem, MenuItem, SeparatorItem

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")
_VALID_TERMINALS = (PLAIN_TERMINAL, PROFILE_TERMINAL)


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def _version() -> str:
    try:
        return metadata.version("sshmenu")
    except metadata.PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sshmenu",
        description="Print the terminal command line for each named host.",
    )
    parser.add_argument("hosts", nargs="*", help="Host titles or raw host names")
    parser.add_argument("-c", "--config-file", type=Path, default=None)
    parser.add_argument("--history-file", type=Path, default=None)
    parser.add_argument("--terminal", choices=_VALID_TERMINALS, default=PLAIN_TERMINAL)
    parser.add_argument("-l", "--list-completions", metavar="PREFIX", default=None)
    parser.add_argument("--all", dest="open_all", metavar="MENU", default=None)
    parser.add_argument("--tabs", metavar="MENU", default=None)
    parser.add_argument(
        "--import-known-hosts",
        action="store_true",
        help="Seed a new config file from ~/.ssh/known_hosts",
    )
    parser.add_argument("--log-level", type=_log_level_type, default="WARN")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_version()}")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _print_command(command: str) -> None:
    print(command)


def _outline(store: ConfigStore) -> list[str]:
    lines: list[str] = []
    for parents, item in store.iter_items():
        indent = "  " * len(parents)
        if isinstance(item, SeparatorItem):
            lines.append(f"{indent}---")
        elif isinstance(item, MenuItem):
            lines.append(f"{indent}{item.title}/")
        elif isinstance(item, HostItem):
            lines.append(f"{indent}{item.title}")
    return lines


def _require_menu(store: ConfigStore, title: str) -> MenuItem:
    menu = store.menu_by_title(title)
    if menu is None:
        raise MenuItemError(f"Menu not found: {title}", hint="Check the menu title.")
    return menu


def build_launcher(
    namespace: argparse.Namespace,
    launch: Callable[[str], None] | None = None,
) -> Launcher:
    importer = known_hosts_importer() if namespace.import_known_hosts else None
    store = ConfigStore(namespace.config_file, importer=importer)
    history = HistoryStore(namespace.history_file)
    return Launcher(
        store,
        launch=launch or _print_command,
        family=TerminalFamily.from_program(namespace.terminal),
        history=history,
    )


def run_cli_flow(
    namespace: argparse.Namespace,
    launch: Callable[[str], None] | None = None,
) -> int:
    launcher = build_launcher(namespace, launch)
    store = launcher.config
    store.load()

    if namespace.list_completions is not None:
        for name in launcher.list_completions(namespace.list_completions):
            print(name)
        return int(ExitCode.SUCCESS)

    if namespace.open_all is not None:
        launcher.open_all(_require_menu(store, namespace.open_all))
    if namespace.tabs is not None:
        launcher.open_tabs(_require_menu(store, namespace.tabs))
    if namespace.hosts:
        launcher.open_by_name(namespace.hosts)

    if namespace.open_all is None and namespace.tabs is None and not namespace.hosts:
        for line in _outline(store):
            print(line)
    return int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    launch: Callable[[str], None] | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging()
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
        logger = configure_logging(level=namespace.log_level, log_file=log_path)
    else:
        logger = configure_logging(level=namespace.log_level)

    try:
        return run_cli_flow(namespace, launch)
    except SSHMenuError as exc:
        logger.error(
            "Handled SSHMenuError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        hint = f"Inspect logs: {log_path}" if namespace.log_file is not None else "Re-run with --log-level DEBUG."
        print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)

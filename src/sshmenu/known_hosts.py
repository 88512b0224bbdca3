"""Seed a first-run menu from the user's SSH known_hosts file."""

from __future__ import annotations

import logging as py_logging
import re
import socket
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = py_logging.getLogger(__name__)

DEFAULT_KNOWN_HOSTS_PATH = Path("~/.ssh/known_hosts")
IMPORTED_SSH_OPTIONS = "-AX"

_HASHED_ENTRY = re.compile(r"^[|]\d+[|]")
_HOST_ENTRY = re.compile(r"^([^|]\S*)\s+(?:ssh|ecdsa|sk)-\S+\s+(\S+)")
_NUMERIC_ADDRESS = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")

Canonicalize = Callable[[str], str]


@dataclass
class KnownHostsScan:
    alias_groups: list[list[str]] = field(default_factory=list)
    hashed_skipped: int = 0


@dataclass
class ImportResult:
    records: list[dict[str, Any]]
    hashed_skipped: int = 0


def canonical_name(address: str) -> str:
    """Resolve ``address`` and return the fully qualified name for it.

    Raises ``LookupError`` when either lookup fails.
    """
    try:
        resolved = socket.gethostbyname(address)
        name, _aliases, _addresses = socket.gethostbyaddr(resolved)
    except OSError as exc:
        raise LookupError(f"Cannot resolve {address}: {exc}") from exc
    return name


def list_host_aliases(lines: Iterable[str]) -> KnownHostsScan:
    """Group known_hosts aliases by host key; hashed entries are only counted."""
    scan = KnownHostsScan()
    by_key: dict[str, list[str]] = {}
    for line in lines:
        if _HASHED_ENTRY.match(line):
            scan.hashed_skipped += 1
            continue
        match = _HOST_ENTRY.match(line)
        if match is None:
            continue
        aliases, key = match.group(1), match.group(2)
        by_key.setdefault(key, []).extend(aliases.split(","))
    scan.alias_groups = list(by_key.values())
    return scan


def best_alias(aliases: list[str], canonicalize: Canonicalize = canonical_name) -> str:
    """Shortest non-numeric alias, else the first address that resolves, else the first alias."""
    names = [alias for alias in aliases if not _NUMERIC_ADDRESS.match(alias)]
    if names:
        return min(names, key=len)
    for alias in aliases:
        try:
            return canonicalize(alias)
        except LookupError:
            logger.debug("known-hosts lookup-failed alias=%s", alias)
    return aliases[0]


def best_address(*aliases: str, canonicalize: Canonicalize = canonical_name) -> str:
    """First candidate that resolves, else the last one (most recently added)."""
    for alias in aliases:
        try:
            if canonicalize(alias):
                return alias
        except LookupError:
            logger.debug("known-hosts lookup-failed alias=%s", alias)
    return aliases[-1]


def import_known_hosts(
    path: str | Path | None = None,
    *,
    canonicalize: Canonicalize = canonical_name,
) -> ImportResult:
    source = Path(path if path is not None else DEFAULT_KNOWN_HOSTS_PATH).expanduser()
    try:
        text = source.read_text(encoding="utf-8", errors="replace")
    except OSError:
        logger.info("known-hosts unreadable path=%s", source)
        return ImportResult(records=[])

    scan = list_host_aliases(text.splitlines())
    imported: dict[str, str] = {}
    for aliases in scan.alias_groups:
        name = best_alias(aliases, canonicalize)
        imported[name] = best_address(name, *aliases, canonicalize=canonicalize)

    records = [
        {"type": "host", "title": name, "sshparams": f"{IMPORTED_SSH_OPTIONS} {imported[name]}"}
        for name in sorted(imported)
    ]
    logger.info(
        "known-hosts imported count=%s hashed_skipped=%s", len(records), scan.hashed_skipped
    )
    return ImportResult(records=records, hashed_skipped=scan.hashed_skipped)


def known_hosts_importer(
    path: str | Path | None = None,
    *,
    canonicalize: Canonicalize = canonical_name,
) -> Callable[[], list[dict[str, Any]]]:
    """Importer callable suitable for ``ConfigStore(importer=...)``."""

    def _import() -> list[dict[str, Any]]:
        return import_known_hosts(path, canonicalize=canonicalize).records

    return _import

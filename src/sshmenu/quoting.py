"""Shell quoting and environment-prefix parsing for connection strings."""

from __future__ import annotations

import re

_SHELL_SPECIAL = re.compile(r'([\\"$`])')
_ENV_PREFIX = re.compile(r'(?:[A-Za-z0-9_]+="(?:\\"|[^"])*" +)*')


def shell_quote(value: str) -> str:
    """Wrap ``value`` in double quotes, escaping backslash, quote, dollar and backtick.

    These are the only characters the shell interprets inside a
    double-quoted word, so nothing else is touched.
    """
    return '"' + _SHELL_SPECIAL.sub(r"\\\1", value) + '"'


def split_env(params: str) -> tuple[str, str]:
    """Split leading ``NAME="value"`` assignments off a connection string.

    Returns ``(prefix, rest)`` where ``prefix`` is the run of assignments
    (trailing spaces included, verbatim) and ``rest`` is whatever follows.
    """
    match = _ENV_PREFIX.match(params)
    prefix = match.group(0) if match else ""
    return prefix, params[len(prefix):]

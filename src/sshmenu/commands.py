"""Terminal command lines for opening SSH sessions to menu hosts."""

from __future__ import annotations

import logging as py_logging
import shutil
from collections.abc import Iterable
from enum import Enum

from sshmenu.errors import MenuItemError
from sshmenu.menu.items import HostItem, Item
from sshmenu.quoting import shell_quote

logger = py_logging.getLogger(__name__)

SSH_COMMAND = "ssh"
ALT_TRANSPORT_PROGRAM = "bcvi"
ALT_TRANSPORT_COMMAND = "bcvi --wrap-ssh --"
PLAIN_TERMINAL = "xterm"
PROFILE_TERMINAL = "gnome-terminal"
DEFAULT_TAB_PROFILE = "Default"


class TerminalFamily(str, Enum):
    PLAIN = "plain"
    PROFILE = "profile"

    @classmethod
    def from_program(cls, program: str) -> TerminalFamily:
        if program.strip() == PROFILE_TERMINAL:
            return cls.PROFILE
        return cls.PLAIN


def have_alt_transport() -> bool:
    return shutil.which(ALT_TRANSPORT_PROGRAM) is not None


def ssh_command(host: HostItem) -> str:
    if host.enable_alt_transport:
        return ALT_TRANSPORT_COMMAND
    return SSH_COMMAND


def _ssh_invocation(host: HostItem) -> str:
    return f"{ssh_command(host)} {host.sshparams_noenv}"


def _profile(host: HostItem) -> str:
    return str(host.extra("profile", ""))


def _profile_session_clause(host: HostItem) -> str:
    # gnome-terminal takes the whole "sh -c ..." as one -e argument, so the
    # already quoted ssh command is quoted a second time.
    inner = f"sh -c {shell_quote(_ssh_invocation(host))}"
    return f" --title={shell_quote(host.title)} -e {shell_quote(inner)}"


def build_plain_command(host: HostItem, *, terminal: str = PLAIN_TERMINAL) -> str:
    """Command line for one xterm-style window running ssh."""
    command = f"{host.env_settings}{terminal} -T {shell_quote(host.title)}"
    if host.geometry:
        command += f" -geometry {host.geometry}"
    command += f" -e sh -c {shell_quote(_ssh_invocation(host))}"
    return command + " &"


def build_profile_command(host: HostItem, *, terminal: str = PROFILE_TERMINAL) -> str:
    """Command line for one gnome-terminal window, honouring the host profile.

    Environment settings need a fresh terminal server, hence
    ``--disable-factory`` whenever the host has any.
    """
    command = terminal
    env = host.env_settings
    if env:
        command = f"{env}{command} --disable-factory"
    if host.geometry:
        command += f" --geometry={host.geometry}"
    profile = _profile(host)
    if profile:
        command += f" --window-with-profile={shell_quote(profile)}"
    command += _profile_session_clause(host)
    return command + " &"


def build_tabbed_command(children: Iterable[Item], *, terminal: str = PROFILE_TERMINAL) -> str:
    """Command line for one gnome-terminal window with a tab per direct host child.

    Environment settings and geometry come from the first host only since
    they apply to the window. Separators and nested menus are skipped.
    """
    command = terminal
    first_host = True
    for item in children:
        if not isinstance(item, HostItem):
            continue
        if first_host:
            env = item.env_settings
            if env:
                command = f"{env}{command} --disable-factory"
            if item.geometry:
                command += f" --geometry={item.geometry}"
            first_host = False
        profile = _profile(item)
        if profile:
            command += f" --tab-with-profile={shell_quote(profile)}"
        else:
            command += f" --tab-with-profile={DEFAULT_TAB_PROFILE}"
        command += _profile_session_clause(item)
    return command + " &"


def build_window_command(host: HostItem, family: TerminalFamily | str = TerminalFamily.PLAIN) -> str:
    family = TerminalFamily(family)
    if family is TerminalFamily.PROFILE:
        command = build_profile_command(host)
    else:
        command = build_plain_command(host)
    logger.debug("command-build family=%s title=%r command=%s", family.value, host.title, command)
    return command


def build_tabs_command(children: Iterable[Item], family: TerminalFamily | str) -> str:
    if TerminalFamily(family) is not TerminalFamily.PROFILE:
        raise MenuItemError(
            "Opening hosts as tabs needs a tab-capable terminal.",
            hint=f"Use --terminal {PROFILE_TERMINAL}.",
        )
    return build_tabbed_command(children)

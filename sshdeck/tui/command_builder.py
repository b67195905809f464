"""
Helpers for launching the external ``ssh`` client for a host profile.

The client reads the same config file the editor writes, so the command only
needs the host alias and, when a non-default file is in use, ``-F``.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from typing import List, Optional, Sequence

from sshdeck.platform_utils import get_ssh_config_path

LOG = logging.getLogger(__name__)


def _same_path(left: str, right: str) -> bool:
    return os.path.normcase(os.path.abspath(left)) == os.path.normcase(os.path.abspath(right))


def build_ssh_command(
    host_name: str,
    *,
    ssh_command: str = "ssh",
    config_path: Optional[str] = None,
) -> List[str]:
    """
    Return the argv list for connecting to *host_name*.

    Args:
        host_name: ``Host`` alias from the config file.
        ssh_command: Client executable, optionally with extra arguments.
        config_path: Config file to pass with ``-F`` when it is not the default.
    """

    host_name = (host_name or "").strip()
    if not host_name:
        raise ValueError("Connection is missing a target host")

    try:
        cmd = shlex.split(ssh_command or "ssh")
    except ValueError as exc:
        raise ValueError("SSH command cannot be parsed") from exc
    if not cmd:
        cmd = ["ssh"]

    if config_path and not _same_path(config_path, get_ssh_config_path()):
        cmd.extend(["-F", os.path.abspath(os.path.expanduser(config_path))])

    cmd.append(host_name)
    return cmd


def format_command(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in cmd)


def launch_connection(cmd: Sequence[str]) -> int:
    """Run the client attached to the current terminal and return its exit status."""
    LOG.info("Launching %s", format_command(cmd))
    try:
        return subprocess.run(list(cmd)).returncode
    except FileNotFoundError:
        LOG.error("%s executable was not found on PATH", cmd[0])
        return -1
    except OSError as exc:
        LOG.error("Connection failed: %s", exc)
        return -1


__all__ = ["build_ssh_command", "format_command", "launch_connection"]

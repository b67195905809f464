"""
Tightening access to private key files.

A :class:`PermissionBackend` describes the commands that lock a file down on
one platform; :class:`PermissionFixer` runs them in order and stops at the
first failure. Windows uses ``icacls`` ACL edits, everything else uses
``chmod`` mode bits.
"""

from __future__ import annotations

import getpass
import logging
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from .platform_utils import is_windows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""


def run_command(argv: Sequence[str]) -> CommandResult:
    """Run *argv* capturing text output; a missing executable is reported as exit 127."""
    try:
        completed = subprocess.run(list(argv), capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        return CommandResult(127, "", f"{argv[0]}: command not found ({exc})")
    except OSError as exc:
        return CommandResult(126, "", f"{argv[0]}: {exc}")
    return CommandResult(completed.returncode, completed.stdout or "", completed.stderr or "")


CommandRunner = Callable[[Sequence[str]], CommandResult]


@dataclass(frozen=True)
class StepResult:
    """Outcome of one permission command."""

    operation: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class PermissionReport:
    path: str
    backend: str
    ok: bool
    steps: List[StepResult] = field(default_factory=list)

    @property
    def output(self) -> str:
        """Combined output of every step that ran."""
        chunks: List[str] = []
        for step in self.steps:
            for text in (step.stdout, step.stderr):
                text = (text or "").strip()
                if text:
                    chunks.append(text)
        return "\n".join(chunks)

    def summary(self) -> str:
        if self.ok:
            return f"Permissions tightened on {self.path}"
        failed = self.steps[-1] if self.steps else None
        message = f"Failed to tighten permissions on {self.path}"
        if failed is not None:
            message += f" ({' '.join(failed.operation)} exited with {failed.returncode})"
        output = self.output
        if output:
            message += f": {output}"
        return message


class PermissionBackend(ABC):
    """Platform-specific list of commands restricting a file to its owner."""

    name = "base"

    @abstractmethod
    def operations(self, path: str) -> List[List[str]]:
        """Return the commands to run against *path*, in order."""


class IcaclsBackend(PermissionBackend):
    """Windows ACL backend: drop inherited and group grants, then grant the user read."""

    name = "icacls"

    def __init__(self, user: str = None):
        self.user = user or os.environ.get("USERNAME") or getpass.getuser()

    def operations(self, path: str) -> List[List[str]]:
        return [
            ["icacls", path, "/reset"],
            ["icacls", path, "/inheritance:r"],
            ["icacls", path, "/remove", "Users"],
            ["icacls", path, "/remove", "Authenticated Users"],
            ["icacls", path, "/grant:r", f"{self.user}:(R)"],
        ]


class PosixModeBackend(PermissionBackend):
    """Mode-bit backend: clear group/other bits, then make the file owner read-only."""

    name = "chmod"

    def operations(self, path: str) -> List[List[str]]:
        return [
            ["chmod", "go-rwx", path],
            ["chmod", "u=r", path],
        ]


def select_backend() -> PermissionBackend:
    """Pick the backend for the running platform."""
    if is_windows():
        return IcaclsBackend()
    return PosixModeBackend()


class PermissionFixer:
    """Runs a backend's command sequence and reports the aggregate result."""

    def __init__(self, backend: PermissionBackend = None, runner: CommandRunner = run_command):
        self.backend = backend or select_backend()
        self.runner = runner

    def run_permission_sequence(self, path: str) -> List[StepResult]:
        """Run each operation in turn, stopping after the first non-zero exit."""
        steps: List[StepResult] = []
        for operation in self.backend.operations(path):
            result = self.runner(operation)
            step = StepResult(list(operation), result.returncode, result.stdout, result.stderr)
            steps.append(step)
            logger.debug("%s -> %s", " ".join(operation), result.returncode)
            if not step.ok:
                logger.warning(
                    "Permission command failed (%s): %s", result.returncode, " ".join(operation)
                )
                break
        return steps

    def tighten_permissions(self, path: str) -> PermissionReport:
        steps = self.run_permission_sequence(path)
        ok = bool(steps) and all(step.ok for step in steps)
        report = PermissionReport(path=path, backend=self.backend.name, ok=ok, steps=steps)
        if ok:
            logger.info("Tightened permissions on %s using %s", path, self.backend.name)
        return report


__all__ = [
    "CommandResult",
    "IcaclsBackend",
    "PermissionBackend",
    "PermissionFixer",
    "PermissionReport",
    "PosixModeBackend",
    "StepResult",
    "run_command",
    "select_backend",
]

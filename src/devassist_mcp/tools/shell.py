"""Subprocess execution used by command-running tools.

Commands run to completion; there is no timeout.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class CommandResult:
    """Captured output of one finished process."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_shell(command: str, cwd: Path) -> CommandResult:
    """Run ``command`` through the system shell."""
    completed = subprocess.run(
        command,
        shell=True,
        cwd=cwd,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def run_argv(argv: list[str], cwd: Path) -> CommandResult:
    """Run an argument vector without a shell."""
    completed = subprocess.run(
        argv,
        cwd=cwd,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def format_output(title: str, result: CommandResult) -> str:
    """Render process output the way tool results present it."""
    text = f"{title}:\n\n{result.stdout}"
    if result.stderr:
        text += f"\n\nErrors:\n{result.stderr}"
    if not result.ok:
        text += f"\n\nExit code: {result.returncode}"
    return text

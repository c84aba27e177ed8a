"""Synchronous external command execution.

Commands run through the shell in a given working directory with the
terminal's stdout/stderr inherited, so generator output streams straight
to the user. Exit status is the only contract; output is never parsed.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from rich.console import Console

console = Console()


class CommandExecutionError(Exception):
    """Raised when an external command exits non-zero or cannot be spawned.

    Attributes:
        command: The literal command string that was run.
        cwd: Working directory the command ran in.
        returncode: Process exit status, or None if the process never started.
    """

    def __init__(self, command: str, cwd: Path, returncode: int | None = None) -> None:
        self.command = command
        self.cwd = cwd
        self.returncode = returncode
        if returncode is None:
            reason = "could not be started"
        else:
            reason = f"exited with code {returncode}"
        super().__init__(f"Command '{command}' {reason} (in {cwd})")


class CommandRunner:
    """Runs one external command at a time, blocking until it exits.

    Failures are never retried and never interpreted; the calling step
    decides what a failure means.

    Args:
        dry_run: If True, print each command instead of executing it and
            treat it as successful.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def run(self, command: str, cwd: Path) -> None:
        """Run command in cwd.

        Raises:
            CommandExecutionError: On non-zero exit or spawn failure.
        """
        if self.dry_run:
            console.print(f"[dim]would run:[/dim] {command} [dim](in {cwd})[/dim]")
            return

        console.print(f"[dim]$ {command}[/dim]")
        try:
            result = subprocess.run(command, shell=True, cwd=cwd, check=False)
        except OSError as exc:
            raise CommandExecutionError(command, cwd) from exc

        if result.returncode != 0:
            raise CommandExecutionError(command, cwd, result.returncode)

"""Subprocess execution for external Android tools."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.errors import CommandFailed, ToolNotFound
from ..core.logger import log


@dataclass
class CommandResult:
    """Captured output of a finished command."""

    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner:
    """Run argument vectors as subprocesses, failing on nonzero exit.

    Commands are never passed through a shell. With ``verbose`` set every
    command is echoed (secrets masked) before it runs.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def _echo(self, argv: Sequence[str]) -> None:
        if self.verbose:
            log.log_command(argv)
        else:
            log.trace(f"exec {argv[0]}")

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> CommandResult:
        """Run ``argv`` to completion and return its captured output.

        Raises:
            ToolNotFound: The executable could not be started.
            CommandFailed: The command exited with a nonzero status.
        """
        argv = [str(arg) for arg in argv]
        self._echo(argv)
        try:
            proc = subprocess.run(  # noqa: S603
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ToolNotFound(f"cannot execute {argv[0]}: {e}") from e

        if proc.returncode != 0:
            raise CommandFailed(argv, proc.returncode, proc.stdout, proc.stderr, operation=operation)

        return CommandResult(argv=argv, returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

    def spawn(self, argv: Sequence[str]) -> subprocess.Popen:
        """Start a long-running command with stdout piped and stderr merged in."""
        argv = [str(arg) for arg in argv]
        self._echo(argv)
        try:
            return subprocess.Popen(  # noqa: S603
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                bufsize=0,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ToolNotFound(f"cannot execute {argv[0]}: {e}") from e

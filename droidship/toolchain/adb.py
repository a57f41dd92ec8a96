"""Wrapper around the adb executable: location and argument vector construction."""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path
from typing import Optional

from ..core.config import Config, config
from ..core.errors import ToolNotFound
from .runner import CommandResult, CommandRunner

ADB_NAME = "adb.exe" if sys.platform == "win32" else "adb"


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


class Adb:
    """Thin wrapper around the ``adb`` executable.

    Builds argument vectors (optionally targeted at one device with ``-s``)
    and runs them through a :class:`CommandRunner`.
    """

    def __init__(self, executable: str | os.PathLike, runner: Optional[CommandRunner] = None):
        self.executable = str(executable)
        self.runner = runner or CommandRunner()

    # ---------------------------------------------------------------------
    # Factory helpers
    # ---------------------------------------------------------------------
    @classmethod
    def locate(cls, settings: Config = config, runner: Optional[CommandRunner] = None) -> Adb:
        """Find adb from settings, the SDK roots, then ``PATH``.

        Raises:
            ToolNotFound: If no runnable adb is found.

        """
        searched: list[str] = []

        if settings.adb_path:
            candidate = Path(settings.adb_path).expanduser()
            if _is_executable(candidate):
                return cls(candidate, runner)
            raise ToolNotFound(f"configured adb_path {candidate} is missing or not executable")

        for root in settings.sdk_roots():
            candidate = Path(root).expanduser() / "platform-tools" / ADB_NAME
            searched.append(str(candidate))
            if _is_executable(candidate):
                return cls(candidate, runner)

        found = shutil.which("adb")
        if found:
            return cls(found, runner)
        searched.append("PATH")

        raise ToolNotFound(
            f"adb not found (searched {', '.join(searched)}); install the Android platform-tools "
            "or set ANDROID_HOME / ADB_PATH"
        )

    # ---------------------------------------------------------------------
    # Command construction
    # ---------------------------------------------------------------------
    def command(self, *args: str, serial: Optional[str] = None) -> list[str]:
        """Return the full argument vector for an adb invocation."""
        argv = [self.executable]
        if serial:
            argv += ["-s", serial]
        argv += [str(arg) for arg in args]
        return argv

    def run(self, *args: str, serial: Optional[str] = None, operation: Optional[str] = None) -> CommandResult:
        """Run an adb subcommand and return its captured output."""
        return self.runner.run(self.command(*args, serial=serial), operation=operation)

    def __repr__(self) -> str:  # pragma: no cover – string representation only
        return f"<Adb executable={self.executable!r}>"

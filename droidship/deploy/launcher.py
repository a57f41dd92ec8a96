"""Starting the deployed app's component."""

from __future__ import annotations

from ..core.errors import CommandFailed
from ..core.logger import log
from ..toolchain.adb import Adb


def launch_command(adb: Adb, device: str, component: str) -> list[str]:
    return adb.command("shell", "am", "start", "-n", component, serial=device)


def launch_component(adb: Adb, device: str, component: str) -> None:
    """Start ``component`` (``package/.Activity``) on ``device``.

    Raises:
        CommandFailed: adb failed, or ``am`` reported an error. Older
            Android releases print ``Error:`` but still exit with status 0.
    """
    log.info(f"Launching {component}")
    argv = launch_command(adb, device, component)
    result = adb.runner.run(argv, operation="launch")
    if "Error:" in result.stdout or "Error:" in result.stderr:
        raise CommandFailed(argv, 1, result.stdout, result.stderr, operation="launch")

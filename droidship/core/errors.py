"""Exception hierarchy for deployment failures.

Every error carries an ``operation`` tag naming the step that failed, so the
CLI can print ``str(error)`` directly to the user.
"""

from __future__ import annotations

from typing import Sequence

from ..utils.helpers import format_command


class DeployError(RuntimeError):
    """Base class for all droidship errors."""

    operation = "deploy"

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        if operation is not None:
            self.operation = operation
        self.message = message
        super().__init__(f"{self.operation}: {message}")


class ToolNotFound(DeployError):
    """adb, bundletool or java is missing or not executable."""

    operation = "locate-tool"


class DeviceEnumerationFailed(DeployError):
    """``adb devices`` could not be run."""

    operation = "list-devices"


class NoDeviceFound(DeployError):
    """``auto`` was requested but no device is connected."""

    operation = "resolve-device"


class DeviceNotConnected(DeployError):
    """The requested device id is not in the connected set."""

    operation = "resolve-device"

    def __init__(self, device: str, connected: Sequence[str]) -> None:
        self.device = device
        self.connected = list(connected)
        listing = ", ".join(self.connected) if self.connected else "none"
        super().__init__(f"device {device!r} is not connected (connected: {listing})")


class CommandFailed(DeployError):
    """A subprocess exited with a nonzero status."""

    operation = "run-command"

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
        *,
        operation: str | None = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = (stderr or stdout).strip()
        message = f"`{format_command(argv)}` exited with status {returncode}"
        if detail:
            message += f"\n{detail}"
        super().__init__(message, operation=operation)


class KeystoreResolutionError(DeployError):
    """The signing keystore could not be fully resolved."""

    operation = "resolve-keystore"


class DeploymentCancelled(DeployError):
    """The deployment was interrupted through its cancellation token."""

    operation = "cancelled"

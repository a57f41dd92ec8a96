"""Connected device discovery and selection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .errors import DeployError, DeviceEnumerationFailed, DeviceNotConnected, NoDeviceFound
from .logger import log
from .models import AUTO_DEVICE

if TYPE_CHECKING:
    from ..toolchain.adb import Adb

# Present on every ready device line of ``adb devices -l``
MODEL_MARKER = " model:"


def parse_device_list(output: str) -> list[str]:
    """Extract device ids from ``adb devices -l`` output.

    Only lines carrying a model are kept; unauthorized and offline devices
    have none. The id is everything before the first space.

    >>> parse_device_list("List of devices attached\\nemulator-5554 device model:Pixel_4\\n")
    ['emulator-5554']
    """
    devices: list[str] = []
    for line in output.splitlines():
        if MODEL_MARKER not in line:
            continue
        devices.append(line.split(" ", 1)[0])
    return devices


def enumerate_devices(adb: Adb) -> list[str]:
    """Return the ids of connected devices, in adb's order.

    Raises:
        DeviceEnumerationFailed: If ``adb devices -l`` could not run.
    """
    try:
        result = adb.run("devices", "-l", operation="list-devices")
    except DeployError as e:
        raise DeviceEnumerationFailed(str(e)) from e

    devices = parse_device_list(result.stdout)
    log.debug(f"Connected devices: {devices or 'none'}")
    return devices


def list_devices(adb: Adb) -> list[str]:
    """Best-effort listing: any failure yields an empty list."""
    try:
        return enumerate_devices(adb)
    except DeployError as e:
        log.debug(f"Device listing failed, reporting none: {e}")
        return []


def resolve_device(requested: str, devices: Sequence[str]) -> Optional[str]:
    """Pick the device a deployment targets.

    Args:
        requested: ``"auto"``, an explicit id, or ``""`` for no device.
        devices: Enumerated connected device ids.

    Returns:
        The device id, or ``None`` when no device was requested.

    Raises:
        NoDeviceFound: ``"auto"`` with no connected device.
        DeviceNotConnected: An explicit id that is not connected.
    """
    if requested == AUTO_DEVICE:
        if not devices:
            raise NoDeviceFound("no connected device found; connect one or start an emulator")
        return devices[0]

    if requested == "":
        return None

    if requested not in devices:
        raise DeviceNotConnected(requested, devices)
    return requested

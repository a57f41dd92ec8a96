from __future__ import annotations

import pytest
from conftest import FakeRunner

from droidship.core.devices import enumerate_devices, list_devices, parse_device_list, resolve_device
from droidship.core.errors import DeviceEnumerationFailed, DeviceNotConnected, NoDeviceFound
from droidship.toolchain.adb import Adb


def test_parse_device_list_extracts_id_before_first_space() -> None:
    assert parse_device_list("emulator-5554 model:Pixel_4 device:generic\n") == ["emulator-5554"]


def test_parse_device_list_without_model_lines_is_empty() -> None:
    output = (
        "List of devices attached\n"
        "0123456789ABCDEF       unauthorized usb:1-1 transport_id:3\n"
        "emulator-5556          offline transport_id:4\n"
    )
    assert parse_device_list(output) == []
    assert parse_device_list("") == []


def test_enumerate_devices_keeps_adb_order(adb: Adb, runner: FakeRunner) -> None:
    assert enumerate_devices(adb) == ["emulator-5554", "R58M123ABC"]
    assert runner.calls == [["adb", "devices", "-l"]]


def test_enumerate_devices_wraps_command_failure() -> None:
    adb = Adb("adb", FakeRunner(fail_on="devices"))
    with pytest.raises(DeviceEnumerationFailed) as excinfo:
        enumerate_devices(adb)
    assert str(excinfo.value).startswith("list-devices:")


def test_list_devices_swallows_failures() -> None:
    adb = Adb("adb", FakeRunner(fail_on="devices"))
    assert list_devices(adb) == []


def test_resolve_auto_picks_first_device() -> None:
    assert resolve_device("auto", ["X", "Y"]) == "X"


def test_resolve_auto_without_devices_fails() -> None:
    with pytest.raises(NoDeviceFound):
        resolve_device("auto", [])


def test_resolve_unknown_device_fails() -> None:
    with pytest.raises(DeviceNotConnected) as excinfo:
        resolve_device("Z", ["X", "Y"])
    assert excinfo.value.device == "Z"
    assert excinfo.value.connected == ["X", "Y"]


def test_resolve_explicit_connected_device() -> None:
    assert resolve_device("Y", ["X", "Y"]) == "Y"


def test_resolve_empty_request_is_a_no_op() -> None:
    assert resolve_device("", ["X", "Y"]) is None
    assert resolve_device("", []) is None

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_str = str(repo_root)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_on_path()

from droidship.core.config import Config  # noqa: E402
from droidship.core.errors import CommandFailed  # noqa: E402
from droidship.toolchain.adb import Adb  # noqa: E402
from droidship.toolchain.runner import CommandResult  # noqa: E402

DEVICES_OUTPUT = (
    "List of devices attached\n"
    "emulator-5554          device product:sdk_gphone64_x86_64 model:Pixel_4 device:emu64x transport_id:1\n"
    "R58M123ABC             device usb:1-1 product:beyond1ltexx model:SM_G973F device:beyond1 transport_id:2\n"
    "\n"
)


class FakeStream:
    """Pipe stand-in returning one scripted chunk per read."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)
        self.closed = False
        self.read_sizes: list[int] = []

    def read(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError("read of closed file")
        self.read_sizes.append(size)
        if not self._chunks:
            return b""
        return self._chunks.pop(0)

    def close(self) -> None:
        self.closed = True


class FakeProcess:
    """Child process that stays alive until terminated, killed or waited on."""

    def __init__(self, chunks: list[bytes]) -> None:
        self.stdout = FakeStream(chunks)
        self.returncode: Optional[int] = None
        self.terminated = False
        self.killed = False
        self.waited = False

    def poll(self) -> Optional[int]:
        return self.returncode

    def wait(self, timeout: Optional[float] = None) -> int:
        self.waited = True
        if self.returncode is None:
            self.returncode = 0
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True
        self.returncode = -15

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9


class FakeRunner:
    """Records every command instead of running it."""

    def __init__(
        self,
        *,
        devices_output: str = DEVICES_OUTPUT,
        crash_log: str = "",
        fail_on: Optional[str] = None,
        stream: Optional[list[bytes]] = None,
        stdout_for: Optional[dict[str, str]] = None,
        before_run: Optional[Callable[[list[str]], None]] = None,
    ) -> None:
        self.verbose = False
        self.devices_output = devices_output
        self.crash_log = crash_log
        self.fail_on = fail_on
        self.stream = stream or []
        self.stdout_for = stdout_for or {}
        self.before_run = before_run
        self.calls: list[list[str]] = []
        self.spawned: list[FakeProcess] = []

    def run(self, argv, *, cwd=None, operation=None) -> CommandResult:  # noqa: ARG002
        argv = [str(arg) for arg in argv]
        self.calls.append(argv)
        if self.before_run is not None:
            self.before_run(argv)

        joined = " ".join(argv)
        if self.fail_on and self.fail_on in joined:
            raise CommandFailed(argv, 1, "", "simulated failure", operation=operation)

        if "devices -l" in joined:
            stdout = self.devices_output
        elif "--buffer=crash" in joined:
            stdout = self.crash_log
        else:
            stdout = next((out for key, out in self.stdout_for.items() if key in joined), "")
        return CommandResult(argv=argv, returncode=0, stdout=stdout, stderr="")

    def spawn(self, argv) -> FakeProcess:
        argv = [str(arg) for arg in argv]
        self.calls.append(argv)
        proc = FakeProcess(self.stream)
        self.spawned.append(proc)
        return proc

    def index_of(self, needle: str) -> int:
        for i, argv in enumerate(self.calls):
            if needle in " ".join(argv):
                return i
        raise AssertionError(f"no call containing {needle!r}: {self.calls}")


@pytest.fixture
def settings() -> Config:
    return Config(crash_scan_delay=0.0, adb_path=None, android_home=None, android_sdk_root=None)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def adb(runner: FakeRunner) -> Adb:
    return Adb("adb", runner)


@pytest.fixture
def apk(tmp_path: Path) -> Path:
    path = tmp_path / "app-debug.apk"
    path.write_bytes(b"PK\x03\x04")
    return path


@pytest.fixture
def aab(tmp_path: Path) -> Path:
    path = tmp_path / "app-release.aab"
    path.write_bytes(b"PK\x03\x04")
    return path

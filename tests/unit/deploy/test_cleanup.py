from __future__ import annotations

import signal

import psutil
import pytest

from droidship.core.cancellation import CancellationToken
from droidship.deploy import cleanup as cleanup_module
from droidship.deploy.cleanup import install_interrupt_handler, kill_bridge_processes


class _FakeProc:
    def __init__(self, pid: int, name: str | None, *, gone: bool = False) -> None:
        self.pid = pid
        self.info = {"name": name}
        self.gone = gone
        self.killed = False

    def kill(self) -> None:
        if self.gone:
            raise psutil.NoSuchProcess(self.pid)
        self.killed = True


def test_kill_bridge_processes_only_kills_adb(monkeypatch: pytest.MonkeyPatch) -> None:
    procs = [
        _FakeProc(1, "adb"),
        _FakeProc(2, "python"),
        _FakeProc(3, "ADB.EXE"),
        _FakeProc(4, None),
        _FakeProc(5, "adb", gone=True),
    ]
    monkeypatch.setattr(cleanup_module.psutil, "process_iter", lambda attrs=None: iter(procs))

    assert kill_bridge_processes() == 2
    assert [p.pid for p in procs if p.killed] == [1, 3]


def test_interrupt_handler_cancels_token_and_restores_previous() -> None:
    original = signal.getsignal(signal.SIGINT)
    token = CancellationToken()
    try:
        previous = install_interrupt_handler(token)
        assert previous is original

        handler = signal.getsignal(signal.SIGINT)
        handler(signal.SIGINT, None)

        assert token.cancelled
        assert "SIGINT" in token.reason
        assert signal.getsignal(signal.SIGINT) is original
    finally:
        signal.signal(signal.SIGINT, original)


def test_interrupt_handler_registration_failure_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(signum, handler):
        raise ValueError("signal only works in main thread of the main interpreter")

    monkeypatch.setattr(cleanup_module.signal, "signal", _refuse)
    assert install_interrupt_handler(CancellationToken()) is None

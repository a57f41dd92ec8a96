"""Interrupt handling and bridge tool shutdown."""

from __future__ import annotations

import signal
from typing import Any, Callable, Optional

import psutil

from ..core.cancellation import CancellationToken
from ..core.logger import log

BRIDGE_PROCESS_NAMES = frozenset({"adb", "adb.exe"})


def install_interrupt_handler(token: CancellationToken) -> Optional[Callable[..., Any]]:
    """Route SIGINT to ``token``.

    The first interrupt cancels the token and restores the previous handler,
    so a second Ctrl-C aborts immediately. Registration is best effort: it
    fails outside the main thread and that is not an error for the deploy.

    Returns:
        The previously installed handler, or ``None`` if registration failed.
    """
    previous = signal.getsignal(signal.SIGINT)

    def _handler(signum: int, frame: Any) -> None:
        log.warning(f"Received signal {signal.Signals(signum).name}, stopping")
        token.cancel(f"interrupted by {signal.Signals(signum).name}")
        # None means the old handler was not installed from Python
        signal.signal(signal.SIGINT, previous if previous is not None else signal.default_int_handler)

    try:
        signal.signal(signal.SIGINT, _handler)
    except (ValueError, OSError) as e:
        log.debug(f"Could not install SIGINT handler: {e}")
        return None
    return previous


def kill_bridge_processes() -> int:
    """Kill every running adb process (server included) by name.

    Returns:
        Number of processes killed.
    """
    killed = 0
    for proc in psutil.process_iter(["name"]):
        name = (proc.info.get("name") or "").lower()
        if name not in BRIDGE_PROCESS_NAMES:
            continue
        try:
            proc.kill()
            killed += 1
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            log.debug(f"Could not kill adb process {proc.pid}: {e}")

    if killed:
        log.info(f"Killed {killed} adb process(es)")
    return killed

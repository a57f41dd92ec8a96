"""Device log handling: clearing, crash scanning and live tailing."""

from __future__ import annotations

import queue
import subprocess
import sys
import threading
import time
from enum import Enum
from typing import BinaryIO, Optional, TextIO

from ..core.cancellation import CancellationToken
from ..core.logger import log
from ..core.models import CrashReport, DeploymentRequest, LogFilterMode, TailOutcome
from ..toolchain.adb import Adb
from ..toolchain.runner import CommandRunner
from ..utils.helpers import count_lines
from ..utils.validation import has_priority

# logcat prints "--------- beginning of crash" when the crash buffer starts
CRASH_MARKER = b"beginning of crash"

# A dumped crash buffer with more lines than this holds a stack trace
CRASH_LINE_THRESHOLD = 3

# Native crash dumps and Java runtime aborts, streamed for debug builds only
DEBUG_DIAGNOSTIC_TAGS = ("DEBUG:V", "AndroidRuntime:V")

TERMINATE_TIMEOUT = 5.0


def clear_logs(adb: Adb, device: str) -> None:
    """Empty the device log buffers."""
    log.debug(f"Clearing logcat on {device}")
    adb.run("logcat", "-c", serial=device, operation="clear-logs")


def scan_for_crash(
    adb: Adb,
    device: str,
    *,
    delay: float = 0.15,
    out: Optional[TextIO] = None,
    token: Optional[CancellationToken] = None,
) -> CrashReport:
    """Dump the crash buffer once and decide whether the app crashed.

    Waits ``delay`` seconds first so a crash right after launch reaches the
    buffer; with a ``token`` the wait ends early on cancellation and raises
    ``DeploymentCancelled``. A crash is reported when the dump has more than
    ``CRASH_LINE_THRESHOLD`` lines; the dump is then echoed unmodified to
    ``out`` (stdout by default).
    """
    if token is None:
        time.sleep(delay)
    else:
        token.wait(delay)
        token.raise_if_cancelled()
    result = adb.run("logcat", "--buffer=crash", "-d", serial=device, operation="crash-scan")
    text = result.stdout

    if count_lines(text) <= CRASH_LINE_THRESHOLD:
        return CrashReport(crashed=False, log=text)

    out = out or sys.stdout
    out.write(text)
    out.flush()
    return CrashReport(crashed=True, log=text)


def build_filter_args(request: DeploymentRequest) -> list[str]:
    """logcat filter specs for the request's filter mode.

    Raw mode streams everything. Filtered mode allows the debug diagnostic
    tags (debug builds only), the caller's tags, the activity's tag, and
    silences everything else.
    """
    if request.log_filter is LogFilterMode.RAW:
        return []

    filters: list[str] = []
    if request.is_debug_build:
        filters.extend(DEBUG_DIAGNOSTIC_TAGS)

    for tag in request.log_tags:
        filters.append(tag if has_priority(tag) else f"{tag}:V")

    filters.append("V:V")
    # logcat rejects a filterspec with an empty tag
    if request.activity:
        filters.append(f"{request.activity}:V")
    filters.append("*:S")
    return filters


class TailState(Enum):
    STREAMING = "streaming"
    CRASH_DETECTED = "crash_detected"


class LogTailer:
    """Stream ``adb logcat`` to ``out`` until it ends, crashes or is cancelled.

    The child's output is read in chunks of at most ``chunk_size`` bytes by a
    helper thread, so waiting for the next chunk can be interrupted through
    the cancellation token. Seeing ``CRASH_MARKER`` moves the tailer from
    ``STREAMING`` to ``CRASH_DETECTED``: reading stops immediately, the chunk
    holding the marker and anything after it are not printed.

    Whatever the outcome the child process is terminated and reaped before
    :meth:`run` returns.
    """

    def __init__(
        self,
        runner: CommandRunner,
        argv: list[str],
        *,
        chunk_size: int = 4096,
        out: Optional[BinaryIO] = None,
        token: Optional[CancellationToken] = None,
        poll_interval: float = 0.1,
    ):
        self.runner = runner
        self.argv = argv
        self.chunk_size = chunk_size
        self.out = out
        self.token = token
        self.poll_interval = poll_interval
        self.state = TailState.STREAMING
        self._chunks: queue.Queue[bytes] = queue.Queue()
        self._carry = b""

    def run(self) -> TailOutcome:
        out = self.out or sys.stdout.buffer
        proc = self.runner.spawn(self.argv)
        reader = threading.Thread(target=self._pump, args=(proc.stdout,), name="logcat-reader", daemon=True)
        reader.start()

        outcome = TailOutcome.STREAM_ENDED
        try:
            while self.state is TailState.STREAMING:
                if self.token is not None and self.token.cancelled:
                    outcome = TailOutcome.CANCELLED
                    break

                try:
                    chunk = self._chunks.get(timeout=self.poll_interval)
                except queue.Empty:
                    continue

                if not chunk:
                    break

                if self._contains_marker(chunk):
                    self.state = TailState.CRASH_DETECTED
                    outcome = TailOutcome.CRASH_DETECTED
                    log.warning("Crash marker seen in logcat, stopping the stream")
                    break

                out.write(chunk)
                out.flush()

            if outcome is TailOutcome.STREAM_ENDED:
                self._drain(out, reader)
                proc.wait()
        finally:
            self._stop(proc)

        return outcome

    def _contains_marker(self, chunk: bytes) -> bool:
        # The marker may straddle two reads
        window = self._carry + chunk
        self._carry = window[-(len(CRASH_MARKER) - 1) :]
        return CRASH_MARKER in window

    def _pump(self, stream: BinaryIO) -> None:
        try:
            while True:
                chunk = stream.read(self.chunk_size)
                if not chunk:
                    break
                self._chunks.put(chunk)
        except (OSError, ValueError) as e:
            # Raised when the pipe is closed under us during shutdown
            log.trace(f"logcat reader stopped: {e}")
        finally:
            self._chunks.put(b"")

    def _drain(self, out: BinaryIO, reader: threading.Thread) -> None:
        """Print whatever the reader queued after the stream end was seen."""
        reader.join()
        while True:
            try:
                chunk = self._chunks.get_nowait()
            except queue.Empty:
                break
            if chunk:
                out.write(chunk)
        out.flush()

    def _stop(self, proc: subprocess.Popen) -> None:
        if proc.poll() is None:
            proc.terminate()
            try:
                proc.wait(timeout=TERMINATE_TIMEOUT)
            except subprocess.TimeoutExpired:
                log.debug("logcat ignored terminate, killing it")
                proc.kill()
                proc.wait()
        if proc.stdout is not None:
            proc.stdout.close()


def tail_logs(
    adb: Adb,
    device: str,
    request: DeploymentRequest,
    *,
    chunk_size: int = 4096,
    out: Optional[BinaryIO] = None,
    token: Optional[CancellationToken] = None,
) -> TailOutcome:
    """Follow the device log with the request's filters applied."""
    argv = adb.command("logcat", *build_filter_args(request), serial=device)
    log.info(f"Streaming logcat from {device} (Ctrl-C to stop)")
    return LogTailer(adb.runner, argv, chunk_size=chunk_size, out=out, token=token).run()

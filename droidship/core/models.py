"""Data model shared by the deployment flow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

AUTO_DEVICE = "auto"

# Build flags that mark a debug build; debug builds also stream native diagnostics
DEBUG_BUILD_FLAGS = frozenset({"--debug", "--dev"})


class PackageFormat(str, Enum):
    """Artifact type, which decides the installer variant."""

    APK = "apk"
    AAB = "aab"

    @classmethod
    def from_artifact(cls, artifact: Path) -> "PackageFormat":
        """Infer the format from the artifact extension."""
        suffix = Path(artifact).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            raise ValueError(f"Cannot infer package format from {artifact}: expected .apk or .aab") from None


class LogFilterMode(str, Enum):
    FILTERED = "filtered"
    RAW = "raw"


class TailOutcome(str, Enum):
    """How an active logcat tail ended."""

    STREAM_ENDED = "stream_ended"
    CRASH_DETECTED = "crash_detected"
    CANCELLED = "cancelled"


class DeploymentRequest(BaseModel):
    """Everything one ``deploy`` invocation needs. Immutable once built."""

    artifact: Path
    package_format: PackageFormat = PackageFormat.APK
    device: str = AUTO_DEVICE
    activity: str = ""
    launch_component: Optional[str] = None
    working_dir: Path = Field(default_factory=Path.cwd)
    keystore: Optional[str] = None
    build_flags: tuple[str, ...] = Field(default_factory=tuple)
    verbosity: int = Field(default=0, ge=0)
    stream_logs: bool = False
    clear_logs: bool = False
    log_filter: LogFilterMode = LogFilterMode.FILTERED
    log_tags: tuple[str, ...] = Field(default_factory=tuple)
    kill_bridge_on_exit: bool = False

    class Config:
        """Pydantic model configuration."""

        frozen = True

    @property
    def is_debug_build(self) -> bool:
        return any(flag in DEBUG_BUILD_FLAGS for flag in self.build_flags)

    @property
    def should_clear_logs(self) -> bool:
        """Clear before install when asked, or when a launch will be streamed."""
        return self.clear_logs or (bool(self.launch_component) and self.stream_logs)


@dataclass(frozen=True)
class Keystore:
    """Signing material passed to bundletool."""

    path: Path
    password: str
    alias: str
    alias_password: str


@dataclass
class CrashReport:
    """Result of scanning the device crash buffer."""

    crashed: bool
    log: str


@dataclass
class DeploymentResult:
    """What a deployment did, returned to the caller for display."""

    device: Optional[str] = None
    installed: bool = False
    launched: bool = False
    apks_path: Optional[Path] = None
    crash: Optional[CrashReport] = None
    tail: Optional[TailOutcome] = None

    @property
    def crashed(self) -> bool:
        return self.crash is not None and self.crash.crashed

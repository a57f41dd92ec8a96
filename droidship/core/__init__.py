"""Core components of droidship."""

from .cancellation import CancellationToken
from .config import Config, config
from .errors import (
    CommandFailed,
    DeployError,
    DeploymentCancelled,
    DeviceEnumerationFailed,
    DeviceNotConnected,
    KeystoreResolutionError,
    NoDeviceFound,
    ToolNotFound,
)
from .logger import Logger, log
from .models import (
    AUTO_DEVICE,
    CrashReport,
    DeploymentRequest,
    DeploymentResult,
    Keystore,
    LogFilterMode,
    PackageFormat,
    TailOutcome,
)

__all__ = [
    "AUTO_DEVICE",
    "CancellationToken",
    "CommandFailed",
    "Config",
    "CrashReport",
    "DeployError",
    "DeploymentCancelled",
    "DeploymentRequest",
    "DeploymentResult",
    "DeviceEnumerationFailed",
    "DeviceNotConnected",
    "Keystore",
    "KeystoreResolutionError",
    "LogFilterMode",
    "Logger",
    "NoDeviceFound",
    "PackageFormat",
    "TailOutcome",
    "ToolNotFound",
    "config",
    "log",
]

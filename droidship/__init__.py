"""droidship: deploy APKs and app bundles to Android devices and watch them run."""

from .core import (
    CancellationToken,
    CrashReport,
    DeployError,
    DeploymentRequest,
    DeploymentResult,
    LogFilterMode,
    PackageFormat,
)
from .deploy import deploy

__version__ = "0.3.0"

__all__ = [
    "CancellationToken",
    "CrashReport",
    "DeployError",
    "DeploymentRequest",
    "DeploymentResult",
    "LogFilterMode",
    "PackageFormat",
    "deploy",
]

"""Wrappers around the external Android tools (adb, bundletool)."""

from .adb import Adb
from .bundletool import APKS_EXTENSION, Bundletool, locate_java
from .runner import CommandResult, CommandRunner

__all__ = [
    "APKS_EXTENSION",
    "Adb",
    "Bundletool",
    "CommandResult",
    "CommandRunner",
    "locate_java",
]

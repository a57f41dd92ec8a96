"""Locating and driving bundletool (AAB -> APK set conversion)."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..core.config import Config, config
from ..core.errors import ToolNotFound
from ..core.models import Keystore
from .runner import CommandResult, CommandRunner

APKS_EXTENSION = ".apks"

JAVA_NAME = "java.exe" if sys.platform == "win32" else "java"


def locate_java(settings: Config = config) -> str:
    """Find a Java runtime able to run ``bundletool.jar``."""
    if settings.java_home:
        candidate = Path(settings.java_home).expanduser() / "bin" / JAVA_NAME
        if candidate.is_file():
            return str(candidate)

    found = shutil.which("java")
    if found:
        return found

    raise ToolNotFound("java not found; bundletool.jar needs a Java runtime (set JAVA_HOME)")


class Bundletool:
    """bundletool invocation, either ``java -jar bundletool.jar`` or a wrapper script."""

    def __init__(self, prefix: Sequence[str], runner: Optional[CommandRunner] = None):
        self.prefix = [str(part) for part in prefix]
        self.runner = runner or CommandRunner()

    @classmethod
    def locate(cls, settings: Config = config, runner: Optional[CommandRunner] = None) -> Bundletool:
        """Resolve bundletool from ``bundletool_path`` or a ``bundletool`` on ``PATH``.

        Raises:
            ToolNotFound: If bundletool, or the Java runtime for its jar, is missing.
        """
        if settings.bundletool_path:
            path = Path(settings.bundletool_path).expanduser()
            if not path.is_file():
                raise ToolNotFound(f"configured bundletool_path {path} does not exist")
            if path.suffix.lower() == ".jar":
                return cls([locate_java(settings), "-jar", str(path)], runner)
            return cls([str(path)], runner)

        found = shutil.which("bundletool")
        if found:
            return cls([found], runner)

        raise ToolNotFound("bundletool not found; set BUNDLETOOL_PATH to bundletool.jar")

    def build_apks_command(self, bundle: Path, output: Path, keystore: Keystore) -> list[str]:
        # bundletool only accepts passwords inline or from a file
        return self.prefix + [
            "build-apks",
            f"--bundle={bundle}",
            f"--output={output}",
            f"--ks={keystore.path}",
            f"--ks-pass=pass:{keystore.password}",
            f"--ks-key-alias={keystore.alias}",
            f"--key-pass=pass:{keystore.alias_password}",
        ]

    def install_apks_command(self, apks: Path, device: str, adb: Optional[str] = None) -> list[str]:
        argv = self.prefix + ["install-apks", f"--apks={apks}", f"--device-id={device}"]
        if adb:
            argv.append(f"--adb={adb}")
        return argv

    def build_apks(self, bundle: Path, output: Path, keystore: Keystore) -> CommandResult:
        return self.runner.run(self.build_apks_command(bundle, output, keystore), operation="build-apks")

    def install_apks(self, apks: Path, device: str, adb: Optional[str] = None) -> CommandResult:
        return self.runner.run(self.install_apks_command(apks, device, adb), operation="install-apks")

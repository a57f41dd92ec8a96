"""Deployment orchestration: resolve a device, install, launch, watch logs."""

from __future__ import annotations

from typing import BinaryIO, Optional, TextIO

from ..core.cancellation import CancellationToken
from ..core.config import Config, config
from ..core.devices import enumerate_devices, resolve_device
from ..core.errors import DeployError, DeploymentCancelled
from ..core.logger import log
from ..core.models import DeploymentRequest, DeploymentResult, PackageFormat
from ..toolchain.adb import Adb
from ..toolchain.bundletool import APKS_EXTENSION, Bundletool
from ..toolchain.runner import CommandRunner
from ..utils.file_utils import ensure_directory, remove_stale_file, replace_extension
from ..utils.validation import validate_artifact
from .cleanup import kill_bridge_processes
from .keystore import resolve_keystore
from .launcher import launch_component
from .logcat import clear_logs, scan_for_crash, tail_logs


class Deployer:
    """Runs one deployment flow for one :class:`DeploymentRequest`.

    Every step is a blocking tool invocation and the first failure aborts the
    rest. The token is checked between steps and while streaming logs.
    """

    def __init__(
        self,
        request: DeploymentRequest,
        *,
        settings: Config = config,
        adb: Optional[Adb] = None,
        bundletool: Optional[Bundletool] = None,
        token: Optional[CancellationToken] = None,
        out: Optional[TextIO] = None,
        log_out: Optional[BinaryIO] = None,
    ):
        settings.validate_config()
        self.request = request
        self.settings = settings
        self.runner = adb.runner if adb is not None else CommandRunner(verbose=request.verbosity > 0)
        self._adb = adb
        self._bundletool = bundletool
        self.token = token or CancellationToken()
        self.out = out
        self.log_out = log_out

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def deploy(self) -> DeploymentResult:
        """Run the flow for the request's package format.

        Raises:
            DeployError: The first step that failed, or ``DeploymentCancelled``.
        """
        try:
            adb = self._locate_adb()
            if self.request.package_format is PackageFormat.AAB:
                return self._deploy_bundle(adb)
            return self._deploy_apk(adb)
        except DeploymentCancelled:
            raise
        except DeployError as e:
            # Ctrl-C also reaches the tool's process group and makes it fail
            if self.token.cancelled:
                raise DeploymentCancelled(self.token.reason or "cancelled") from e
            raise
        finally:
            if self.request.kill_bridge_on_exit and self.token.cancelled:
                kill_bridge_processes()

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------
    def _deploy_apk(self, adb: Adb) -> DeploymentResult:
        self._check_artifact(".apk")
        result = DeploymentResult()

        device = self._resolve_device(adb)
        if device is None:
            return result
        result.device = device

        self._maybe_clear_logs(adb, device)

        self._checkpoint()
        log.info(f"Installing {self.request.artifact.name} on {device}")
        adb.run("install", "-r", str(self.request.artifact), serial=device, operation="install")
        result.installed = True
        log.success(f"Installed {self.request.artifact.name}")

        self._after_install(adb, device, result)
        return result

    def _deploy_bundle(self, adb: Adb) -> DeploymentResult:
        self._check_artifact(".aab")
        bundletool = self._locate_bundletool()
        keystore = resolve_keystore(self.request.keystore, self.settings)
        result = DeploymentResult()

        working_dir = ensure_directory(self.request.working_dir)
        apks = replace_extension(self.request.artifact, APKS_EXTENSION, working_dir)
        remove_stale_file(apks)

        self._checkpoint()
        log.info(f"Building APK set {apks.name} from {self.request.artifact.name}")
        bundletool.build_apks(self.request.artifact, apks, keystore)
        result.apks_path = apks

        device = self._resolve_device(adb)
        if device is None:
            return result
        result.device = device

        self._maybe_clear_logs(adb, device)

        self._checkpoint()
        log.info(f"Installing {apks.name} on {device}")
        bundletool.install_apks(apks, device, adb.executable)
        result.installed = True
        log.success(f"Installed {apks.name}")

        self._after_install(adb, device, result)
        return result

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------
    def _after_install(self, adb: Adb, device: str, result: DeploymentResult) -> None:
        if self.request.launch_component:
            self._checkpoint()
            launch_component(adb, device, self.request.launch_component)
            result.launched = True

        if self.request.stream_logs:
            self._checkpoint()
            result.tail = tail_logs(
                adb,
                device,
                self.request,
                chunk_size=self.settings.tail_chunk_size,
                out=self.log_out,
                token=self.token,
            )

        self._checkpoint()
        result.crash = scan_for_crash(
            adb, device, delay=self.settings.crash_scan_delay, out=self.out, token=self.token
        )
        if result.crash.crashed:
            log.warning(
                "The app crashed, see the crash buffer above. It stays on the device until cleared "
                f"with: {adb.executable} -s {device} logcat -c"
            )

    def _resolve_device(self, adb: Adb) -> Optional[str]:
        devices = enumerate_devices(adb)
        device = resolve_device(self.request.device, devices)
        if device is None:
            log.debug("No device requested, skipping install")
        else:
            log.log_deploy_step("resolve-device", {"device": device, "connected": devices})
        return device

    def _maybe_clear_logs(self, adb: Adb, device: str) -> None:
        if self.request.should_clear_logs:
            self._checkpoint()
            clear_logs(adb, device)

    def _locate_adb(self) -> Adb:
        if self._adb is None:
            self._adb = Adb.locate(self.settings, self.runner)
        return self._adb

    def _locate_bundletool(self) -> Bundletool:
        if self._bundletool is None:
            self._bundletool = Bundletool.locate(self.settings, self.runner)
        return self._bundletool

    def _check_artifact(self, suffix: str) -> None:
        ok, error = validate_artifact(self.request.artifact, suffix)
        if not ok:
            raise DeployError(error, operation="check-artifact")

    def _checkpoint(self) -> None:
        self.token.raise_if_cancelled()


def deploy(
    request: DeploymentRequest,
    token: Optional[CancellationToken] = None,
    settings: Config = config,
) -> DeploymentResult:
    """Deploy ``request.artifact`` as described by ``request``."""
    return Deployer(request, settings=settings, token=token).deploy()

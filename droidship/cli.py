"""Command line entry point.

Usage:
    droidship deploy app-release.aab --keystore debug --launch com.example/.MainActivity --logs
    droidship devices
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.cancellation import CancellationToken
from .core.config import config
from .core.devices import list_devices
from .core.errors import DeployError, DeploymentCancelled
from .core.logger import log
from .core.models import DeploymentRequest, LogFilterMode, PackageFormat, TailOutcome
from .deploy.cleanup import install_interrupt_handler
from .deploy.installer import deploy
from .toolchain.adb import Adb
from .utils.validation import validate_log_tag

EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="droidship", description="Deploy an APK or AAB to an Android device")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Echo commands (-vv for trace output)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    deploy_parser = subparsers.add_parser("deploy", help="Install an artifact and optionally launch and watch it")
    deploy_parser.add_argument("artifact", type=Path, help="Path to the .apk or .aab")
    deploy_parser.add_argument("--format", choices=[f.value for f in PackageFormat],
                               help="Package format (default: from the artifact extension)")
    deploy_parser.add_argument("--device", "-d", default=config.default_device,
                               help="Device id, 'auto' for the first connected device, '' to skip install")
    deploy_parser.add_argument("--activity", default="", help="Activity name used as a log tag")
    deploy_parser.add_argument("--launch", metavar="COMPONENT", help="Component to start, e.g. com.example/.MainActivity")
    deploy_parser.add_argument("--logs", action="store_true", help="Stream logcat after installing")
    deploy_parser.add_argument("--raw-logs", action="store_true", help="Stream logcat without tag filters")
    deploy_parser.add_argument("--clear-logs", action="store_true", help="Clear logcat before installing")
    deploy_parser.add_argument("--tag", dest="tags", action="append", default=[],
                               help="Extra log tag to show, TAG or TAG:PRIORITY (repeatable)")
    deploy_parser.add_argument("--keystore", help="Keystore path, key.properties file, or 'debug' (AAB only)")
    deploy_parser.add_argument("--working-dir", type=Path, default=Path.cwd(), help="Where the .apks archive is written")
    deploy_parser.add_argument("--build-flag", dest="build_flags", action="append", default=[],
                               help="Flag the artifact was built with, e.g. --build-flag=--debug (repeatable)")
    deploy_parser.add_argument("--kill-adb", action="store_true", help="Kill adb when interrupted")

    subparsers.add_parser("devices", help="List connected devices")
    return parser


def request_from_args(args: argparse.Namespace) -> DeploymentRequest:
    for tag in args.tags:
        ok, error = validate_log_tag(tag)
        if not ok:
            raise ValueError(error)

    package_format = PackageFormat(args.format) if args.format else PackageFormat.from_artifact(args.artifact)
    return DeploymentRequest(
        artifact=args.artifact,
        package_format=package_format,
        device=args.device,
        activity=args.activity,
        launch_component=args.launch,
        working_dir=args.working_dir,
        keystore=args.keystore,
        build_flags=args.build_flags,
        verbosity=args.verbose,
        stream_logs=args.logs or args.raw_logs,
        clear_logs=args.clear_logs,
        log_filter=LogFilterMode.RAW if args.raw_logs else LogFilterMode.FILTERED,
        log_tags=args.tags,
        kill_bridge_on_exit=args.kill_adb,
    )


def run_deploy(args: argparse.Namespace) -> int:
    try:
        request = request_from_args(args)
    except ValueError as e:
        log.error(str(e))
        return 2

    token = CancellationToken()
    install_interrupt_handler(token)

    try:
        result = deploy(request, token=token)
    except DeploymentCancelled:
        log.warning("Deployment interrupted")
        return EXIT_INTERRUPTED
    except (DeployError, ValueError) as e:
        log.error(str(e))
        return 1

    if result.tail is TailOutcome.CANCELLED:
        return EXIT_INTERRUPTED
    if result.crashed:
        return 1
    return 0


def run_devices(args: argparse.Namespace) -> int:
    try:
        adb = Adb.locate()
    except DeployError as e:
        log.error(str(e))
        return 1

    for device in list_devices(adb):
        print(device)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    log.set_verbosity(args.verbose)

    if args.command == "devices":
        return run_devices(args)
    return run_deploy(args)


if __name__ == "__main__":
    sys.exit(main())

"""Deployment of APKs and app bundles to a connected device.

This sub-package provides:
- The deploy flow for both package formats
- Signing keystore resolution for bundles
- Component launch
- Crash scanning and live logcat streaming
- Interrupt handling and adb shutdown
"""

from .cleanup import install_interrupt_handler, kill_bridge_processes
from .installer import Deployer, deploy
from .keystore import resolve_keystore
from .launcher import launch_component
from .logcat import LogTailer, TailState, build_filter_args, scan_for_crash, tail_logs

__all__ = [
    "Deployer",
    "LogTailer",
    "TailState",
    "build_filter_args",
    "deploy",
    "install_interrupt_handler",
    "kill_bridge_processes",
    "launch_component",
    "resolve_keystore",
    "scan_for_crash",
    "tail_logs",
]

from __future__ import annotations

from pathlib import Path

import pytest

from droidship import cli
from droidship.core.errors import DeploymentCancelled, DeviceNotConnected
from droidship.core.models import DeploymentResult, LogFilterMode, PackageFormat, TailOutcome
from droidship.deploy.logcat import build_filter_args


def _parse(*argv: str):
    return cli.build_parser().parse_args(list(argv))


def test_request_from_args_infers_format_and_filters(tmp_path: Path) -> None:
    args = _parse(
        "-v",
        "deploy",
        str(tmp_path / "app-release.aab"),
        "--device",
        "emulator-5554",
        "--keystore",
        "debug",
        "--tag",
        "MyApp",
        "--tag",
        "OkHttp:W",
        "--build-flag=--debug",
        "--logs",
        "--launch",
        "com.example/.MainActivity",
    )
    request = cli.request_from_args(args)

    assert request.package_format is PackageFormat.AAB
    assert request.device == "emulator-5554"
    assert request.log_tags == ("MyApp", "OkHttp:W")
    assert request.is_debug_build
    assert request.stream_logs
    assert request.log_filter is LogFilterMode.FILTERED
    assert request.verbosity == 1
    assert request.should_clear_logs


def test_raw_logs_implies_streaming(tmp_path: Path) -> None:
    request = cli.request_from_args(_parse("deploy", str(tmp_path / "app.apk"), "--raw-logs"))
    assert request.stream_logs
    assert request.log_filter is LogFilterMode.RAW


def test_filtered_logs_without_activity_build_valid_filters(tmp_path: Path) -> None:
    request = cli.request_from_args(_parse("deploy", str(tmp_path / "app.apk"), "--logs", "--tag", "MyApp"))
    assert build_filter_args(request) == ["MyApp:V", "V:V", "*:S"]


def test_invalid_tag_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Invalid log tag"):
        cli.request_from_args(_parse("deploy", str(tmp_path / "app.apk"), "--tag", "My App:Q"))


def test_main_maps_errors_to_exit_status(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "install_interrupt_handler", lambda token: None)

    def _fail(request, token=None):
        raise DeviceNotConnected("Z", [])

    monkeypatch.setattr(cli, "deploy", _fail)
    assert cli.main(["deploy", str(tmp_path / "app.apk"), "--device", "Z"]) == 1


def test_main_cancelled_deploy_exits_interrupted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "install_interrupt_handler", lambda token: None)

    def _cancelled(request, token=None):
        raise DeploymentCancelled("interrupted by SIGINT")

    monkeypatch.setattr(cli, "deploy", _cancelled)
    assert cli.main(["deploy", str(tmp_path / "app.apk")]) == cli.EXIT_INTERRUPTED


@pytest.mark.parametrize(
    ("result", "status"),
    [
        (DeploymentResult(device="X", installed=True), 0),
        (DeploymentResult(device="X", installed=True, tail=TailOutcome.CANCELLED), cli.EXIT_INTERRUPTED),
    ],
)
def test_main_exit_status_from_result(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, result, status) -> None:
    monkeypatch.setattr(cli, "install_interrupt_handler", lambda token: None)
    monkeypatch.setattr(cli, "deploy", lambda request, token=None: result)
    assert cli.main(["deploy", str(tmp_path / "app.apk")]) == status

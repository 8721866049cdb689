from __future__ import annotations

import os
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from smoketest.app.options import RunOptions
from smoketest.app.target import (
    Quality,
    TargetKind,
    classify_quality,
    resolve_target,
    source_environment,
)
from smoketest.automation.exceptions import ConfigurationError, UnsupportedPlatformError


def test_insiders_build_on_linux(linux_build) -> None:
    root = linux_build("app-insiders", application_name="code-insiders")
    target = resolve_target(RunOptions(build=str(root)), platform="linux", env={})
    assert target.kind is TargetKind.DESKTOP
    assert target.executable_path == root / "code-insiders"
    assert target.quality is Quality.INSIDERS
    assert target.source_mode is False
    assert source_environment(target.source_mode, target.repository_path) == {}


def test_stable_build_on_linux(linux_build) -> None:
    root = linux_build("VSCode-linux-x64")
    stable = linux_build("VSCode-stable")
    target = resolve_target(RunOptions(build=str(root), stable_build=str(stable)), platform="linux", env={})
    assert target.quality is Quality.STABLE
    assert target.stable_executable_path == stable / "code"


def test_missing_build_executable_fails(linux_build) -> None:
    root = linux_build("broken", create_executable=False)
    with pytest.raises(ConfigurationError, match="Can't find VSCode at") as exc:
        resolve_target(RunOptions(build=str(root)), platform="linux", env={})
    assert str(root / "code") in str(exc.value)


def test_missing_stable_build_fails(linux_build) -> None:
    root = linux_build("VSCode-linux-x64")
    stable = linux_build("VSCode-stable", create_executable=False)
    with pytest.raises(ConfigurationError, match="Can't find Stable VSCode"):
        resolve_target(RunOptions(build=str(root), stable_build=str(stable)), platform="linux", env={})


def test_dev_fallback_enables_source_mode(dev_repository: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VSCODE_DEV", raising=False)
    monkeypatch.delenv("VSCODE_CLI", raising=False)
    target = resolve_target(RunOptions(), platform="linux", env={}, repository=dev_repository)
    assert target.quality is Quality.DEV
    assert target.source_mode is True
    assert target.repository_path == dev_repository
    assert target.executable_path == dev_repository / ".build" / "electron" / "code-oss"
    assert source_environment(target.source_mode, target.repository_path) == {
        "VSCODE_DEV": "1",
        "VSCODE_CLI": "1",
        "VSCODE_REPOSITORY": str(dev_repository),
    }
    # resolution never leaks markers into this process
    assert "VSCODE_DEV" not in os.environ
    assert "VSCODE_CLI" not in os.environ


def test_dev_marker_in_environment_wins(linux_build) -> None:
    root = linux_build("app-insiders", application_name="code-insiders")
    target = resolve_target(RunOptions(build=str(root)), platform="linux", env={"VSCODE_DEV": "1"})
    assert target.quality is Quality.DEV


def test_unsupported_platform_is_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedPlatformError):
        resolve_target(RunOptions(build=str(tmp_path)), platform="aix", env={})


def test_web_missing_server_fails(tmp_path: Path) -> None:
    server = tmp_path / "srv" / "server"
    with pytest.raises(ConfigurationError, match="Can't find Code server at") as exc:
        resolve_target(RunOptions(web=True, build=str(server)), env={})
    assert str(server) in str(exc.value)


def test_web_server_from_environment(tmp_path: Path) -> None:
    server = tmp_path / "vscode-server"
    server.mkdir()
    target = resolve_target(RunOptions(web=True), env={"VSCODE_REMOTE_SERVER_PATH": str(server)})
    assert target.kind is TargetKind.WEB
    assert target.is_web
    assert target.server_path == server
    assert target.quality is Quality.INSIDERS
    assert target.source_mode is False


def test_web_empty_server_variable_fails(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match=r"Can't find Code server at \.$"):
        resolve_target(RunOptions(web=True), env={"VSCODE_REMOTE_SERVER_PATH": ""}, repository=tmp_path)


def test_web_without_server_runs_from_source(tmp_path: Path) -> None:
    target = resolve_target(RunOptions(web=True), env={}, repository=tmp_path)
    assert target.quality is Quality.DEV
    assert target.source_mode is True
    assert target.server_path is None
    assert target.repository_path == tmp_path


@given(source_mode=st.booleans(), path=st.one_of(st.none(), st.text()))
def test_desktop_quality_is_always_one_channel(source_mode: bool, path) -> None:
    quality = classify_quality(source_mode, path)
    assert quality in set(Quality)
    if source_mode:
        assert quality is Quality.DEV


@given(source_mode=st.booleans(), path=st.one_of(st.none(), st.text()))
def test_web_quality_never_stable(source_mode: bool, path) -> None:
    assert classify_quality(source_mode, path, web=True) in {Quality.DEV, Quality.INSIDERS}


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/Applications/Visual Studio Code - Insiders.app/Contents/MacOS/Electron", Quality.INSIDERS),
        ("C:/Program Files/Microsoft VS Code Insiders/Code - Insiders.exe", Quality.INSIDERS),
        ("/usr/share/code-insiders/code-insiders", Quality.INSIDERS),
        ("/usr/share/code/code", Quality.STABLE),
    ],
)
def test_insiders_marker_detection(path: str, expected: Quality) -> None:
    assert classify_quality(False, path) is expected

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from smoketest.app.environment import Sandbox, build_workspace_paths


def test_sandbox_layout() -> None:
    sandbox = Sandbox()
    paths = sandbox.create()
    try:
        assert paths.root.is_dir()
        assert paths.root.name.startswith("t")
        assert paths.workspace_path == paths.root / "vscode-smoketest-express"
        assert paths.extensions_path == paths.root / "extensions-dir"
        assert paths.extensions_path.is_dir()
        assert paths.user_data_dir == paths.root / "d"
        assert not paths.user_data_dir.exists()
        assert paths.screenshots_path is None
    finally:
        sandbox.remove()
    assert not paths.root.exists()


def test_remove_twice_is_a_no_op() -> None:
    sandbox = Sandbox()
    paths = sandbox.create()
    sandbox.remove()
    sandbox.remove()
    assert not paths.root.exists()


def test_remove_after_external_delete() -> None:
    sandbox = Sandbox()
    paths = sandbox.create()
    shutil.rmtree(paths.root)
    sandbox.remove()


def test_remove_before_create_does_nothing() -> None:
    Sandbox().remove()
    with pytest.raises(RuntimeError):
        Sandbox().paths


def test_context_manager_cleans_up_on_error() -> None:
    sandbox = Sandbox()
    with pytest.raises(ValueError):
        with sandbox as paths:
            (paths.workspace_path / "file.txt").parent.mkdir(parents=True)
            (paths.workspace_path / "file.txt").write_text("x", encoding="utf-8")
            raise ValueError("boom")
    assert not paths.root.exists()


def test_screenshots_path_is_resolved_and_created(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    paths = build_workspace_paths(tmp_path / "root", screenshots="./shots")
    assert paths.screenshots_path == (tmp_path / "shots").resolve()
    assert paths.screenshots_path.is_absolute()
    assert paths.screenshots_path.is_dir()

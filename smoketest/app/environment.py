"""Scoped temporary tree holding one run's workspace and editor state."""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

WORKSPACE_NAME = "vscode-smoketest-express"
EXTENSIONS_DIR_NAME = "extensions-dir"
USER_DATA_DIR_NAME = "d"


@dataclass(frozen=True)
class WorkspacePaths:
    """Resolved filesystem locations scoped to one smoke-test run."""

    root: Path
    workspace_path: Path
    extensions_path: Path
    user_data_dir: Path
    screenshots_path: Optional[Path] = None


def build_workspace_paths(root: Path, screenshots: Optional[str] = None) -> WorkspacePaths:
    """Derive the sandbox layout under ``root`` and create the eager directories.

    The user-data directory is left for the application to create.
    """
    screenshots_path = Path(screenshots).resolve() if screenshots else None
    paths = WorkspacePaths(
        root=root,
        workspace_path=root / WORKSPACE_NAME,
        extensions_path=root / EXTENSIONS_DIR_NAME,
        user_data_dir=root / USER_DATA_DIR_NAME,
        screenshots_path=screenshots_path,
    )
    _ensure_dirs(paths.extensions_path)
    if screenshots_path is not None:
        _ensure_dirs(screenshots_path)
    return paths


def _ensure_dirs(*directories: Path) -> None:
    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


class Sandbox:
    """Disposable temporary tree holding the workspace, extensions and user data.

    Use as a context manager; the tree is removed on every exit path.
    """

    def __init__(self, screenshots: Optional[str] = None, prefix: str = "t") -> None:
        self._screenshots = screenshots
        self._prefix = prefix
        self._paths: Optional[WorkspacePaths] = None

    @property
    def paths(self) -> WorkspacePaths:
        if self._paths is None:
            raise RuntimeError("Sandbox has not been created yet.")
        return self._paths

    def create(self) -> WorkspacePaths:
        root = Path(tempfile.mkdtemp(prefix=self._prefix))
        logger.info("*** Test data: %s", root)
        self._paths = build_workspace_paths(root, self._screenshots)
        return self._paths

    def remove(self) -> None:
        """Delete the tree. Calling this again, or after the tree vanished, does nothing."""
        if self._paths is None:
            return
        root = self._paths.root
        try:
            shutil.rmtree(root)
        except FileNotFoundError:
            return
        logger.debug("Removed sandbox %s", root)

    def __enter__(self) -> WorkspacePaths:
        return self.create()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.remove()
            return
        # the original error wins over a failing cleanup
        try:
            self.remove()
        except OSError as cleanup_exc:
            logger.warning("Could not remove sandbox %s: %s", self.paths.root, cleanup_exc)

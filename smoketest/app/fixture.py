"""Materialize the fixture project the smoke tests operate on."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path
from typing import Optional, Sequence

from ..automation.exceptions import FixtureError

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE_URL = "https://github.com/Microsoft/vscode-smoketest-express"
DEFAULT_INSTALL_COMMAND = ("yarn",)
SETUP_TIMEOUT_SECONDS = 120.0

_URL_PREFIXES = ("http://", "https://", "git@", "ssh://", "git://", "file://")


def is_remote_url(value: str) -> bool:
    return value.startswith(_URL_PREFIXES)


class FixtureRepository:
    """Copy, clone or refresh the fixture project inside the sandbox workspace."""

    def __init__(
        self,
        workspace_path: Path,
        test_repo: Optional[str] = None,
        *,
        url: str = DEFAULT_FIXTURE_URL,
        install_command: Sequence[str] = DEFAULT_INSTALL_COMMAND,
    ) -> None:
        self.workspace_path = workspace_path
        self.local_path: Optional[Path] = None
        self.url = url
        if test_repo:
            if is_remote_url(test_repo):
                self.url = test_repo
            else:
                self.local_path = Path(test_repo)
        self.install_command = tuple(install_command)

    def setup(self, timeout: Optional[float] = SETUP_TIMEOUT_SECONDS) -> None:
        """Stage the workspace and install its dependencies.

        ``timeout`` bounds the whole phase; ``None`` disables the bound.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        if self.local_path is not None:
            self._copy_local()
        elif not self.workspace_path.exists():
            logger.info("*** Cloning test project repository...")
            self._run(["git", "clone", self.url, str(self.workspace_path)], cwd=None, deadline=deadline)
        else:
            logger.info("*** Cleaning test project repository...")
            for args in (["git", "fetch"], ["git", "reset", "--hard", "FETCH_HEAD"], ["git", "clean", "-xdf"]):
                self._run(args, cwd=self.workspace_path, deadline=deadline)

        logger.info("*** Running %s...", " ".join(self.install_command))
        self._run(list(self.install_command), cwd=self.workspace_path, deadline=deadline, stream=True)

    def _copy_local(self) -> None:
        source = self.local_path
        logger.info("*** Copying test project repository: %s", source)
        if source is None or not source.is_dir():
            raise FixtureError(f"Test project repository not found: {source}")
        shutil.rmtree(self.workspace_path, ignore_errors=True)
        try:
            shutil.copytree(source, self.workspace_path, symlinks=True)
        except (OSError, shutil.Error) as exc:
            raise FixtureError(f"Could not copy {source} to {self.workspace_path}: {exc}") from exc

    def _run(self, args: Sequence[str], *, cwd: Optional[Path], deadline: Optional[float], stream: bool = False) -> None:
        executable = shutil.which(args[0]) or args[0]
        command = [executable, *args[1:]]
        timeout = None
        if deadline is not None:
            timeout = deadline - time.monotonic()
            if timeout <= 0:
                raise FixtureError(f"Fixture setup timed out before running: {' '.join(args)}")
        logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
        try:
            subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                env=os.environ.copy(),
                timeout=timeout,
                check=True,
                stdout=None if stream else subprocess.PIPE,
                stderr=None if stream else subprocess.STDOUT,
                text=True,
            )
        except subprocess.TimeoutExpired as exc:
            raise FixtureError(f"Fixture setup timed out after {exc.timeout:.1f} seconds: {' '.join(args)}") from exc
        except subprocess.CalledProcessError as exc:
            output = (exc.output or "").strip()
            detail = f"\n{output}" if output else ""
            raise FixtureError(f"'{' '.join(args)}' exited with code {exc.returncode}{detail}") from exc
        except OSError as exc:
            raise FixtureError(f"Could not run '{' '.join(args)}': {exc}") from exc

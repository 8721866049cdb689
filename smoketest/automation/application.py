"""
Process-level driver for the editor under test.

The driver launches either the desktop executable or the web server with the
sandbox directories of the current run, waits until the application has
claimed its user-data directory, and stops it again when the run is over.
Interaction with the running workbench belongs to the feature areas.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from PIL import ImageGrab

from ..app.launch import LaunchConfiguration
from ..app.platforms import layout_for
from ..app.target import source_environment
from .exceptions import ApplicationError, ApplicationStartError
from .reporting.allure_helpers import attach_image

DEFAULT_WEB_HOST = "127.0.0.1"
DEFAULT_WEB_PORT = 9888
_POLL_INTERVAL = 0.25

_DESKTOP_FLAGS = (
    "--skip-release-notes",
    "--skip-welcome",
    "--disable-telemetry",
    "--no-cached-data",
    "--disable-updates",
    "--disable-crash-reporter",
    "--disable-workspace-trust",
)


class Application:
    """Starts, stops and screenshots one instance of the application under test."""

    def __init__(self, config: LaunchConfiguration, *, platform: Optional[str] = None) -> None:
        self.config = config
        self._platform = platform or sys.platform
        self._process: Optional[subprocess.Popen] = None

    @property
    def logger(self) -> logging.Logger:
        return self.config.logger

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def start(self, desktop: Optional[bool] = None) -> None:
        """Launch the application; ``desktop=False`` starts the web server instead."""
        if self._process is not None:
            raise ApplicationError("Application has already been started.")
        as_web = desktop is False or (desktop is None and self.config.web)
        command = self.web_command() if as_web else self.desktop_command()
        self.logger.info("Starting %s", " ".join(command))
        output = None if self.config.verbose else subprocess.DEVNULL
        self._process = subprocess.Popen(
            command,
            env=self.launch_environment(),
            stdout=output,
            stderr=output,
        )
        self._wait_until_ready()

    def stop(self) -> None:
        process = self._process
        if process is None:
            return
        self._process = None
        if process.poll() is not None:
            self.logger.info("Application already exited with code %s", process.returncode)
            return
        self.logger.info("Stopping application (pid %s)", process.pid)
        process.terminate()
        try:
            process.wait(timeout=self.config.wait_time)
        except subprocess.TimeoutExpired:
            self.logger.warning("Application did not exit within %ss; killing it", self.config.wait_time)
            process.kill()
            process.wait()

    def capture_screenshot(self, name: str) -> Optional[Path]:
        """Save a screenshot as ``<screenshots>/<name>.png``; returns ``None`` when disabled."""
        if self.config.screenshots_path is None:
            return None
        destination = self.config.screenshots_path / f"{name}.png"
        try:
            ImageGrab.grab().save(destination)
        except OSError as exc:
            self.logger.warning("Unable to capture screenshot '%s': %s", name, exc)
            return None
        self.logger.info("Saved screenshot %s", destination)
        attach_image(name, destination)
        return destination

    # ------------------------------------------------------------------
    def desktop_command(self) -> List[str]:
        config = self.config
        if config.executable_path is None:
            raise ApplicationError("No desktop executable was resolved for this run.")
        command = [str(config.executable_path)]
        if config.source_mode and config.repository_path is not None:
            command.append(str(config.repository_path))
        if config.remote:
            command.append(f"--folder-uri=vscode-remote://test+test/{config.workspace_path.as_posix().lstrip('/')}")
        else:
            command.append(str(config.workspace_path))
        command.extend(_DESKTOP_FLAGS)
        command.append(f"--extensions-dir={config.extensions_path}")
        command.append(f"--user-data-dir={config.user_data_dir}")
        if config.log:
            command.extend(["--log", config.log])
        return command

    def web_command(self) -> List[str]:
        config = self.config
        layout = layout_for(self._platform)
        if config.server_path is not None:
            launcher = layout.server_launcher(config.server_path)
        elif config.repository_path is not None:
            launcher = layout.server_launcher(config.repository_path / "resources" / "server")
        else:
            raise ApplicationError("No web server was resolved for this run.")
        command = [
            str(launcher),
            "--host", DEFAULT_WEB_HOST,
            "--port", str(DEFAULT_WEB_PORT),
            f"--extensions-dir={config.extensions_path}",
            f"--user-data-dir={config.user_data_dir}",
        ]
        if config.log:
            command.extend(["--log", config.log])
        return command

    def launch_environment(self) -> Dict[str, str]:
        env = os.environ.copy()
        env.update(source_environment(self.config.source_mode, self.config.repository_path))
        if self.config.browser:
            env["SMOKETEST_BROWSER"] = self.config.browser
        if self.config.headless:
            env["SMOKETEST_HEADLESS"] = "1"
        return env

    def _wait_until_ready(self) -> None:
        process = self._process
        deadline = time.monotonic() + max(self.config.wait_time, 1)
        while time.monotonic() < deadline:
            if process.poll() is not None:
                self._process = None
                raise ApplicationStartError(f"Application exited during startup with code {process.returncode}.")
            if self.config.user_data_dir.exists():
                self.logger.info("Application ready (pid %s)", process.pid)
                return
            time.sleep(_POLL_INTERVAL)
        self.stop()
        raise ApplicationStartError(
            f"Application did not create {self.config.user_data_dir} within {self.config.wait_time} seconds."
        )

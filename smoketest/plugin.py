"""pytest plugin wiring the smoke-test run lifecycle.

One run stages a single sandbox, launches the application once, and shares
both with every selected feature area through session fixtures.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from .app.environment import Sandbox, WorkspacePaths
from .app.fixture import SETUP_TIMEOUT_SECONDS, FixtureRepository
from .app.launch import LaunchConfiguration, create_options
from .app.options import RunOptions
from .app.target import ResolvedTarget
from .areas import select_areas
from .automation.application import Application
from .automation.reporting.allure_helpers import attach_file
from .automation.util import full_title, screenshot_name

logger = logging.getLogger(__name__)

SHUTDOWN_DELAY_SECONDS = 0.5


def suite_title(options: RunOptions) -> str:
    return f"VSCode Smoke Tests ({'Web' if options.web else 'Electron'})"


class SmokeTestPlugin:
    """Session lifecycle, per-test hooks and area fixtures for one smoke-test run."""

    def __init__(
        self,
        options: RunOptions,
        target: ResolvedTarget,
        *,
        sandbox: Optional[Sandbox] = None,
        fixture_factory: Callable[[Path, Optional[str]], FixtureRepository] = FixtureRepository,
        application_factory: Callable[[LaunchConfiguration], Application] = Application,
        setup_timeout: Optional[float] = SETUP_TIMEOUT_SECONDS,
        shutdown_delay: float = SHUTDOWN_DELAY_SECONDS,
    ) -> None:
        self.options = options
        self.target = target
        self.sandbox = sandbox or Sandbox(screenshots=options.screenshots)
        self.fixture_factory = fixture_factory
        self.application_factory = application_factory
        self.setup_timeout = setup_timeout
        self.shutdown_delay = shutdown_delay
        self.selected_areas = set(select_areas(options))
        self.current_config: Optional[LaunchConfiguration] = None
        self.current_app: Optional[Application] = None

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def pytest_configure(self, config: pytest.Config) -> None:
        config.addinivalue_line("markers", "area(name): feature area a smoke test belongs to")

    def pytest_report_header(self, config: pytest.Config) -> List[str]:
        target = self.target
        location = target.server_path if target.is_web else target.executable_path
        return [
            f"{suite_title(self.options)}: quality={target.quality.value}",
            f"target: {location or target.repository_path}",
        ]

    def pytest_collection_modifyitems(self, session: pytest.Session, config: pytest.Config, items: List[pytest.Item]) -> None:
        kept: List[pytest.Item] = []
        deselected: List[pytest.Item] = []
        for item in items:
            marker = item.get_closest_marker("area")
            if marker is None or not marker.args or marker.args[0] in self.selected_areas:
                kept.append(item)
            else:
                deselected.append(item)
        if deselected:
            logger.debug("Deselected %d tests outside the selected areas", len(deselected))
            config.hook.pytest_deselected(items=deselected)
            items[:] = kept

    @pytest.hookimpl(trylast=True)
    def pytest_runtest_setup(self, item: pytest.Item) -> None:
        if self.options.log and self.current_app is not None:
            self.current_app.logger.info("*** Test start: %s", self.title_for(item))

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item: pytest.Item, call: pytest.CallInfo):
        outcome = yield
        report = outcome.get_result()
        if report.when != "call" or not report.failed:
            return
        if self.options.screenshots and self.current_app is not None:
            self.current_app.capture_screenshot(screenshot_name(self.title_for(item)))
        if self.current_config is not None and self.current_config.log_path is not None:
            attach_file("smoketest log", self.current_config.log_path)

    # ------------------------------------------------------------------
    # Fixtures
    # ------------------------------------------------------------------
    @pytest.fixture(scope="session", autouse=True)
    def launch_config(self):
        with self.sandbox as paths:
            logger.info("*** Preparing smoketest setup...")
            self.fixture_factory(paths.workspace_path, self.options.test_repo).setup(timeout=self.setup_timeout)
            logger.info("*** Smoketest setup done!")
            self.current_config = create_options(self.options, self.target, paths)
            yield self.current_config
            time.sleep(self.shutdown_delay)
            self.copy_logs(paths)

    @pytest.fixture(scope="session", autouse=True)
    def app(self, launch_config: LaunchConfiguration):
        application = self.application_factory(launch_config)
        application.start(False if self.options.web else None)
        self.current_app = application
        try:
            yield application
        finally:
            self.current_app = None
            application.stop()

    @pytest.fixture(scope="session")
    def test_data_path(self, launch_config: LaunchConfiguration) -> Path:
        return self.sandbox.paths.root

    @pytest.fixture(scope="session")
    def stable_build(self) -> Optional[str]:
        return self.options.stable_build

    @pytest.fixture(scope="session")
    def is_web(self) -> bool:
        return self.options.web

    # ------------------------------------------------------------------
    def title_for(self, item: pytest.Item) -> str:
        return f"{suite_title(self.options)} {full_title(item.nodeid)}"

    def copy_logs(self, paths: WorkspacePaths) -> None:
        """Copy the application's logs next to the requested log file."""
        if not self.options.log:
            return
        logs_dir = paths.user_data_dir / "logs"
        destination = Path(self.options.log).resolve().parent / "logs"
        if not logs_dir.is_dir():
            logger.warning("No application logs found at %s", logs_dir)
            return
        shutil.copytree(logs_dir, destination, dirs_exist_ok=True)
        logger.info("Copied application logs to %s", destination)

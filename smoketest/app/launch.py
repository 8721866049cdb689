"""Launch configuration handed to the application driver, plus its logger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .environment import WorkspacePaths
from .options import RunOptions, parse_wait_time
from .target import Quality, ResolvedTarget

APP_LOGGER_NAME = "smoketest.app"
TRACE_LOG_LEVEL = "trace"
_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class LaunchConfiguration:
    """Everything the application driver and the lifecycle hooks need for one run."""

    quality: Quality
    code_path: Optional[str]
    executable_path: Optional[Path]
    server_path: Optional[Path]
    workspace_path: Path
    user_data_dir: Path
    extensions_path: Path
    screenshots_path: Optional[Path]
    wait_time: int
    logger: logging.Logger
    verbose: bool = False
    log: Optional[str] = None
    log_path: Optional[Path] = None
    remote: bool = False
    web: bool = False
    browser: Optional[str] = None
    headless: bool = False
    source_mode: bool = False
    repository_path: Optional[Path] = None


def build_logger(verbose: bool, log_path: Optional[Path], name: str = APP_LOGGER_NAME) -> logging.Logger:
    """Return a logger fanning out to a console sink and/or a file sink."""

    app_logger = logging.getLogger(name)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.DEBUG)
    app_logger.propagate = False

    formatter = logging.Formatter(_LOG_FORMAT)
    if verbose:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        app_logger.addHandler(console)
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)
    if not app_logger.handlers:
        app_logger.addHandler(logging.NullHandler())
    return app_logger


def create_options(options: RunOptions, target: ResolvedTarget, paths: WorkspacePaths) -> LaunchConfiguration:
    log_path = Path(options.log).resolve() if options.log else None
    return LaunchConfiguration(
        quality=target.quality,
        code_path=options.build,
        executable_path=target.executable_path,
        server_path=target.server_path,
        workspace_path=paths.workspace_path,
        user_data_dir=paths.user_data_dir,
        extensions_path=paths.extensions_path,
        screenshots_path=paths.screenshots_path,
        wait_time=parse_wait_time(options.wait_time),
        logger=build_logger(options.verbose, log_path),
        verbose=options.verbose,
        log=TRACE_LOG_LEVEL if log_path is not None else None,
        log_path=log_path,
        remote=options.remote,
        web=options.web,
        browser=options.browser,
        headless=options.headless,
        source_mode=target.source_mode,
        repository_path=target.repository_path,
    )

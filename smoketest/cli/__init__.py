from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import pytest

from smoketest.app.configuration import load_runtime_config
from smoketest.app.options import parse_known_args
from smoketest.app.target import resolve_target
from smoketest.automation.exceptions import ConfigurationError
from smoketest.plugin import SmokeTestPlugin

logger = logging.getLogger("smoketest.cli")

USAGE = """usage: smoketest [--build PATH] [--stable-build PATH] [--web] [--remote] [--browser NAME]
                 [--headless] [--wait-time SECONDS] [--test-repo PATH|URL] [--screenshots DIR]
                 [--log FILE] [--verbose] [--ci] [pytest args...]

Boolean flags also take --no-<flag> or --<flag>=true|false."""


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if "-h" in args or "--help" in args:
        print(USAGE)
        return 0

    runtime_cfg = load_runtime_config()
    options, extras = parse_known_args(args, runtime_cfg.option_defaults())

    logging.basicConfig(level=logging.DEBUG if options.verbose else logging.INFO, format="%(levelname)s %(name)s - %(message)s")
    logger.debug("Loaded runtime config: %s", runtime_cfg)

    try:
        target = resolve_target(options, repository=runtime_cfg.repository_root())
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        return 1
    logger.info("Testing %s build (%s)", target.quality.value, "web" if target.is_web else "desktop")

    pytest_args = build_pytest_args(extras, runtime_cfg.suite_root())
    return int(pytest.main(pytest_args, plugins=[SmokeTestPlugin(options, target)]))


def build_pytest_args(extras: List[str], suite_root: Path) -> List[str]:
    """Forward unrecognised arguments to pytest, defaulting the test path to the suite."""
    has_path = any(not arg.startswith("-") and Path(arg.split("::", 1)[0]).exists() for arg in extras)
    if has_path:
        return list(extras)
    return [*extras, str(suite_root)]


if __name__ == "__main__":
    sys.exit(main())

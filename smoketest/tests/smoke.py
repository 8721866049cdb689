"""Quick wiring check: resolve the configured target and stage an empty sandbox."""

from __future__ import annotations

import sys

from smoketest.app.configuration import load_runtime_config
from smoketest.app.environment import Sandbox
from smoketest.app.launch import create_options
from smoketest.app.options import parse_args
from smoketest.app.target import resolve_target
from smoketest.automation.exceptions import ConfigurationError


def run() -> int:
    runtime_cfg = load_runtime_config()
    options = parse_args(sys.argv[1:], runtime_cfg.option_defaults())
    try:
        target = resolve_target(options, repository=runtime_cfg.repository_root())
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(f"Quality:     {target.quality.value}")
    print(f"Executable:  {target.executable_path or target.server_path or target.repository_path}")

    with Sandbox(screenshots=options.screenshots) as paths:
        config = create_options(options, target, paths)
        print(f"Workspace:   {config.workspace_path}")
        print(f"Extensions:  {config.extensions_path}")
    print("Smoke check passed: target resolved and sandbox staged and removed cleanly.")
    return 0


if __name__ == "__main__":
    sys.exit(run())

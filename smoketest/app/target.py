"""Decide which build of the editor to exercise and which release channel it belongs to.

Resolution is a pure function of the parsed options, the host platform, the
incoming environment and the repository root. Nothing here touches
``os.environ``; source-mode markers travel on :class:`ResolvedTarget` and are
only applied to the child process by the application driver.
"""

from __future__ import annotations

import enum
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..automation.exceptions import ConfigurationError
from .options import RunOptions
from .platforms import PlatformLayout, layout_for

logger = logging.getLogger(__name__)

REMOTE_SERVER_ENV = "VSCODE_REMOTE_SERVER_PATH"
REPOSITORY_ENV = "VSCODE_REPOSITORY"
DEV_ENV = "VSCODE_DEV"
CLI_ENV = "VSCODE_CLI"

_INSIDERS_MARKERS = ("Code - Insiders", "code-insiders")


class Quality(enum.Enum):
    DEV = "dev"
    INSIDERS = "insiders"
    STABLE = "stable"


class TargetKind(enum.Enum):
    DESKTOP = "desktop"
    WEB = "web"


@dataclass(frozen=True)
class ResolvedTarget:
    kind: TargetKind
    quality: Quality
    executable_path: Optional[Path] = None
    stable_executable_path: Optional[Path] = None
    server_path: Optional[Path] = None
    source_mode: bool = False
    repository_path: Optional[Path] = None

    @property
    def is_web(self) -> bool:
        return self.kind is TargetKind.WEB


def classify_quality(source_mode: bool, path: Optional[str], *, web: bool = False) -> Quality:
    """Map source mode and the resolved path onto exactly one channel.

    Web targets never report ``STABLE``.
    """
    if source_mode:
        return Quality.DEV
    if web:
        return Quality.INSIDERS
    if path and any(marker in path for marker in _INSIDERS_MARKERS):
        return Quality.INSIDERS
    return Quality.STABLE


def resolve_target(
    options: RunOptions,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    repository: Optional[Path] = None,
) -> ResolvedTarget:
    """Resolve the desktop executable or web server to test.

    Raises :class:`ConfigurationError` when a requested build, stable build or
    server path is missing on disk, or when the platform is unsupported.
    """

    source_env = os.environ if env is None else env
    repo_root = Path(repository) if repository is not None else Path.cwd()
    if options.web:
        return _resolve_web(options, source_env, repo_root)
    return _resolve_desktop(options, layout_for(platform or sys.platform), source_env, repo_root)


def _resolve_desktop(
    options: RunOptions,
    layout: PlatformLayout,
    env: Mapping[str, str],
    repository: Path,
) -> ResolvedTarget:
    stable_path: Optional[Path] = None
    source_mode = env.get(DEV_ENV) == "1"
    repository_path: Optional[Path] = None

    if options.build:
        executable = layout.build_executable(Path(options.build))
        if options.stable_build:
            stable_path = layout.build_executable(Path(options.stable_build))
    else:
        executable = layout.dev_executable(repository)
        source_mode = True
        repository_path = repository

    if not executable.exists():
        raise ConfigurationError(f"Can't find VSCode at {executable}.")
    if stable_path is not None and not stable_path.exists():
        raise ConfigurationError(f"Can't find Stable VSCode at {stable_path}.")

    quality = classify_quality(source_mode, str(executable))
    logger.debug("Resolved desktop build %s (%s)", executable, quality.value)
    return ResolvedTarget(
        kind=TargetKind.DESKTOP,
        quality=quality,
        executable_path=executable,
        stable_executable_path=stable_path,
        source_mode=source_mode,
        repository_path=repository_path,
    )


def _resolve_web(options: RunOptions, env: Mapping[str, str], repository: Path) -> ResolvedTarget:
    candidate = options.build if options.build is not None else env.get(REMOTE_SERVER_ENV)
    source_mode = env.get(DEV_ENV) == "1"
    server_path: Optional[Path] = None
    repository_path: Optional[Path] = None

    if candidate is not None:
        # an empty value is a missing server, not source mode
        if not candidate or not Path(candidate).exists():
            raise ConfigurationError(f"Can't find Code server at {candidate}.")
        server_path = Path(candidate)
    else:
        source_mode = True
        repository_path = repository

    quality = classify_quality(source_mode, candidate, web=True)
    logger.debug("Resolved web server %s (%s)", server_path or repository, quality.value)
    return ResolvedTarget(
        kind=TargetKind.WEB,
        quality=quality,
        server_path=server_path,
        source_mode=source_mode,
        repository_path=repository_path,
    )


def source_environment(source_mode: bool, repository_path: Optional[Path] = None) -> Dict[str, str]:
    """Environment markers the application under test needs when running from source."""
    if not source_mode:
        return {}
    markers = {DEV_ENV: "1", CLI_ENV: "1"}
    if repository_path is not None:
        markers[REPOSITORY_ENV] = str(repository_path)
    return markers

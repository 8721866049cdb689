"""Runtime configuration loading helpers for the smoke-test bootstrapper."""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

_ENV_PREFIX = "SMOKETEST_"
_SECTION = "smoketest"
_BOOL_TRUE = {"1", "true", "yes", "on"}
_BOOL_FALSE = {"0", "false", "no", "off"}


@dataclass(slots=True)
class RuntimeConfig:
    """Declarative defaults sourced from environment variables or config files."""

    config_source: Optional[Path] = None
    build: Optional[str] = None
    stable_build: Optional[str] = None
    wait_time: Optional[str] = None
    test_repo: Optional[str] = None
    screenshots: Optional[str] = None
    log: Optional[str] = None
    browser: Optional[str] = None
    verbose: Optional[bool] = None
    headless: Optional[bool] = None
    repository: Optional[Path] = None
    suite_dir: Optional[Path] = None

    def option_defaults(self) -> Dict[str, object]:
        """Return the values that pre-seed command line parsing."""

        defaults: Dict[str, object] = {}
        for key in ("build", "stable_build", "wait_time", "test_repo", "screenshots", "log", "browser", "verbose", "headless"):
            value = getattr(self, key)
            if value is not None:
                defaults[key] = value
        return defaults

    def repository_root(self) -> Path:
        return self.repository if self.repository is not None else Path.cwd()

    def suite_root(self) -> Path:
        return self.suite_dir if self.suite_dir is not None else Path.cwd() / "areas"


def load_runtime_config(
    env: Mapping[str, str] | None = None,
    config_path: Optional[Path] = None,
) -> RuntimeConfig:
    """Load runtime configuration from environment variables and optional INI files."""

    source_env = os.environ if env is None else env
    config_file = _determine_config_path(source_env, config_path)
    config = RuntimeConfig(config_source=config_file)

    if config_file is not None and config_file.is_file():
        parser = configparser.ConfigParser()
        try:
            parser.read(config_file, encoding="utf-8")
        except configparser.Error:
            parser = None  # pragma: no cover - invalid file handled via env overrides only
        if parser and parser.has_section(_SECTION):
            section = parser[_SECTION]
            config.build = section.get("build", config.build)
            config.stable_build = section.get("stable_build", config.stable_build)
            config.wait_time = section.get("wait_time", config.wait_time)
            config.test_repo = section.get("test_repo", config.test_repo)
            config.screenshots = section.get("screenshots", config.screenshots)
            config.log = section.get("log", config.log)
            config.browser = section.get("browser", config.browser)
            config.verbose = _get_bool(section, "verbose", config.verbose)
            config.headless = _get_bool(section, "headless", config.headless)
            config.repository = _get_path(section, "repository", config.repository)
            config.suite_dir = _get_path(section, "suite_dir", config.suite_dir)

    _apply_env_overrides(config, source_env)
    return config


def _determine_config_path(env: Mapping[str, str], explicit: Optional[Path]) -> Optional[Path]:
    if explicit is not None:
        return explicit
    env_override = env.get(f"{_ENV_PREFIX}CONFIG_FILE")
    if env_override:
        return Path(env_override).expanduser()
    candidates = (
        Path(env.get("SMOKETEST_ROOT", "")) / "smoketest.ini" if env.get("SMOKETEST_ROOT") else None,
        Path.cwd() / "smoketest.ini",
    )
    for candidate in candidates:
        if candidate and candidate.is_file():
            return candidate
    return None


def _apply_env_overrides(config: RuntimeConfig, env: Mapping[str, str]) -> None:
    config.build = env.get(f"{_ENV_PREFIX}BUILD", config.build)
    config.stable_build = env.get(f"{_ENV_PREFIX}STABLE_BUILD", config.stable_build)
    config.wait_time = env.get(f"{_ENV_PREFIX}WAIT_TIME", config.wait_time)
    config.test_repo = env.get(f"{_ENV_PREFIX}TEST_REPO", config.test_repo)
    config.screenshots = env.get(f"{_ENV_PREFIX}SCREENSHOTS", config.screenshots)
    config.log = env.get(f"{_ENV_PREFIX}LOG", config.log)
    config.browser = env.get(f"{_ENV_PREFIX}BROWSER", config.browser)
    config.verbose = _get_bool(env, f"{_ENV_PREFIX}VERBOSE", config.verbose)
    config.headless = _get_bool(env, f"{_ENV_PREFIX}HEADLESS", config.headless)
    config.repository = _get_path(env, f"{_ENV_PREFIX}REPOSITORY", config.repository)
    config.suite_dir = _get_path(env, f"{_ENV_PREFIX}SUITE_DIR", config.suite_dir)


def _get_path(source: Mapping[str, str], key: str, default: Optional[Path]) -> Optional[Path]:
    raw = source.get(key)
    if not raw:
        return default
    return Path(str(raw).strip()).expanduser()


def parse_bool(raw: object) -> Optional[bool]:
    """Map a textual switch value onto a bool, or ``None`` when it is not recognised."""
    value = str(raw).strip().lower()
    if value in _BOOL_TRUE:
        return True
    if value in _BOOL_FALSE:
        return False
    return None


def _get_bool(source: Mapping[str, str], key: str, default: Optional[bool]) -> Optional[bool]:
    raw = source.get(key)
    if raw is None:
        return default
    value = parse_bool(raw)
    return default if value is None else value

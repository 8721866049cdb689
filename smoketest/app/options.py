"""Command line options for one smoke-test run."""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from .configuration import parse_bool

DEFAULT_WAIT_TIME = 20

_STRING_OPTIONS = ("browser", "build", "stable-build", "wait-time", "test-repo", "screenshots", "log")
_BOOLEAN_FLAGS = ("verbose", "remote", "web", "headless", "ci")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class RunOptions:
    """Command line input for one smoke-test run."""

    browser: Optional[str] = None
    build: Optional[str] = None
    stable_build: Optional[str] = None
    wait_time: int = DEFAULT_WAIT_TIME
    test_repo: Optional[str] = None
    screenshots: Optional[str] = None
    log: Optional[str] = None
    verbose: bool = False
    remote: bool = False
    web: bool = False
    headless: bool = False
    ci: bool = False


def parse_wait_time(raw: Optional[str]) -> int:
    """Return the leading integer of ``raw`` in seconds, or the default for junk input."""
    match = _LEADING_INT.match("" if raw is None else str(raw))
    if match is None:
        return DEFAULT_WAIT_TIME
    return int(match.group(1)) or DEFAULT_WAIT_TIME


def normalize_flags(argv: Sequence[str]) -> List[str]:
    """Rewrite ``--flag=value`` switches as ``--flag`` / ``--no-flag``.

    Unrecognised values are dropped so the flag keeps its configured default.
    """

    normalized: List[str] = []
    for arg in argv:
        name, sep, raw = arg.partition("=")
        negated = name.startswith("--no-")
        flag = name[5:] if negated else name[2:]
        if sep and name.startswith("--") and flag in _BOOLEAN_FLAGS:
            value = parse_bool(raw)
            if value is not None:
                normalized.append(f"--{flag}" if value != negated else f"--no-{flag}")
            continue
        normalized.append(arg)
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smoketest", add_help=False, allow_abbrev=False)
    for name in _STRING_OPTIONS:
        parser.add_argument(f"--{name}", dest=name.replace("-", "_"), nargs="?", const="", default=None)
    for name in _BOOLEAN_FLAGS:
        parser.add_argument(f"--{name}", dest=name, default=None, action=argparse.BooleanOptionalAction)
    return parser


def parse_known_args(
    argv: Sequence[str],
    defaults: Optional[Mapping[str, object]] = None,
) -> Tuple[RunOptions, List[str]]:
    """Parse the recognised flags and hand back everything else untouched.

    ``defaults`` holds values from the runtime configuration layer; anything
    given on the command line takes precedence over them.
    """

    namespace, extras = build_parser().parse_known_args(normalize_flags(argv))
    values = dict(defaults or {})
    for key, value in vars(namespace).items():
        if value is not None:
            values[key] = value

    options = RunOptions(
        browser=_as_str(values.get("browser")),
        build=_as_str(values.get("build")),
        stable_build=_as_str(values.get("stable_build")),
        wait_time=parse_wait_time(values.get("wait_time")),
        test_repo=_as_str(values.get("test_repo")),
        screenshots=_as_str(values.get("screenshots")),
        log=_as_str(values.get("log")),
        verbose=bool(values.get("verbose", False)),
        remote=bool(values.get("remote", False)),
        web=bool(values.get("web", False)),
        headless=bool(values.get("headless", False)),
        ci=bool(values.get("ci", False)),
    )
    return options, extras


def parse_args(argv: Sequence[str], defaults: Optional[Mapping[str, object]] = None) -> RunOptions:
    options, _ = parse_known_args(argv, defaults)
    return options


def _as_str(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None

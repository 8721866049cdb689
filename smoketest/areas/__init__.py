"""Feature areas of the smoke suite and the modes they run in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..app.options import RunOptions


@dataclass(frozen=True)
class Area:
    name: str
    desktop_only: bool = False


AREAS: Tuple[Area, ...] = (
    Area("data-migration", desktop_only=True),
    Area("data-loss", desktop_only=True),
    Area("explorer"),
    Area("preferences", desktop_only=True),
    Area("search"),
    Area("css"),
    Area("editor"),
    Area("statusbar"),
    Area("extensions"),
    Area("terminal"),
    Area("multiroot", desktop_only=True),
    Area("localization"),
    Area("launch", desktop_only=True),
)

# Areas reliable enough to run on CI. None qualify yet.
CI_AREAS: Tuple[str, ...] = ()


def area_names() -> List[str]:
    return [area.name for area in AREAS]


def select_areas(options: RunOptions) -> List[str]:
    """Return the area names to run, in suite order."""
    if options.ci:
        return [area.name for area in AREAS if area.name in CI_AREAS]
    if options.web:
        return [area.name for area in AREAS if not area.desktop_only]
    return area_names()

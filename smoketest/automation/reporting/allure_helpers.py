"""Allure reporting helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import allure

logger = logging.getLogger(__name__)


def attach_image(name: str, path: Path, attachment_type: Optional[str] = None) -> None:
    attachment_type = attachment_type or allure.attachment_type.PNG
    try:
        allure.attach(path.read_bytes(), name=name, attachment_type=attachment_type)
    except OSError as exc:
        logger.debug("Could not attach screenshot %s: %s", path, exc)


def attach_file(name: str, path: Path, attachment_type: Optional[str] = None) -> None:
    if not path.exists():
        return
    attachment_type = attachment_type or allure.attachment_type.TEXT
    try:
        allure.attach(path.read_bytes(), name=name, attachment_type=attachment_type)
    except OSError as exc:
        logger.debug("Could not attach %s: %s", path, exc)

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest


def write_product(path: Path, *, name_short: str = "Code", name_long: str = "Visual Studio Code", application_name: str = "code") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps({"nameShort": name_short, "nameLong": name_long, "applicationName": application_name}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def linux_build(tmp_path: Path) -> Callable[..., Path]:
    """Create a packaged Linux build root with its executable and product metadata."""

    def _make(name: str, application_name: str = "code", create_executable: bool = True) -> Path:
        root = tmp_path / name
        write_product(root / "resources" / "app" / "product.json", application_name=application_name)
        if create_executable:
            (root / application_name).write_text("#!/bin/sh\n", encoding="utf-8")
        return root

    return _make


@pytest.fixture
def dev_repository(tmp_path: Path) -> Path:
    """A source checkout whose Linux dev executable exists."""
    repo = tmp_path / "repo"
    write_product(repo / "product.json", application_name="code-oss")
    executable = repo / ".build" / "electron" / "code-oss"
    executable.parent.mkdir(parents=True)
    executable.write_text("#!/bin/sh\n", encoding="utf-8")
    return repo


@pytest.fixture
def product_writer() -> Callable[..., Path]:
    return write_product

"""Per-platform executable layouts for development checkouts and packaged builds."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Type

from ..automation.exceptions import ConfigurationError, UnsupportedPlatformError


@dataclass(frozen=True)
class ProductInfo:
    """The subset of ``product.json`` the smoke tests care about."""

    name_short: str
    name_long: str
    application_name: str


def read_product(path: Path) -> ProductInfo:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Can't read product metadata at {path}.") from exc
    return ProductInfo(
        name_short=str(data.get("nameShort", "")),
        name_long=str(data.get("nameLong", "")),
        application_name=str(data.get("applicationName", "")),
    )


def build_product(root: Path) -> ProductInfo:
    """Product metadata bundled inside a packaged build."""
    return read_product(root / "resources" / "app" / "product.json")


class PlatformLayout(ABC):
    """Where the Electron executable lives for one host platform."""

    name = "unknown"
    server_script = "server.sh"

    @abstractmethod
    def dev_executable(self, repository: Path) -> Path:
        """Executable of a development checkout rooted at ``repository``."""

    @abstractmethod
    def build_executable(self, root: Path) -> Path:
        """Executable inside a packaged build rooted at ``root``."""

    def server_launcher(self, server_root: Path) -> Path:
        return server_root / self.server_script


class DarwinLayout(PlatformLayout):
    name = "darwin"

    def dev_executable(self, repository: Path) -> Path:
        product = read_product(repository / "product.json")
        app_bundle = f"{product.name_long}.app"
        return repository / ".build" / "electron" / app_bundle / "Contents" / "MacOS" / "Electron"

    def build_executable(self, root: Path) -> Path:
        return root / "Contents" / "MacOS" / "Electron"


class LinuxLayout(PlatformLayout):
    name = "linux"

    def dev_executable(self, repository: Path) -> Path:
        product = read_product(repository / "product.json")
        return repository / ".build" / "electron" / product.application_name

    def build_executable(self, root: Path) -> Path:
        return root / build_product(root).application_name


class WindowsLayout(PlatformLayout):
    name = "win32"
    server_script = "server.cmd"

    def dev_executable(self, repository: Path) -> Path:
        product = read_product(repository / "product.json")
        return repository / ".build" / "electron" / f"{product.name_short}.exe"

    def build_executable(self, root: Path) -> Path:
        return root / f"{build_product(root).name_short}.exe"


class UnsupportedLayout(PlatformLayout):
    """Stand-in for hosts without a known layout; every lookup is a configuration error."""

    def __init__(self, platform: str) -> None:
        self.name = platform

    def _fail(self) -> UnsupportedPlatformError:
        return UnsupportedPlatformError(f"Unsupported platform: {self.name}.")

    def dev_executable(self, repository: Path) -> Path:
        raise self._fail()

    def build_executable(self, root: Path) -> Path:
        raise self._fail()

    def server_launcher(self, server_root: Path) -> Path:
        raise self._fail()


_LAYOUTS: Dict[str, Type[PlatformLayout]] = {
    "darwin": DarwinLayout,
    "linux": LinuxLayout,
    "win32": WindowsLayout,
}


def layout_for(platform: str) -> PlatformLayout:
    """Return the layout for a ``sys.platform`` value."""
    key = "linux" if platform.startswith("linux") else platform
    layout_cls = _LAYOUTS.get(key)
    if layout_cls is None:
        return UnsupportedLayout(platform)
    return layout_cls()

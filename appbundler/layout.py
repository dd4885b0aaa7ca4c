"""Path computations for a .app bundle. Nothing here touches the disk."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

LAUNCHER_SOURCE_NAME = "main.c"
ENTRY_SCRIPT_NAME = "__main__.py"
ICON_EXTENSION = ".icns"


def executable_name(name: str) -> str:
    """My App -> MyApp"""
    return re.sub(r"\s+", "", name)


@dataclass(frozen=True)
class BundleLayout:
    name: str
    parent: Path = field(default_factory=lambda: Path("."))

    @classmethod
    def for_spec(cls, spec) -> "BundleLayout":
        return cls(spec.name, Path(spec.root))

    @property
    def bundle_root(self) -> Path:
        return Path(self.parent) / f"{self.name}.app"

    @property
    def contents_root(self) -> Path:
        return self.bundle_root / "Contents"

    @property
    def frameworks_root(self) -> Path:
        return self.contents_root / "Frameworks"

    @property
    def macos_root(self) -> Path:
        return self.contents_root / "MacOS"

    @property
    def resources_root(self) -> Path:
        return self.contents_root / "Resources"

    @property
    def info_plist_file(self) -> Path:
        return self.contents_root / "Info.plist"

    @property
    def pkg_info_file(self) -> Path:
        return self.contents_root / "PkgInfo"

    @property
    def icon_file(self) -> Path:
        return self.resources_root / f"{self.name}{ICON_EXTENSION}"

    @property
    def executable_name(self) -> str:
        return executable_name(self.name)

    @property
    def executable_file(self) -> Path:
        return self.macos_root / self.executable_name

    @property
    def launcher_source_file(self) -> Path:
        return self.macos_root / LAUNCHER_SOURCE_NAME

    @property
    def entry_script_file(self) -> Path:
        return self.resources_root / ENTRY_SCRIPT_NAME

    def directories(self) -> List[Path]:
        """Bundle skeleton in creation order."""
        return [self.bundle_root, self.contents_root, self.frameworks_root,
                self.macos_root, self.resources_root]

"""
Application specification

Loads an app.yaml (or app.json) document into a read-only Specification and
expands its path patterns into concrete file lists.

  name: My App
  identifier: com.example.myapp
  version: "1.2"
  icon: resources/MyApp.icns
  sources: [lib/**/*.py]
  resources: [resources/**/*.*]
  data_models: [models/*.xcdatamodel]
"""

import glob
import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigError

SPEC_FILE_NAMES = ["app.yaml", "app.yml", "app.json"]

DEFAULT_VERSION = "1.0"
DEFAULT_PACKAGE_TYPE = "APPL"
DEFAULT_SIGNATURE = "????"
DEFAULT_MINIMUM_SYSTEM_VERSION = "10.13"
DEFAULT_DEPLOY_TOOL = "macpython-deploy"
DEPLOY_TOOL_ENV = "APPBUNDLER_DEPLOY_TOOL"

DATA_MODEL_EXTENSION = ".xcdatamodel"


@dataclass(frozen=True)
class Specification:
    name: str
    identifier: str
    version: str = DEFAULT_VERSION
    icon: Optional[str] = None
    info_string: Optional[str] = None
    agent: bool = False
    overwrite: bool = False
    stdlib: bool = True
    embed_bridge_support: bool = False
    compile: bool = False
    signature: str = DEFAULT_SIGNATURE
    package_type: str = DEFAULT_PACKAGE_TYPE
    minimum_system_version: str = DEFAULT_MINIMUM_SYSTEM_VERSION
    universal: bool = True
    sources: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    data_models: Tuple[str, ...] = ()
    packages: Tuple[str, ...] = ()
    deploy_tool: str = DEFAULT_DEPLOY_TOOL
    root: Path = field(default_factory=Path.cwd)

    def __post_init__(self):
        for attr in ("name", "identifier"):
            value = getattr(self, attr)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"'{attr}' is required and must be a non-empty string")
        for attr in ("signature", "package_type"):
            value = getattr(self, attr)
            if not isinstance(value, str) or len(value) != 4 or not value.isascii():
                raise ConfigError(f"'{attr}' must be exactly 4 ASCII characters, got {value!r}")

    # ─── Predicates ──────────────────────────────────────────────────────────

    @property
    def is_overwrite(self) -> bool:
        return self.overwrite

    @property
    def icon_exists(self) -> bool:
        """True only when an icon is declared and the file is on disk."""
        return bool(self.icon) and self.icon_path.is_file()

    @property
    def icon_path(self) -> Optional[Path]:
        return self.root / self.icon if self.icon else None

    @property
    def embeds_bridge_support(self) -> bool:
        return self.embed_bridge_support

    @property
    def compiles(self) -> bool:
        return self.compile

    # ─── Pattern resolution ──────────────────────────────────────────────────

    def source_files(self) -> List[Path]:
        return resolve_patterns(self.sources, self.root)

    def resource_files(self) -> List[Path]:
        return resolve_patterns(self.resources, self.root)

    def data_model_files(self) -> List[Path]:
        return [p for p in resolve_patterns(self.data_models, self.root)
                if p.suffix == DATA_MODEL_EXTENSION]

    # ─── Construction ────────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Dict[str, Any], root: Optional[Path] = None) -> "Specification":
        """Build a Specification from a parsed document, applying defaults."""
        if not isinstance(data, dict):
            raise ConfigError("specification must be a mapping of keys to values")

        packages = data.get("packages")
        if packages is None:
            packages = data.get("gems")

        deploy_tool = (data.get("deploy_tool")
                       or os.environ.get(DEPLOY_TOOL_ENV)
                       or DEFAULT_DEPLOY_TOOL)

        return cls(
            name=data.get("name"),
            identifier=data.get("identifier"),
            version=_version_str(data, "version", DEFAULT_VERSION),
            icon=_optional_str(data, "icon"),
            info_string=_optional_str(data, "info_string"),
            agent=data.get("agent") is True,
            overwrite=data.get("overwrite") is True,
            stdlib=data.get("stdlib") is not False,
            embed_bridge_support=(data.get("embed_bs") or data.get("embed_bridge_support")) is True,
            compile=data.get("compile") is True,
            signature=data.get("signature") or DEFAULT_SIGNATURE,
            package_type=data.get("package_type") or DEFAULT_PACKAGE_TYPE,
            minimum_system_version=_version_str(data, "minimum_system_version",
                                                  DEFAULT_MINIMUM_SYSTEM_VERSION),
            universal=data.get("universal") is not False,
            sources=_pattern_list(data, "sources"),
            resources=_pattern_list(data, "resources"),
            data_models=_pattern_list(data, "data_models"),
            packages=_pattern_list(data, "packages", packages),
            deploy_tool=deploy_tool,
            root=Path(root) if root is not None else Path.cwd(),
        )


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, (str, int, float)):
        raise ConfigError(f"'{key}' must be a string")
    return str(value)


def _version_str(data: dict, key: str, default: str) -> str:
    """Version strings must be quoted in YAML; 1.10 would otherwise load as 1.1."""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ConfigError(f"'{key}' must be a string, quote it (got {value!r})")
    value = str(value)
    if not value.strip():
        raise ConfigError(f"'{key}' must not be empty")
    return value


def _pattern_list(data: dict, key: str, value=None) -> Tuple[str, ...]:
    if value is None:
        value = data.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return tuple(value)


def resolve_patterns(patterns, root: Path) -> List[Path]:
    """Expand glob patterns relative to root. Returns sorted unique paths.

    Paths under root come back relative to it; absolute patterns that match
    outside root stay absolute. A pattern that matches nothing contributes
    nothing.
    """
    root = Path(root)
    seen = set()
    result = []
    for pattern in patterns:
        matches = glob.glob(pattern, root_dir=root, recursive=True)
        for match in sorted(matches):
            path = Path(match)
            if path.is_absolute():
                try:
                    path = path.relative_to(root)
                except ValueError:
                    pass
            if path in seen:
                continue
            seen.add(path)
            result.append(path)
    return result


# ─── Loading ─────────────────────────────────────────────────────────────────

def find_spec_file(directory: Path) -> Path:
    """Return the first app.yaml / app.yml / app.json found in directory."""
    directory = Path(directory)
    for name in SPEC_FILE_NAMES:
        path = directory / name
        if path.exists():
            return path
    raise ConfigError(f"no {', '.join(SPEC_FILE_NAMES)} found in {directory}")


def load(path) -> Specification:
    """Load a specification document. Patterns resolve against its directory."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError("specification file not found", path)

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            # Strip single-line comments (// ...) for JSONC support
            text = re.sub(r'^\s*//.*$', '', text, flags=re.MULTILINE)
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except UnicodeDecodeError as e:
        raise ConfigError(f"not a UTF-8 text document: {e}", path) from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"malformed document: {e}", path) from e

    try:
        return Specification.from_dict(data, root=path.parent.resolve())
    except ConfigError as e:
        if e.path is None:
            raise ConfigError(str(e), path) from e
        raise

"""Assemble macOS application bundles from a declarative app.yaml."""

from .builder import Builder, BuildState, build
from .errors import AppBundlerError, ConfigError, ExternalToolError
from .layout import BundleLayout
from .specification import Specification, find_spec_file, load
from .toolchain import Toolchain

__version__ = "0.1.0"

__all__ = [
    "AppBundlerError",
    "Builder",
    "BuildState",
    "BundleLayout",
    "ConfigError",
    "ExternalToolError",
    "Specification",
    "Toolchain",
    "build",
    "find_spec_file",
    "load",
]

"""
Bundle builder

Assembles <Name>.app from a Specification in a fixed order:

  clean (overwrite or deploy) -> skeleton -> PkgInfo + Info.plist
  -> launcher + entry script -> sources -> resources -> data models
  -> icon -> deploy

Without overwrite an existing bundle is reused and only refreshed, so
files that were added to it by hand survive a rebuild.
"""

import enum
import plistlib
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from .deploy import deploy_arguments
from .layout import BundleLayout
from .specification import Specification, load
from .templates import entry_script, launcher_source
from .toolchain import Toolchain, launcher_archs

INTERFACE_EXTENSION = ".xib"
COMPILED_INTERFACE_EXTENSION = ".nib"
COMPILED_DATA_MODEL_EXTENSION = ".mom"

DEVELOPMENT_REGION = "English"
INFO_DICTIONARY_VERSION = "6.0"
PRINCIPAL_CLASS = "NSApplication"


class BuildState(enum.Enum):
    INIT = "init"
    CLEAN = "clean"
    SCAFFOLD = "scaffold"
    METADATA_WRITTEN = "metadata-written"
    LAUNCHER_READY = "launcher-ready"
    SOURCES_COPIED = "sources-copied"
    RESOURCES_COPIED = "resources-copied"
    DATA_MODELS_COMPILED = "data-models-compiled"
    ICON_COPIED = "icon-copied"
    DEPLOYED = "deployed"
    DONE = "done"


def resource_destination(resource: Path) -> Path:
    """resources/images/a.png -> images/a.png; the top-level folder is dropped.

    Absolute paths outside the project keep only their file name.
    """
    resource = Path(resource)
    if resource.is_absolute():
        return Path(resource.name)
    parts = resource.parts
    if len(parts) > 1:
        return Path(*parts[1:])
    return resource


def _copy(src: Path, dst: Path, ignore=None):
    dst.parent.mkdir(parents=True, exist_ok=True)
    if src.is_dir():
        shutil.copytree(src, dst, ignore=ignore, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dst)


class Builder:
    """Builds one application bundle from one Specification."""

    def __init__(self, spec, toolchain: Optional[Toolchain] = None):
        if isinstance(spec, (str, Path)):
            spec = load(spec)
        self.spec: Specification = spec
        self.toolchain = toolchain or Toolchain()
        self.layout = BundleLayout.for_spec(spec)
        self.state = BuildState.INIT
        self.history: List[BuildState] = [BuildState.INIT]

    def _enter(self, state: BuildState):
        self.state = state
        self.history.append(state)

    def build(self, deploy=False) -> Path:
        """Build the bundle, optionally for deployment. Returns the bundle root."""
        spec = self.spec
        layout = self.layout

        print(f"\n=== Building {layout.bundle_root.name} ===")
        print(f"  Identifier: {spec.identifier}")
        print(f"  Version: {spec.version}")

        # Deploying always makes a fresh build
        if spec.is_overwrite or deploy:
            self.remove_bundle_root()
            self._enter(BuildState.CLEAN)

        self.build_bundle_structure()
        self._enter(BuildState.SCAFFOLD)

        self.write_pkg_info_file()
        self.write_info_plist_file()
        self._enter(BuildState.METADATA_WRITTEN)

        if not layout.executable_file.exists():
            self.build_executable()
        self.write_entry_script(deploy)
        self._enter(BuildState.LAUNCHER_READY)

        self.copy_sources()
        self._enter(BuildState.SOURCES_COPIED)

        self.copy_resources()
        self._enter(BuildState.RESOURCES_COPIED)

        self.compile_data_models()
        self._enter(BuildState.DATA_MODELS_COMPILED)

        if spec.icon_exists:
            self.copy_icon_file()
            self._enter(BuildState.ICON_COPIED)

        if deploy:
            self.deploy()
            self._enter(BuildState.DEPLOYED)

        self._enter(BuildState.DONE)
        print(f"\n  {layout.bundle_root}")
        return layout.bundle_root

    def run(self) -> int:
        """Launch the built executable and wait for it to exit."""
        executable = self.layout.executable_file
        print(f"\n=== Running {self.spec.name} ===")
        return subprocess.run([str(executable)], cwd=self.spec.root).returncode

    def remove_bundle_root(self):
        bundle_root = self.layout.bundle_root
        if bundle_root.exists():
            shutil.rmtree(bundle_root)
            print(f"  Removed {bundle_root.name}/")

    # ─── Steps ───────────────────────────────────────────────────────────────

    def build_bundle_structure(self):
        for directory in self.layout.directories():
            directory.mkdir(exist_ok=True)

    def write_pkg_info_file(self):
        content = f"{self.spec.package_type}{self.spec.signature}"
        self.layout.pkg_info_file.write_bytes(content.encode("ascii"))

    def info_plist(self) -> dict:
        """Info.plist contents for this specification."""
        spec = self.spec
        info = {
            "CFBundleName": spec.name,
            "CFBundleIdentifier": spec.identifier,
            "CFBundleVersion": spec.version,
            "CFBundlePackageType": spec.package_type,
            "CFBundleSignature": spec.signature,
            "CFBundleExecutable": self.layout.executable_name,
            "CFBundleDevelopmentRegion": DEVELOPMENT_REGION,
            "CFBundleInfoDictionaryVersion": INFO_DICTIONARY_VERSION,
            "NSPrincipalClass": PRINCIPAL_CLASS,
            "LSUIElement": spec.agent,
            "LSMinimumSystemVersion": spec.minimum_system_version,
        }
        if spec.info_string:
            info["CFBundleGetInfoString"] = spec.info_string
        if spec.icon_exists:
            info["CFBundleIconFile"] = self.layout.icon_file.name
        return info

    def write_info_plist_file(self):
        with open(self.layout.info_plist_file, "wb") as f:
            plistlib.dump(self.info_plist(), f)
        print(f"  Info.plist: {self.spec.name} ({self.spec.identifier})")

    def build_executable(self):
        layout = self.layout
        source = layout.launcher_source_file
        source.write_text(launcher_source(layout.entry_script_file.name))
        archs = launcher_archs(self.spec.universal)
        print(f"  Compiling launcher -> {layout.executable_name} ({', '.join(archs)})")
        try:
            self.toolchain.compile_launcher(source, layout.executable_file, archs)
        finally:
            source.unlink(missing_ok=True)

    def write_entry_script(self, deploy=False):
        script = entry_script(self.layout.executable_name, deploy=deploy)
        self.layout.entry_script_file.write_text(script)

    def copy_sources(self):
        resources_root = self.layout.resources_root
        for source in self.spec.source_files():
            src = self.spec.root / source
            dst = resources_root / (source if not source.is_absolute() else source.name)
            _copy(src, dst)
            print(f"  Source: {source}")

    def copy_resources(self):
        resources_root = self.layout.resources_root
        compiled = set()
        for resource in self.spec.resource_files():
            src = self.spec.root / resource
            dst = resources_root / resource_destination(resource)
            if src.is_dir():
                # Interfaces inside directories (en.lproj/...) are compiled, never copied
                _copy(src, dst, ignore=shutil.ignore_patterns(f"*{INTERFACE_EXTENSION}"))
                print(f"  Resource: {resource}/")
                for interface in sorted(src.rglob(f"*{INTERFACE_EXTENSION}")):
                    self.compile_interface(interface, dst / interface.relative_to(src), compiled)
            elif dst.suffix == INTERFACE_EXTENSION:
                self.compile_interface(src, dst, compiled)
            else:
                _copy(src, dst)
                print(f"  Resource: {resource}")

    def compile_interface(self, src: Path, dst: Path, compiled: set):
        """Compile one .xib to .nib, once per source file per build."""
        key = src.resolve()
        if key in compiled:
            return
        compiled.add(key)
        dst = dst.with_suffix(COMPILED_INTERFACE_EXTENSION)
        dst.parent.mkdir(parents=True, exist_ok=True)
        print(f"  Interface: {src.name} -> {dst.name}")
        self.toolchain.compile_interface_resource(src, dst)

    def compile_data_models(self):
        resources_root = self.layout.resources_root
        for model in self.spec.data_model_files():
            dst = resources_root / f"{model.stem}{COMPILED_DATA_MODEL_EXTENSION}"
            print(f"  Data model: {model} -> {dst.name}")
            self.toolchain.compile_data_model(self.spec.root / model, dst)

    def copy_icon_file(self):
        shutil.copy2(self.spec.icon_path, self.layout.icon_file)
        print(f"  Icon: {self.layout.icon_file.name}")

    def deploy(self):
        print(f"\n=== Deploying {self.layout.bundle_root.name} ===")
        self.toolchain.deploy(self.layout.bundle_root, deploy_arguments(self.spec),
                              self.spec.deploy_tool)


def build(spec, deploy=False, toolchain: Optional[Toolchain] = None) -> Path:
    """Build a bundle from a Specification or a path to a specification file."""
    return Builder(spec, toolchain).build(deploy=deploy)

"""
External tools

Every compiler and the deploy tool is driven through a Toolchain so the
builder can be exercised with a fake one. The real Toolchain shells out
synchronously and treats any failure as fatal.
"""

import subprocess
from pathlib import Path
from typing import Sequence

from .errors import ExternalToolError

UNIVERSAL_ARCHS = ("x86_64", "arm64")
LEGACY_ARCHS = ("x86_64",)

LAUNCHER_FRAMEWORKS = ("Python", "Foundation")


def run(cmd, cwd=None):
    print(f"  $ {' '.join(str(c) for c in cmd)}")
    cmd = [str(c) for c in cmd]
    try:
        return subprocess.run(cmd, cwd=cwd, check=True)
    except subprocess.CalledProcessError as e:
        raise ExternalToolError(cmd, e.returncode) from e
    except OSError as e:
        raise ExternalToolError(cmd, reason=e.strerror or str(e)) from e


def launcher_archs(universal: bool = True) -> Sequence[str]:
    return UNIVERSAL_ARCHS if universal else LEGACY_ARCHS


class Toolchain:
    """Command-line tools used to build a bundle."""

    cc = "cc"
    ibtool = "ibtool"
    momc = ("xcrun", "momc")

    def compile_launcher(self, source: Path, output: Path, archs: Sequence[str]):
        """Compile the launcher stub next to its source."""
        cmd = [self.cc, source.name, "-o", output.name]
        for arch in archs:
            cmd += ["-arch", arch]
        for framework in LAUNCHER_FRAMEWORKS:
            cmd += ["-framework", framework]
        run(cmd, cwd=source.parent)

    def compile_interface_resource(self, source: Path, destination: Path):
        run([self.ibtool, "--compile", destination, source])

    def compile_data_model(self, source: Path, destination: Path):
        run([*self.momc, source, destination])

    def deploy(self, bundle_root: Path, arguments: Sequence[str], tool: str):
        run([tool, *arguments, bundle_root])

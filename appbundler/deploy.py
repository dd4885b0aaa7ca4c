"""
Deploy step

Embeds a Python runtime (and optionally its standard library) into a built
bundle by handing it to the external deploy tool. Nothing is parsed back
from the tool; it either succeeds or the build aborts.
"""

from pathlib import Path
from typing import List, Optional

from .errors import ConfigError
from .specification import DEFAULT_DEPLOY_TOOL

SUPPORT_PACKAGE = "pyobjc"


def deploy_arguments(spec) -> List[str]:
    """Flags for the deploy tool, in the order the tool documents them."""
    args = ["--embed", "--package", SUPPORT_PACKAGE]
    for package in spec.packages:
        args += ["--package", package]
    if spec.embeds_bridge_support:
        args.append("--bs")
    if spec.compiles:
        args.append("--compile")
    if not spec.stdlib:
        args.append("--no-stdlib")
    return args


def deploy_bundle(bundle_path, toolchain, arguments: Optional[List[str]] = None,
                  tool: str = DEFAULT_DEPLOY_TOOL):
    """Run the deploy step against an already built .app.

    arguments defaults to a plain embed; pass deploy_arguments(spec) to deploy
    with the same flags a build --deploy would use.
    """
    bundle_path = Path(bundle_path)
    if not bundle_path.exists():
        raise ConfigError(f"bundle does not exist: {bundle_path}")
    if bundle_path.suffix != ".app":
        raise ConfigError(f"not an application bundle: {bundle_path}")

    if arguments is None:
        arguments = ["--embed", "--package", SUPPORT_PACKAGE]

    print(f"\n=== Deploying {bundle_path.name} ===")
    toolchain.deploy(bundle_path, list(arguments), tool)

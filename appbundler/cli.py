"""
appbundler - Build CLI

Reads app.yaml (or app.json) and assembles <Name>.app next to it.

Usage:
  appbundler build                    # Incremental build (full rebuild if overwrite: true)
  appbundler build --deploy           # Clean build with an embedded Python runtime
  appbundler run                      # Build and launch
  appbundler clean                    # Remove the bundle
  appbundler embed                    # Run the deploy step on an existing bundle
  appbundler build --spec path/to/app.yaml
"""

import argparse
import sys
from pathlib import Path

from .builder import Builder
from .deploy import deploy_arguments, deploy_bundle
from .errors import AppBundlerError
from .specification import find_spec_file, load
from .toolchain import Toolchain


def load_spec(args):
    if args.spec:
        return load(args.spec)
    return load(find_spec_file(Path(args.dir).resolve()))


# ─── Commands ─────────────────────────────────────────────────────────────────

def cmd_build(builder: Builder, deploy=False):
    builder.build(deploy=deploy)


def cmd_run(builder: Builder, deploy=False):
    builder.build(deploy=deploy)
    return builder.run()


def cmd_clean(builder: Builder):
    print("\n=== Cleaning ===")
    builder.remove_bundle_root()


def cmd_embed(builder: Builder):
    spec = builder.spec
    deploy_bundle(builder.layout.bundle_root, builder.toolchain,
                  deploy_arguments(spec), tool=spec.deploy_tool)


# ─── CLI ──────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appbundler",
        description="Assemble a macOS .app bundle from app.yaml",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.strip(),
    )
    parser.add_argument("command", nargs="?", default="build",
                        choices=["build", "run", "clean", "embed"],
                        help="Command to run (default: build)")
    parser.add_argument("--spec", type=str, help="Path to the specification document")
    parser.add_argument("--dir", type=str, default=".",
                        help="Directory containing app.yaml (default: current directory)")
    parser.add_argument("--deploy", action="store_true",
                        help="Clean build and embed the Python runtime")
    return parser


def main(argv=None, toolchain=None):
    args = build_parser().parse_args(argv)

    try:
        builder = Builder(load_spec(args), toolchain or Toolchain())
        if args.command == "clean":
            cmd_clean(builder)
        elif args.command == "build":
            cmd_build(builder, deploy=args.deploy)
        elif args.command == "run":
            returncode = cmd_run(builder, deploy=args.deploy)
            if returncode:
                sys.exit(returncode)
        elif args.command == "embed":
            cmd_embed(builder)
    except (AppBundlerError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

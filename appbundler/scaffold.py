"""
appbundler-new - start a new application project

Writes app.yaml, an application module and empty resources/ and models/
folders, ready for `appbundler build`.

  appbundler-new my-app
  appbundler-new my-app --name "My App" --id "com.example.myapp"
"""

import argparse
import re
import shutil
import sys
from pathlib import Path

from .errors import ConfigError
from .layout import executable_name

TEMPLATE_DIR = Path(__file__).parent / "template"
TEMPLATE_SUFFIX = ".tmpl"
DEFAULT_ID_PREFIX = "com.appbundler"
EMPTY_DIRS = ("resources", "models")


def slug_to_name(slug: str) -> str:
    """my_great-app -> My Great App"""
    return re.sub(r"[-_]+", " ", slug).strip().title()


def slug_to_id(slug: str) -> str:
    """My-App -> com.appbundler.myapp; anything but [a-z0-9] is dropped."""
    return f"{DEFAULT_ID_PREFIX}.{re.sub(r'[^a-z0-9]', '', slug.lower())}"


def module_name(slug: str) -> str:
    return re.sub(r"\W", "_", slug)


def scaffold(target_dir: Path, replacements: dict, slug: str) -> Path:
    """Lay out a new project in target_dir, which must not exist yet."""
    if target_dir.exists():
        raise ConfigError("refusing to overwrite existing directory", target_dir)

    shutil.copytree(TEMPLATE_DIR, target_dir)
    for path in sorted(target_dir.rglob("*")):
        if not path.is_file():
            continue
        text = path.read_text()
        for placeholder, value in replacements.items():
            text = text.replace(placeholder, value)
        if path.suffix == TEMPLATE_SUFFIX:
            path.unlink()
            path = path.with_name(f"{module_name(slug)}.py")
        path.write_text(text)

    for name in EMPTY_DIRS:
        (target_dir / name).mkdir(exist_ok=True)
    return target_dir


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="appbundler-new",
        description="Start a new application project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.strip(),
    )
    parser.add_argument("slug", help="Project directory name, e.g. my-app")
    parser.add_argument("--name", help="Application name (default: from slug)")
    parser.add_argument("--id", help=f"Bundle identifier (default: {DEFAULT_ID_PREFIX}.<slug>)")
    parser.add_argument("--dir", default=".", help="Where to create the project")
    args = parser.parse_args(argv)

    name = args.name or slug_to_name(args.slug)
    identifier = args.id or slug_to_id(args.slug)
    target_dir = (Path(args.dir) / args.slug).resolve()

    print(f"\n=== New project {name} ({identifier}) ===")
    try:
        scaffold(target_dir, {
            "{{APP_NAME}}": name,
            "{{APP_ID}}": identifier,
            "{{APP_CLASS}}": executable_name(name),
        }, args.slug)
    except (ConfigError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"  {target_dir}")
    print(f"  next: cd {target_dir.name} && appbundler run")
    return target_dir


if __name__ == "__main__":
    main()

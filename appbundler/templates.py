"""
Generated bundle files

The launcher stub (C, compiled into Contents/MacOS/<Executable>) and the
entry-point script it hands control to (Contents/Resources/__main__.py).
Both are plain text templates with {{PLACEHOLDER}} substitution.
"""

from .layout import ENTRY_SCRIPT_NAME

FRAMEWORKS_PREFIX = "/Library/Frameworks"


def render(template: str, replacements: dict) -> str:
    """Replace every {{KEY}} in template with its value."""
    content = template
    for key, value in replacements.items():
        content = content.replace("{{" + key + "}}", value)
    return content


# ─── Launcher stub ───────────────────────────────────────────────────────────

LAUNCHER_TEMPLATE = """\
#include <Python.h>
#include <libgen.h>
#include <limits.h>
#include <mach-o/dyld.h>
#include <stdio.h>
#include <stdlib.h>

int main(int argc, char *argv[])
{
    char exe[PATH_MAX];
    char script[PATH_MAX];
    uint32_t size = sizeof(exe);

    if (_NSGetExecutablePath(exe, &size) != 0) {
        fprintf(stderr, "cannot resolve executable path\\n");
        return 1;
    }
    snprintf(script, sizeof(script), "%s/../Resources/%s", dirname(exe), "{{ENTRY_SCRIPT}}");

    char **args = calloc(argc + 2, sizeof(char *));
    args[0] = argv[0];
    args[1] = script;
    for (int i = 1; i < argc; i++)
        args[i + 1] = argv[i];

    return Py_BytesMain(argc + 1, args);
}
"""


def launcher_source(entry_script_name: str = ENTRY_SCRIPT_NAME) -> str:
    return render(LAUNCHER_TEMPLATE, {"ENTRY_SCRIPT": entry_script_name})


# ─── Entry-point script ──────────────────────────────────────────────────────

ENTRY_SCRIPT_TEMPLATE = '''\
# Generated by appbundler. Rewritten on every build.
import importlib.util
import os
import sys
import traceback

RESOURCES = os.path.dirname(os.path.abspath(__file__))
{{FRAMEWORKS_REWRITE}}
sys.path.insert(0, RESOURCES)


def load_modules():
    """Import every .py file under Resources/, this script excluded."""
    here = os.path.abspath(__file__)
    modules = []
    for dirpath, dirnames, filenames in os.walk(RESOURCES):
        dirnames.sort()
        for filename in sorted(filenames):
            path = os.path.join(dirpath, filename)
            if not filename.endswith(".py") or os.path.abspath(path) == here:
                continue
            rel = os.path.relpath(path, RESOURCES)[:-3]
            name = rel.replace(os.sep, ".")
            if name.endswith(".__init__"):
                name = name[:-len(".__init__")]
            if name in sys.modules:
                modules.append(sys.modules[name])
                continue
            spec = importlib.util.spec_from_file_location(name, path)
            module = importlib.util.module_from_spec(spec)
            sys.modules[name] = module
            spec.loader.exec_module(module)
            modules.append(module)
    return modules


def main():
    for module in load_modules():
        app_class = getattr(module, "{{APP_CLASS}}", None)
        if app_class is not None:
            return app_class().start()
    raise LookupError("entry class {{APP_CLASS}} not found in bundle resources")


try:
    main()
except Exception as e:
    sys.stderr.write(f"{e}\\n")
    traceback.print_exc(file=sys.stderr)
    sys.exit(1)
'''

FRAMEWORKS_REWRITE = '''
FRAMEWORKS = os.path.join(os.path.dirname(RESOURCES), "Frameworks")
sys.path[:] = [
    FRAMEWORKS + p[len("{{FRAMEWORKS_PREFIX}}"):] if p.startswith("{{FRAMEWORKS_PREFIX}}") else p
    for p in sys.path
]
'''


def entry_script(app_class: str, deploy: bool = False) -> str:
    """Entry-point script that loads the app's modules and calls <app_class>().start().

    Deploy builds also point /Library/Frameworks paths at the bundle's own
    Contents/Frameworks so the shipped app does not depend on the build host.
    """
    rewrite = ""
    if deploy:
        rewrite = render(FRAMEWORKS_REWRITE, {"FRAMEWORKS_PREFIX": FRAMEWORKS_PREFIX})
    return render(ENTRY_SCRIPT_TEMPLATE, {
        "FRAMEWORKS_REWRITE": rewrite,
        "APP_CLASS": app_class,
    })

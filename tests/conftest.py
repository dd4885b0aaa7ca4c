"""Shared fixtures: a project directory on disk and a recording fake toolchain."""

from pathlib import Path

import pytest

from appbundler.specification import Specification


class FakeToolchain:
    """Records every external invocation and writes placeholder outputs."""

    def __init__(self):
        self.calls = []

    def compile_launcher(self, source, output, archs):
        assert Path(source).exists(), "launcher source must exist while compiling"
        self.calls.append(("compile_launcher", Path(source), Path(output), tuple(archs)))
        Path(output).write_bytes(b"\xcf\xfa\xed\xfe")

    def compile_interface_resource(self, source, destination):
        self.calls.append(("compile_interface_resource", Path(source), Path(destination)))
        Path(destination).write_bytes(b"nib")

    def compile_data_model(self, source, destination):
        self.calls.append(("compile_data_model", Path(source), Path(destination)))
        Path(destination).write_bytes(b"mom")

    def deploy(self, bundle_root, arguments, tool):
        self.calls.append(("deploy", Path(bundle_root), list(arguments), tool))

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def toolchain():
    return FakeToolchain()


@pytest.fixture
def project(tmp_path):
    """A minimal app project: one source file, two resources, one data model, an icon."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.txt").write_text("alpha\n")
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "app.py").write_text("class FooBar:\n    def start(self):\n        pass\n")
    (tmp_path / "resources" / "images").mkdir(parents=True)
    (tmp_path / "resources" / "images" / "logo.png").write_bytes(b"\x89PNG\r\n")
    (tmp_path / "resources" / "MainMenu.xib").write_text("<document/>")
    (tmp_path / "models" / "Store.xcdatamodel").mkdir(parents=True)
    (tmp_path / "models" / "Store.xcdatamodel" / "elements").write_text("<model/>")
    (tmp_path / "icon.icns").write_bytes(b"icns")
    return tmp_path


@pytest.fixture
def make_spec(project):
    def _make(**overrides):
        fields = {"name": "Foo Bar", "identifier": "com.x.foobar", "root": project}
        fields.update(overrides)
        return Specification(**fields)
    return _make

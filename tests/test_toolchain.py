"""Tests for the subprocess-backed toolchain."""

import subprocess
from pathlib import Path

import pytest

from appbundler import toolchain as toolchain_module
from appbundler.errors import ExternalToolError
from appbundler.toolchain import Toolchain, launcher_archs, run


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, cmd, cwd=None):
        self.calls.append((list(cmd), cwd))


@pytest.fixture
def recorder(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr(toolchain_module, "run", rec)
    return rec


class TestRun:
    """Test run() error translation."""

    def test_echoes_command(self, monkeypatch, capsys):
        """The command is echoed before it runs."""
        monkeypatch.setattr(subprocess, "run", lambda cmd, cwd=None, check=True: None)
        run(["ibtool", "--compile", Path("a.nib"), Path("a.xib")])
        assert "  $ ibtool --compile a.nib a.xib" in capsys.readouterr().out

    def test_nonzero_exit(self, monkeypatch):
        """A failing tool raises ExternalToolError with its exit status."""
        def fake(cmd, cwd=None, check=True):
            raise subprocess.CalledProcessError(2, cmd)
        monkeypatch.setattr(subprocess, "run", fake)
        with pytest.raises(ExternalToolError) as exc:
            run(["cc", "main.c"])
        assert exc.value.returncode == 2
        assert exc.value.cmd == ["cc", "main.c"]
        assert "cc exited with status 2" in str(exc.value)

    def test_missing_tool(self):
        """A tool missing from PATH raises ExternalToolError."""
        with pytest.raises(ExternalToolError) as exc:
            run(["appbundler-no-such-tool-xyz"])
        assert exc.value.returncode is None
        assert "could not be executed" in str(exc.value)


class TestToolchain:
    """Test the command lines each tool receives."""

    def test_compile_launcher(self, recorder, tmp_path):
        """cc runs inside MacOS/ with arch and framework flags."""
        Toolchain().compile_launcher(tmp_path / "main.c", tmp_path / "FooBar", ["x86_64", "arm64"])
        cmd, cwd = recorder.calls[0]
        assert cmd == ["cc", "main.c", "-o", "FooBar",
                       "-arch", "x86_64", "-arch", "arm64",
                       "-framework", "Python", "-framework", "Foundation"]
        assert cwd == tmp_path

    def test_compile_interface_resource(self, recorder):
        Toolchain().compile_interface_resource(Path("r/Main.xib"), Path("out/Main.nib"))
        assert recorder.calls[0][0] == ["ibtool", "--compile", Path("out/Main.nib"), Path("r/Main.xib")]

    def test_compile_data_model(self, recorder):
        Toolchain().compile_data_model(Path("m/Store.xcdatamodel"), Path("out/Store.mom"))
        assert recorder.calls[0][0] == ["xcrun", "momc", Path("m/Store.xcdatamodel"), Path("out/Store.mom")]

    def test_deploy(self, recorder):
        Toolchain().deploy(Path("Foo.app"), ["--embed", "--compile"], "macpython-deploy")
        assert recorder.calls[0][0] == ["macpython-deploy", "--embed", "--compile", Path("Foo.app")]


class TestLauncherArchs:
    def test_archs(self):
        assert launcher_archs(True) == ("x86_64", "arm64")
        assert launcher_archs(False) == ("x86_64",)

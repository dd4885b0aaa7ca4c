"""Tests for the appbundler command line."""

import pytest

from appbundler.cli import main


@pytest.fixture
def spec_file(project):
    path = project / "app.yaml"
    path.write_text(
        "name: Foo Bar\n"
        "identifier: com.x.foobar\n"
        "sources: [src/a.txt]\n"
        "resources: [resources/**/*.*]\n"
    )
    return path


class TestBuildCommand:
    """Test the build command."""

    def test_build_from_dir(self, project, spec_file, toolchain):
        """app.yaml is discovered in --dir."""
        main(["build", "--dir", str(project)], toolchain=toolchain)
        assert (project / "Foo Bar.app" / "Contents" / "Resources" / "src" / "a.txt").is_file()
        assert "deploy" not in toolchain.names()

    def test_default_command_is_build(self, project, spec_file, toolchain):
        main(["--spec", str(spec_file)], toolchain=toolchain)
        assert (project / "Foo Bar.app" / "Contents" / "PkgInfo").is_file()

    def test_build_deploy(self, project, spec_file, toolchain):
        """--deploy runs the deploy step last."""
        main(["build", "--spec", str(spec_file), "--deploy"], toolchain=toolchain)
        assert toolchain.names()[-1] == "deploy"


class TestOtherCommands:
    """Test clean and embed."""

    def test_clean(self, project, spec_file, toolchain):
        main(["build", "--dir", str(project)], toolchain=toolchain)
        main(["clean", "--dir", str(project)], toolchain=toolchain)
        assert not (project / "Foo Bar.app").exists()

    def test_embed(self, project, spec_file, toolchain):
        main(["build", "--dir", str(project)], toolchain=toolchain)
        main(["embed", "--dir", str(project)], toolchain=toolchain)
        assert toolchain.calls[-1][0] == "deploy"
        assert toolchain.calls[-1][1] == project / "Foo Bar.app"

    def test_embed_uses_spec_flags(self, project, toolchain):
        """embed deploys with the same flags as build --deploy."""
        (project / "app.yaml").write_text(
            "name: Foo Bar\n"
            "identifier: com.x.foobar\n"
            "packages: [requests]\n"
            "embed_bs: true\n"
            "deploy_tool: embed-py\n"
        )
        main(["build", "--dir", str(project)], toolchain=toolchain)
        main(["embed", "--dir", str(project)], toolchain=toolchain)
        assert toolchain.calls[-1] == (
            "deploy", project / "Foo Bar.app",
            ["--embed", "--package", "pyobjc", "--package", "requests", "--bs"],
            "embed-py",
        )


class TestErrors:
    """Test fatal error reporting."""

    def test_missing_spec(self, tmp_path, toolchain, capsys):
        """A missing spec exits 1 with ERROR on stderr."""
        with pytest.raises(SystemExit) as exc:
            main(["build", "--dir", str(tmp_path)], toolchain=toolchain)
        assert exc.value.code == 1
        assert "ERROR:" in capsys.readouterr().err

    def test_spec_not_utf8(self, project, toolchain, capsys):
        """An undecodable app.yaml exits 1 instead of raising."""
        (project / "app.yaml").write_bytes(b"name: Caf\xe9\nidentifier: com.x.cafe\n")
        with pytest.raises(SystemExit) as exc:
            main(["build", "--dir", str(project)], toolchain=toolchain)
        assert exc.value.code == 1
        assert "UTF-8" in capsys.readouterr().err

    def test_embed_without_bundle(self, project, spec_file, toolchain, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["embed", "--dir", str(project)], toolchain=toolchain)
        assert exc.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_tool_failure(self, project, spec_file, toolchain, capsys):
        """An external tool failure aborts with a non-zero exit."""
        from appbundler.errors import ExternalToolError

        def fail(source, destination):
            raise ExternalToolError(["ibtool", "--compile"], 1)
        toolchain.compile_interface_resource = fail

        with pytest.raises(SystemExit) as exc:
            main(["build", "--dir", str(project)], toolchain=toolchain)
        assert exc.value.code == 1
        assert "ibtool exited with status 1" in capsys.readouterr().err

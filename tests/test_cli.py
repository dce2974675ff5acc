"""Integration tests for CLI commands."""

from pathlib import Path

from typer.testing import CliRunner

from protoset import __version__
from protoset.cli import app, split_comma_separated
from protoset.compiler import builder as builder_module
from protoset.compiler import executor, toolchain
from protoset.compiler.executor import ExecutionResult
from protoset.compiler.toolchain import Toolset

from tests.conftest import MESSAGE_ONLY, importing

runner = CliRunner()


class TestHelpers:
    def test_split_comma_separated(self):
        assert split_comma_separated(" a, b,,c ,") == ["a", "b", "c"]
        assert split_comma_separated(None) == []


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestFilesCommand:
    """Tests for 'protoset files'."""

    def test_lists_relative_paths(self, write_proto, proto_root: Path):
        write_proto("a.proto")
        write_proto("pkg/b.proto")

        result = runner.invoke(app, ["files", "--proto-dir", str(proto_root)])

        assert result.exit_code == 0
        assert "a.proto" in result.output
        assert "pkg/b.proto" in result.output

    def test_nonexistent_dir(self, tmp_path: Path):
        result = runner.invoke(app, ["files", "--proto-dir", str(tmp_path / "nope")])

        assert result.exit_code == 1


class TestPlanCommand:
    """Tests for 'protoset plan'."""

    def test_prints_command(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("a.proto", importing("b/b.proto"))
        write_proto("b/b.proto", MESSAGE_ONLY)
        out = tmp_path / "gen"

        result = runner.invoke(
            app,
            [
                "plan",
                "-p", str(proto_root),
                "-o", str(out),
                "-I", f"{proto_root},{proto_root}/",
                "--plugins", "go,go-grpc",
                "--go-opt", "paths=source_relative,module=example.com/x",
            ],
        )

        assert result.exit_code == 0
        line = next(l for l in result.output.splitlines() if l.startswith("protoc "))
        assert line.count("--proto_path=") == 1
        assert f"--go_out=paths=source_relative,module=example.com/x:{out.as_posix()}" in line
        assert line.endswith(" a.proto")
        assert "b/b.proto" not in line

    def test_no_smart_filter(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("a.proto", importing("b.proto"))
        write_proto("b.proto", MESSAGE_ONLY)

        result = runner.invoke(app, ["plan", "-p", str(proto_root), "-o", str(tmp_path), "--no-smart-filter"])

        line = next(l for l in result.output.splitlines() if l.startswith("protoc "))
        assert line.endswith(" a.proto b.proto")

    def test_empty_directory_fails(self, proto_root: Path, tmp_path: Path):
        result = runner.invoke(app, ["plan", "-p", str(proto_root), "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "no .proto files found" in result.output


class TestCompileCommand:
    """Tests for 'protoset compile'."""

    def test_missing_protoc(self, write_proto, proto_root: Path, tmp_path: Path, monkeypatch):
        write_proto("a.proto", MESSAGE_ONLY)
        monkeypatch.setattr(toolchain, "lookup", lambda tool: None)

        result = runner.invoke(app, ["compile", "-p", str(proto_root), "-o", str(tmp_path / "gen")])

        assert result.exit_code == 1
        assert "protoc command not found in PATH" in result.output

    def test_success(self, write_proto, proto_root: Path, tmp_path: Path, monkeypatch):
        write_proto("a.proto", MESSAGE_ONLY)
        monkeypatch.setattr(
            builder_module,
            "check_toolchain",
            lambda plugins, compiler_name=None: Toolset(compiler="protoc"),
        )
        monkeypatch.setattr(executor, "run", lambda *args, **kwargs: ExecutionResult("", 0))

        result = runner.invoke(app, ["compile", "-p", str(proto_root), "-o", str(tmp_path / "gen")])

        assert result.exit_code == 0
        assert "Compiled 1 file(s)" in result.output

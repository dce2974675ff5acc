"""End-to-end tests for the resolution pipeline (no compiler is run)."""

from pathlib import Path

import pytest

from protoset.core.pipeline import find_files, resolve_source_set, validate_options
from protoset.errors import ConfigurationError, NoSchemaFilesError, PathContainmentError
from protoset.models.schema import CompileOptions

from tests.conftest import MESSAGE_ONLY, importing


def _options(proto_root: Path, tmp_path: Path, **kwargs) -> CompileOptions:
    return CompileOptions(proto_dir=proto_root, output_dir=tmp_path / "gen", **kwargs)


def _file_args(plan) -> list[str]:
    return [a for a in plan.command.arguments if not a.startswith("--")]


def _root_args(plan) -> list[str]:
    return [a for a in plan.command.arguments if a.startswith("--proto_path=")]


class TestScenarios:
    """Behavioural scenarios for complete resolution runs."""

    def test_imported_message_file_pulled_in(self, write_proto, proto_root: Path, tmp_path: Path):
        a = write_proto("a.proto", importing("b/b.proto"))
        write_proto("b/b.proto", MESSAGE_ONLY)

        plan = resolve_source_set(_options(proto_root, tmp_path))

        assert plan.compile_set.files == [a]
        assert plan.roots == [proto_root]
        assert _file_args(plan) == ["a.proto"]

    def test_service_importing_common(self, write_proto, proto_root: Path, tmp_path: Path):
        svc = write_proto(
            "svc.proto",
            importing("common.proto", body="service Api {\n  rpc Get (Item) returns (Item);\n}\n"),
        )
        write_proto("common.proto", MESSAGE_ONLY)

        plan = resolve_source_set(_options(proto_root, tmp_path))

        assert plan.compile_set.files == [svc]

    def test_independent_files_both_compiled(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("one.proto", MESSAGE_ONLY)
        write_proto("two.proto", MESSAGE_ONLY)

        plan = resolve_source_set(_options(proto_root, tmp_path))

        assert _file_args(plan) == ["one.proto", "two.proto"]

    def test_primary_root_repeated_as_extra(self, write_proto, proto_root: Path, tmp_path: Path, monkeypatch):
        write_proto("a.proto", MESSAGE_ONLY)
        monkeypatch.chdir(tmp_path)
        options = CompileOptions(
            proto_dir="proto",
            output_dir="gen",
            proto_paths=(str(proto_root) + "/",),
        )

        plan = resolve_source_set(options)

        assert _root_args(plan) == [f"--proto_path={proto_root.as_posix()}"]

    def test_import_literal_path_kept_in_arguments(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("api/v1/service.proto", importing("api/v1/types.proto"))
        write_proto("api/v1/types.proto", MESSAGE_ONLY)

        plan = resolve_source_set(_options(proto_root, tmp_path))

        assert _file_args(plan) == ["api/v1/service.proto"]

    def test_subdirectory_importing_from_parent(self, tmp_path: Path, write_proto):
        """Upward walk adds the ancestor that satisfies the import as a root."""
        proto_root = tmp_path / "docs" / "proto"
        act = proto_root / "act7110"
        write_proto("act7110/enum.proto", "enum ClickType {\n  Rat = 0;\n}\n", base=proto_root)
        write_proto(
            "act7110/act7110.proto",
            importing("act7110/enum.proto", body="message Request {\n  ClickType click_type = 1;\n}\n"),
            base=proto_root,
        )

        plan = resolve_source_set(CompileOptions(proto_dir=act, output_dir=tmp_path / "gen"))

        assert plan.roots == [act, proto_root]
        assert _file_args(plan) == ["act7110.proto"]

    def test_fallback_on_cycle(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("a.proto", importing("b.proto"))
        write_proto("b.proto", importing("a.proto"))

        plan = resolve_source_set(_options(proto_root, tmp_path))

        assert plan.compile_set.fallback_applied is True
        assert _file_args(plan) == ["a.proto", "b.proto"]

    def test_smart_filter_disabled(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("a.proto", importing("b.proto"))
        write_proto("b.proto", MESSAGE_ONLY)

        plan = resolve_source_set(_options(proto_root, tmp_path, smart_filter=False))

        assert _file_args(plan) == ["a.proto", "b.proto"]

    def test_auto_detect_disabled_skips_graph(self, tmp_path: Path, write_proto):
        workspace = tmp_path / "ws"
        sub = workspace / "sub"
        write_proto("common/types.proto", MESSAGE_ONLY, base=workspace)
        write_proto("a.proto", importing("common/types.proto"), base=sub)

        plan = resolve_source_set(
            CompileOptions(proto_dir=sub, output_dir=tmp_path / "gen", auto_detect_imports=False)
        )

        assert plan.roots == [sub]
        assert plan.graph.edges == []

    def test_workspace_dir_is_primary_root(self, write_proto, tmp_path: Path):
        workspace = tmp_path / "ws"
        write_proto("api/a.proto", MESSAGE_ONLY, base=workspace)

        plan = resolve_source_set(
            CompileOptions(proto_dir=workspace / "api", workspace_dir=workspace, output_dir=tmp_path / "gen")
        )

        assert plan.command.working_dir == workspace
        assert _file_args(plan) == ["api/a.proto"]

    def test_unresolved_imports_reported(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("a.proto", importing("does/not/exist.proto"))

        plan = resolve_source_set(_options(proto_root, tmp_path, verbose=True))

        assert [u.literal for u in plan.graph.unresolved] == ["does/not/exist.proto"]
        assert _file_args(plan) == ["a.proto"]

    def test_precomputed_discovery(self, write_proto, proto_root: Path, tmp_path: Path):
        only = write_proto("only.proto", MESSAGE_ONLY)
        write_proto("ignored.proto", MESSAGE_ONLY)

        plan = resolve_source_set(_options(proto_root, tmp_path), discovered=[only])

        assert _file_args(plan) == ["only.proto"]

    def test_resolving_twice_is_stable(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("a.proto", importing("b.proto"))
        write_proto("b.proto", MESSAGE_ONLY)
        options = _options(proto_root, tmp_path, proto_paths=(proto_root,))

        assert resolve_source_set(options).command == resolve_source_set(options).command


class TestValidation:
    """Tests for configuration and containment errors."""

    def test_missing_proto_dir(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="proto directory not specified"):
            validate_options(CompileOptions(output_dir=tmp_path))

    def test_blank_proto_dir_is_unspecified(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="not specified"):
            validate_options(CompileOptions(proto_dir="", output_dir=tmp_path))

    def test_missing_output_dir(self, proto_root: Path):
        with pytest.raises(ConfigurationError, match="output directory not specified"):
            validate_options(CompileOptions(proto_dir=proto_root))

    def test_nonexistent_proto_dir(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="does not exist"):
            validate_options(CompileOptions(proto_dir=tmp_path / "nope", output_dir=tmp_path))

    def test_proto_dir_outside_workspace(self, proto_root: Path, tmp_path: Path):
        workspace = tmp_path / "ws"
        workspace.mkdir()

        with pytest.raises(PathContainmentError) as exc_info:
            validate_options(
                CompileOptions(proto_dir=proto_root, workspace_dir=workspace, output_dir=tmp_path)
            )

        assert exc_info.value.workspace_dir == str(workspace)

    def test_no_schema_files(self, proto_root: Path, tmp_path: Path):
        with pytest.raises(NoSchemaFilesError, match="no .proto files found"):
            resolve_source_set(_options(proto_root, tmp_path))

    def test_find_files(self, write_proto, proto_root: Path, tmp_path: Path):
        write_proto("a.proto")
        write_proto("nested/b.proto")

        assert len(find_files(_options(proto_root, tmp_path))) == 2

"""Tests for import resolution and in-degree counting."""

from pathlib import Path

from protoset.graph.builder import ImportResolver, build_import_graph
from protoset.parsers.proto_scanner import ProtoScanner

from tests.conftest import MESSAGE_ONLY, importing


def _scan(*paths: Path):
    scanner = ProtoScanner()
    return [scanner.scan_file(p) for p in paths]


class TestImportResolver:
    """Tests for the resolution order."""

    def test_importing_file_directory_first(self, write_proto, proto_root: Path):
        """A sibling of the importing file wins over the root."""
        sibling = write_proto("pkg/common.proto")
        write_proto("common.proto")
        importer = write_proto("pkg/a.proto")

        target, ascended = ImportResolver(proto_root).resolve(importer, "common.proto")

        assert target == sibling
        assert ascended is None

    def test_primary_root(self, write_proto, proto_root: Path):
        common = write_proto("shared/common.proto")
        importer = write_proto("pkg/a.proto")

        target, _ = ImportResolver(proto_root).resolve(importer, "shared/common.proto")

        assert target == common

    def test_extra_roots_in_order(self, write_proto, proto_root: Path, tmp_path: Path):
        first = tmp_path / "vendor1"
        second = tmp_path / "vendor2"
        write_proto("dep.proto", base=second)
        expected = write_proto("dep.proto", base=first)
        importer = write_proto("a.proto")

        target, ascended = ImportResolver(proto_root, [first, second]).resolve(importer, "dep.proto")

        assert target == expected
        assert ascended is None

    def test_upward_walk(self, tmp_path: Path, write_proto):
        """Imports written relative to an ancestor of the root resolve there."""
        workspace = tmp_path / "ws"
        sub = workspace / "sub"
        types = write_proto("common/types.proto", base=workspace)
        importer = write_proto("a.proto", base=sub)

        target, ascended = ImportResolver(sub).resolve(importer, "common/types.proto")

        assert target == types
        assert ascended == workspace

    def test_upward_walk_is_bounded(self, tmp_path: Path, write_proto):
        workspace = tmp_path / "ws"
        deep = workspace / "a" / "b"
        write_proto("common/types.proto", base=workspace)
        importer = write_proto("x.proto", base=deep)

        assert ImportResolver(deep, max_ascent_depth=1).resolve(importer, "common/types.proto") is None
        assert ImportResolver(deep, max_ascent_depth=2).resolve(importer, "common/types.proto") is not None

    def test_backslash_literal(self, write_proto, proto_root: Path):
        common = write_proto("shared/common.proto")
        importer = write_proto("a.proto")

        target, _ = ImportResolver(proto_root).resolve(importer, "shared\\common.proto")

        assert target == common

    def test_unresolvable(self, write_proto, proto_root: Path):
        importer = write_proto("a.proto")

        assert ImportResolver(proto_root).resolve(importer, "does/not/exist.proto") is None


class TestBuildImportGraph:
    """Tests for graph construction."""

    def test_in_degree_counts_files(self, write_proto, proto_root: Path):
        """Two import lines in one file count as one importer."""
        common = write_proto("common.proto", MESSAGE_ONLY)
        a = write_proto("a.proto", importing("common.proto", "common.proto"))
        b = write_proto("b.proto", importing("common.proto"))

        graph = build_import_graph(_scan(common, a, b), proto_root)

        assert graph.in_degree_of(common) == 2
        assert graph.in_degree_of(a) == 0
        assert len(graph.edges) == 2
        assert {e.from_path for e in graph.edges} == {a, b}

    def test_unresolved_does_not_count(self, write_proto, proto_root: Path):
        a = write_proto("a.proto", importing("does/not/exist.proto"))

        graph = build_import_graph(_scan(a), proto_root)

        assert graph.in_degree == {}
        assert graph.unresolved_count == 1
        assert graph.unresolved[0].file == a
        assert graph.unresolved[0].literal == "does/not/exist.proto"

    def test_self_import_ignored(self, write_proto, proto_root: Path):
        a = write_proto("a.proto", importing("a.proto"))

        graph = build_import_graph(_scan(a), proto_root)

        assert graph.in_degree_of(a) == 0
        assert graph.edges == []

    def test_same_target_via_different_literals(self, write_proto, proto_root: Path):
        """``common.proto`` and ``./common.proto`` are one target."""
        common = write_proto("common.proto", MESSAGE_ONLY)
        a = write_proto("a.proto", importing("common.proto", "./common.proto"))

        graph = build_import_graph(_scan(common, a), proto_root)

        assert graph.in_degree_of(common) == 1

    def test_ascended_roots_recorded(self, tmp_path: Path, write_proto):
        workspace = tmp_path / "ws"
        sub = workspace / "sub"
        write_proto("common/types.proto", MESSAGE_ONLY, base=workspace)
        a = write_proto("a.proto", importing("common/types.proto"), base=sub)

        graph = build_import_graph(_scan(a), sub)

        assert graph.ascended_roots == [workspace]
        assert graph.unresolved == []

    def test_unreadable_file_contributes_nothing(self, write_proto, proto_root: Path):
        a = write_proto("a.proto", importing("b.proto"))
        files = _scan(a, proto_root / "vanished.proto")

        graph = build_import_graph(files, proto_root)

        assert graph.edges == []
        assert len(graph.unresolved) == 1

"""Resolves import literals to files and counts importers per file.

Resolution follows the order the compiler itself uses, so that "found"
here means "found" for ``protoc`` too:

1. the importing file's own directory;
2. the primary root;
3. each extra search root, in the order given;
4. each ancestor of the primary root, nearest first, up to a bounded depth.

Anything else is recorded as unresolved.  Unresolved imports are a
diagnostic, not an error: they may resolve against an include path the
resolver was never told about.
"""

from __future__ import annotations

import os
import pathlib
from collections import Counter
from typing import Iterable, Optional, Sequence

import structlog

from protoset.config import settings
from protoset.core.paths import canonicalize, path_key
from protoset.models.schema import ImportEdge, ImportGraph, SourceFile, UnresolvedImport

logger = structlog.get_logger(__name__)


class ImportResolver:
    """Maps ``(importing file, literal)`` pairs to absolute file paths.

    Root-relative lookups (steps 2-4) do not depend on the importing file
    and are cached per literal.

    Args:
        primary_root: Canonical primary search root.
        extra_roots: Additional search roots, highest priority first.
        max_ascent_depth: How many ancestors of the primary root to try.
            ``0`` disables the upward walk.
    """

    def __init__(
        self,
        primary_root: pathlib.Path,
        extra_roots: Sequence[pathlib.Path] = (),
        max_ascent_depth: Optional[int] = None,
    ) -> None:
        self.primary_root = canonicalize(primary_root)
        self.extra_roots = [canonicalize(root) for root in extra_roots]
        self.max_ascent_depth = (
            settings.max_ascent_depth if max_ascent_depth is None else max_ascent_depth
        )
        self._root_cache: dict[str, Optional[tuple[pathlib.Path, Optional[pathlib.Path]]]] = {}

    @staticmethod
    def _candidate(base: pathlib.Path, literal: str) -> Optional[pathlib.Path]:
        candidate = canonicalize(base / literal)
        return candidate if candidate.is_file() else None

    def _ancestors(self) -> Iterable[pathlib.Path]:
        current = self.primary_root
        for _ in range(self.max_ascent_depth):
            parent = current.parent
            if parent == current:
                return
            yield parent
            current = parent

    def _resolve_against_roots(
        self, literal: str
    ) -> Optional[tuple[pathlib.Path, Optional[pathlib.Path]]]:
        if literal in self._root_cache:
            return self._root_cache[literal]

        result: Optional[tuple[pathlib.Path, Optional[pathlib.Path]]] = None
        for root in [self.primary_root, *self.extra_roots]:
            found = self._candidate(root, literal)
            if found is not None:
                result = (found, None)
                break
        else:
            for ancestor in self._ancestors():
                found = self._candidate(ancestor, literal)
                if found is not None:
                    result = (found, ancestor)
                    break

        self._root_cache[literal] = result
        return result

    def resolve(
        self, source: pathlib.Path, literal: str
    ) -> Optional[tuple[pathlib.Path, Optional[pathlib.Path]]]:
        """Resolve *literal* as imported from *source*.

        Args:
            source: Canonical path of the importing file.
            literal: Raw import literal.

        Returns:
            ``(target, ascended_root)`` where *ascended_root* is the
            ancestor directory that satisfied the import during the upward
            walk (``None`` for steps 1-3), or ``None`` if unresolved.
        """
        normalized = literal.strip().replace("\\", "/")
        if not normalized:
            return None

        found = self._candidate(source.parent, normalized)
        if found is not None:
            return found, None
        return self._resolve_against_roots(normalized)


def build_import_graph(
    files: Sequence[SourceFile],
    primary_root: pathlib.Path,
    extra_roots: Sequence[pathlib.Path] = (),
    max_ascent_depth: Optional[int] = None,
    verbose: bool = False,
) -> ImportGraph:
    """Build the import graph for *files*.

    In-degree counts importing *files*, not import statements: a file that
    imports the same target twice contributes one edge.  A file importing
    itself is ignored.

    Args:
        files: Scanned schema files.
        primary_root: Primary search root.
        extra_roots: Caller-supplied search roots.
        max_ascent_depth: Upward-walk bound (``None`` uses settings).
        verbose: Log unresolved imports at INFO instead of DEBUG.

    Returns:
        The populated :class:`ImportGraph`.
    """
    resolver = ImportResolver(primary_root, extra_roots, max_ascent_depth)
    diagnostic = logger.info if verbose else logger.debug

    # Spellings that differ only by case map back to the discovered path.
    discovered = {path_key(f.path): f.path for f in files}

    in_degree: Counter[pathlib.Path] = Counter()
    edges: list[ImportEdge] = []
    unresolved: list[UnresolvedImport] = []
    ascended: list[pathlib.Path] = []
    ascended_keys: set[str] = set()

    for source in files:
        seen_targets: set[str] = set()
        seen_unresolved: set[str] = set()

        for literal in source.declared_imports:
            resolved = resolver.resolve(source.path, literal)
            if resolved is None:
                if literal not in seen_unresolved:
                    seen_unresolved.add(literal)
                    unresolved.append(UnresolvedImport(file=source.path, literal=literal))
                    diagnostic("import_unresolved", file=str(source.path), literal=literal)
                continue

            target, ascended_root = resolved
            key = os.path.normcase(str(target))
            target = discovered.get(key, target)

            if ascended_root is not None and path_key(ascended_root) not in ascended_keys:
                ascended_keys.add(path_key(ascended_root))
                ascended.append(ascended_root)
                diagnostic("import_root_ascended", literal=literal, root=str(ascended_root))

            if key == path_key(source.path) or key in seen_targets:
                continue
            seen_targets.add(key)
            in_degree[target] += 1
            edges.append(ImportEdge(from_path=source.path, to_path=target, literal=literal))

    logger.debug(
        "import_graph_built",
        files=len(files),
        edges=len(edges),
        unresolved=len(unresolved),
        ascended_roots=len(ascended),
    )
    return ImportGraph(
        in_degree=dict(in_degree),
        edges=edges,
        unresolved=unresolved,
        ascended_roots=ascended,
    )

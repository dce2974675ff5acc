"""Chooses which discovered files are listed explicitly for compilation.

Listing a file that the compiler also reaches through an import of another
listed file makes some compilers report its types as defined twice.  Files
that exist only to be imported are therefore left for the compiler to pull
in on its own.
"""

from __future__ import annotations

import pathlib
from typing import Sequence

import structlog

from protoset.models.schema import ImportGraph, ResolvedCompileSet, SourceFile

logger = structlog.get_logger(__name__)


def is_entry_point(source: SourceFile, in_degree: int) -> bool:
    """Return ``True`` if *source* must be named on the command line.

    A file is kept when nothing imports it, when it defines a service, or
    when it defines a message and nothing imports it.
    """
    if in_degree == 0:
        return True
    if source.has_service_definition:
        return True
    return source.has_message_definition and in_degree == 0


def _ordered(paths: Sequence[pathlib.Path]) -> list[pathlib.Path]:
    return sorted(paths, key=lambda p: p.as_posix())


def select_compile_set(
    files: Sequence[SourceFile],
    graph: ImportGraph,
    verbose: bool = False,
) -> ResolvedCompileSet:
    """Apply the inclusion rule to every file in one pass.

    In-degrees are global, so each decision is independent of the others.
    If the rule would leave nothing to compile while *files* is not empty,
    the whole discovery result is returned instead.

    Args:
        files: Every discovered file.
        graph: The import graph built over *files*.
        verbose: Log omitted files at INFO instead of DEBUG.

    Returns:
        A :class:`ResolvedCompileSet` sorted by path.
    """
    diagnostic = logger.info if verbose else logger.debug
    kept: list[pathlib.Path] = []

    for source in files:
        in_degree = graph.in_degree_of(source.path)
        if is_entry_point(source, in_degree):
            kept.append(source.path)
        else:
            diagnostic("omitted_imported_only", file=str(source.path), importers=in_degree)

    if not kept and files:
        logger.warning("inclusion_filter_fallback", files=len(files))
        return ResolvedCompileSet(files=_ordered([f.path for f in files]), fallback_applied=True)

    return ResolvedCompileSet(files=_ordered(kept))


def select_all(files: Sequence[SourceFile]) -> ResolvedCompileSet:
    """Compile set used when filtering is switched off: every file."""
    return ResolvedCompileSet(files=_ordered([f.path for f in files]))

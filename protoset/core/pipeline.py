"""Resolution pipeline: discovery -> scan -> graph -> filter -> roots -> command.

This is the main entry point for planning a compiler invocation.  It reads
files but never runs the compiler, so it can be called for a dry run and is
safe to call from several threads with different options.
"""

from __future__ import annotations

import pathlib
from typing import Optional, Sequence

import structlog

from protoset.command.assembler import assemble_command
from protoset.command.roots import dedupe_roots
from protoset.config import settings
from protoset.core.crawler import discover
from protoset.core.paths import canonicalize, relative_posix
from protoset.errors import ConfigurationError, NoSchemaFilesError, PathContainmentError
from protoset.graph.builder import build_import_graph
from protoset.graph.inclusion import select_all, select_compile_set
from protoset.models.schema import CompileOptions, ImportGraph, ResolutionPlan, SourceFile
from protoset.parsers.proto_scanner import ProtoScanner

logger = structlog.get_logger(__name__)


def validate_options(options: CompileOptions) -> tuple[pathlib.Path, pathlib.Path, pathlib.Path]:
    """Check the configured directories before touching the file tree.

    Args:
        options: Options to validate.

    Returns:
        Canonical ``(proto_dir, primary_root, output_dir)``.

    Raises:
        ConfigurationError: A directory is unspecified, or the proto or
            workspace directory does not exist.
        PathContainmentError: The proto directory lies outside the
            workspace directory.
    """
    if options.proto_dir is None:
        raise ConfigurationError("proto directory not specified")
    if options.primary_root is None:
        raise ConfigurationError("workspace directory not specified")
    if options.output_dir is None:
        raise ConfigurationError("output directory not specified")

    proto_dir = canonicalize(options.proto_dir)
    primary_root = canonicalize(options.primary_root)

    if not proto_dir.is_dir():
        raise ConfigurationError(f"proto directory does not exist: {proto_dir}")
    if not primary_root.is_dir():
        raise ConfigurationError(f"workspace directory does not exist: {primary_root}")
    if relative_posix(proto_dir, primary_root) is None:
        raise PathContainmentError(str(proto_dir), str(primary_root))

    return proto_dir, primary_root, canonicalize(options.output_dir)


def find_files(options: CompileOptions) -> list[pathlib.Path]:
    """Validate *options* and return every schema file under the proto dir."""
    proto_dir, _, _ = validate_options(options)
    return discover(proto_dir)


def scan_files(paths: Sequence[pathlib.Path]) -> list[SourceFile]:
    """Run the import scanner over every path; unreadable files are kept."""
    scanner = ProtoScanner()
    return [scanner.scan_file(path) for path in paths]


def resolve_source_set(
    options: CompileOptions,
    discovered: Optional[Sequence[pathlib.Path]] = None,
) -> ResolutionPlan:
    """Compute roots, compile set and compiler arguments for *options*.

    Args:
        options: Immutable compile options.
        discovered: Pre-computed discovery result; when ``None`` the proto
            directory is walked.

    Returns:
        The complete :class:`ResolutionPlan`.

    Raises:
        ConfigurationError: See :func:`validate_options`.
        PathContainmentError: See :func:`validate_options`.
        DiscoveryError: A directory could not be walked.
        NoSchemaFilesError: Discovery found nothing to compile.
    """
    proto_dir, primary_root, output_dir = validate_options(options)
    diagnostic = logger.info if options.verbose else logger.debug

    if discovered is None:
        discovered = discover(proto_dir)
    paths = [canonicalize(p) for p in discovered]
    if not paths:
        raise NoSchemaFilesError(str(proto_dir), settings.schema_extension)

    extra_roots = [canonicalize(p) for p in options.proto_paths]

    if options.auto_detect_imports:
        files = scan_files(paths)
        graph = build_import_graph(
            files,
            primary_root,
            extra_roots,
            max_ascent_depth=options.max_ascent_depth,
            verbose=options.verbose,
        )
    else:
        files = [SourceFile(path=p) for p in paths]
        graph = ImportGraph()

    if options.smart_filter:
        compile_set = select_compile_set(files, graph, verbose=options.verbose)
    else:
        compile_set = select_all(files)

    roots = dedupe_roots(primary_root, extra_roots, graph.ascended_roots)
    command = assemble_command(
        roots,
        compile_set.files,
        options.plugins,
        options.plugin_opts,
        output_dir,
        verbose=options.verbose,
    )

    diagnostic(
        "source_set_resolved",
        discovered=len(files),
        compile=len(compile_set.files),
        roots=len(roots),
        unresolved=graph.unresolved_count,
        fallback=compile_set.fallback_applied,
    )
    return ResolutionPlan(
        options=options,
        files=files,
        graph=graph,
        compile_set=compile_set,
        roots=roots,
        command=command,
    )

"""Data models shared by every stage of the resolution pipeline.

Models are frozen: a stage never mutates what the previous stage produced,
it builds a new value instead.
"""

from __future__ import annotations

import pathlib
import threading
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from protoset.config import settings
from protoset.errors import ProtosetError


class SourceFile(BaseModel):
    """A discovered schema file and what the lexical scan found in it.

    Attributes:
        path: Canonical absolute path of the file.
        declared_imports: Raw import literals in declaration order.
        has_service_definition: ``service Name {`` appears in the file.
        has_message_definition: ``message Name {`` appears in the file.
        scan_error: Why the file could not be scanned, if it could not.
    """

    model_config = ConfigDict(frozen=True)

    path: pathlib.Path = Field(..., description="Canonical absolute path.")
    declared_imports: tuple[str, ...] = Field(default=(), description="Raw import literals.")
    has_service_definition: bool = False
    has_message_definition: bool = False
    scan_error: Optional[str] = Field(None, description="Reason the scan was skipped.")


class ImportEdge(BaseModel):
    """A resolved reference from one schema file to another."""

    model_config = ConfigDict(frozen=True)

    from_path: pathlib.Path
    to_path: pathlib.Path
    literal: str


class UnresolvedImport(BaseModel):
    """An import literal that no search root could satisfy."""

    model_config = ConfigDict(frozen=True)

    file: pathlib.Path
    literal: str


class ImportGraph(BaseModel):
    """Import relationships between the discovered files.

    Attributes:
        in_degree: Resolved target path -> number of distinct importing files.
        edges: One edge per (importer, target) pair.
        unresolved: Literals that could not be resolved, per file.
        ascended_roots: Directories above the primary root at which the
            upward walk found an import target.
    """

    model_config = ConfigDict(frozen=True)

    in_degree: dict[pathlib.Path, int] = Field(default_factory=dict)
    edges: list[ImportEdge] = Field(default_factory=list)
    unresolved: list[UnresolvedImport] = Field(default_factory=list)
    ascended_roots: list[pathlib.Path] = Field(default_factory=list)

    def in_degree_of(self, path: pathlib.Path) -> int:
        """Return how many files import *path* (zero when none do)."""
        return self.in_degree.get(path, 0)

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved)


class ResolvedCompileSet(BaseModel):
    """The files that must be named explicitly on the compiler command line.

    Attributes:
        files: Absolute paths, in a deterministic order.
        fallback_applied: ``True`` when filtering would have produced an
            empty list and every discovered file was returned instead.
    """

    model_config = ConfigDict(frozen=True)

    files: list[pathlib.Path] = Field(default_factory=list)
    fallback_applied: bool = False


class CommandPlan(BaseModel):
    """Compiler arguments plus the directory the compiler must run in.

    Attributes:
        arguments: Ordered argument list (without the executable itself).
        working_dir: The primary root.
        warnings: Input-contract violations noticed while assembling.
    """

    model_config = ConfigDict(frozen=True)

    arguments: list[str] = Field(default_factory=list)
    working_dir: pathlib.Path
    warnings: list[str] = Field(default_factory=list)


class CompileOptions(BaseModel):
    """Immutable snapshot of everything one compiler invocation needs.

    Attributes:
        proto_dir: Directory that discovery walks.
        workspace_dir: Primary search root; defaults to ``proto_dir``.
        output_dir: Where plugins write generated code.
        proto_paths: Extra search roots, in priority order.
        plugins: Output plugin names (``"go"``, ``"go-grpc"``, ``"python"``...).
        plugin_opts: Option strings per plugin name.
        auto_detect_imports: Build the import graph and walk upward for
            imports that the configured roots do not satisfy.
        smart_filter: Drop files that are reachable only through imports.
        verbose: Promote diagnostics from DEBUG to INFO.
        timeout: Seconds the compiler may run before it is killed.
        max_ascent_depth: Bound for the upward import walk.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    proto_dir: Optional[pathlib.Path] = None
    workspace_dir: Optional[pathlib.Path] = None
    output_dir: Optional[pathlib.Path] = None
    proto_paths: tuple[pathlib.Path, ...] = ()
    plugins: tuple[str, ...] = Field(default_factory=lambda: tuple(settings.default_plugins))
    plugin_opts: dict[str, tuple[str, ...]] = Field(
        default_factory=lambda: {k: tuple(v) for k, v in settings.default_plugin_opts.items()}
    )
    auto_detect_imports: bool = True
    smart_filter: bool = True
    verbose: bool = False
    timeout: Optional[float] = Field(None, gt=0)
    max_ascent_depth: int = Field(default_factory=lambda: settings.max_ascent_depth, ge=0)
    cancel_event: Optional[threading.Event] = Field(None, exclude=True)

    @field_validator("proto_dir", "workspace_dir", "output_dir", mode="before")
    @classmethod
    def blank_is_unset(cls, value: object) -> object:
        # Path("") would silently mean the current directory.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def primary_root(self) -> Optional[pathlib.Path]:
        """The directory every compiled file is expressed relative to."""
        return self.workspace_dir if self.workspace_dir is not None else self.proto_dir


class ResolutionPlan(BaseModel):
    """Everything the pipeline computed for one set of options."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    options: CompileOptions
    files: list[SourceFile] = Field(default_factory=list)
    graph: ImportGraph = Field(default_factory=ImportGraph)
    compile_set: ResolvedCompileSet = Field(default_factory=ResolvedCompileSet)
    roots: list[pathlib.Path] = Field(default_factory=list)
    command: CommandPlan


@dataclass
class CompileResult:
    """Outcome of one compile request.

    Failures are reported through :attr:`error` instead of being raised;
    call :meth:`raise_for_error` to turn them back into an exception.

    Attributes:
        output: Combined compiler output (may be partial on failure).
        exit_status: Compiler exit status, ``None`` if it never ran to completion.
        plan: The resolution plan, when the pipeline got that far.
        error: The failure, or ``None`` on success.
    """

    output: str = ""
    exit_status: Optional[int] = None
    plan: Optional[ResolutionPlan] = None
    error: Optional[ProtosetError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise :attr:`error` if the compile failed."""
        if self.error is not None:
            raise self.error

"""Pydantic v2 data models for the protoset resolution pipeline."""

from protoset.models.schema import (
    CommandPlan,
    CompileOptions,
    CompileResult,
    ImportEdge,
    ImportGraph,
    ResolutionPlan,
    ResolvedCompileSet,
    SourceFile,
    UnresolvedImport,
)

__all__ = [
    "SourceFile",
    "ImportEdge",
    "UnresolvedImport",
    "ImportGraph",
    "ResolvedCompileSet",
    "CommandPlan",
    "ResolutionPlan",
    "CompileOptions",
    "CompileResult",
]

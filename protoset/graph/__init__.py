"""Import graph construction and compile-set filtering."""

from protoset.graph.builder import ImportResolver, build_import_graph
from protoset.graph.inclusion import select_compile_set

__all__ = ["ImportResolver", "build_import_graph", "select_compile_set"]

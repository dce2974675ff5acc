"""Protoset: compute a correct, duplicate-free ``protoc`` invocation."""

__version__ = "0.1.0"

from protoset.compiler.api import compile, compile_with, must_compile, must_compile_with
from protoset.compiler.builder import Compiler
from protoset.core.pipeline import resolve_source_set
from protoset.models.schema import CompileOptions, CompileResult, ResolutionPlan

__all__ = [
    "__version__",
    "Compiler",
    "CompileOptions",
    "CompileResult",
    "ResolutionPlan",
    "compile",
    "compile_with",
    "must_compile",
    "must_compile_with",
    "resolve_source_set",
]

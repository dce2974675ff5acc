"""Function-style entry points mirroring :class:`~protoset.compiler.builder.Compiler`.

``compile`` and ``compile_with`` return a :class:`CompileResult`; the
``must_`` variants raise the recorded error instead and return the
compiler output.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from protoset.compiler.builder import run_compile
from protoset.core.paths import PathLike
from protoset.errors import ConfigurationError
from protoset.models.schema import CompileOptions, CompileResult


def _merge(options: Optional[CompileOptions], overrides: dict[str, Any]) -> CompileOptions:
    base = options or CompileOptions(proto_dir=".", output_dir=".")
    if not overrides:
        return base
    # model_dump() leaves the cancel event out; carry it over by hand.
    data = base.model_dump()
    data["cancel_event"] = base.cancel_event
    data.update(overrides)
    return CompileOptions.model_validate(data)


def compile(proto_dir: PathLike, output_dir: PathLike) -> CompileResult:
    """Compile every schema file in *proto_dir* with default options."""
    return compile_with(proto_dir=proto_dir, output_dir=output_dir)


def compile_with(options: Optional[CompileOptions] = None, **overrides: Any) -> CompileResult:
    """Compile with an options object and/or keyword overrides.

    Unspecified directories default to the current directory.

    Example::

        result = compile_with(
            proto_dir="./proto",
            output_dir="./generated",
            plugins=("go", "go-grpc"),
            verbose=True,
        )
    """
    try:
        merged = _merge(options, overrides)
    except ValidationError as exc:
        return CompileResult(error=ConfigurationError(f"invalid compile options: {exc}"))
    return run_compile(merged)


def must_compile(proto_dir: PathLike, output_dir: PathLike) -> str:
    """Like :func:`compile` but raises on failure and returns the output."""
    result = compile(proto_dir, output_dir)
    result.raise_for_error()
    return result.output


def must_compile_with(options: Optional[CompileOptions] = None, **overrides: Any) -> str:
    """Like :func:`compile_with` but raises on failure and returns the output."""
    result = compile_with(options, **overrides)
    result.raise_for_error()
    return result.output

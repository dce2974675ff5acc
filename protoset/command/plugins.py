"""Lookup table from output-plugin names to compiler flags and binaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PluginSpec:
    """How one output plugin is passed to the compiler.

    Attributes:
        name: Plugin name as the caller writes it.
        flag: Output flag without dashes, e.g. ``"go_out"``.
        binary: Executable the compiler spawns for this plugin, or ``None``
            for generators built into the compiler.
    """

    name: str
    flag: str
    binary: Optional[str]


_BUILTIN_GENERATORS = ("cpp", "csharp", "java", "kotlin", "objc", "php", "pyi", "python", "ruby")

KNOWN_PLUGINS: dict[str, PluginSpec] = {
    "go": PluginSpec("go", "go_out", "protoc-gen-go"),
    "go-grpc": PluginSpec("go-grpc", "go-grpc_out", "protoc-gen-go-grpc"),
    **{name: PluginSpec(name, f"{name}_out", None) for name in _BUILTIN_GENERATORS},
}


def lookup_plugin(name: str) -> PluginSpec:
    """Return the :class:`PluginSpec` for *name*.

    Unknown names follow the compiler's own convention: ``--<name>_out``
    served by a ``protoc-gen-<name>`` executable.
    """
    spec = KNOWN_PLUGINS.get(name)
    if spec is not None:
        return spec
    return PluginSpec(name, f"{name}_out", f"protoc-gen-{name}")

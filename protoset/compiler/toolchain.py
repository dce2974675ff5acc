"""Presence checks for the compiler and its output plugins.

Missing tools are a hard stop; the raised error carries installation
instructions for the host platform.
"""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

import structlog

from protoset.command.plugins import lookup_plugin
from protoset.config import settings
from protoset.errors import PluginNotFoundError, ToolNotFoundError

logger = structlog.get_logger(__name__)

_COMPILER_REMEDIATION: dict[str, str] = {
    "win32": (
        "Download protoc-<version>-win64.zip from "
        "https://github.com/protocolbuffers/protobuf/releases, extract it and "
        "add its bin directory to PATH (or run: choco install protoc)."
    ),
    "darwin": "Install it with Homebrew: brew install protobuf",
    "linux": (
        "Install it with your package manager, e.g. apt install protobuf-compiler, "
        "or download a release from https://github.com/protocolbuffers/protobuf/releases."
    ),
}

_PLUGIN_INSTALL: dict[str, str] = {
    "go": "go install google.golang.org/protobuf/cmd/protoc-gen-go@latest",
    "go-grpc": "go install google.golang.org/grpc/cmd/protoc-gen-go-grpc@latest",
}


def _platform_key(platform: str) -> str:
    if platform.startswith("win") or platform == "cygwin":
        return "win32"
    if platform == "darwin":
        return "darwin"
    return "linux"


def compiler_remediation(platform: str = sys.platform) -> str:
    return _COMPILER_REMEDIATION[_platform_key(platform)]


def plugin_remediation(plugin: str, binary: str, platform: str = sys.platform) -> str:
    """Return how to install the executable behind *plugin*."""
    install = _PLUGIN_INSTALL.get(plugin)
    if install is None:
        hint = f"Install {binary} and make sure it is on PATH."
    else:
        hint = f"Run: {install}"
    if install is not None and _platform_key(platform) == "win32":
        hint += " and add %USERPROFILE%\\go\\bin to PATH."
    elif install is not None:
        hint += " and add $(go env GOPATH)/bin to PATH."
    return hint


def lookup(tool: str) -> Optional[str]:
    """Return the full path of *tool* on ``PATH``, or ``None``."""
    return shutil.which(tool)


@dataclass(frozen=True)
class Toolset:
    """A validated compiler plus the plugin executables it will spawn.

    Attributes:
        compiler: Full path of the compiler executable.
        plugins: Plugin name -> executable path (``None`` for built-ins).
    """

    compiler: str
    plugins: dict[str, Optional[str]] = field(default_factory=dict)


def check_toolchain(plugins: Sequence[str], compiler_name: Optional[str] = None) -> Toolset:
    """Verify that the compiler and every requested plugin are installed.

    Args:
        plugins: Requested output plugin names.
        compiler_name: Compiler executable; defaults to settings.

    Returns:
        The resolved :class:`Toolset`.

    Raises:
        ToolNotFoundError: The compiler is not on ``PATH``.
        PluginNotFoundError: A plugin executable is not on ``PATH``.
    """
    name = compiler_name or settings.compiler_name
    compiler = lookup(name)
    if compiler is None:
        logger.error("compiler_not_found", tool=name)
        raise ToolNotFoundError(name, compiler_remediation())

    found: dict[str, Optional[str]] = {}
    for plugin in plugins:
        spec = lookup_plugin(plugin)
        if spec.binary is None:
            found[plugin] = None
            continue
        path = lookup(spec.binary)
        if path is None:
            logger.error("plugin_not_found", plugin=plugin, binary=spec.binary)
            raise PluginNotFoundError(plugin, spec.binary, plugin_remediation(plugin, spec.binary))
        found[plugin] = path

    logger.debug("toolchain_checked", compiler=compiler, plugins=found)
    return Toolset(compiler=compiler, plugins=found)

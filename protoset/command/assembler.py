"""Turns resolved roots and files into the compiler's argument list.

Argument layout::

    --proto_path=<root>            one per search root, primary first
    --<plugin flag>=[opts:]<out>   one per output plugin
    <file relative to primary>     one per compile-set file

Every path is written with forward slashes, so identical inputs produce
textually identical arguments on every host OS.
"""

from __future__ import annotations

import pathlib
from typing import Mapping, Sequence

import structlog

from protoset.command.plugins import lookup_plugin
from protoset.core.paths import canonicalize, relative_posix, to_posix
from protoset.models.schema import CommandPlan

logger = structlog.get_logger(__name__)


def plugin_argument(plugin: str, options: Sequence[str], output_dir: pathlib.Path) -> str:
    """Render one plugin output flag.

    >>> plugin_argument("go", ["paths=source_relative"], pathlib.Path("/out"))
    '--go_out=paths=source_relative:/out'
    """
    spec = lookup_plugin(plugin)
    output = to_posix(output_dir)
    if options:
        return f"--{spec.flag}={','.join(options)}:{output}"
    return f"--{spec.flag}={output}"


def assemble_command(
    roots: Sequence[pathlib.Path],
    files: Sequence[pathlib.Path],
    plugins: Sequence[str],
    plugin_opts: Mapping[str, Sequence[str]],
    output_dir: pathlib.Path,
    verbose: bool = False,
) -> CommandPlan:
    """Assemble the compiler arguments.

    Args:
        roots: Deduplicated search roots; ``roots[0]`` is the primary root.
        files: Compile-set files (canonical absolute paths).
        plugins: Output plugin names, in order.
        plugin_opts: Options per plugin name.
        output_dir: Directory generated code goes to.
        verbose: Log the assembled command at INFO instead of DEBUG.

    Returns:
        A :class:`CommandPlan` whose working directory is the primary root.

    Raises:
        ValueError: If *roots* is empty.
    """
    if not roots:
        raise ValueError("at least one search root (the primary root) is required")

    primary = roots[0]
    output = canonicalize(output_dir)
    arguments = [f"--proto_path={to_posix(root)}" for root in roots]
    arguments.extend(plugin_argument(p, plugin_opts.get(p, ()), output) for p in plugins)

    warnings: list[str] = []
    for path in files:
        relative = relative_posix(path, primary)
        if relative is None:
            # The compiler records a different logical path for this file.
            message = f"{to_posix(path)} is outside primary root {to_posix(primary)}"
            logger.warning("file_outside_primary_root", file=str(path), root=str(primary))
            warnings.append(message)
            arguments.append(to_posix(path))
        else:
            arguments.append(relative)

    diagnostic = logger.info if verbose else logger.debug
    diagnostic("command_assembled", args=" ".join(arguments), cwd=str(primary))
    return CommandPlan(arguments=arguments, working_dir=primary, warnings=warnings)

"""Typer-based CLI for protoset."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer

from protoset import __version__
from protoset.config import settings
from protoset.core import pipeline
from protoset.compiler.builder import run_compile
from protoset.core.paths import relative_posix
from protoset.errors import ProtosetError
from protoset.logging import setup_logging
from protoset.models.schema import CompileOptions

app = typer.Typer(
    help="Compile a tree of .proto files with a correct, duplicate-free protoc command.",
    no_args_is_help=True,
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"protoset v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Minimum log level."),
):
    """protoset: plan and run protoc for every .proto file under a directory."""
    setup_logging(log_level)


def split_comma_separated(value: Optional[str]) -> list[str]:
    """Split ``"a, b,,c"`` into ``["a", "b", "c"]``."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _build_options(
    proto_dir: Path,
    workspace_dir: Optional[Path],
    output_dir: Path,
    proto_paths: Optional[str],
    plugins: Optional[str],
    go_opt: Optional[str],
    go_grpc_opt: Optional[str],
    auto_detect_imports: bool,
    smart_filter: bool,
    verbose: bool,
    timeout: Optional[float] = None,
) -> CompileOptions:
    plugin_opts = {name: tuple(opts) for name, opts in settings.default_plugin_opts.items()}
    if go_opt is not None:
        plugin_opts["go"] = tuple(split_comma_separated(go_opt))
    if go_grpc_opt is not None:
        plugin_opts["go-grpc"] = tuple(split_comma_separated(go_grpc_opt))

    return CompileOptions(
        proto_dir=proto_dir,
        workspace_dir=workspace_dir,
        output_dir=output_dir,
        proto_paths=tuple(split_comma_separated(proto_paths)),
        plugins=tuple(split_comma_separated(plugins)) or tuple(settings.default_plugins),
        plugin_opts=plugin_opts,
        auto_detect_imports=auto_detect_imports,
        smart_filter=smart_filter,
        verbose=verbose,
        timeout=timeout,
    )


def _fail(exc: ProtosetError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    remediation = getattr(exc, "remediation", "")
    if remediation:
        typer.echo(remediation, err=True)
    output = getattr(exc, "output", "")
    if output:
        typer.echo(output, err=True)
    raise typer.Exit(code=1)


ProtoDirOption = typer.Option(Path("."), "--proto-dir", "-p", help="Directory containing .proto files.")
WorkspaceOption = typer.Option(None, "--workspace-dir", "-w", help="Primary include root (default: proto dir).")
OutputOption = typer.Option(Path("."), "--output-dir", "-o", help="Output directory for generated files.")
ProtoPathsOption = typer.Option(None, "--proto-paths", "-I", help="Extra include paths, comma-separated.")
PluginsOption = typer.Option(None, "--plugins", help="Plugins, comma-separated (default: go).")
GoOptOption = typer.Option(None, "--go-opt", help="Options for the go plugin, comma-separated.")
GoGrpcOptOption = typer.Option(None, "--go-grpc-opt", help="Options for the go-grpc plugin, comma-separated.")
AutoDetectOption = typer.Option(
    True, "--auto-detect-imports/--no-auto-detect-imports", help="Resolve imports to choose files and roots."
)
SmartFilterOption = typer.Option(
    True, "--smart-filter/--no-smart-filter", help="Omit files that are only ever imported."
)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Report diagnostics at INFO level.")


@app.command("files")
def list_files(
    proto_dir: Path = ProtoDirOption,
    workspace_dir: Optional[Path] = WorkspaceOption,
):
    """List every .proto file discovery finds, relative to the primary root."""
    options = CompileOptions(proto_dir=proto_dir, workspace_dir=workspace_dir, output_dir=Path("."))
    try:
        _, primary_root, _ = pipeline.validate_options(options)
        files = pipeline.find_files(options)
    except ProtosetError as exc:
        _fail(exc)

    if not files:
        typer.echo("No .proto files found.")
        raise typer.Exit(code=0)
    for path in files:
        typer.echo(relative_posix(path, primary_root) or path.as_posix())


@app.command("plan")
def plan(
    proto_dir: Path = ProtoDirOption,
    workspace_dir: Optional[Path] = WorkspaceOption,
    output_dir: Path = OutputOption,
    proto_paths: Optional[str] = ProtoPathsOption,
    plugins: Optional[str] = PluginsOption,
    go_opt: Optional[str] = GoOptOption,
    go_grpc_opt: Optional[str] = GoGrpcOptOption,
    auto_detect_imports: bool = AutoDetectOption,
    smart_filter: bool = SmartFilterOption,
    verbose: bool = VerboseOption,
):
    """Print the protoc command that would run, without running it."""
    options = _build_options(
        proto_dir, workspace_dir, output_dir, proto_paths, plugins,
        go_opt, go_grpc_opt, auto_detect_imports, smart_filter, verbose,
    )
    try:
        resolution = pipeline.resolve_source_set(options)
    except ProtosetError as exc:
        _fail(exc)

    typer.echo(f"cwd: {resolution.command.working_dir.as_posix()}")
    typer.echo(" ".join([settings.compiler_name, *resolution.command.arguments]))
    if verbose:
        for item in resolution.graph.unresolved:
            typer.echo(f"unresolved: {item.file.as_posix()} -> {item.literal}")
    for warning in resolution.command.warnings:
        typer.echo(f"warning: {warning}", err=True)


@app.command("compile")
def compile_protos(
    proto_dir: Path = ProtoDirOption,
    workspace_dir: Optional[Path] = WorkspaceOption,
    output_dir: Path = OutputOption,
    proto_paths: Optional[str] = ProtoPathsOption,
    plugins: Optional[str] = PluginsOption,
    go_opt: Optional[str] = GoOptOption,
    go_grpc_opt: Optional[str] = GoGrpcOptOption,
    auto_detect_imports: bool = AutoDetectOption,
    smart_filter: bool = SmartFilterOption,
    verbose: bool = VerboseOption,
    timeout: Optional[float] = typer.Option(None, "--timeout", min=0.001, help="Kill protoc after N seconds."),
):
    """Resolve the .proto files and run protoc."""
    options = _build_options(
        proto_dir, workspace_dir, output_dir, proto_paths, plugins,
        go_opt, go_grpc_opt, auto_detect_imports, smart_filter, verbose, timeout,
    )
    result = run_compile(options)
    if result.error is not None:
        _fail(result.error)

    if result.output and verbose:
        typer.echo(result.output)
    typer.echo(f"Compiled {len(result.plan.compile_set.files)} file(s) into {output_dir}.")


if __name__ == "__main__":
    app()

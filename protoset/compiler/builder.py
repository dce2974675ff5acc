"""Chainable, thread-safe compiler configuration and the compile driver.

:class:`Compiler` is the mutable front end: every ``with_*`` call and the
:meth:`Compiler.options` snapshot take the same lock.  Discovery,
resolution and the compiler process run on the snapshot *outside* the
lock, so configuring another invocation is never blocked by a slow
compile.
"""

from __future__ import annotations

import pathlib
import threading
from typing import Optional

import structlog
from pydantic import ValidationError

from protoset.compiler import executor
from protoset.compiler.toolchain import check_toolchain
from protoset.config import settings
from protoset.core import pipeline
from protoset.core.paths import PathLike
from protoset.errors import CompilerExecutionError, ConfigurationError, ProtosetError, ToolNotFoundError
from protoset.models.schema import CompileOptions, CompileResult, ResolutionPlan

logger = structlog.get_logger(__name__)


class Compiler:
    """Builder for one compiler invocation.

    Usage::

        result = (
            Compiler()
            .with_proto_dir("./proto")
            .with_output_dir("./generated")
            .with_plugins("go", "go-grpc")
            .compile()
        )
        result.raise_for_error()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._proto_dir: Optional[PathLike] = None
        self._workspace_dir: Optional[PathLike] = None
        self._output_dir: Optional[PathLike] = None
        self._proto_paths: list[PathLike] = []
        self._plugins: list[str] = list(settings.default_plugins)
        self._plugin_opts: dict[str, list[str]] = {
            name: list(opts) for name, opts in settings.default_plugin_opts.items()
        }
        self._auto_detect_imports = True
        self._smart_filter = True
        self._verbose = False
        self._timeout: Optional[float] = None
        self._max_ascent_depth = settings.max_ascent_depth
        self._cancel_event: Optional[threading.Event] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def with_proto_dir(self, directory: PathLike) -> Compiler:
        """Set the directory whose schema files are compiled."""
        with self._lock:
            self._proto_dir = directory
        return self

    def with_workspace_dir(self, directory: PathLike) -> Compiler:
        """Set the primary root; defaults to the proto directory."""
        with self._lock:
            self._workspace_dir = directory
        return self

    def with_output_dir(self, directory: PathLike) -> Compiler:
        with self._lock:
            self._output_dir = directory
        return self

    def with_proto_paths(self, *paths: PathLike) -> Compiler:
        """Replace the extra search roots."""
        with self._lock:
            self._proto_paths = list(paths)
        return self

    def with_plugins(self, *plugins: str) -> Compiler:
        with self._lock:
            self._plugins = list(plugins)
        return self

    def with_plugin_opts(self, plugin: str, *opts: str) -> Compiler:
        """Set the option list passed to *plugin*."""
        with self._lock:
            self._plugin_opts[plugin] = list(opts)
        return self

    def with_go_opts(self, *opts: str) -> Compiler:
        return self.with_plugin_opts("go", *opts)

    def with_go_grpc_opts(self, *opts: str) -> Compiler:
        return self.with_plugin_opts("go-grpc", *opts)

    def with_auto_detect_imports(self, enabled: bool) -> Compiler:
        with self._lock:
            self._auto_detect_imports = enabled
        return self

    def with_smart_filter(self, enabled: bool) -> Compiler:
        with self._lock:
            self._smart_filter = enabled
        return self

    def with_verbose(self, verbose: bool) -> Compiler:
        with self._lock:
            self._verbose = verbose
        return self

    def with_timeout(self, seconds: Optional[float]) -> Compiler:
        with self._lock:
            self._timeout = seconds
        return self

    def with_max_ascent_depth(self, depth: int) -> Compiler:
        with self._lock:
            self._max_ascent_depth = depth
        return self

    def with_cancel_event(self, event: Optional[threading.Event]) -> Compiler:
        """Attach an event that aborts a running compile when set."""
        with self._lock:
            self._cancel_event = event
        return self

    def options(self) -> CompileOptions:
        """Return an immutable snapshot of the current configuration.

        Raises:
            ConfigurationError: A configured value is invalid.
        """
        with self._lock:
            try:
                return self._snapshot()
            except ValidationError as exc:
                raise ConfigurationError(f"invalid compiler configuration: {exc}") from exc

    def _snapshot(self) -> CompileOptions:
        return CompileOptions(
            proto_dir=self._proto_dir,
            workspace_dir=self._workspace_dir,
            output_dir=self._output_dir,
            proto_paths=tuple(self._proto_paths),
            plugins=tuple(self._plugins),
            plugin_opts={name: tuple(opts) for name, opts in self._plugin_opts.items()},
            auto_detect_imports=self._auto_detect_imports,
            smart_filter=self._smart_filter,
            verbose=self._verbose,
            timeout=self._timeout,
            max_ascent_depth=self._max_ascent_depth,
            cancel_event=self._cancel_event,
        )

    # ------------------------------------------------------------------
    # Operations (run outside the lock)
    # ------------------------------------------------------------------

    def find_files(self) -> list[pathlib.Path]:
        """Return every schema file under the configured proto directory."""
        return pipeline.find_files(self.options())

    def plan(self) -> ResolutionPlan:
        """Resolve roots, files and arguments without running the compiler."""
        return pipeline.resolve_source_set(self.options())

    def compile(self) -> CompileResult:
        """Resolve and run the compiler; failures are returned, not raised."""
        try:
            options = self.options()
        except ConfigurationError as exc:
            logger.error("compile_failed", error=str(exc), category=type(exc).__name__)
            return CompileResult(error=exc)
        return run_compile(options)


def _create_output_dir(directory: pathlib.Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"create output directory {directory}: {exc}") from exc


def run_compile(options: CompileOptions, compiler_name: Optional[str] = None) -> CompileResult:
    """Validate, check the toolchain, resolve and execute.

    Args:
        options: Snapshot to compile.
        compiler_name: Compiler executable override.

    Returns:
        A :class:`CompileResult`; :attr:`CompileResult.error` is set on
        any failure.
    """
    plan: Optional[ResolutionPlan] = None
    try:
        _, _, output_dir = pipeline.validate_options(options)
        toolset = check_toolchain(options.plugins, compiler_name)
        plan = pipeline.resolve_source_set(options)
        _create_output_dir(output_dir)

        diagnostic = logger.info if options.verbose else logger.debug
        diagnostic(
            "compile_started",
            compiler=toolset.compiler,
            files=[str(p) for p in plan.compile_set.files],
            cwd=str(plan.command.working_dir),
        )

        try:
            execution = executor.run(
                toolset.compiler,
                plan.command.arguments,
                cwd=plan.command.working_dir,
                cancel_event=options.cancel_event,
                timeout=options.timeout,
            )
        except FileNotFoundError as exc:
            raise ToolNotFoundError(toolset.compiler) from exc
        except OSError as exc:
            raise CompilerExecutionError("", None, f"protoc could not be started: {exc}") from exc

        if execution.exit_status != 0:
            raise CompilerExecutionError(execution.output, execution.exit_status)
    except ProtosetError as exc:
        logger.error("compile_failed", error=str(exc), category=type(exc).__name__)
        output = getattr(exc, "output", "")
        exit_status = getattr(exc, "exit_status", None)
        return CompileResult(output=output, exit_status=exit_status, plan=plan, error=exc)

    logger.info(
        "compile_finished",
        files=len(plan.compile_set.files),
        output_dir=str(output_dir),
    )
    return CompileResult(output=execution.output, exit_status=execution.exit_status, plan=plan)

"""Exception hierarchy for protoset.

Every failure the resolver or the compiler wrapper can report derives from
:class:`ProtosetError`, so callers can catch one type and still inspect the
specific category and its attached data.
"""

from __future__ import annotations

from typing import Optional


class ProtosetError(Exception):
    """Base class for all protoset errors."""


class ConfigurationError(ProtosetError):
    """A required directory is unspecified or does not exist."""


class PathContainmentError(ProtosetError):
    """The proto directory is not inside the workspace directory.

    Attributes:
        proto_dir: The offending proto directory.
        workspace_dir: The workspace directory it must live under.
    """

    def __init__(self, proto_dir: str, workspace_dir: str) -> None:
        self.proto_dir = proto_dir
        self.workspace_dir = workspace_dir
        super().__init__(
            f"proto directory {proto_dir} must be within workspace directory {workspace_dir}"
        )


class DiscoveryError(ProtosetError):
    """A directory could not be walked while discovering schema files.

    Attributes:
        path: Directory that failed.
        cause: The underlying ``OSError``.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"walk directory {path}: {cause}")


class NoSchemaFilesError(ProtosetError):
    """Discovery finished without finding a single schema file."""

    def __init__(self, directory: Optional[str] = None, extension: str = ".proto") -> None:
        self.directory = directory
        self.extension = extension
        message = f"no {extension} files found"
        if directory:
            message += f" in {directory}"
        super().__init__(message)


class ToolNotFoundError(ProtosetError):
    """The schema compiler executable is not on ``PATH``.

    Attributes:
        tool: Executable name that was looked up.
        remediation: Platform-specific installation hint.
    """

    def __init__(self, tool: str = "protoc", remediation: str = "") -> None:
        self.tool = tool
        self.remediation = remediation
        super().__init__(f"{tool} command not found in PATH")


class PluginNotFoundError(ProtosetError):
    """An output plugin binary required by a requested plugin is missing.

    Attributes:
        plugin: Plugin name as requested by the caller (e.g. ``"go-grpc"``).
        binary: Executable that was looked up (e.g. ``"protoc-gen-go-grpc"``).
        remediation: Platform-specific installation hint.
    """

    def __init__(self, plugin: str, binary: str = "", remediation: str = "") -> None:
        self.plugin = plugin
        self.binary = binary or f"protoc-gen-{plugin}"
        self.remediation = remediation
        super().__init__(f'protoc plugin "{plugin}" not found in PATH')


class CompilerExecutionError(ProtosetError):
    """The external compiler exited with a non-zero status.

    Attributes:
        output: Combined stdout/stderr captured from the compiler.
        exit_status: Process exit code, or ``None`` if it never finished.
    """

    def __init__(self, output: str, exit_status: Optional[int], message: str = "") -> None:
        self.output = output
        self.exit_status = exit_status
        super().__init__(message or f"protoc execution failed: exit status {exit_status}")


class CompilationCancelledError(CompilerExecutionError):
    """The compiler was killed because of cancellation or a timeout."""

    def __init__(self, output: str, reason: str) -> None:
        self.reason = reason
        super().__init__(output, None, f"protoc execution {reason}")

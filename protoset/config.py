"""Application-wide configuration and settings.

Uses ``pydantic-settings`` so values can be overridden via environment
variables prefixed with ``PROTOSET_``.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global defaults for the protoset resolver and compiler wrapper.

    Attributes:
        app_name: Display name of the application.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        schema_extension: File extension (matched case-insensitively) of
            schema sources picked up by discovery.
        compiler_name: Executable name of the external schema compiler.
        default_plugins: Output plugins used when the caller names none.
        default_plugin_opts: Option lists per plugin name.
        default_blacklist: Directory/file patterns to skip during discovery.
        max_file_size_bytes: Schema files larger than this are skipped.
        max_ascent_depth: How many parent directories above the primary root
            the import resolver may climb before giving up.
        cancel_poll_interval: Seconds between cancellation checks while the
            external compiler runs.
    """

    app_name: str = "protoset"
    log_level: str = "INFO"

    schema_extension: str = ".proto"
    compiler_name: str = "protoc"
    default_plugins: list[str] = ["go"]
    default_plugin_opts: dict[str, list[str]] = {
        "go": ["paths=source_relative"],
        "go-grpc": ["paths=source_relative"],
    }

    default_blacklist: list[str] = [
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        ".venv",
        "venv",
        "__pycache__",
        ".idea",
        ".vscode",
    ]
    max_file_size_bytes: int = 1_048_576  # 1 MB

    max_ascent_depth: int = 16
    cancel_poll_interval: float = 0.1

    model_config = {"env_prefix": "PROTOSET_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()

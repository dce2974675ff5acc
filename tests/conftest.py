"""Pytest configuration and fixtures for protoset tests."""

from pathlib import Path
from typing import Callable, Optional

import pytest
import structlog
from structlog.testing import capture_logs


@pytest.fixture
def proto_root(tmp_path: Path) -> Path:
    """An empty directory acting as the primary .proto root."""
    root = tmp_path / "proto"
    root.mkdir()
    return root


@pytest.fixture
def write_proto(proto_root: Path) -> Callable[..., Path]:
    """Write a schema file below ``proto_root`` (or another base directory)."""

    def _write(relative: str, content: str = "", base: Optional[Path] = None) -> Path:
        path = (base or proto_root) / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


MESSAGE_ONLY = 'syntax = "proto3";\npackage test;\n\nmessage Item {\n  string id = 1;\n}\n'


def importing(*targets: str, body: str = "message Holder {\n  string id = 1;\n}\n") -> str:
    """Build proto source that imports *targets* and defines *body*."""
    lines = ['syntax = "proto3";', "package test;"]
    lines.extend(f'import "{target}";' for target in targets)
    return "\n".join(lines) + "\n\n" + body


@pytest.fixture
def captured_logs():
    """Collect structlog events regardless of the level a CLI test configured."""
    structlog.reset_defaults()
    with capture_logs() as logs:
        yield logs

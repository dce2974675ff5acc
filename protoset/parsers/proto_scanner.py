"""Best-effort lexical scanner for Protocol Buffers sources.

This is not a parser.  It works line by line with regular expressions:

- text after ``//`` on a line is dropped before matching;
- ``import "x.proto";`` (also ``import public`` / ``import weak``, single
  or double quotes) records ``x.proto`` verbatim;
- ``service Name {`` and ``message Name {`` set the definition markers.

Known limitations: block comments, string literals that happen to contain
these keywords, and literals split across lines are not understood.
"""

from __future__ import annotations

import pathlib
import re

import structlog

from protoset.models.schema import SourceFile
from protoset.parsers.base import BaseSchemaScanner

logger = structlog.get_logger(__name__)

_IMPORT_RE = re.compile(
    r"""(?:^|;)\s*import\s+(?:(?:public|weak)\s+)?(["'])(?P<literal>[^"']*)\1"""
)
_SERVICE_RE = re.compile(r"\bservice\s+[A-Za-z_]\w*\s*\{")
_MESSAGE_RE = re.compile(r"\bmessage\s+[A-Za-z_]\w*\s*\{")


def _strip_line_comment(line: str) -> str:
    index = line.find("//")
    return line if index < 0 else line[:index]


def scan_source(text: str) -> tuple[tuple[str, ...], bool, bool]:
    """Scan schema *text*.

    Returns:
        ``(imports, has_service, has_message)`` where *imports* keeps
        duplicates and declaration order.
    """
    imports: list[str] = []
    code_lines: list[str] = []

    for raw_line in text.splitlines():
        line = _strip_line_comment(raw_line)
        code_lines.append(line)
        for match in _IMPORT_RE.finditer(line):
            imports.append(match.group("literal"))

    # Definitions may put the brace on the following line.
    code = "\n".join(code_lines)
    has_service = _SERVICE_RE.search(code) is not None
    has_message = _MESSAGE_RE.search(code) is not None
    return tuple(imports), has_service, has_message


class ProtoScanner(BaseSchemaScanner):
    """Scanner for ``.proto`` files."""

    def scan_text(self, file_path: pathlib.Path, text: str) -> SourceFile:
        imports, has_service, has_message = scan_source(text)
        logger.debug(
            "file_scanned",
            file=str(file_path),
            imports=len(imports),
            service=has_service,
            message=has_message,
        )
        return SourceFile(
            path=file_path,
            declared_imports=imports,
            has_service_definition=has_service,
            has_message_definition=has_message,
        )

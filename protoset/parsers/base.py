"""Abstract base class for schema-file scanners.

A scanner turns one file's text into a :class:`SourceFile`.  It never
touches other files, so scanning is a pure function of content plus the
read step provided here.
"""

from __future__ import annotations

import abc
import pathlib

import structlog

from protoset.config import settings
from protoset.core.content_reader import read_text
from protoset.models.schema import SourceFile

logger = structlog.get_logger(__name__)


class BaseSchemaScanner(abc.ABC):
    """Contract that every schema scanner must fulfil.

    Args:
        max_file_size_bytes: Files larger than this are not scanned.
    """

    def __init__(self, max_file_size_bytes: int | None = None) -> None:
        self.max_file_size_bytes = max_file_size_bytes or settings.max_file_size_bytes

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def scan_text(self, file_path: pathlib.Path, text: str) -> SourceFile:
        """Extract imports and definition markers from *text*.

        Args:
            file_path: Canonical absolute path of the file.
            text: Decoded file content.
        """

    def scan_file(self, file_path: pathlib.Path) -> SourceFile:
        """Read and scan *file_path*.

        A file that cannot be read is still returned, with no imports and
        :attr:`SourceFile.scan_error` set, so one bad file never aborts
        the run.
        """
        try:
            size = file_path.stat().st_size
            if size > self.max_file_size_bytes:
                return self._skipped(
                    file_path, f"file too large ({size} > {self.max_file_size_bytes} bytes)"
                )
            text = read_text(file_path)
        except OSError as exc:
            return self._skipped(file_path, str(exc))
        return self.scan_text(file_path, text)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _skipped(file_path: pathlib.Path, reason: str) -> SourceFile:
        logger.warning("scan_skipped", file=str(file_path), reason=reason)
        return SourceFile(path=file_path, scan_error=reason)

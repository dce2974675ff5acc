"""Reads schema sources from disk as text.

Schema files are small, so each one is read whole.  Files saved in a
non-UTF-8 charset are decoded through a fallback chain instead of failing.
"""

from __future__ import annotations

import pathlib

import structlog

logger = structlog.get_logger(__name__)

# Encodings to attempt in order when reading source files.
_ENCODING_CHAIN: tuple[str, ...] = ("utf-8-sig", "cp1252", "latin-1")


def read_text(file_path: pathlib.Path) -> str:
    """Read *file_path* as text, trying each encoding in turn.

    Args:
        file_path: Absolute path to the schema file.

    Returns:
        The decoded file content.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    raw = file_path.read_bytes()

    for encoding in _ENCODING_CHAIN:
        try:
            content = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        if encoding != _ENCODING_CHAIN[0]:
            logger.debug("encoding_fallback", file=str(file_path), encoding=encoding)
        return content

    # latin-1 maps every byte, so this is only reached if the chain changes.
    logger.warning("encoding_fallback", file=str(file_path), tried=_ENCODING_CHAIN)
    return raw.decode("utf-8", errors="replace")

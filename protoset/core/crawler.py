"""Recursive schema-file discovery with .gitignore-style blacklist filtering.

Uses ``pathlib`` for all file-system operations and ``pathspec`` for
glob-pattern matching against the configurable blacklist.
"""

from __future__ import annotations

import pathlib
from typing import Iterator

import pathspec
import structlog

from protoset.config import settings
from protoset.core.paths import PathLike, canonicalize
from protoset.errors import DiscoveryError

logger = structlog.get_logger(__name__)


class FileCrawler:
    """Recursively walks a directory tree, yielding schema source files.

    Extension matching is case-insensitive, so ``API.PROTO`` is found as
    well as ``api.proto``.  Symlinked directories are not descended into.
    Pruned directories are logged at INFO.  Directory errors are not swallowed: an
    unreadable directory aborts the walk with :class:`DiscoveryError`.

    Args:
        root: The root directory to scan.
        extension: Schema extension.  Falls back to
            :pyattr:`protoset.config.Settings.schema_extension`.
        blacklist: Glob patterns to exclude.  ``None`` falls back to
            :pyattr:`protoset.config.Settings.default_blacklist`; an empty
            list disables exclusion.
    """

    def __init__(
        self,
        root: PathLike,
        extension: str | None = None,
        blacklist: list[str] | None = None,
    ) -> None:
        self.root = canonicalize(root)
        self.extension = (extension or settings.schema_extension).lower()
        self.blacklist = settings.default_blacklist if blacklist is None else blacklist
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.blacklist)

    def _is_excluded(self, path: pathlib.Path) -> bool:
        """Check whether *path* matches any blacklist pattern.

        Args:
            path: Absolute path to test.

        Returns:
            ``True`` if the path should be skipped.
        """
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return False
        # pathspec expects forward-slash separated POSIX paths.
        posix = relative.as_posix()
        if path.is_dir():
            posix += "/"
        return self._spec.match_file(posix)

    def _is_schema_file(self, path: pathlib.Path) -> bool:
        return path.name.lower().endswith(self.extension)

    def crawl(self) -> Iterator[pathlib.Path]:
        """Yield every schema file under :pyattr:`root`.

        Yields:
            Canonical absolute paths, in sorted walk order.

        Raises:
            DiscoveryError: If the root or any directory below it cannot
                be listed.
        """
        logger.info("crawl_started", root=str(self.root))
        file_count = 0

        for path in self._walk(self.root):
            file_count += 1
            yield path

        logger.info("crawl_finished", root=str(self.root), files_found=file_count)

    def _walk(self, directory: pathlib.Path) -> Iterator[pathlib.Path]:
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.error("walk_failed", path=str(directory), error=str(exc))
            raise DiscoveryError(str(directory), exc) from exc

        for entry in entries:
            if self._is_excluded(entry):
                if entry.is_dir():
                    logger.info("directory_excluded", path=str(entry))
                else:
                    logger.debug("excluded", path=str(entry))
                continue

            # Symlinked directories are not followed: they would list the
            # same file under a second spelling, or loop back on an ancestor.
            if entry.is_symlink() and entry.is_dir():
                logger.info("symlinked_directory_skipped", path=str(entry))
                continue

            if entry.is_dir():
                yield from self._walk(entry)
            elif entry.is_file() and self._is_schema_file(entry):
                yield canonicalize(entry)


def discover(
    root: PathLike,
    extension: str | None = None,
    blacklist: list[str] | None = None,
) -> list[pathlib.Path]:
    """Return every schema file below *root* as a list.

    Args:
        root: Directory to walk.
        extension: Schema extension override.
        blacklist: Exclusion pattern override.

    Raises:
        DiscoveryError: If *root* (or a directory below it) is unreadable.
    """
    return list(FileCrawler(root, extension=extension, blacklist=blacklist).crawl())

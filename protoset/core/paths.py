"""Path canonicalisation shared by discovery, resolution and root handling.

Two spellings of the same directory (relative vs absolute, trailing
separator, ``..`` segments, case on case-insensitive systems) must compare
equal, otherwise the compiler sees two logical packages for one file.
"""

from __future__ import annotations

import os
import pathlib
from typing import Union

PathLike = Union[str, os.PathLike]


def canonicalize(path: PathLike) -> pathlib.Path:
    """Return the absolute, normalised form of *path*.

    ``~`` is expanded, ``.``/``..`` segments are collapsed and trailing
    separators disappear.  Symlinks are left alone so that a file keeps the
    location it was discovered at.  The path does not need to exist.
    """
    return pathlib.Path(os.path.abspath(os.path.expanduser(os.fspath(path))))


def path_key(path: PathLike) -> str:
    """Return a comparison key that is case-folded where the OS folds case."""
    return os.path.normcase(str(canonicalize(path)))


def to_posix(path: pathlib.Path) -> str:
    """Render *path* with forward slashes regardless of host OS."""
    return pathlib.PurePath(path).as_posix()


def relative_posix(path: pathlib.Path, root: pathlib.Path) -> str | None:
    """Return *path* relative to *root* in POSIX form, or ``None`` if outside.

    Both arguments must already be canonical.
    """
    if os.path.normcase(str(path)) == os.path.normcase(str(root)):
        return "."
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        pass
    # Case-insensitive filesystems: compare folded spellings.
    folded_path = pathlib.PurePath(os.path.normcase(str(path)))
    folded_root = pathlib.PurePath(os.path.normcase(str(root)))
    try:
        folded_path.relative_to(folded_root)
    except ValueError:
        return None
    return pathlib.PurePath(*path.parts[len(root.parts):]).as_posix()

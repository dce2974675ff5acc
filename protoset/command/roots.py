"""Ordered, duplicate-free set of compiler search roots.

The compiler treats two spellings of one directory as two include paths,
and a file reachable through both gets two logical names.  Membership is
therefore tested on the canonical path, never on the caller's text.
"""

from __future__ import annotations

import pathlib
from typing import Iterable, Iterator, Optional

from protoset.core.paths import PathLike, canonicalize, path_key


class SearchRootSet:
    """Insertion-ordered set of canonical directory paths.

    Usage::

        roots = SearchRootSet(["proto", "./proto/", "/abs/vendor"])
        list(roots)  # [<cwd>/proto, /abs/vendor]
    """

    def __init__(self, roots: Iterable[PathLike] = ()) -> None:
        self._roots: dict[str, pathlib.Path] = {}
        for root in roots:
            self.add(root)

    def add(self, root: PathLike) -> bool:
        """Insert *root*; return ``False`` if an equivalent root is present."""
        canonical = canonicalize(root)
        key = path_key(canonical)
        if key in self._roots:
            return False
        self._roots[key] = canonical
        return True

    def __contains__(self, root: object) -> bool:
        if not isinstance(root, (str, pathlib.PurePath)):
            return False
        return path_key(root) in self._roots

    def __iter__(self) -> Iterator[pathlib.Path]:
        return iter(self._roots.values())

    def __len__(self) -> int:
        return len(self._roots)

    def __repr__(self) -> str:
        return f"SearchRootSet({[str(r) for r in self]!r})"

    def as_list(self) -> list[pathlib.Path]:
        return list(self._roots.values())


def dedupe_roots(
    primary_root: PathLike,
    extra_roots: Iterable[PathLike] = (),
    ascended_roots: Optional[Iterable[PathLike]] = None,
) -> list[pathlib.Path]:
    """Collapse all search roots into a canonical list, primary root first.

    Args:
        primary_root: The primary source root.
        extra_roots: Caller-supplied roots, in priority order.
        ascended_roots: Roots found by the import resolver's upward walk.

    Returns:
        Canonical directories; each appears once however it was spelled.
    """
    roots = SearchRootSet([primary_root])
    for root in extra_roots:
        roots.add(root)
    for root in ascended_roots or ():
        roots.add(root)
    return roots.as_list()

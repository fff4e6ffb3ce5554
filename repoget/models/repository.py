"""
Local repository model for Repoget.

A ``LocalRepository`` identifies one repository directory under a root:
its absolute path, its path relative to the root and the decomposed path
segments used for name matching and for display.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import SplitResult


def to_slash(path: str, sep: Optional[str] = None) -> str:
    """Render ``path`` with forward slashes regardless of the host separator."""

    sep = sep or os.sep
    if sep == "/":
        return path
    return path.replace(sep, "/")


def _split_query(query: str) -> List[str]:
    normalized = query.replace("\\", "/").strip("/")
    if not normalized:
        return []
    return [part for part in normalized.split("/") if part]


@dataclass(frozen=True)
class LocalRepository:
    """Immutable on-disk repository location."""

    root_path: str
    rel_path: str
    full_path: str
    path_parts: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.path_parts:
            raise ValueError("A local repository needs at least one path segment")

    @property
    def slash_rel_path(self) -> str:
        return to_slash(self.rel_path)

    @property
    def display_name(self) -> str:
        return "/".join(self.path_parts)

    def subpaths(self) -> List[str]:
        """
        Return every trailing run of path segments, shortest first.

        ``github.com/x/a`` yields ``a``, ``x/a`` and ``github.com/x/a``.
        """
        parts = self.path_parts
        return ["/".join(parts[len(parts) - i - 1:]) for i in range(len(parts))]

    def matches(self, query: str) -> bool:
        """
        Check whether ``query`` names this repository.

        The query matches when its segments equal a contiguous run of whole
        path segments. A partial segment never matches, so ``a`` does not
        match ``github.com/x/ab``.
        """
        wanted = _split_query(query)
        if not wanted:
            return False

        size = len(wanted)
        parts = list(self.path_parts)
        return any(
            parts[i:i + size] == wanted
            for i in range(len(parts) - size + 1)
        )

    @classmethod
    def from_full_path(cls, full_path: str, roots: Sequence[str]) -> "LocalRepository":
        """
        Rebuild a repository from an existing directory under one of ``roots``.

        Raises:
            ValueError: If ``full_path`` lies outside every root
        """
        full_path = os.path.abspath(full_path)
        for root in roots:
            root = os.path.abspath(root)
            rel_path = os.path.relpath(full_path, root)
            if rel_path in (os.curdir, os.pardir) or rel_path.startswith(os.pardir + os.sep):
                continue
            parts = tuple(part for part in rel_path.split(os.sep) if part)
            return cls(
                root_path=root,
                rel_path=rel_path,
                full_path=full_path,
                path_parts=parts
            )
        raise ValueError(f"{full_path} is not under any repository root")

    @classmethod
    def from_url(
        cls,
        url: SplitResult,
        bare: bool,
        roots: Sequence[str]
    ) -> "LocalRepository":
        """
        Project the local location a remote URL occupies.

        An existing directory under any root wins; otherwise the location
        is placed under the primary (first) root.
        """
        if not roots:
            raise ValueError("At least one repository root is required")

        parts = [url.hostname or ""] + [p for p in url.path.split("/") if p]
        parts = [p for p in parts if p]
        if not parts:
            raise ValueError(f"Cannot derive a local path from {url.geturl()}")

        if parts[-1].endswith(".git"):
            parts[-1] = parts[-1][:-len(".git")]
        if bare:
            parts[-1] += ".git"

        rel_path = os.path.join(*parts)
        for root in roots:
            candidate = os.path.join(root, rel_path)
            if os.path.isdir(candidate):
                return cls(
                    root_path=root,
                    rel_path=rel_path,
                    full_path=candidate,
                    path_parts=tuple(parts)
                )

        primary = roots[0]
        return cls(
            root_path=primary,
            rel_path=rel_path,
            full_path=os.path.join(primary, rel_path),
            path_parts=tuple(parts)
        )


def sort_repositories(repos: Iterable[LocalRepository]) -> List[LocalRepository]:
    return sorted(repos, key=lambda repo: (repo.root_path, repo.path_parts))


__all__ = [
    "LocalRepository",
    "sort_repositories",
    "to_slash",
]

"""
Discovery of repositories under the configured roots.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from ..infrastructure.error_handler import WalkError
from ..infrastructure.logger import logger
from ..models import LocalRepository, Settings, sort_repositories
from .vcs import is_bare_git_dir


VCS_MARKERS = (".git", ".hg", ".svn", "_darcs", ".bzr", ".fslckout", "_FOSSIL_")

DEFAULT_WALK_WORKERS = 8


def is_repository_dir(path: str) -> bool:
    if any(os.path.exists(os.path.join(path, marker)) for marker in VCS_MARKERS):
        return True
    return is_bare_git_dir(path)


def _walk_tree(
    top: str,
    root: str,
    callback: Callable[[LocalRepository], None]
) -> None:
    stack = [top]
    while stack:
        path = stack.pop()
        if is_repository_dir(path):
            callback(LocalRepository.from_full_path(path, [root]))
            continue

        try:
            entries = list(os.scandir(path))
        except OSError as e:
            logger.debug(f"skipping directory {path}: {e}")
            continue

        for entry in entries:
            if entry.name.startswith(".") or not entry.is_dir(follow_symlinks=False):
                continue
            stack.append(entry.path)


def walk_all_local_repositories(
    callback: Callable[[LocalRepository], None],
    settings: Settings,
    max_workers: int = DEFAULT_WALK_WORKERS
) -> None:
    """
    Call ``callback`` once per repository found under every root.

    Each top-level directory of a root is scanned in its own worker thread,
    so ``callback`` may run concurrently. A root that does not exist yet is
    skipped.

    Raises:
        WalkError: If a root exists but cannot be listed
    """
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = []
        for root in settings.roots:
            if not os.path.exists(root):
                logger.debug(f"repository root {root} does not exist")
                continue
            if not os.path.isdir(root):
                raise WalkError(f"repository root {root} is not a directory")

            try:
                entries = list(os.scandir(root))
            except OSError as e:
                raise WalkError(f"cannot read repository root {root}", e) from e

            for entry in entries:
                if entry.name.startswith(".") or not entry.is_dir():
                    continue
                futures.append(executor.submit(_walk_tree, entry.path, root, callback))

        for future in futures:
            future.result()


def list_local_repositories(
    settings: Settings,
    walker: Optional[Callable] = None
) -> List[LocalRepository]:
    """Return every local repository, sorted by root then path."""

    walker = walker or walk_all_local_repositories
    found: List[LocalRepository] = []
    lock = threading.Lock()

    def collect(repo: LocalRepository) -> None:
        with lock:
            found.append(repo)

    walker(collect, settings)
    return sort_repositories(found)


__all__ = [
    "is_repository_dir",
    "list_local_repositories",
    "walk_all_local_repositories",
]

"""
Resolve a user-supplied repository name to exactly one local repository.
"""

from __future__ import annotations

import os
import threading
from typing import Callable, List, Optional

from ..infrastructure.error_handler import (
    AmbiguousRepositoryError, RepogetError, RepositoryNotFoundError
)
from ..infrastructure.logger import logger
from ..models import LocalRepository, Settings
from ..services.local import walk_all_local_repositories
from ..services.settings import load_settings
from ..services.url import parse_url


Walker = Callable[[Callable[[LocalRepository], None], Settings], None]


class RepositoryLocator:
    """
    Looks up local repositories by partial name.

    The walker may invoke its callback from several threads at once, so
    matches are collected under a lock.
    """

    def __init__(self, settings: Optional[Settings] = None, walker: Optional[Walker] = None):
        self.settings = settings or load_settings()
        self.walker = walker or walk_all_local_repositories

    def find_matches(self, name: str) -> List[LocalRepository]:
        """Return every local repository matching ``name``, in walk order."""

        found: List[LocalRepository] = []
        lock = threading.Lock()

        def collect(repo: LocalRepository) -> None:
            if repo.matches(name):
                with lock:
                    found.append(repo)

        self.walker(collect, self.settings)
        return found

    def _from_url(self, name: str, bare: bool) -> Optional[LocalRepository]:
        try:
            url = parse_url(name, ssh=False, settings=self.settings)
        except RepogetError as e:
            logger.debug(f"{name!r} is not a URL either: {e}")
            return None

        repo = LocalRepository.from_url(url, bare, self.settings.roots)
        if os.path.isdir(repo.full_path):
            return repo
        return None

    def locate(self, name: str, bare: bool = False) -> LocalRepository:
        """
        Resolve ``name`` to one repository.

        When no local repository matches, ``name`` is read as a URL and the
        directory it would be cloned into is used if it exists.

        Raises:
            RepositoryNotFoundError: If nothing matches
            AmbiguousRepositoryError: If several repositories match
        """
        found = self.find_matches(name)

        if not found:
            repo = self._from_url(name, bare)
            if repo is not None:
                found.append(repo)

        if not found:
            raise RepositoryNotFoundError("no repository found")
        if len(found) > 1:
            raise AmbiguousRepositoryError([repo.display_name for repo in found])
        return found[0]


__all__ = [
    "RepositoryLocator",
]

"""
High-level Python API for Repoget.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, TextIO

from ..core import (
    FetchOrchestrator, Getter, RepositoryLocator, jump, open_target_stream
)
from ..infrastructure.logger import logger
from ..models import FetchConfig, FetchSummary, LocalRepository, Settings
from ..services.local import list_local_repositories
from ..services.settings import load_settings


class Repoget:
    """
    Entry point for fetching, listing and jumping into repositories.

    Example:
        >>> repoget = Repoget()
        >>> summary = asyncio.run(repoget.get(["x-motemen/ghq"]))
        >>> repoget.look("ghq")
    """

    def __init__(self, settings: Optional[Settings] = None, verbose: bool = False):
        self.settings = settings or load_settings()
        self.locator = RepositoryLocator(self.settings)
        self.set_verbose(verbose)

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    async def get(
        self,
        targets: Sequence[str],
        config: Optional[FetchConfig] = None,
        parallel: bool = False,
        look: bool = False,
        stdin: Optional[TextIO] = None
    ) -> FetchSummary:
        """
        Fetch every target, from ``targets`` or else from standard input.

        Args:
            targets: Explicit targets; empty means read ``stdin``
            config: Fetch options
            parallel: Fetch up to six targets at a time, logging failures
            look: Jump into the fetched repository afterwards
            stdin: Reader used when ``targets`` is empty

        Returns:
            FetchSummary of the run
        """
        config = config or FetchConfig()
        if self.settings.prefers_ssh:
            config = replace(config, ssh=True)
        if parallel:
            config = config.for_parallel()

        stream = open_target_stream(targets, stdin)
        orchestrator = FetchOrchestrator(Getter(config, self.settings), parallel=parallel)
        summary = await orchestrator.run(stream)

        if look:
            look_target = summary.look_target
            if isinstance(look_target, LocalRepository):
                self.jump(look_target)
            elif look_target is not None:
                self.look(look_target, bare=config.bare)

        return summary

    def look(self, name: str, bare: bool = False) -> LocalRepository:
        """Resolve ``name`` and jump into it."""

        repo = self.locator.locate(name, bare=bare)
        self.jump(repo)
        return repo

    def jump(self, repo: LocalRepository) -> None:
        jump(repo)

    def list(
        self,
        query: Optional[str] = None,
        exact: bool = False,
        full_path: bool = False
    ) -> List[str]:
        """
        List local repositories.

        ``query`` filters by substring of the relative path, or by whole
        path segments when ``exact`` is set.
        """
        repos = list_local_repositories(self.settings, self.locator.walker)
        if query:
            if exact:
                repos = [repo for repo in repos if repo.matches(query)]
            else:
                needle = query.lower()
                repos = [repo for repo in repos if needle in repo.slash_rel_path.lower()]

        if full_path:
            return [repo.full_path for repo in repos]
        return [repo.slash_rel_path for repo in repos]

    def roots(self, all: bool = False) -> List[str]:
        if all:
            return list(self.settings.roots)
        return [self.settings.primary_root]


__all__ = [
    "Repoget",
]

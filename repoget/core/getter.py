"""
Fetch unit: resolve one target and clone or update it under the root.
"""

from __future__ import annotations

import os
import threading
from typing import Dict, Optional, Set

from ..infrastructure.error_handler import FetchError, VCSError
from ..infrastructure.logger import logger
from ..models import FetchAction, FetchConfig, FetchResult, LocalRepository, Settings
from ..services.settings import load_settings
from ..services.url import parse_url
from ..services.vcs import (
    VCSBackend, VCSOptions, detect_local_vcs, detect_remote_vcs, get_backend
)


class Getter:
    """
    Maps a target to a fetched local repository.

    A destination is cloned or updated at most once per getter, so the same
    repository named twice in one run is only fetched once.
    """

    def __init__(
        self,
        config: FetchConfig,
        settings: Optional[Settings] = None,
        vcs_registry: Optional[Dict[str, VCSBackend]] = None
    ):
        self.config = config
        self.settings = settings or load_settings()
        self.vcs_registry = vcs_registry
        self._claimed: Set[str] = set()
        self._claim_lock = threading.Lock()

    @property
    def options(self) -> VCSOptions:
        return VCSOptions(
            shallow=self.config.shallow,
            branch=self.config.branch,
            recursive=self.config.recursive,
            bare=self.config.bare,
            silent=self.config.silent,
        )

    def get(self, target: str) -> FetchResult:
        """
        Fetch one target.

        Args:
            target: URL, shorthand or path naming the repository

        Returns:
            FetchResult describing where the repository lives and what was done

        Raises:
            FetchError: Wrapping whatever made the fetch fail
        """
        try:
            return self._get(target)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(target, e) from e

    def _get(self, target: str) -> FetchResult:
        url = parse_url(target, ssh=self.config.ssh, settings=self.settings)
        local = LocalRepository.from_url(url, self.config.bare, self.settings.roots)

        if not os.path.exists(local.full_path):
            if self.config.vcs:
                backend, clone_url = get_backend(self.config.vcs, self.vcs_registry), url
            else:
                backend, clone_url = detect_remote_vcs(url, self.vcs_registry)
                if clone_url.path.rstrip("/") != url.path.rstrip("/"):
                    # the repository root is shorter than the requested path
                    local = LocalRepository.from_url(
                        clone_url, self.config.bare, self.settings.roots
                    )
            url = clone_url

        if not os.path.exists(local.full_path):
            if not self._claim(local.full_path):
                return self._result(target, local, FetchAction.SKIPPED, url.geturl())

            logger.info(f"clone {url.geturl()} -> {local.full_path}")
            backend.clone(url.geturl(), local.full_path, self.options)
            return self._result(target, local, FetchAction.CLONED, url.geturl())

        if self.config.update:
            detected = detect_local_vcs(local.full_path, local.root_path, self.vcs_registry)
            if detected is None:
                raise VCSError(f"failed to detect VCS for {local.full_path!r}")
            backend, repo_root = detected

            if not self._claim(repo_root):
                return self._result(target, local, FetchAction.SKIPPED, url.geturl())

            logger.info(f"update {local.full_path}")
            backend.update(repo_root, self.options)
            return self._result(target, local, FetchAction.UPDATED, url.geturl())

        logger.info(f"exists {local.full_path}")
        return self._result(target, local, FetchAction.EXISTS, url.geturl())

    def _claim(self, path: str) -> bool:
        with self._claim_lock:
            if path in self._claimed:
                logger.info(f"skip {path} (already fetched in this run)")
                return False
            self._claimed.add(path)
            return True

    @staticmethod
    def _result(
        target: str,
        local: LocalRepository,
        action: FetchAction,
        remote_url: str
    ) -> FetchResult:
        return FetchResult(
            target=target,
            local_repository=local,
            action=action,
            remote_url=remote_url,
        )


__all__ = [
    "Getter",
]

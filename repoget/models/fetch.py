"""
Fetch domain models for Repoget.

This module contains the per-invocation fetch configuration, the result of
fetching one target and the summary of a whole fetch run.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Union

from .repository import LocalRepository


class FetchAction(Enum):
    """What the fetch unit did with a target's destination."""

    CLONED = "clone"
    UPDATED = "update"
    EXISTS = "exists"
    SKIPPED = "skip"


@dataclass(frozen=True)
class FetchConfig:
    """
    Fetch options set once per invocation.

    ``vcs`` forces a backend by name (``git``, ``hg``, ``svn``) instead of
    detecting it from the URL.
    """

    update: bool = False
    shallow: bool = False
    ssh: bool = False
    vcs: Optional[str] = None
    branch: Optional[str] = None
    recursive: bool = True
    bare: bool = False
    silent: bool = False

    def for_parallel(self) -> "FetchConfig":
        """Parallel output would interleave, so parallel runs are always silent."""

        return replace(self, silent=True)


@dataclass(frozen=True)
class FetchResult:
    """Result of fetching one target."""

    target: str
    local_repository: LocalRepository
    action: FetchAction
    remote_url: str


@dataclass
class FetchSummary:
    """Outcome of an orchestrated fetch run."""

    target_count: int = 0
    first_target: Optional[str] = None
    results: List[FetchResult] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    def record_target(self, target: str) -> None:
        if self.first_target is None:
            self.first_target = target
        self.target_count += 1

    @property
    def is_successful(self) -> bool:
        return not self.failures

    @property
    def look_target(self) -> Optional[Union[LocalRepository, str]]:
        """
        What a follow-up look should use.

        A single consumed target yields its fetched repository. Several
        consumed targets yield only the first target string, to be looked up
        by name.
        """
        if self.target_count > 1:
            return self.first_target
        if self.target_count == 1 and self.results:
            return self.results[0].local_repository
        return None


__all__ = [
    "FetchAction",
    "FetchConfig",
    "FetchResult",
    "FetchSummary",
]

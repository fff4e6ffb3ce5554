"""
Core data models API surface for Repoget.

Re-exports model classes so callers can write ``from repoget.models import X``.
"""

from .repository import (
    LocalRepository,
    sort_repositories,
    to_slash,
)
from .fetch import (
    FetchAction,
    FetchConfig,
    FetchResult,
    FetchSummary,
)
from .config import (
    LOOK_ENV,
    PARALLEL_WIDTH,
    ROOT_ENV,
    Settings,
)

__all__ = [
    # Repository models
    "LocalRepository",
    "sort_repositories",
    "to_slash",
    # Fetch models
    "FetchAction",
    "FetchConfig",
    "FetchResult",
    "FetchSummary",
    # Config models
    "LOOK_ENV",
    "PARALLEL_WIDTH",
    "ROOT_ENV",
    "Settings",
]

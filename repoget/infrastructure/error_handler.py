"""
Error types and error-handling decorators for Repoget.

Every error raised by the package derives from ``RepogetError`` so the CLI
can report it uniformly. Errors that wrap a lower-level failure keep it in
``original_error`` and mention it in their string form.
"""

from __future__ import annotations

import functools
import time
from typing import Callable, Iterable, Optional, Sequence, Tuple, Type

import httpx

from .logger import logger


####
##      ERROR TYPES
#####
class RepogetError(Exception):
    """Base class for every error surfaced by Repoget."""

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.message = message
        self.original_error = original_error
        if original_error is not None:
            super().__init__(f"{message} (Original: {original_error})")
        else:
            super().__init__(message)


class NoTargetError(RepogetError):
    """Raised when no target was given and stdin is an interactive terminal."""


class InputReadError(RepogetError):
    """Raised when reading targets from standard input fails."""


class URLParseError(RepogetError):
    """Raised when a target cannot be turned into a remote URL."""


class VCSError(RepogetError):
    """Raised when a VCS client (or remote VCS detection) fails."""


class WalkError(RepogetError):
    """Raised when a repository root cannot be walked."""


class FetchError(RepogetError):
    """A single target failed to fetch."""

    def __init__(self, target: str, original_error: BaseException):
        self.target = target
        super().__init__(f'failed to get "{target}"', original_error)


class RepositoryNotFoundError(RepogetError):
    """No local repository matches the requested name."""


class AmbiguousRepositoryError(RepogetError):
    """More than one local repository matches the requested name."""

    def __init__(self, candidates: Sequence[str]):
        self.candidates = list(candidates)
        lines = ["More than one repositories are found; Try more precise name"]
        lines.extend(f"       - {candidate}" for candidate in self.candidates)
        super().__init__("\n".join(lines))


class JumpError(RepogetError):
    """The interactive shell could not be started or exited non-zero."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        original_error: Optional[BaseException] = None
    ):
        self.returncode = returncode
        super().__init__(message, original_error)


####
##      DECORATORS
#####
def handle_probe_error(func: Callable) -> Callable:
    """
    Translate HTTP failures of a remote probe into ``VCSError``.

    Errors that are already ``RepogetError`` pass through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RepogetError:
            raise
        except httpx.HTTPStatusError as e:
            raise VCSError(
                f"remote probe returned HTTP {e.response.status_code}", e
            ) from e
        except httpx.HTTPError as e:
            raise VCSError("remote probe failed", e) from e

    return wrapper


RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (
    httpx.TransportError,
    ConnectionError,
    TimeoutError,
)


def retry_on_error(
    max_retries: int = 2,
    delay: float = 0.5,
    backoff_factor: float = 2.0,
    retryable_errors: Iterable[Type[BaseException]] = RETRYABLE_ERRORS
) -> Callable:
    """
    Retry a function on transient errors with exponential backoff.

    Args:
        max_retries: Extra attempts after the first call
        delay: Initial delay between attempts, in seconds
        backoff_factor: Multiplier applied to the delay after each attempt
        retryable_errors: Exception types that trigger a retry

    Returns:
        Decorator
    """
    retryable = tuple(retryable_errors)

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            wait = delay
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retryable as e:
                    if attempt >= max_retries:
                        raise
                    logger.debug(
                        f"{func.__name__} failed ({e}), "
                        f"retrying in {wait:.1f}s ({attempt + 1}/{max_retries})"
                    )
                    time.sleep(wait)
                    wait *= backoff_factor

        return wrapper

    return decorator


__all__ = [
    "RepogetError",
    "NoTargetError",
    "InputReadError",
    "URLParseError",
    "VCSError",
    "WalkError",
    "FetchError",
    "RepositoryNotFoundError",
    "AmbiguousRepositoryError",
    "JumpError",
    "handle_probe_error",
    "retry_on_error",
]

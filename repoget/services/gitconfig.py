"""
Read-only access to git configuration values.
"""

from __future__ import annotations

import subprocess
from typing import List, Optional

from ..infrastructure.logger import logger


def _run_git_config(args: List[str]) -> List[str]:
    try:
        result = subprocess.run(
            ["git", "config", *args],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        logger.debug("git executable not found, ignoring git config")
        return []

    # exit status 1 means the key is not set
    if result.returncode != 0:
        return []
    return [line for line in result.stdout.splitlines() if line]


def get(key: str) -> Optional[str]:
    """Return the last value of ``key``, or None when it is not set."""

    values = _run_git_config(["--get", key])
    return values[-1] if values else None


def get_all(key: str, path: bool = False) -> List[str]:
    """Return every value of ``key``; ``path`` expands ``~`` like git does."""

    args = ["--path"] if path else []
    return _run_git_config([*args, "--get-all", key])


def get_bool(key: str) -> Optional[bool]:
    value = get(key)
    if value is None:
        return None
    return value.strip().lower() in ("true", "yes", "on", "1")


__all__ = [
    "get",
    "get_all",
    "get_bool",
]

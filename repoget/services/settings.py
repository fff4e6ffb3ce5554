"""
Resolve Repoget settings from the environment and git config.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from ..models.config import DEFAULT_ROOT, ROOT_ENV, Settings
from . import gitconfig


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build the process settings.

    Roots come from ``REPOGET_ROOT`` (os.pathsep separated), then every
    ``repoget.root`` git config value, then ``~/repoget``.
    """
    env = os.environ if environ is None else environ

    roots = [r for r in env.get(ROOT_ENV, "").split(os.pathsep) if r]
    if not roots:
        roots = gitconfig.get_all("repoget.root", path=True)
    if not roots:
        roots = [DEFAULT_ROOT]

    user = (
        gitconfig.get("repoget.user")
        or env.get("GITHUB_USER")
        or env.get("USER")
        or env.get("USERNAME")
    )
    complete_user = gitconfig.get_bool("repoget.completeUser")

    return Settings(
        roots=roots,
        protocol=gitconfig.get("repoget.protocol"),
        user=user,
        complete_user=True if complete_user is None else complete_user,
    )


__all__ = [
    "load_settings",
]

"""
Interactive jump: start a shell inside a repository.
"""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Mapping, Optional

from ..infrastructure.error_handler import JumpError
from ..infrastructure.logger import logger
from ..models import LOOK_ENV, LocalRepository


def detect_shell(environ: Optional[Mapping[str, str]] = None) -> str:
    """The user's shell, else the platform default."""

    env = os.environ if environ is None else environ
    shell = env.get("SHELL")
    if shell:
        return shell
    if sys.platform == "win32":
        return env.get("COMSPEC", "cmd.exe")
    return "/bin/sh"


def jump(repo: LocalRepository, shell: Optional[str] = None) -> None:
    """
    Run an interactive shell in ``repo`` and wait for it to exit.

    The shell inherits stdio and sees the repository's relative path in
    ``REPOGET_LOOK``.

    Raises:
        JumpError: If the shell cannot start or exits non-zero
    """
    shell = shell or detect_shell()
    env = dict(os.environ)
    env[LOOK_ENV] = repo.slash_rel_path

    logger.debug(f"starting {shell} in {repo.full_path}")
    try:
        completed = subprocess.run([shell], cwd=repo.full_path, env=env)
    except OSError as e:
        raise JumpError(f"failed to start {shell}", original_error=e) from e

    if completed.returncode != 0:
        raise JumpError(
            f"{shell} exited with status {completed.returncode}",
            returncode=completed.returncode,
        )


__all__ = [
    "detect_shell",
    "jump",
]

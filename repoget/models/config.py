"""
Configuration models for Repoget.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional


DEFAULT_ROOT = os.path.join("~", "repoget")
ROOT_ENV = "REPOGET_ROOT"
LOOK_ENV = "REPOGET_LOOK"

# Admission gate width for parallel fetches
PARALLEL_WIDTH = 6


@dataclass
class Settings:
    """
    Process-wide settings: repository roots and URL preferences.

    The first entry of ``roots`` is the primary root new repositories are
    cloned into.
    """

    roots: List[str] = field(default_factory=lambda: [DEFAULT_ROOT])
    protocol: Optional[str] = None
    user: Optional[str] = None
    complete_user: bool = True

    def __post_init__(self) -> None:
        if not self.roots:
            raise ValueError("At least one repository root is required")
        self.roots = [os.path.abspath(os.path.expanduser(root)) for root in self.roots]

    @property
    def primary_root(self) -> str:
        return self.roots[0]

    @property
    def prefers_ssh(self) -> bool:
        return (self.protocol or "").lower() == "ssh"


__all__ = [
    "DEFAULT_ROOT",
    "LOOK_ENV",
    "PARALLEL_WIDTH",
    "ROOT_ENV",
    "Settings",
]

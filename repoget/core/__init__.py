"""
Core fetch, lookup and jump operations.
"""

from .input_stream import TargetStream, ArgumentStream, StdinStream, open_target_stream
from .getter import Getter
from .orchestrator import FetchOrchestrator
from .locator import RepositoryLocator
from .jump import detect_shell, jump

__all__ = [
    "TargetStream",
    "ArgumentStream",
    "StdinStream",
    "open_target_stream",
    "Getter",
    "FetchOrchestrator",
    "RepositoryLocator",
    "detect_shell",
    "jump",
]

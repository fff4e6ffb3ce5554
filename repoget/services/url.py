"""
Target-to-URL normalization.

Turns what a user types (a full URL, an scp-like ``git@host:path``, a
``host.tld/owner/name`` path, ``owner/name`` or a bare ``name``) into an
absolute remote URL.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit

from ..infrastructure.error_handler import URLParseError
from ..models.config import Settings


DEFAULT_HOST = "github.com"

HAS_SCHEME = re.compile(r"^[^:]+://")
SCP_LIKE = re.compile(r"^([^@]+@)?([^:]+):(/?.+)$")
LOOKS_LIKE_AUTHORITY = re.compile(r"[A-Za-z0-9]\.[A-Za-z]+(?::\d{1,5})?$")


def _fill_user(name: str, settings: Optional[Settings]) -> str:
    settings = settings or Settings()
    if not settings.complete_user:
        return f"{name}/{name}"
    if not settings.user:
        raise URLParseError(f"cannot determine the owner of {name!r}; set repoget.user")
    return f"{settings.user}/{name}"


def _host_with_port(url: SplitResult) -> str:
    host = url.hostname or ""
    if url.port:
        host = f"{host}:{url.port}"
    return host


def to_ssh(url: SplitResult) -> SplitResult:
    """Rewrite an http(s) URL as ``ssh://<user>@host/path`` (user defaults to git)."""

    user = url.username or "git"
    return SplitResult("ssh", f"{user}@{_host_with_port(url)}", url.path, "", "")


def parse_url(ref: str, ssh: bool = False, settings: Optional[Settings] = None) -> SplitResult:
    """
    Parse a target into an absolute remote URL.

    Args:
        ref: Target as typed by the user
        ssh: Rewrite the result to an ssh URL
        settings: Used to complete bare names with the configured user

    Returns:
        The parsed URL

    Raises:
        URLParseError: If ``ref`` cannot be interpreted as a URL
    """
    ref = ref.strip()
    if not ref:
        raise URLParseError("empty target")

    if not HAS_SCHEME.match(ref):
        matched = SCP_LIKE.match(ref)
        if matched:
            user, host, path = matched.group(1) or "", matched.group(2), matched.group(3)
            ref = f"ssh://{user}{host}/{path.lstrip('/')}"
        else:
            head = ref.split("/")
            if len(head) > 1 and LOOKS_LIKE_AUTHORITY.search(head[0]):
                ref = "https://" + ref

    try:
        url = urlsplit(ref)
        # port is validated lazily
        url.port
    except ValueError as e:
        raise URLParseError(f"invalid URL: {ref}", e) from e

    if not url.scheme:
        path = url.path.strip("/")
        if not path:
            raise URLParseError(f"invalid URL: {ref}")
        if "/" not in path:
            path = _fill_user(path, settings)
        url = SplitResult("https", DEFAULT_HOST, "/" + path, url.query, "")
    elif not url.hostname:
        raise URLParseError(f"URL has no host: {ref}")

    if ssh:
        url = to_ssh(url)
    return url


__all__ = [
    "DEFAULT_HOST",
    "parse_url",
    "to_ssh",
]

"""
VCS backends used to clone and update repositories.

Each backend shells out to its client (``git``, ``hg``, ``svn``). Remote
VCS detection works from the URL alone when it can and otherwise probes
the host for a ``go-import`` meta tag over HTTP.
"""

from __future__ import annotations

import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple
from urllib.parse import SplitResult, urlsplit

import httpx

from ..infrastructure.error_handler import (
    VCSError, handle_probe_error, retry_on_error
)
from ..infrastructure.logger import logger


KNOWN_GIT_HOSTS = frozenset({
    "github.com",
    "gitlab.com",
    "bitbucket.org",
    "codeberg.org",
    "gist.github.com",
})

# hosts whose repositories always live at /<owner>/<name>
OWNER_NAME_HOSTS = frozenset({"github.com", "bitbucket.org", "codeberg.org"})

PROBE_TIMEOUT = 10.0


@dataclass(frozen=True)
class VCSOptions:
    """Options forwarded to a backend's clone or update."""

    shallow: bool = False
    branch: Optional[str] = None
    recursive: bool = True
    bare: bool = False
    silent: bool = False


####
##      BACKENDS
#####
class VCSBackend(ABC):
    """Clone/update operations for one version control system."""

    name: str = ""
    markers: Tuple[str, ...] = ()

    @abstractmethod
    def clone(self, url: str, dest: str, options: VCSOptions) -> None:
        """Create a working copy of ``url`` at ``dest``."""

    @abstractmethod
    def update(self, dest: str, options: VCSOptions) -> None:
        """Bring the working copy at ``dest`` up to date."""

    def _run(self, args: List[str], options: VCSOptions, cwd: Optional[str] = None) -> None:
        logger.debug(f"running {' '.join(args)}" + (f" in {cwd}" if cwd else ""))
        output = subprocess.DEVNULL if options.silent else None
        try:
            subprocess.run(args, cwd=cwd, stdout=output, stderr=output, check=True)
        except FileNotFoundError as e:
            raise VCSError(f"{args[0]} is not installed", e) from e
        except subprocess.CalledProcessError as e:
            raise VCSError(
                f"{' '.join(args)} exited with status {e.returncode}", e
            ) from e

    def _prepare_destination(self, dest: str) -> None:
        parent = os.path.dirname(dest)
        if parent:
            os.makedirs(parent, exist_ok=True)

    def _reject_bare(self, options: VCSOptions) -> None:
        if options.bare:
            raise VCSError(f"bare clones are not supported by {self.name}")


class GitBackend(VCSBackend):
    name = "git"
    markers = (".git",)

    def clone(self, url: str, dest: str, options: VCSOptions) -> None:
        self._prepare_destination(dest)
        args = ["git", "clone"]
        if options.shallow:
            args += ["--depth", "1"]
        if options.branch:
            args += ["--branch", options.branch, "--single-branch"]
        if options.bare:
            args.append("--bare")
        elif options.recursive:
            args.append("--recursive")
        args += [url, dest]
        self._run(args, options)

    def update(self, dest: str, options: VCSOptions) -> None:
        if options.bare or is_bare_git_dir(dest):
            self._run(["git", "fetch", "--prune"], options, cwd=dest)
            return

        self._run(["git", "pull", "--ff-only"], options, cwd=dest)
        if options.recursive:
            self._run(
                ["git", "submodule", "update", "--init", "--recursive"],
                options, cwd=dest
            )


class MercurialBackend(VCSBackend):
    name = "hg"
    markers = (".hg",)

    def clone(self, url: str, dest: str, options: VCSOptions) -> None:
        self._reject_bare(options)
        self._prepare_destination(dest)
        args = ["hg", "clone"]
        if options.branch:
            args += ["--branch", options.branch]
        args += [url, dest]
        self._run(args, options)

    def update(self, dest: str, options: VCSOptions) -> None:
        self._run(["hg", "pull", "--update"], options, cwd=dest)


class SubversionBackend(VCSBackend):
    name = "svn"
    markers = (".svn",)

    def clone(self, url: str, dest: str, options: VCSOptions) -> None:
        self._reject_bare(options)
        self._prepare_destination(dest)
        if options.branch:
            url = f"{url.rstrip('/')}/branches/{options.branch}"
        args = ["svn", "checkout"]
        if options.shallow:
            args += ["--depth", "immediates"]
        args += [url, dest]
        self._run(args, options)

    def update(self, dest: str, options: VCSOptions) -> None:
        self._run(["svn", "update"], options, cwd=dest)


git_backend = GitBackend()
hg_backend = MercurialBackend()
svn_backend = SubversionBackend()

VCS_REGISTRY: Dict[str, VCSBackend] = {
    "git": git_backend,
    "github": git_backend,
    "hg": hg_backend,
    "mercurial": hg_backend,
    "svn": svn_backend,
    "subversion": svn_backend,
}


def get_backend(name: str, registry: Optional[Dict[str, VCSBackend]] = None) -> VCSBackend:
    registry = VCS_REGISTRY if registry is None else registry
    try:
        return registry[name.lower()]
    except KeyError:
        raise VCSError(f"unsupported VCS: {name}") from None


####
##      LOCAL DETECTION
#####
def is_bare_git_dir(path: str) -> bool:
    return (
        path.rstrip(os.sep).endswith(".git")
        and os.path.isfile(os.path.join(path, "HEAD"))
        and os.path.isdir(os.path.join(path, "objects"))
    )


def detect_local_vcs(
    path: str,
    root: Optional[str] = None,
    registry: Optional[Dict[str, VCSBackend]] = None
) -> Optional[Tuple[VCSBackend, str]]:
    """
    Find the backend managing ``path`` by looking for marker directories.

    Parents are checked too, stopping at ``root``.

    Returns:
        (backend, repository root), or None when nothing is found
    """
    registry = VCS_REGISTRY if registry is None else registry
    backends = list(dict.fromkeys(registry.values()))

    if is_bare_git_dir(path) and "git" in registry:
        return registry["git"], path

    current = os.path.abspath(path)
    stop = os.path.abspath(root) if root else None
    while True:
        for backend in backends:
            if any(os.path.exists(os.path.join(current, m)) for m in backend.markers):
                return backend, current
        parent = os.path.dirname(current)
        if parent == current or current == stop:
            return None
        current = parent


####
##      REMOTE DETECTION
#####
class _GoImportParser(HTMLParser):
    """Collects ``<meta name="go-import" content="prefix vcs root">`` tags."""

    def __init__(self):
        super().__init__()
        self.imports: List[Tuple[str, str, str]] = []

    def handle_starttag(self, tag, attrs):
        if tag != "meta":
            return
        attributes = dict(attrs)
        if attributes.get("name") != "go-import":
            return
        fields = (attributes.get("content") or "").split()
        if len(fields) == 3:
            self.imports.append((fields[0], fields[1], fields[2]))


@handle_probe_error
@retry_on_error(max_retries=2)
def probe_go_import(url: SplitResult, timeout: float = PROBE_TIMEOUT) -> Optional[Tuple[str, str]]:
    """
    Ask the host for go-import metadata.

    Returns:
        (vcs name, repository root URL) for the longest matching prefix, or None
    """
    probe_url = SplitResult("https", url.netloc, url.path, "go-get=1", "").geturl()
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(probe_url)
        response.raise_for_status()

    parser = _GoImportParser()
    parser.feed(response.text)

    wanted = f"{url.hostname}{url.path}".rstrip("/")
    candidates = [
        (prefix, vcs, root) for prefix, vcs, root in parser.imports
        if wanted == prefix or wanted.startswith(prefix + "/")
    ]
    if not candidates:
        return None
    _, vcs, root = max(candidates, key=lambda item: len(item[0]))
    return vcs, root


def detect_remote_vcs(
    url: SplitResult,
    registry: Optional[Dict[str, VCSBackend]] = None
) -> Tuple[VCSBackend, SplitResult]:
    """
    Choose the backend for a remote URL and the URL to clone from.

    The clone URL differs from ``url`` when the repository root is shorter
    than the requested path (``github.com/x/y/tree/main`` clones ``x/y``).
    """
    registry = VCS_REGISTRY if registry is None else registry
    scheme = url.scheme.lower()
    path = url.path.rstrip("/")
    host = (url.hostname or "").lower()

    if scheme in ("svn", "svn+ssh") or path.endswith(".svn"):
        return get_backend("svn", registry), url
    if path.endswith(".hg"):
        return get_backend("hg", registry), url
    if scheme.startswith("git") or path.endswith(".git"):
        return get_backend("git", registry), url

    if host in KNOWN_GIT_HOSTS:
        if host in OWNER_NAME_HOSTS:
            parts = [p for p in path.split("/") if p]
            if len(parts) > 2:
                url = url._replace(path="/" + "/".join(parts[:2]))
        return get_backend("git", registry), url

    if scheme in ("http", "https"):
        try:
            found = probe_go_import(url)
        except VCSError as e:
            logger.debug(f"go-import probe of {url.geturl()} failed: {e}")
            found = None
        if found:
            vcs, root = found
            if vcs in registry:
                return registry[vcs], urlsplit(root)
            logger.debug(f"ignoring unsupported VCS {vcs!r} announced by {host}")

    return get_backend("git", registry), url


__all__ = [
    "GitBackend",
    "MercurialBackend",
    "SubversionBackend",
    "VCSBackend",
    "VCSOptions",
    "VCS_REGISTRY",
    "detect_local_vcs",
    "detect_remote_vcs",
    "get_backend",
    "is_bare_git_dir",
    "probe_go_import",
]

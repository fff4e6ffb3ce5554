import os
from unittest.mock import patch

import pytest

from repoget.core.getter import Getter
from repoget.infrastructure.error_handler import FetchError, VCSError
from repoget.models import FetchAction, FetchConfig, Settings
from repoget.services.vcs import VCSBackend


# --- Helpers ---

class FakeBackend(VCSBackend):
    """Backend that creates a marker directory instead of running a client."""

    def __init__(self, name="git", marker=".git", fail=False):
        self.name = name
        self.markers = (marker,)
        self.fail = fail
        self.clones = []
        self.updates = []

    def clone(self, url, dest, options):
        self.clones.append((url, dest, options))
        if self.fail:
            raise VCSError("git clone exited with status 128")
        os.makedirs(os.path.join(dest, self.markers[0]))

    def update(self, dest, options):
        self.updates.append((dest, options))


@pytest.fixture
def settings(tmp_path):
    return Settings(roots=[str(tmp_path)], user="me")


@pytest.fixture
def git():
    return FakeBackend()


def make_getter(settings, registry, **config):
    return Getter(FetchConfig(**config), settings, vcs_registry=registry)


# --- Test Cases ---

def test_clones_missing_repository(settings, git, tmp_path):
    getter = make_getter(settings, {"git": git}, shallow=True, branch="dev")

    result = getter.get("x/a")

    assert result.action == FetchAction.CLONED
    assert result.remote_url == "https://github.com/x/a"
    assert result.local_repository.full_path == str(tmp_path / "github.com" / "x" / "a")
    url, dest, options = git.clones[0]
    assert url == "https://github.com/x/a"
    assert dest == str(tmp_path / "github.com" / "x" / "a")
    assert options.shallow is True
    assert options.branch == "dev"
    assert options.recursive is True


def test_existing_repository_is_left_alone(settings, git, tmp_path):
    (tmp_path / "github.com" / "x" / "a" / ".git").mkdir(parents=True)
    getter = make_getter(settings, {"git": git})

    result = getter.get("https://github.com/x/a")

    assert result.action == FetchAction.EXISTS
    assert git.clones == []
    assert git.updates == []


def test_update_twice_keeps_one_repository(settings, git, tmp_path):
    first = make_getter(settings, {"git": git}, update=True).get("x/a")
    second = make_getter(settings, {"git": git}, update=True).get("x/a")

    assert first.action == FetchAction.CLONED
    assert second.action == FetchAction.UPDATED
    assert first.local_repository == second.local_repository
    assert os.listdir(tmp_path / "github.com" / "x") == ["a"]
    assert len(git.clones) == 1
    assert git.updates[0][0] == str(tmp_path / "github.com" / "x" / "a")


def test_same_destination_is_fetched_once_per_run(settings, git):
    getter = make_getter(settings, {"git": git}, update=True)

    first = getter.get("x/a")
    second = getter.get("https://github.com/x/a.git")

    assert first.action == FetchAction.CLONED
    assert second.action == FetchAction.SKIPPED
    assert len(git.clones) == 1
    assert git.updates == []


def test_update_without_detectable_vcs_fails(settings, git, tmp_path):
    (tmp_path / "github.com" / "x" / "a").mkdir(parents=True)
    getter = make_getter(settings, {"git": git}, update=True)

    with pytest.raises(FetchError, match="failed to detect VCS"):
        getter.get("x/a")


def test_vcs_override_skips_detection(settings, git):
    hg = FakeBackend(name="hg", marker=".hg")
    getter = make_getter(settings, {"git": git, "hg": hg}, vcs="hg")

    with patch("repoget.core.getter.detect_remote_vcs") as detect:
        result = getter.get("https://example.org/x/a")

    detect.assert_not_called()
    assert result.action == FetchAction.CLONED
    assert len(hg.clones) == 1
    assert git.clones == []


def test_clone_url_rewrite_moves_destination(settings, git, tmp_path):
    getter = make_getter(settings, {"git": git})

    result = getter.get("https://github.com/x/a/tree/main/docs")

    assert result.remote_url == "https://github.com/x/a"
    assert result.local_repository.full_path == str(tmp_path / "github.com" / "x" / "a")


def test_ssh_flag_rewrites_clone_url(settings, git):
    getter = make_getter(settings, {"git": git}, ssh=True)

    getter.get("x/a")

    assert git.clones[0][0] == "ssh://git@github.com/x/a"


def test_bare_clone_destination(settings, git, tmp_path):
    getter = make_getter(settings, {"git": git}, bare=True)

    result = getter.get("x/a")

    assert result.local_repository.full_path == str(tmp_path / "github.com" / "x" / "a.git")
    assert git.clones[0][2].bare is True


def test_collaborator_error_is_wrapped_with_target(settings):
    broken = FakeBackend(fail=True)
    getter = make_getter(settings, {"git": broken})

    with pytest.raises(FetchError) as exc_info:
        getter.get("x/a")

    assert exc_info.value.target == "x/a"
    assert isinstance(exc_info.value.original_error, VCSError)
    assert "exited with status 128" in str(exc_info.value)


def test_unparsable_target_is_wrapped(settings, git):
    getter = make_getter(settings, {"git": git})

    with pytest.raises(FetchError) as exc_info:
        getter.get("   ")

    assert exc_info.value.target == "   "


def test_rewritten_clone_url_reuses_existing_repository(settings, git, tmp_path):
    (tmp_path / "github.com" / "x" / "a" / ".git").mkdir(parents=True)
    getter = make_getter(settings, {"git": git})

    result = getter.get("https://github.com/x/a/tree/main")

    assert result.action == FetchAction.EXISTS
    assert result.local_repository.full_path == str(tmp_path / "github.com" / "x" / "a")
    assert git.clones == []

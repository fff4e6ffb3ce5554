import os
from unittest.mock import patch

import pytest

from repoget.services.settings import load_settings


@pytest.fixture
def fake_gitconfig():
    def install(values=None, lists=None, flags=None):
        values, lists, flags = values or {}, lists or {}, flags or {}
        mock = patcher.start()
        mock.get.side_effect = values.get
        mock.get_all.side_effect = lambda key, path=False: lists.get(key, [])
        mock.get_bool.side_effect = flags.get
        return mock

    patcher = patch("repoget.services.settings.gitconfig")
    yield install
    patcher.stop()


def test_roots_from_environment(tmp_path, fake_gitconfig):
    first, second = tmp_path / "a", tmp_path / "b"
    fake_gitconfig(lists={"repoget.root": ["/ignored"]})

    settings = load_settings({"REPOGET_ROOT": f"{first}{os.pathsep}{second}"})

    assert settings.roots == [str(first), str(second)]
    assert settings.primary_root == str(first)


def test_roots_from_git_config(tmp_path, fake_gitconfig):
    fake_gitconfig(lists={"repoget.root": [str(tmp_path)]})

    settings = load_settings({})

    assert settings.roots == [str(tmp_path)]


def test_default_root_and_user(fake_gitconfig):
    fake_gitconfig()

    settings = load_settings({"USER": "alice"})

    assert settings.roots == [os.path.abspath(os.path.expanduser(os.path.join("~", "repoget")))]
    assert settings.user == "alice"
    assert settings.complete_user is True
    assert settings.prefers_ssh is False


def test_git_config_overrides(fake_gitconfig):
    fake_gitconfig(
        values={"repoget.user": "bob", "repoget.protocol": "SSH"},
        flags={"repoget.completeUser": False},
    )

    settings = load_settings({"GITHUB_USER": "carol"})

    assert settings.user == "bob"
    assert settings.complete_user is False
    assert settings.prefers_ssh is True

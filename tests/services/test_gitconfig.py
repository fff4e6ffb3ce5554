from unittest.mock import MagicMock, patch

from repoget.services import gitconfig


def completed(returncode=0, stdout=""):
    return MagicMock(returncode=returncode, stdout=stdout)


def test_get_returns_last_value():
    with patch("repoget.services.gitconfig.subprocess.run", return_value=completed(stdout="a\nb\n")) as run:
        assert gitconfig.get("repoget.user") == "b"

    assert run.call_args[0][0] == ["git", "config", "--get", "repoget.user"]


def test_missing_key():
    with patch("repoget.services.gitconfig.subprocess.run", return_value=completed(returncode=1)):
        assert gitconfig.get("repoget.user") is None
        assert gitconfig.get_all("repoget.root") == []
        assert gitconfig.get_bool("repoget.completeUser") is None


def test_get_all_paths():
    with patch("repoget.services.gitconfig.subprocess.run", return_value=completed(stdout="/a\n/b\n")) as run:
        assert gitconfig.get_all("repoget.root", path=True) == ["/a", "/b"]

    assert run.call_args[0][0] == ["git", "config", "--path", "--get-all", "repoget.root"]


def test_get_bool():
    with patch("repoget.services.gitconfig.subprocess.run", return_value=completed(stdout="false\n")):
        assert gitconfig.get_bool("repoget.completeUser") is False


def test_git_not_installed():
    with patch("repoget.services.gitconfig.subprocess.run", side_effect=FileNotFoundError("git")):
        assert gitconfig.get("repoget.user") is None

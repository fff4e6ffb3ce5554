import pytest

from repoget.infrastructure.error_handler import URLParseError
from repoget.models import Settings
from repoget.services.url import parse_url, to_ssh


@pytest.fixture
def settings(tmp_path):
    return Settings(roots=[str(tmp_path)], user="me")


@pytest.mark.parametrize("ref, expected", [
    ("https://github.com/x/a", "https://github.com/x/a"),
    ("git://git.example.org/x/a.git", "git://git.example.org/x/a.git"),
    ("git@github.com:x/a.git", "ssh://git@github.com/x/a.git"),
    ("git@github.com:/x/a.git", "ssh://git@github.com/x/a.git"),
    ("github.com/x/a", "https://github.com/x/a"),
    ("x/a", "https://github.com/x/a"),
    ("/x/a", "https://github.com/x/a"),
    ("a", "https://github.com/me/a"),
])
def test_parse_url(settings, ref, expected):
    assert parse_url(ref, settings=settings).geturl() == expected


def test_bare_name_without_user_completion(tmp_path):
    settings = Settings(roots=[str(tmp_path)], user="me", complete_user=False)
    assert parse_url("a", settings=settings).geturl() == "https://github.com/a/a"


def test_bare_name_without_known_user(tmp_path):
    settings = Settings(roots=[str(tmp_path)], user=None)
    with pytest.raises(URLParseError, match="cannot determine the owner"):
        parse_url("a", settings=settings)


def test_ssh_rewrite(settings):
    assert parse_url("x/a", ssh=True, settings=settings).geturl() == "ssh://git@github.com/x/a"


def test_ssh_rewrite_keeps_user_and_port():
    from urllib.parse import urlsplit
    url = to_ssh(urlsplit("https://alice@git.example.org:2222/x/a"))
    assert url.geturl() == "ssh://alice@git.example.org:2222/x/a"


@pytest.mark.parametrize("ref", ["", "   ", "https://github.com:99999/x/a", "file:///tmp/x"])
def test_invalid_targets(settings, ref):
    with pytest.raises(URLParseError):
        parse_url(ref, settings=settings)

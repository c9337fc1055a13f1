"""Pytest configuration and fixtures."""

import json

import pytest

from quartz.models.config import PlatformConfig
from quartz.storage.config_store import ConfigStore
from quartz.utils.errors import GitCommandError
from quartz.utils.settings import ENV_OVERRIDES


class FakeGitRemote:
    """Records git calls instead of running git."""

    def __init__(self, on_remote: bool = False, push_fails: bool = False, query_fails: bool = False):
        self.on_remote = on_remote
        self.push_fails = push_fails
        self.query_fails = query_fails
        self.calls = []

    def is_branch_on_remote(self, branch):
        self.calls.append(("ls-remote", branch))
        if self.query_fails:
            raise GitCommandError("could not read from remote repository")
        return self.on_remote

    def push_branch(self, branch):
        self.calls.append(("push", branch))
        if self.push_fails:
            raise GitCommandError("rejected: non-fast-forward")
        self.on_remote = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep QUARTZ_* variables of the host out of the tests."""
    for var in list(ENV_OVERRIDES.values()) + ["QUARTZ_CONFIG_DIR", "QUARTZ_DEBUG"]:
        monkeypatch.delenv(var, raising=False)

@pytest.fixture
def config_dir(tmp_path):
    """Directory for the config file; nothing is created in it."""
    return tmp_path / ".quartz"


@pytest.fixture
def store(config_dir):
    """A store whose file does not exist yet."""
    return ConfigStore(config_dir)


@pytest.fixture
def initialized_store(store):
    """A store with a freshly initialized file."""
    store.init()
    return store


@pytest.fixture
def write_raw(config_dir):
    """Write raw text or a mapping straight to the config file."""
    def _write(content):
        config_dir.mkdir(parents=True, exist_ok=True)
        path = config_dir / "quartz.jsonc"
        if not isinstance(content, str):
            content = json.dumps(content, indent=2)
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def fake_git():
    return FakeGitRemote()


@pytest.fixture
def github_config():
    return PlatformConfig(type="github", token="ghp_test")


@pytest.fixture
def gitlab_config():
    return PlatformConfig(type="gitlab", token="glpat_test")


@pytest.fixture
def make_git():
    """Factory for recording git fakes with a chosen remote state."""
    return FakeGitRemote

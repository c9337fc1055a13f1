"""Unit tests for git remote helpers."""

import subprocess

import pytest

from quartz.git.remote import GitRemote, RepoInfo, parse_repo_info
from quartz.utils.errors import GitCommandError


@pytest.mark.parametrize("url,expected", [
    ("git@github.com:octocat/hello-world.git", RepoInfo("octocat", "hello-world", "github", "github.com")),
    ("https://github.com/octocat/hello-world", RepoInfo("octocat", "hello-world", "github", "github.com")),
    ("https://user@github.com/octocat/hello-world.git/", RepoInfo("octocat", "hello-world", "github", "github.com")),
    ("ssh://git@github.com/octocat/hello-world.git", RepoInfo("octocat", "hello-world", "github", "github.com")),
    ("git@gitlab.com:group/project.git", RepoInfo("group", "project", "gitlab", "gitlab.com")),
    ("https://gitlab.com/group/sub/project.git", RepoInfo("group/sub", "project", "gitlab", "gitlab.com")),
    ("git@gitlab.corp.net:team/app.git", RepoInfo("team", "app", "gitlab", "gitlab.corp.net")),
])
def test_parse_repo_info(url, expected):
    assert parse_repo_info(url) == expected


@pytest.mark.parametrize("url", [
    "https://bitbucket.org/team/repo.git",
    "https://gitlab.com/lonely",
    "not a url",
])
def test_parse_repo_info_unknown(url):
    assert parse_repo_info(url) is None


class _Recorder:
    """Stands in for subprocess.run."""

    def __init__(self, stdout="", fail_with=None):
        self.stdout = stdout
        self.fail_with = fail_with
        self.commands = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(cmd)
        if self.fail_with is not None:
            raise self.fail_with
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout, stderr="")


def test_is_branch_on_remote(monkeypatch, tmp_path):
    recorder = _Recorder(stdout="abc123\trefs/heads/feature\n")
    monkeypatch.setattr(subprocess, "run", recorder)

    assert GitRemote(tmp_path).is_branch_on_remote("feature") is True
    assert recorder.commands == [["git", "ls-remote", "--heads", "origin", "feature"]]


def test_branch_missing_on_remote(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", _Recorder(stdout=""))
    assert GitRemote(tmp_path).is_branch_on_remote("feature") is False


def test_push_branch_sets_upstream(monkeypatch, tmp_path):
    recorder = _Recorder()
    monkeypatch.setattr(subprocess, "run", recorder)

    GitRemote(tmp_path, remote="upstream").push_branch("feature")

    assert recorder.commands == [["git", "push", "-u", "upstream", "feature"]]


def test_git_failure_raises(monkeypatch, tmp_path):
    error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: not a git repository\n")
    monkeypatch.setattr(subprocess, "run", _Recorder(fail_with=error))

    with pytest.raises(GitCommandError, match="not a git repository"):
        GitRemote(tmp_path).get_remote_url()


def test_git_not_installed(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", _Recorder(fail_with=FileNotFoundError("git")))

    with pytest.raises(GitCommandError, match="not found"):
        GitRemote(tmp_path).get_current_branch()


def test_get_repo_info(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", _Recorder(stdout="git@github.com:octocat/hello-world.git\n"))
    assert GitRemote(tmp_path).get_repo_info().owner == "octocat"


def test_detached_head_has_no_branch(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", _Recorder(stdout="\n"))
    assert GitRemote(tmp_path).get_current_branch() is None

"""Git remote helpers"""
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..utils.errors import GitCommandError
from ..utils.logger import Logger

_GITHUB_PATTERNS = [
    re.compile(r'^git@github\.com:/?([^/]+)/([^/]+?)(?:\.git)?/?$'),
    re.compile(r'^(?:https?|ssh)://(?:[^@/]+@)?github\.com(?::\d+)?/([^/]+)/([^/]+?)(?:\.git)?/?$'),
]

_SCP_PATTERN = re.compile(r'^[^@/]+@([^:/]+):/?(.+?)(?:\.git)?/?$')
_URL_PATTERN = re.compile(r'^(?:https?|ssh)://(?:[^@/]+@)?([^/:]+)(?::\d+)?/(.+?)(?:\.git)?/?$')


@dataclass
class RepoInfo:
    """Owner, repository and platform parsed from a remote URL."""
    owner: str
    repo: str
    platform: str
    host: Optional[str] = None


def parse_repo_info(remote_url: str) -> Optional[RepoInfo]:
    """
    Parse a GitHub or GitLab remote URL.

    GitLab is recognised on any host containing ``gitlab`` so self-hosted
    instances work; nested GitLab groups end up in ``owner``.
    """
    url = remote_url.strip()

    for pattern in _GITHUB_PATTERNS:
        match = pattern.match(url)
        if match:
            return RepoInfo(match.group(1), match.group(2), "github", "github.com")

    match = _SCP_PATTERN.match(url) or _URL_PATTERN.match(url)
    if match and 'gitlab' in match.group(1):
        host, path = match.group(1), match.group(2)
        if '/' not in path:
            return None
        owner, repo = path.rsplit('/', 1)
        return RepoInfo(owner, repo, "gitlab", host)

    return None


class GitRemote:
    """Thin wrapper over the git executable for remote operations"""

    def __init__(self, repo_path: Union[str, Path] = ".", remote: str = "origin"):
        self.repo_path = Path(repo_path).absolute()
        self.remote = remote

    def _run(self, args: List[str]) -> str:
        cmd = ["git"] + args
        Logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True
            )
        except subprocess.CalledProcessError as e:
            raise GitCommandError(
                (e.stderr or "").strip() or f"git command failed: {' '.join(cmd)}"
            ) from e
        except FileNotFoundError as e:
            raise GitCommandError("git executable not found") from e
        return (result.stdout or "").strip()

    def get_current_branch(self) -> Optional[str]:
        """Get current git branch name"""
        return self._run(["branch", "--show-current"]) or None

    def get_remote_url(self) -> str:
        """Get the URL of the configured remote"""
        return self._run(["remote", "get-url", self.remote])

    def get_repo_info(self) -> Optional[RepoInfo]:
        """Parse owner/repo/platform from the remote URL"""
        return parse_repo_info(self.get_remote_url())

    def is_branch_on_remote(self, branch: str) -> bool:
        """Check if a branch exists on the remote"""
        output = self._run(["ls-remote", "--heads", self.remote, branch])
        return bool(output)

    def push_branch(self, branch: str) -> None:
        """Push a branch and set its upstream"""
        self._run(["push", "-u", self.remote, branch])

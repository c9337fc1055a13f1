"""Base platform strategy interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from ..git.remote import GitRemote
from ..models.config import PlatformConfig
from ..models.types import PullRequestResult
from ..utils.errors import (
    BranchPushError, GitCommandError, PlatformAPIError, UnsupportedPlatformError
)
from ..utils.logger import Logger


class PlatformStrategy(ABC):
    """
    Creates pull/merge requests on one hosting platform.

    The head branch is always pushed before the platform is asked to open a
    request against it.
    """

    platform_type: str = ""
    display_name: str = ""

    def __init__(self, config: PlatformConfig, git: Optional[GitRemote] = None):
        if config.type != self.platform_type:
            raise UnsupportedPlatformError(
                f"Invalid platform type for {type(self).__name__}: {config.type}"
            )
        self.config = config
        self.git = git or GitRemote()

    def is_branch_on_remote(self, branch: str) -> bool:
        """Check if a branch exists on the remote."""
        try:
            return self.git.is_branch_on_remote(branch)
        except GitCommandError as e:
            Logger.debug(f"Could not query remote for '{branch}': {e}")
            return False

    def push_branch_to_remote(self, branch: str) -> None:
        """Push a branch to the remote."""
        try:
            self.git.push_branch(branch)
        except GitCommandError as e:
            raise BranchPushError(f"Failed to push branch '{branch}': {e}") from e

    def create_pull_request(
            self,
            owner: str,
            repo: str,
            title: str,
            body: str,
            head: str,
            base: str
    ) -> PullRequestResult:
        """Push ``head`` if the remote lacks it, then open the request."""
        if not self.is_branch_on_remote(head):
            Logger.info(f"Pushing branch '{head}' to remote...")
            self.push_branch_to_remote(head)

        return self._submit_pull_request(owner, repo, title, body, head, base)

    @abstractmethod
    def _submit_pull_request(
            self,
            owner: str,
            repo: str,
            title: str,
            body: str,
            head: str,
            base: str
    ) -> PullRequestResult:
        """Make the actual API call."""
        pass

    def _post(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> requests.Response:
        """POST JSON, reporting transport failures as API errors."""
        Logger.debug(f"POST {url}")
        try:
            return requests.post(url, headers=headers, json=payload)
        except requests.RequestException as e:
            raise PlatformAPIError(f"{self.display_name} request failed: {e}") from e

    def _created(self, response: requests.Response, *fields: str) -> Dict[str, Any]:
        """The created object from a 2xx response, with the fields we need."""
        try:
            data = response.json()
        except ValueError as e:
            raise PlatformAPIError(
                f"{self.display_name} returned an unreadable response: {e}",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            data = {}
        missing = [f for f in fields if f not in data]
        if missing:
            raise PlatformAPIError(
                f"{self.display_name} response is missing {', '.join(missing)}",
                status_code=response.status_code,
            )
        return data

    @staticmethod
    def _error_body(response: requests.Response) -> Dict[str, Any]:
        """Parse the JSON error body, or an empty dict when there is none."""
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

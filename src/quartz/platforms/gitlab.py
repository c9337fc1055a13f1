"""GitLab merge request strategy."""

import json
from urllib.parse import quote

import requests

from ..constants import GITLAB_PUBLIC_URL
from ..models.types import PullRequestResult
from ..utils.errors import PlatformAPIError
from .strategy import PlatformStrategy


class GitLabStrategy(PlatformStrategy):
    """gitlab.com and self-hosted GitLab."""

    platform_type = "gitlab"
    display_name = "GitLab"

    @property
    def base_url(self) -> str:
        return (self.config.url or GITLAB_PUBLIC_URL).rstrip('/')

    def _submit_pull_request(self, owner, repo, title, body, head, base) -> PullRequestResult:
        project = quote(f"{owner}/{repo}", safe='')
        url = f"{self.base_url}/api/v4/projects/{project}/merge_requests"
        response = self._post(
            url,
            {
                "PRIVATE-TOKEN": self.config.token,
                "Content-Type": "application/json",
            },
            {
                "source_branch": head,
                "target_branch": base,
                "title": title,
                "description": body,
            },
        )

        if not response.ok:
            raise self._api_error(response)

        mr = self._created(response, "web_url", "iid")
        return PullRequestResult(url=mr["web_url"], id=mr["iid"])

    def _api_error(self, response: requests.Response) -> PlatformAPIError:
        error = self._error_body(response)

        # GitLab sends validation failures as a list or mapping under "message"
        detail = error.get("message") or response.reason
        if not isinstance(detail, str):
            detail = json.dumps(detail)

        message = f"GitLab API error ({response.status_code}): {detail}"
        if error.get("error"):
            message += f"\nDetails: {error['error']}"

        return PlatformAPIError(
            message,
            status_code=response.status_code,
            details=error.get("error"),
        )

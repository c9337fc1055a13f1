"""GitHub pull request strategy."""

import json

import requests

from ..constants import GITHUB_API_URL
from ..models.types import PullRequestResult
from ..utils.errors import PlatformAPIError
from .strategy import PlatformStrategy

_HINTS = {
    401: [
        "Token validation failed. Please check:",
        "   1. Token is valid and not expired",
        "   2. Token has \"repo\" scope for creating PRs",
        "   3. Token format is correct (should start with \"ghp_\" or \"github_pat_\")",
    ],
    403: [
        "Permission denied. Please ensure:",
        "   1. Token has sufficient permissions (requires \"repo\" scope)",
        "   2. You have write access to the repository",
    ],
    422: [
        "Validation failed. Common issues:",
        "   1. PR already exists for this branch",
        "   2. No commits between base and head branches",
        "   3. Head branch does not exist on remote",
    ],
}


class GitHubStrategy(PlatformStrategy):
    """GitHub and GitHub Enterprise."""

    platform_type = "github"
    display_name = "GitHub"

    @property
    def api_base(self) -> str:
        if self.config.url:
            return f"{self.config.url.rstrip('/')}/api/v3"
        return GITHUB_API_URL

    def _submit_pull_request(self, owner, repo, title, body, head, base) -> PullRequestResult:
        url = f"{self.api_base}/repos/{owner}/{repo}/pulls"
        response = self._post(
            url,
            {
                "Authorization": f"token {self.config.token}",
                "Accept": "application/vnd.github.v3+json",
                "Content-Type": "application/json",
            },
            {
                "title": title,
                "body": body,
                "head": head,
                "base": base,
            },
        )

        if not response.ok:
            raise self._api_error(response)

        pr = self._created(response, "html_url", "number")
        return PullRequestResult(url=pr["html_url"], number=pr["number"])

    def _api_error(self, response: requests.Response) -> PlatformAPIError:
        error = self._error_body(response)
        message = (
            f"GitHub API error ({response.status_code}): "
            f"{error.get('message') or response.reason}"
        )

        hints = _HINTS.get(response.status_code)
        if hints:
            message += "\n\n💡 " + "\n".join(hints)

        details = error.get("errors")
        if details:
            message += "\n\nAPI Details: " + json.dumps(details, indent=2)

        if error.get("documentation_url"):
            message += f"\n\nDocumentation: {error['documentation_url']}"

        return PlatformAPIError(message, status_code=response.status_code, details=details)

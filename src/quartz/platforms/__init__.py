"""Platform strategy factory."""

from typing import Dict, Optional, Type

from .strategy import PlatformStrategy
from .github import GitHubStrategy
from .gitlab import GitLabStrategy
from ..git.remote import GitRemote
from ..models.config import PlatformConfig
from ..utils.logger import Logger
from ..utils.errors import UnsupportedPlatformError

STRATEGIES: Dict[str, Type[PlatformStrategy]] = {
    "github": GitHubStrategy,
    "gitlab": GitLabStrategy,
}

# Host fragments checked in order against a remote URL
KNOWN_HOSTS = (
    ("github.com", "github"),
    ("gitlab.com", "gitlab"),
)


def create_strategy(config: PlatformConfig, git: Optional[GitRemote] = None) -> PlatformStrategy:
    """Create the strategy for a platform config."""
    strategy_cls = STRATEGIES.get(config.type)
    if strategy_cls is None:
        raise UnsupportedPlatformError(f"Unsupported platform type: {config.type}")

    Logger.debug(f"Creating {config.type} strategy for {config.url or 'public host'}")
    return strategy_cls(config, git)


def detect_platform_from_url(remote_url: str) -> Optional[str]:
    """Guess the platform type from a remote URL. No network access."""
    for fragment, platform_type in KNOWN_HOSTS:
        if fragment in remote_url:
            return platform_type
    return None


__all__ = [
    "PlatformStrategy",
    "GitHubStrategy",
    "GitLabStrategy",
    "STRATEGIES",
    "create_strategy",
    "detect_platform_from_url",
]

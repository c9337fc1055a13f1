"""
Quartz - AI-assisted git workflow CLI
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Named configuration profiles for AI and hosting-platform credentials, and
pull/merge request creation on GitHub and GitLab.

Basic usage:
    >>> from quartz import ConfigStore, create_strategy
    >>> store = ConfigStore(".quartz")
    >>> store.init()
    >>> platform = store.get_platform_config("github")
    >>> create_strategy(platform).create_pull_request(
    ...     "owner", "repo", "Add login", "Body", "feature/login", "main")

:license: MIT, see LICENSE for more details.
"""

__version__ = "1.5.0"

from .models.config import PlatformConfig, QuartzConfig
from .storage.config_store import ConfigStore
from .storage.migration import MigrationRunner
from .platforms import create_strategy, detect_platform_from_url

__all__ = [
    "ConfigStore",
    "MigrationRunner",
    "PlatformConfig",
    "QuartzConfig",
    "create_strategy",
    "detect_platform_from_url",
]

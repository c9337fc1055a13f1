from .config import (
    OpenAIConfig, PlatformConfig, LanguageConfig, QuartzConfig, Profile, PlatformType
)
from .types import (
    VersionMetadata, PullRequestResult, MigrationResult, Parsed, DefaultsUsed, ReadOutcome
)

__all__ = [
    "OpenAIConfig",
    "PlatformConfig",
    "PlatformType",
    "LanguageConfig",
    "QuartzConfig",
    "Profile",
    "VersionMetadata",
    "PullRequestResult",
    "MigrationResult",
    "Parsed",
    "DefaultsUsed",
    "ReadOutcome",
]

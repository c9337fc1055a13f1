"""Runtime settings for the Quartz CLI itself."""

import os
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass
from dotenv import load_dotenv

from ..constants import CONFIG_DIR_NAME, GITLAB_PUBLIC_URL
from ..models.config import PlatformConfig

# Load environment variables from .env file
load_dotenv()


@dataclass
class Settings:
    """Where the config store lives and how noisy the CLI is."""
    config_dir: Path
    debug: bool = False

    @classmethod
    def from_env(cls, use_global: bool = False, config_dir: Optional[str] = None) -> 'Settings':
        """Resolve settings from explicit arguments, then environment, then scope."""
        resolved = config_dir or os.getenv("QUARTZ_CONFIG_DIR")
        if resolved:
            path = Path(resolved).expanduser()
        elif use_global:
            path = Path.home() / CONFIG_DIR_NAME
        else:
            path = Path.cwd() / CONFIG_DIR_NAME

        return cls(
            config_dir=path,
            debug=os.getenv("QUARTZ_DEBUG", "false").lower() == "true",
        )


@dataclass
class CLIOverrides:
    """OpenAI settings given on the command line; they win over the file."""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.api_key or self.base_url or self.model)

    def apply(self, config):
        """Return a copy of ``config`` with the overrides applied."""
        if self.is_empty():
            return config

        updated = config.model_copy(deep=True)
        if self.api_key:
            updated.openai.api_key = self.api_key
        if self.base_url:
            updated.openai.base_url = self.base_url
        if self.model:
            updated.openai.model = self.model
        return updated


# Setting name -> environment variable, for CI/CD runs without a config file edit
ENV_OVERRIDES = {
    'openai_api_key': "QUARTZ_OPENAI_API_KEY",
    'openai_base_url': "QUARTZ_OPENAI_BASE_URL",
    'openai_model': "QUARTZ_OPENAI_MODEL",
    'github_token': "QUARTZ_GITHUB_TOKEN",
    'gitlab_token': "QUARTZ_GITLAB_TOKEN",
    'gitlab_url': "QUARTZ_GITLAB_URL",
    'ui_language': "QUARTZ_LANG",
    'prompt_language': "QUARTZ_PROMPT_LANG",
}


@dataclass
class EnvOverrides:
    """
    Profile settings taken from ``QUARTZ_*`` environment variables.

    They win over the config file and are never written back to it.
    """
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: Optional[str] = None
    github_token: Optional[str] = None
    gitlab_token: Optional[str] = None
    gitlab_url: Optional[str] = None
    ui_language: Optional[str] = None
    prompt_language: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'EnvOverrides':
        """Create overrides from environment variables."""
        return cls(**{name: os.getenv(var) or None for name, var in ENV_OVERRIDES.items()})

    def active(self) -> List[str]:
        """Names of the environment variables that are in effect."""
        return [var for name, var in ENV_OVERRIDES.items() if getattr(self, name)]

    def apply(self, config):
        """Return a copy of ``config`` with the overrides applied."""
        if not self.active():
            return config

        updated = config.model_copy(deep=True)
        if self.openai_api_key:
            updated.openai.api_key = self.openai_api_key
        if self.openai_base_url:
            updated.openai.base_url = self.openai_base_url
        if self.openai_model:
            updated.openai.model = self.openai_model
        if self.ui_language:
            updated.language.ui = self.ui_language
        if self.prompt_language:
            updated.language.prompt = self.prompt_language

        if self.github_token:
            _override_platform(updated, "github", self.github_token)
        if self.gitlab_token or self.gitlab_url:
            _override_platform(updated, "gitlab", self.gitlab_token, self.gitlab_url)
        return updated


def _override_platform(config, platform_type: str, token: Optional[str], url: Optional[str] = None) -> None:
    existing = config.find_platform(platform_type)
    if existing is not None:
        if token:
            existing.token = token
        if url:
            existing.url = url
    elif token:
        # a url-only override has nothing to attach to
        config.platforms.append(
            PlatformConfig(type=platform_type, url=url or _public_url(platform_type), token=token)
        )


def _public_url(platform_type: str) -> Optional[str]:
    return GITLAB_PUBLIC_URL if platform_type == "gitlab" else None

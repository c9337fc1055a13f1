"""Configuration models stored in the Quartz config file."""

from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..constants import (
    DEFAULT_LANGUAGE, DEFAULT_OPENAI_BASE_URL, DEFAULT_OPENAI_MODEL
)
from ..utils.logger import Logger

PlatformType = Literal["github", "gitlab"]


class OpenAIConfig(BaseModel):
    """Credentials and endpoint for the AI backend."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field("", alias="apiKey")
    base_url: str = Field(DEFAULT_OPENAI_BASE_URL, alias="baseUrl")
    model: str = DEFAULT_OPENAI_MODEL


class PlatformConfig(BaseModel):
    """
    Credentials for one hosting platform.

    ``url`` is only set for self-hosted or enterprise instances; ``None``
    means the public host.
    """

    type: PlatformType
    url: Optional[str] = None
    token: str

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class LanguageConfig(BaseModel):
    """Interface language and AI output language, set independently."""

    ui: str = DEFAULT_LANGUAGE
    prompt: str = DEFAULT_LANGUAGE


class QuartzConfig(BaseModel):
    """The content of a single profile."""

    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    platforms: List[PlatformConfig] = Field(default_factory=list)
    language: LanguageConfig = Field(default_factory=LanguageConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk representation."""
        return {
            'openai': self.openai.model_dump(by_alias=True),
            'platforms': [p.to_dict() for p in self.platforms],
            'language': self.language.model_dump(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QuartzConfig':
        """Create from dictionary, failing on invalid content."""
        return cls.model_validate(data)

    @classmethod
    def from_raw(cls, data: Any) -> 'QuartzConfig':
        """
        Build a config from whatever was found on disk.

        Missing or null fields take their defaults and platform entries that
        do not validate are dropped, so a hand-edited file still loads.
        """
        if not isinstance(data, dict):
            Logger.warning("Invalid config structure, using default config")
            return cls()

        openai = _section(data.get('openai'), OpenAIConfig, 'openai')
        language = _section(data.get('language'), LanguageConfig, 'language')

        raw_platforms = data.get('platforms')
        platforms = []
        if raw_platforms is None:
            raw_platforms = []
        elif not isinstance(raw_platforms, list):
            Logger.warning("Invalid platforms configuration, using empty list")
            raw_platforms = []

        for item in raw_platforms:
            try:
                platforms.append(PlatformConfig.model_validate(item))
            except ValidationError:
                Logger.warning(f"Dropping invalid platform entry: {item!r}")

        return cls(openai=openai, platforms=platforms, language=language)

    # Platform registry

    def find_platform(self, platform_type: str) -> Optional[PlatformConfig]:
        """Return the first platform entry of the given type."""
        for platform in self.platforms:
            if platform.type == platform_type:
                return platform
        return None

    def upsert_platform(self, platform: PlatformConfig) -> bool:
        """
        Replace the entry with the same (type, url) or append a new one.

        Returns True when an existing entry was replaced.
        """
        for i, existing in enumerate(self.platforms):
            if existing.type == platform.type and existing.url == platform.url:
                self.platforms[i] = platform
                return True

        self.platforms.append(platform)
        return False

    def remove_platform(self, platform_type: str, url: Optional[str] = None) -> int:
        """Remove entries of a type (and url, when given). Returns the count removed."""
        before = len(self.platforms)
        self.platforms = [
            p for p in self.platforms
            if p.type != platform_type or (url is not None and p.url != url)
        ]
        return before - len(self.platforms)


class Profile(BaseModel):
    """A named, addressable configuration."""

    name: str
    config: QuartzConfig = Field(default_factory=QuartzConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'config': self.config.to_dict()}


def _section(value: Any, model, name: str):
    if not isinstance(value, dict):
        if value is not None:
            Logger.warning(f"Invalid {name} configuration, using defaults")
        return model()

    cleaned = {k: v for k, v in value.items() if v is not None}
    try:
        return model.model_validate(cleaned)
    except ValidationError as e:
        Logger.warning(f"Invalid {name} configuration ({e.error_count()} errors), using defaults")
        return model()

"""Profile-aware store for the Quartz config file."""

import copy
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any, Union

from pydantic import ValidationError

from .. import __version__
from ..constants import (
    CONFIG_FILE_NAME, CURRENT_CONFIG_VERSION, DEFAULT_PROFILE, LEGACY_CONFIG_VERSION,
    METADATA_KEY,
)
from ..models.config import PlatformConfig, Profile, QuartzConfig
from ..models.types import (
    MISSING, DefaultsUsed, Parsed, ReadOutcome, VersionMetadata
)
from ..utils.errors import (
    ConfigImportError, ConfigParseError, DefaultProfileProtectedError,
    InvalidProfileNameError, ProfileExistsError, ProfileNotFoundError,
    StorageError,
)
from ..utils.logger import Logger
from .serialization import Serializer


class ConfigStore:
    """
    Reads and writes the Quartz config file.

    The file maps profile names to ``{name, config}`` entries and carries
    one ``_metadata`` entry with the schema version and the active profile.
    A ``default`` profile always exists.

    Every write re-reads the whole file, changes one entry and rewrites the
    whole file. There is no cross-process lock: two CLI invocations writing
    at the same time resolve as last writer wins.

    The parsed file is cached per instance. Writes invalidate the cache and
    ``clear_cache()`` forces the next read to go back to disk.
    """

    def __init__(
        self,
        config_dir: Union[str, Path],
        file_name: str = CONFIG_FILE_NAME,
        cli_version: Optional[str] = None
    ):
        self.config_dir = Path(config_dir)
        self.config_path = self.config_dir / file_name
        self.cli_version = cli_version or __version__
        self.serializer = Serializer()
        self._cache: Optional[ReadOutcome] = None

    # ==================== File level ====================

    def exists(self) -> bool:
        """Check if the config file exists."""
        return self.config_path.exists()

    def init(self) -> bool:
        """Create the config directory and file. Returns False if it already existed."""
        if self.exists():
            Logger.info(f"Config already initialized at {self.config_path}")
            return False

        self.write_file({DEFAULT_PROFILE: Profile(name=DEFAULT_PROFILE).to_dict()})
        self.initialize_version_metadata()
        Logger.debug(f"Created config file {self.config_path}")
        return True

    def load(self) -> ReadOutcome:
        """
        Load the whole config file.

        Returns ``Parsed`` when the file was read, or ``DefaultsUsed`` with the
        reason when it is missing or unreadable. Never raises and never writes.
        """
        if self._cache is not None:
            return self._cache

        if not self.config_path.exists():
            self._cache = DefaultsUsed(self._default_file(), self.config_path, MISSING)
            return self._cache

        try:
            data = self.serializer.from_jsonc(self.serializer.read_text(self.config_path))
        except (ConfigParseError, OSError) as e:
            self._cache = DefaultsUsed(self._default_file(), self.config_path, str(e))
            return self._cache

        if not isinstance(data.get(DEFAULT_PROFILE), dict):
            data[DEFAULT_PROFILE] = Profile(name=DEFAULT_PROFILE).to_dict()

        self._cache = Parsed(data, self.config_path)
        return self._cache

    def write_file(self, data: Dict[str, Any]) -> None:
        """Serialize the whole file to disk."""
        metadata = data.get(METADATA_KEY)
        if isinstance(metadata, dict):
            metadata['updatedAt'] = _now()

        try:
            self.serializer.write_text(self.serializer.to_json(data), self.config_path)
        except OSError as e:
            Logger.error(f"Failed to write config file: {e}")
            raise StorageError(f"Failed to write config file {self.config_path}: {e}") from e
        finally:
            self.clear_cache()

    def clear_cache(self) -> None:
        """Clear in-memory cache."""
        self._cache = None

    def _snapshot(self) -> Dict[str, Any]:
        """Mutable copy of the file to base a write on."""
        outcome = self.load()
        if isinstance(outcome, DefaultsUsed) and not outcome.missing:
            Logger.warning(
                f"Existing config at {outcome.path} is unreadable ({outcome.reason}); "
                "it will be replaced"
            )
        return copy.deepcopy(outcome.data)

    def _default_file(self) -> Dict[str, Any]:
        return {
            METADATA_KEY: self._new_metadata().to_dict(),
            DEFAULT_PROFILE: Profile(name=DEFAULT_PROFILE).to_dict(),
        }

    # ==================== Profile configs ====================

    def read_config(self, profile_name: Optional[str] = None) -> QuartzConfig:
        """
        Read the config of a profile.

        Without a name the active profile is used. A missing profile, file or
        an unparseable file yields the default config.
        """
        outcome = self.load()
        if isinstance(outcome, DefaultsUsed) and not outcome.missing:
            Logger.warning(
                f"Failed to parse {outcome.path}: {outcome.reason}. Using default config."
            )

        target = profile_name or self.get_active_profile()
        entry = outcome.data.get(target)
        if target == METADATA_KEY or not isinstance(entry, dict):
            Logger.debug(f"Profile '{target}' not found, using default config")
            return QuartzConfig()

        return QuartzConfig.from_raw(entry.get('config'))

    def write_config(self, config: QuartzConfig, profile_name: Optional[str] = None) -> str:
        """Insert or replace a profile's config. Returns the profile name written."""
        data = self._snapshot()
        target = profile_name or self._active_from(data)
        _validate_profile_name(target)

        data[target] = Profile(name=target, config=config).to_dict()
        self.write_file(data)
        return target

    # ==================== Active profile ====================

    def get_active_profile(self) -> str:
        """Get the active profile name, falling back to ``default``."""
        return self._active_from(self.load().data)

    def set_active_profile(self, profile_name: str) -> None:
        """Make an existing profile the active one."""
        if not self.profile_exists(profile_name):
            raise ProfileNotFoundError(profile_name)

        data = self._snapshot()
        metadata = data.get(METADATA_KEY)
        if not isinstance(metadata, dict):
            # stamp as legacy so pending migrations still run
            metadata = self._new_metadata(LEGACY_CONFIG_VERSION).to_dict()
            data[METADATA_KEY] = metadata
        metadata['activeProfile'] = profile_name
        self.write_file(data)

    @staticmethod
    def _active_from(data: Dict[str, Any]) -> str:
        metadata = data.get(METADATA_KEY)
        active = metadata.get('activeProfile') if isinstance(metadata, dict) else None
        if not active:
            return DEFAULT_PROFILE
        if active == METADATA_KEY or not isinstance(data.get(active), dict):
            Logger.warning(f"Active profile '{active}' does not exist, using '{DEFAULT_PROFILE}'")
            return DEFAULT_PROFILE
        return active

    # ==================== Profile management ====================

    def list_profiles(self) -> List[str]:
        """Get all profile names."""
        return [name for name in self.load().data if name != METADATA_KEY]

    def profile_exists(self, profile_name: str) -> bool:
        """Check if a profile exists."""
        return profile_name != METADATA_KEY and profile_name in self.load().data

    def create_profile(self, profile_name: str, from_profile: Optional[str] = None) -> None:
        """Create a new profile, empty or seeded from another profile."""
        _validate_profile_name(profile_name)
        if self.profile_exists(profile_name):
            raise ProfileExistsError(profile_name)

        if from_profile:
            if not self.profile_exists(from_profile):
                raise ProfileNotFoundError(from_profile)
            config = self.read_config(from_profile)
        else:
            config = QuartzConfig()

        self.write_config(config, profile_name)

    def copy_profile(self, source: str, target: str) -> None:
        """Copy a profile's config under a new name."""
        _validate_profile_name(target)
        if not self.profile_exists(source):
            raise ProfileNotFoundError(source, f"Source profile '{source}' does not exist")
        if self.profile_exists(target):
            raise ProfileExistsError(target)

        data = self._snapshot()
        data[target] = {
            'name': target,
            'config': copy.deepcopy(data[source].get('config')),
        }
        self.write_file(data)

    def rename_profile(self, old_name: str, new_name: str) -> None:
        """Rename a profile; the active pointer follows it."""
        if old_name == DEFAULT_PROFILE:
            raise DefaultProfileProtectedError("Cannot rename default profile")
        _validate_profile_name(new_name)
        if not self.profile_exists(old_name):
            raise ProfileNotFoundError(old_name)
        if self.profile_exists(new_name):
            raise ProfileExistsError(new_name)

        data = self._snapshot()
        profile = data.pop(old_name)
        profile['name'] = new_name
        data[new_name] = profile

        metadata = data.get(METADATA_KEY)
        if isinstance(metadata, dict) and metadata.get('activeProfile') == old_name:
            metadata['activeProfile'] = new_name

        self.write_file(data)

    def delete_profile(self, profile_name: str) -> None:
        """
        Delete a profile.

        Deleting the active profile makes ``default`` active again.
        """
        if profile_name == DEFAULT_PROFILE:
            raise DefaultProfileProtectedError("Cannot delete default profile")
        if not self.profile_exists(profile_name):
            raise ProfileNotFoundError(profile_name)

        data = self._snapshot()
        del data[profile_name]

        metadata = data.get(METADATA_KEY)
        if isinstance(metadata, dict) and metadata.get('activeProfile') == profile_name:
            metadata['activeProfile'] = DEFAULT_PROFILE
            Logger.info(f"Deleted active profile '{profile_name}', switched to '{DEFAULT_PROFILE}'")

        self.write_file(data)

    # ==================== Field setters ====================

    def set_openai(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        profile_name: Optional[str] = None
    ) -> None:
        """Update the OpenAI fields that are given."""
        config = self.read_config(profile_name)
        if api_key is not None:
            config.openai.api_key = api_key
        if base_url is not None:
            config.openai.base_url = base_url
        if model is not None:
            config.openai.model = model
        self.write_config(config, profile_name)

    def set_language(
        self,
        ui: Optional[str] = None,
        prompt: Optional[str] = None,
        profile_name: Optional[str] = None
    ) -> None:
        """Update the UI and/or prompt language."""
        config = self.read_config(profile_name)
        if ui is not None:
            config.language.ui = ui
        if prompt is not None:
            config.language.prompt = prompt
        self.write_config(config, profile_name)

    # ==================== Platform registry ====================

    def get_platform_configs(self, profile_name: Optional[str] = None) -> List[PlatformConfig]:
        """Get all platform entries of a profile."""
        return self.read_config(profile_name).platforms

    def get_platform_config(
        self,
        platform_type: str,
        profile_name: Optional[str] = None
    ) -> Optional[PlatformConfig]:
        """Get the first platform entry of a type."""
        return self.read_config(profile_name).find_platform(platform_type)

    def upsert_platform_config(
        self,
        platform: PlatformConfig,
        profile_name: Optional[str] = None
    ) -> bool:
        """Add or replace a platform entry. Returns True when one was replaced."""
        config = self.read_config(profile_name)
        replaced = config.upsert_platform(platform)
        self.write_config(config, profile_name)
        return replaced

    def remove_platform_config(
        self,
        platform_type: str,
        url: Optional[str] = None,
        profile_name: Optional[str] = None
    ) -> int:
        """Remove platform entries. Returns how many were removed."""
        config = self.read_config(profile_name)
        removed = config.remove_platform(platform_type, url)
        self.write_config(config, profile_name)
        return removed

    # ==================== Export / import ====================

    def export_config(self, profile_name: Optional[str] = None, fmt: str = "json") -> str:
        """Export a profile's config as JSON or YAML text."""
        data = self.read_config(profile_name).to_dict()
        if fmt == "json":
            return self.serializer.to_json(data)
        if fmt == "yaml":
            return self.serializer.to_yaml(data)
        raise ValueError(f"Unknown export format: {fmt}")

    def import_config(self, text: str, profile_name: Optional[str] = None) -> str:
        """Import exported config text into a profile. Returns the profile name written."""
        try:
            data = self.serializer.from_jsonc(text)
        except ConfigParseError as e:
            raise ConfigImportError(f"Failed to import config: {e}") from e

        try:
            config = QuartzConfig.from_dict(data)
        except ValidationError as e:
            raise ConfigImportError(f"Failed to import config: {e}") from e

        return self.write_config(config, profile_name)

    # ==================== Version metadata ====================

    def read_version_metadata(self) -> Optional[VersionMetadata]:
        """Read the version stamp, or None for files written before it existed."""
        if not self.exists():
            return None

        outcome = self.load()
        if isinstance(outcome, DefaultsUsed):
            return None

        metadata = outcome.data.get(METADATA_KEY)
        if not isinstance(metadata, dict):
            return None

        try:
            return VersionMetadata.model_validate(metadata)
        except ValidationError:
            Logger.warning(f"Ignoring malformed {METADATA_KEY} in {self.config_path}")
            return None

    def write_version_metadata(self, metadata: VersionMetadata) -> None:
        """Replace the version stamp."""
        data = self._snapshot()
        data[METADATA_KEY] = metadata.to_dict()
        self.write_file(data)

    def initialize_version_metadata(self) -> VersionMetadata:
        """Stamp the file with the current schema and CLI versions."""
        metadata = self._new_metadata()
        self.write_version_metadata(metadata)
        return metadata

    def _new_metadata(self, config_version: str = CURRENT_CONFIG_VERSION) -> VersionMetadata:
        return VersionMetadata(
            config_version=config_version,
            cli_version=self.cli_version,
            updated_at=_now(),
            active_profile=DEFAULT_PROFILE,
        )


def _validate_profile_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidProfileNameError("Profile name must not be empty")
    if name == METADATA_KEY:
        raise InvalidProfileNameError(f"'{METADATA_KEY}' is reserved and cannot be a profile name")


def _now() -> str:
    return datetime.now().isoformat()

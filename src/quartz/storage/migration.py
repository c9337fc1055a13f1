"""Versioned migrations of the config file schema."""

import copy
from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional

from ..constants import DEFAULT_PROFILE, LEGACY_CONFIG_VERSION, METADATA_KEY
from ..models.types import DefaultsUsed, MigrationResult, VersionMetadata
from ..utils.errors import MigrationError, StorageError
from ..utils.logger import Logger
from .config_store import ConfigStore

UNKNOWN_VERSION = "unknown"

MigrationFunction = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass
class Migration:
    """
    One schema upgrade step.

    ``migrate`` receives the whole config file (profiles and ``_metadata``)
    and returns the upgraded file. It must not mutate its input, must not
    raise on a well-formed file and must be safe to run twice.
    """
    version: str
    description: str
    migrate: MigrationFunction


def compare_versions(a: str, b: str) -> int:
    """Compare two ``major.minor.patch`` versions. Returns -1, 0 or 1."""
    a_parts = _parse_version(a)
    b_parts = _parse_version(b)
    if a_parts < b_parts:
        return -1
    if a_parts > b_parts:
        return 1
    return 0


def _parse_version(version: str) -> tuple:
    parts = version.split('.')
    try:
        numbers = [int(p) for p in parts[:3]]
    except ValueError:
        raise MigrationError(f"Invalid version: {version!r}")
    return tuple(numbers + [0] * (3 - len(numbers)))


class MigrationRunner:
    """Applies pending migrations to a ConfigStore, all or nothing."""

    def __init__(
        self,
        store: ConfigStore,
        migrations: Optional[List[Migration]] = None,
        target_version: Optional[str] = None
    ):
        if migrations is None:
            from .migrations import default_migrations
            migrations = default_migrations()

        self.store = store
        self.migrations = sorted(
            migrations,
            key=cmp_to_key(lambda x, y: compare_versions(x.version, y.version))
        )
        self.target_version = target_version or store.cli_version

    def current_version(self) -> Optional[str]:
        """Schema version of the file on disk, or None when there is no readable file."""
        outcome = self.store.load()
        if isinstance(outcome, DefaultsUsed):
            return None

        metadata = self.store.read_version_metadata()
        return metadata.config_version if metadata else LEGACY_CONFIG_VERSION

    def pending(self, from_version: str) -> List[Migration]:
        """Migrations after ``from_version`` and up to the target version, in order."""
        return [
            m for m in self.migrations
            if compare_versions(from_version, m.version) < 0
            and compare_versions(m.version, self.target_version) <= 0
        ]

    def needs_migration(self) -> bool:
        current = self.current_version()
        if current is None:
            return False
        try:
            return bool(self.pending(current))
        except MigrationError as e:
            Logger.warning(f"Cannot tell whether config needs migrating: {e}")
            return False

    def run(self) -> MigrationResult:
        """
        Apply every pending migration.

        The file is written once, after all steps succeed. If a step fails the
        chain stops and the file on disk is left untouched.
        """
        outcome = self.store.load()
        if isinstance(outcome, DefaultsUsed):
            errors = None
            if not outcome.missing:
                errors = [f"Config file is unreadable: {outcome.reason}"]
            return self._result(False, UNKNOWN_VERSION, errors=errors)

        from_version = self.current_version()
        try:
            to_apply = self.pending(from_version)
        except MigrationError as e:
            message = f"Cannot migrate config from version {from_version!r}: {e}"
            Logger.error(message)
            return self._result(False, from_version, errors=[message])

        if not to_apply:
            Logger.debug(f"Config is up to date at {from_version}")
            return self._result(False, from_version)

        data = copy.deepcopy(outcome.data)
        applied = []
        for migration in to_apply:
            Logger.info(f"Applying migration: {migration.version} - {migration.description}")
            try:
                data = migration.migrate(data)
                if not isinstance(data, dict):
                    raise MigrationError(f"returned {type(data).__name__} instead of a mapping")
            except Exception as e:
                message = f"Failed to apply migration {migration.version}: {e}"
                Logger.error(message)
                return self._result(False, from_version, errors=[message])
            applied.append(migration.version)

        previous = data.get(METADATA_KEY)
        active = previous.get('activeProfile') if isinstance(previous, dict) else None
        data[METADATA_KEY] = VersionMetadata(
            config_version=self.target_version,
            cli_version=self.store.cli_version,
            updated_at=datetime.now().isoformat(),
            active_profile=active or DEFAULT_PROFILE,
        ).to_dict()

        try:
            self.store.write_file(data)
        except StorageError as e:
            return self._result(False, from_version, errors=[f"Failed to write migrated config: {e}"])

        Logger.info(f"Migrated config {from_version} → {self.target_version}")
        return self._result(True, from_version, applied)

    def _result(
        self,
        migrated: bool,
        from_version: str,
        applied: Optional[List[str]] = None,
        errors: Optional[List[str]] = None
    ) -> MigrationResult:
        return MigrationResult(
            migrated=migrated,
            from_version=from_version,
            to_version=self.target_version,
            applied_migrations=applied or [],
            errors=errors,
        )

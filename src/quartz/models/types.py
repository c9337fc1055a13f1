"""Result and metadata types shared across Quartz."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field


class VersionMetadata(BaseModel):
    """Schema-version stamp kept under ``_metadata`` in the config file."""

    model_config = ConfigDict(populate_by_name=True)

    config_version: str = Field(..., alias="configVersion")
    cli_version: str = Field(..., alias="cliVersion")
    updated_at: str = Field(..., alias="updatedAt")
    active_profile: Optional[str] = Field(None, alias="activeProfile")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PullRequestResult(BaseModel):
    """A created pull request (GitHub) or merge request (GitLab)."""

    url: str
    number: Optional[int] = None
    id: Optional[int] = None

    @property
    def reference(self) -> str:
        if self.number is not None:
            return f"#{self.number}"
        if self.id is not None:
            return f"!{self.id}"
        return self.url


class MigrationResult(BaseModel):
    """Outcome of running the migration pipeline."""

    model_config = ConfigDict(populate_by_name=True)

    migrated: bool
    from_version: str = Field(..., alias="fromVersion")
    to_version: str = Field(..., alias="toVersion")
    applied_migrations: List[str] = Field(default_factory=list, alias="appliedMigrations")
    errors: Optional[List[str]] = None

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class Parsed:
    """The config file was read and parsed."""
    data: Dict[str, Any]
    path: Path


@dataclass
class DefaultsUsed:
    """The config file was missing or unreadable; ``data`` holds defaults."""
    data: Dict[str, Any]
    path: Path
    reason: str

    @property
    def missing(self) -> bool:
        return self.reason == MISSING


MISSING = "missing"

ReadOutcome = Union[Parsed, DefaultsUsed]

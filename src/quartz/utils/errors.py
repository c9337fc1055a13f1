"""Custom exceptions for Quartz."""

from typing import Any, Optional


class QuartzError(Exception):
    """Base exception for all Quartz errors."""
    pass

class ConfigParseError(QuartzError):
    """Raised when the config file cannot be parsed."""
    pass

class ConfigImportError(QuartzError):
    """Raised when imported configuration text is invalid."""
    pass

class ProfileNotFoundError(QuartzError):
    """Raised when a named profile does not exist."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Profile '{name}' does not exist")

class ProfileExistsError(QuartzError):
    """Raised when a profile name is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Profile '{name}' already exists")

class DefaultProfileProtectedError(QuartzError):
    """Raised on any attempt to delete or rename the default profile."""
    pass

class UnsupportedPlatformError(QuartzError):
    """Raised for platform types without a strategy."""
    pass

class PlatformAPIError(QuartzError):
    """Raised when a hosting platform call fails or returns an unusable answer."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details

class BranchPushError(QuartzError):
    """Raised when pushing a branch to the remote fails."""
    pass

class GitCommandError(QuartzError):
    """Raised when a git command exits with a non-zero status."""
    pass

class MigrationError(QuartzError):
    """Raised for config migration errors."""
    pass

class StorageError(QuartzError):
    """Raised when the config file cannot be written."""
    pass

class InvalidProfileNameError(QuartzError):
    """Raised for profile names that cannot be stored."""
    pass

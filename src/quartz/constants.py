"""Shared constants for Quartz."""

CONFIG_DIR_NAME = ".quartz"
CONFIG_FILE_NAME = "quartz.jsonc"
DEFAULT_PROFILE = "default"
METADATA_KEY = "_metadata"

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-5"
DEFAULT_LANGUAGE = "en"

GITHUB_API_URL = "https://api.github.com"
GITLAB_PUBLIC_URL = "https://gitlab.com"

# Schema version assumed for a file that predates version metadata
LEGACY_CONFIG_VERSION = "0.0.0"

# Schema version stamped into newly created config files
CURRENT_CONFIG_VERSION = "1.5.0"

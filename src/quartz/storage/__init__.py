from .config_store import ConfigStore
from .migration import Migration, MigrationRunner, compare_versions
from .serialization import Serializer

__all__ = [
    "ConfigStore",
    "Migration",
    "MigrationRunner",
    "Serializer",
    "compare_versions",
]

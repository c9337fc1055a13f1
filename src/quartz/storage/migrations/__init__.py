"""Built-in config migrations."""

from typing import List

from ..migration import Migration
from .v1_2_0 import migration_1_2_0
from .v1_5_0 import migration_1_5_0


def default_migrations() -> List[Migration]:
    """All built-in migrations. Add new ones here."""
    return [
        migration_1_2_0,
        migration_1_5_0,
    ]

from typing import Any, Dict, Iterator

from ...constants import METADATA_KEY


def iter_profile_configs(data: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """Yield the ``config`` mapping of every profile in a config file."""
    for key, profile in data.items():
        if key == METADATA_KEY or not isinstance(profile, dict):
            continue
        config = profile.get('config')
        if isinstance(config, dict):
            yield config

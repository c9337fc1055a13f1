"""Normalize platform entries and fill required fields."""

import copy
from typing import Any, Dict

from ...constants import (
    DEFAULT_OPENAI_BASE_URL, DEFAULT_OPENAI_MODEL, GITLAB_PUBLIC_URL
)
from ..migration import Migration
from ._common import iter_profile_configs


def normalize_platforms(config: Dict[str, Any]) -> Dict[str, Any]:
    data = copy.deepcopy(config)

    for profile_config in iter_profile_configs(data):
        platforms = profile_config.get('platforms')
        if not isinstance(platforms, list):
            platforms = []
        profile_config['platforms'] = [_normalize_platform(p) for p in platforms]

        openai = profile_config.get('openai')
        if isinstance(openai, dict):
            if not openai.get('apiKey'):
                openai['apiKey'] = ''
            if not openai.get('baseUrl'):
                openai['baseUrl'] = DEFAULT_OPENAI_BASE_URL
            if not openai.get('model'):
                openai['model'] = DEFAULT_OPENAI_MODEL

    return data


def _normalize_platform(platform: Any) -> Any:
    if not isinstance(platform, dict):
        return platform

    url = platform.get('url')
    if isinstance(url, str):
        url = url.strip().rstrip('/')
        if url:
            platform['url'] = url
        else:
            del platform['url']

    # A GitHub url means an Enterprise host, so only GitLab gets its public default
    if platform.get('type') == 'gitlab' and not platform.get('url'):
        platform['url'] = GITLAB_PUBLIC_URL

    if not platform.get('token'):
        platform['token'] = ''

    return platform


migration_1_5_0 = Migration(
    version="1.5.0",
    description="Normalize platform URLs and ensure required fields",
    migrate=normalize_platforms,
)

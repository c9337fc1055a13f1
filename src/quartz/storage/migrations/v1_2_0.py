"""Split the single ``language`` string into UI and prompt languages."""

import copy
from typing import Any, Dict

from ...constants import DEFAULT_LANGUAGE
from ..migration import Migration
from ._common import iter_profile_configs


def split_language(config: Dict[str, Any]) -> Dict[str, Any]:
    data = copy.deepcopy(config)

    for profile_config in iter_profile_configs(data):
        language = profile_config.get('language')

        if isinstance(language, str):
            profile_config['language'] = {'ui': language, 'prompt': language}
        elif isinstance(language, dict):
            if not language.get('ui'):
                language['ui'] = DEFAULT_LANGUAGE
            if not language.get('prompt'):
                language['prompt'] = DEFAULT_LANGUAGE

    return data


migration_1_2_0 = Migration(
    version="1.2.0",
    description="Add separate UI and prompt language configuration",
    migrate=split_language,
)

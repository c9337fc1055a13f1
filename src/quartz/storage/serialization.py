"""Serialization utilities for Quartz."""

import json
from pathlib import Path
from typing import Any, Dict

import json5
import yaml

from ..utils.errors import ConfigParseError


class Serializer:
    """Handles serialization/deserialization of Quartz config data."""

    @staticmethod
    def from_jsonc(text: str) -> Dict[str, Any]:
        """Parse JSON with comments into a mapping."""
        try:
            data = json5.loads(text)
        except ValueError as e:
            raise ConfigParseError(str(e)) from e

        if not isinstance(data, dict):
            raise ConfigParseError(
                f"Expected a JSON object at top level, got {type(data).__name__}"
            )
        return data

    @staticmethod
    def to_json(data: Any) -> str:
        """Render data as indented JSON text."""
        return json.dumps(data, indent=2, ensure_ascii=False)

    @staticmethod
    def to_yaml(data: Any) -> str:
        """Render data as YAML text."""
        return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)

    @staticmethod
    def read_text(path: Path) -> str:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    @staticmethod
    def write_text(text: str, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
            if not text.endswith("\n"):
                f.write("\n")

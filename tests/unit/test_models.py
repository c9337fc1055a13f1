"""Unit tests for data models."""

import logging

import pytest
from pydantic import ValidationError

from quartz.constants import DEFAULT_OPENAI_BASE_URL, DEFAULT_OPENAI_MODEL
from quartz.models.config import PlatformConfig, Profile, QuartzConfig
from quartz.models.types import (
    DefaultsUsed, MigrationResult, PullRequestResult, VersionMetadata
)


def test_default_config():
    """Test default config values."""
    config = QuartzConfig()

    assert config.openai.api_key == ""
    assert config.openai.base_url == DEFAULT_OPENAI_BASE_URL
    assert config.openai.model == DEFAULT_OPENAI_MODEL
    assert config.platforms == []
    assert config.language.ui == "en"
    assert config.language.prompt == "en"


def test_config_serialization_uses_camel_case():
    """Test config serialization."""
    config = QuartzConfig()
    config.openai.api_key = "sk-test"
    config.platforms.append(PlatformConfig(type="github", token="ghp_x"))

    data = config.to_dict()
    assert data['openai']['apiKey'] == "sk-test"
    assert data['openai']['baseUrl'] == DEFAULT_OPENAI_BASE_URL
    assert data['platforms'] == [{'type': 'github', 'token': 'ghp_x'}]

    restored = QuartzConfig.from_dict(data)
    assert restored == config


def test_from_dict_rejects_invalid_content():
    with pytest.raises(ValidationError):
        QuartzConfig.from_dict({'platforms': [{'type': 'bitbucket', 'token': 'x'}]})


def test_from_raw_fills_missing_sections():
    config = QuartzConfig.from_raw({'openai': {'apiKey': 'sk-a', 'model': None}})

    assert config.openai.api_key == "sk-a"
    assert config.openai.model == DEFAULT_OPENAI_MODEL
    assert config.language.ui == "en"


def test_from_raw_drops_invalid_platforms(caplog):
    raw = {
        'platforms': [
            {'type': 'github', 'token': 'ghp_ok'},
            {'type': 'bitbucket', 'token': 'nope'},
            {'type': 'gitlab', 'token': ''},
            'garbage',
        ]
    }

    with caplog.at_level(logging.WARNING, logger="quartz"):
        config = QuartzConfig.from_raw(raw)

    assert [p.type for p in config.platforms] == ['github', 'gitlab']
    assert config.platforms[1].token == ""
    assert "Dropping invalid platform entry" in caplog.text


def test_from_raw_non_mapping_gives_defaults():
    assert QuartzConfig.from_raw(None) == QuartzConfig()
    assert QuartzConfig.from_raw(["not", "a", "mapping"]) == QuartzConfig()


def test_upsert_replaces_same_type_and_url():
    config = QuartzConfig()

    assert config.upsert_platform(PlatformConfig(type="github", token="a")) is False
    assert config.upsert_platform(PlatformConfig(type="github", token="b")) is True

    assert len(config.platforms) == 1
    assert config.platforms[0].token == "b"


def test_upsert_treats_url_as_part_of_identity():
    """An entry without url and one with url are different entries."""
    config = QuartzConfig()
    config.upsert_platform(PlatformConfig(type="github", token="public"))
    config.upsert_platform(
        PlatformConfig(type="github", url="https://ghe.example.com", token="enterprise")
    )

    assert [p.token for p in config.platforms] == ["public", "enterprise"]
    assert config.find_platform("github").token == "public"


def test_remove_platform_by_type_and_url():
    config = QuartzConfig(platforms=[
        PlatformConfig(type="gitlab", token="a"),
        PlatformConfig(type="gitlab", url="https://git.corp", token="b"),
        PlatformConfig(type="github", token="c"),
    ])

    assert config.remove_platform("gitlab", "https://git.corp") == 1
    assert [p.token for p in config.platforms] == ["a", "c"]

    assert config.remove_platform("gitlab") == 1
    assert config.remove_platform("gitlab") == 0
    assert [p.type for p in config.platforms] == ["github"]


def test_remove_platform_with_empty_url_matches_nothing():
    config = QuartzConfig(platforms=[
        PlatformConfig(type="gitlab", token="a"),
        PlatformConfig(type="gitlab", url="https://git.corp", token="b"),
    ])

    assert config.remove_platform("gitlab", "") == 0
    assert len(config.platforms) == 2


def test_profile_to_dict():
    profile = Profile(name="work")
    data = profile.to_dict()

    assert data['name'] == "work"
    assert data['config']['language'] == {'ui': 'en', 'prompt': 'en'}


def test_version_metadata_aliases():
    metadata = VersionMetadata.model_validate({
        'configVersion': '1.5.0',
        'cliVersion': '1.5.0',
        'updatedAt': '2025-01-01T00:00:00',
    })

    assert metadata.active_profile is None
    assert 'activeProfile' not in metadata.to_dict()
    assert metadata.to_dict()['configVersion'] == '1.5.0'


def test_pull_request_reference():
    assert PullRequestResult(url="u", number=7).reference == "#7"
    assert PullRequestResult(url="u", id=3).reference == "!3"


def test_migration_result_ok():
    ok = MigrationResult(migrated=True, from_version="1.0.0", to_version="1.5.0")
    failed = MigrationResult(
        migrated=False, from_version="1.0.0", to_version="1.5.0", errors=["boom"]
    )

    assert ok.ok
    assert ok.applied_migrations == []
    assert not failed.ok
    assert failed.model_dump(by_alias=True)['fromVersion'] == "1.0.0"


def test_defaults_used_missing(tmp_path):
    assert DefaultsUsed({}, tmp_path, "missing").missing
    assert not DefaultsUsed({}, tmp_path, "Unexpected token").missing

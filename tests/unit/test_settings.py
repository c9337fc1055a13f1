"""Unit tests for CLI settings and environment overrides."""

from pathlib import Path

from quartz.constants import GITLAB_PUBLIC_URL
from quartz.models.config import PlatformConfig, QuartzConfig
from quartz.utils.settings import CLIOverrides, EnvOverrides, Settings


def test_settings_resolution(monkeypatch, tmp_path):
    assert Settings.from_env(config_dir=str(tmp_path)).config_dir == tmp_path
    assert Settings.from_env(use_global=True).config_dir == Path.home() / ".quartz"

    monkeypatch.setenv("QUARTZ_CONFIG_DIR", str(tmp_path / "env"))
    monkeypatch.setenv("QUARTZ_DEBUG", "true")
    settings = Settings.from_env(use_global=True)

    assert settings.config_dir == tmp_path / "env"
    assert settings.debug


def test_no_env_means_no_change():
    config = QuartzConfig()
    overrides = EnvOverrides.from_env()

    assert overrides.active() == []
    assert overrides.apply(config) is config


def test_env_overrides_win_over_file(monkeypatch):
    monkeypatch.setenv("QUARTZ_OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("QUARTZ_OPENAI_MODEL", "gpt-4o")
    monkeypatch.setenv("QUARTZ_LANG", "de")
    monkeypatch.setenv("QUARTZ_PROMPT_LANG", "fr")
    config = QuartzConfig()
    config.openai.api_key = "sk-file"

    overrides = EnvOverrides.from_env()
    effective = overrides.apply(config)

    assert effective.openai.api_key == "sk-env"
    assert effective.openai.model == "gpt-4o"
    assert effective.language.ui == "de"
    assert effective.language.prompt == "fr"
    assert config.openai.api_key == "sk-file"
    assert overrides.active() == [
        "QUARTZ_OPENAI_API_KEY", "QUARTZ_OPENAI_MODEL", "QUARTZ_LANG", "QUARTZ_PROMPT_LANG"
    ]


def test_platform_token_overrides(monkeypatch):
    monkeypatch.setenv("QUARTZ_GITHUB_TOKEN", "ghp_env")
    monkeypatch.setenv("QUARTZ_GITLAB_TOKEN", "glpat_env")
    config = QuartzConfig(platforms=[PlatformConfig(type="github", token="ghp_file")])

    effective = EnvOverrides.from_env().apply(config)

    assert effective.find_platform("github").token == "ghp_env"
    gitlab = effective.find_platform("gitlab")
    assert gitlab.token == "glpat_env"
    assert gitlab.url == GITLAB_PUBLIC_URL
    assert config.find_platform("gitlab") is None


def test_gitlab_url_override(monkeypatch):
    monkeypatch.setenv("QUARTZ_GITLAB_URL", "https://git.corp")
    with_entry = QuartzConfig(platforms=[PlatformConfig(type="gitlab", token="t")])

    assert EnvOverrides.from_env().apply(with_entry).find_platform("gitlab").url == "https://git.corp"
    # a url alone does not create credentials
    assert EnvOverrides.from_env().apply(QuartzConfig()).platforms == []


def test_cli_overrides_copy_config():
    config = QuartzConfig()
    updated = CLIOverrides(model="gpt-4o-mini").apply(config)

    assert updated.openai.model == "gpt-4o-mini"
    assert config.openai.model != "gpt-4o-mini"
    assert CLIOverrides().is_empty()

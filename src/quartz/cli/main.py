"""Main CLI entry point."""

import sys
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import click
from rich.console import Console
from rich.table import Table
from rich.prompt import Confirm

from .. import __version__
from ..constants import GITLAB_PUBLIC_URL
from ..git.remote import GitRemote
from ..models.config import PlatformConfig
from ..platforms import STRATEGIES, create_strategy
from ..storage.config_store import ConfigStore
from ..storage.migration import MigrationRunner
from ..utils.errors import ProfileNotFoundError, QuartzError
from ..utils.logger import Logger
from ..utils.settings import CLIOverrides, EnvOverrides, Settings

console = Console()

CONFIG_KEYS = {
    'openai.apiKey': ('openai', 'api_key'),
    'openai.baseUrl': ('openai', 'base_url'),
    'openai.model': ('openai', 'model'),
    'language.ui': ('language', 'ui'),
    'language.prompt': ('language', 'prompt'),
}

PUBLIC_HOSTS = {
    "github": "github.com",
    "gitlab": "gitlab.com",
}


def _mask(secret: str) -> str:
    if not secret:
        return "[dim]not set[/dim]"
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}****{secret[-4:]}"


def _fail(error: Exception) -> None:
    Logger.error(str(error))
    sys.exit(1)


@click.group()
@click.option('--global', 'use_global', is_flag=True, help='Use the user-level config in ~/.quartz')
@click.option('--config-dir', help='Directory holding quartz.jsonc')
@click.option('--apikey', help='Override the OpenAI API key')
@click.option('--baseurl', help='Override the OpenAI base URL')
@click.option('--model', help='Override the OpenAI model')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path), help='Also write debug logs to this file')
@click.version_option(version=__version__, prog_name="quartz")
@click.pass_context
def cli(ctx, use_global, config_dir, apikey, baseurl, model, debug, log_file):
    """Quartz - AI-assisted git workflow.

    Manage configuration profiles and open pull/merge requests on GitHub and GitLab.
    """
    ctx.ensure_object(dict)

    settings = Settings.from_env(use_global=use_global, config_dir=config_dir)
    Logger.setup_logger(debug=debug or settings.debug, log_file=log_file)

    ctx.obj['store'] = ConfigStore(settings.config_dir)
    ctx.obj['overrides'] = CLIOverrides(api_key=apikey, base_url=baseurl, model=model)
    ctx.obj['env'] = EnvOverrides.from_env()


@cli.command()
@click.pass_context
def init(ctx):
    """Create the config file with a default profile."""
    store: ConfigStore = ctx.obj['store']
    try:
        if store.init():
            Logger.success(f"Quartz initialized at {store.config_path}")
        else:
            result = MigrationRunner(store).run()
            for error in result.errors or []:
                Logger.fail(error)
            if result.migrated:
                Logger.success(f"Config migrated to {result.to_version}")
    except QuartzError as e:
        _fail(e)


@cli.command()
@click.option('--check', is_flag=True, help='Only report whether a migration is pending')
@click.pass_context
def migrate(ctx, check):
    """Upgrade the config file to the current schema."""
    store: ConfigStore = ctx.obj['store']
    runner = MigrationRunner(store)

    try:
        if check:
            current = runner.current_version()
            if current is None:
                console.print("No config file found")
            elif runner.needs_migration():
                versions = ", ".join(m.version for m in runner.pending(current))
                console.print(f"[yellow]Migration pending[/yellow] {current} → {runner.target_version} ({versions})")
            else:
                console.print(f"Config is up to date ({current})")
            return

        result = runner.run()
    except QuartzError as e:
        _fail(e)

    if result.errors:
        for error in result.errors:
            Logger.fail(error)
        sys.exit(1)

    if result.migrated:
        Logger.success(
            f"Migrated {result.from_version} → {result.to_version}: "
            f"{', '.join(result.applied_migrations)}"
        )
    else:
        console.print(f"Nothing to migrate ({result.from_version})")


# ==================== config ====================

@cli.group()
def config():
    """Show and edit profile settings."""


@config.command('show')
@click.option('--profile', '-p', help='Profile to show (defaults to the active one)')
@click.option('--show-secrets', is_flag=True, help='Print keys and tokens unmasked')
@click.pass_context
def config_show(ctx, profile, show_secrets):
    """Show the effective configuration."""
    store: ConfigStore = ctx.obj['store']
    name = profile or store.get_active_profile()
    env: EnvOverrides = ctx.obj['env']
    cfg = ctx.obj['overrides'].apply(env.apply(store.read_config(name)))
    secret = (lambda s: s or "[dim]not set[/dim]") if show_secrets else _mask

    table = Table(show_header=True, header_style="bold", title=f"Profile: {name}")
    table.add_column("Section")
    table.add_column("Key")
    table.add_column("Value")

    table.add_row("openai", "apiKey", secret(cfg.openai.api_key))
    table.add_row("openai", "baseUrl", cfg.openai.base_url)
    table.add_row("openai", "model", cfg.openai.model)
    table.add_row("language", "ui", cfg.language.ui)
    table.add_row("language", "prompt", cfg.language.prompt)
    for platform in cfg.platforms:
        table.add_row(
            "platform",
            f"{platform.type} ({platform.url or 'public'})",
            secret(platform.token)
        )

    console.print(table)
    if env.active():
        console.print(f"[yellow]Environment overrides:[/yellow] {', '.join(env.active())}")


@config.command('set')
@click.argument('key', type=click.Choice(sorted(CONFIG_KEYS)))
@click.argument('value')
@click.option('--profile', '-p', help='Profile to change (defaults to the active one)')
@click.pass_context
def config_set(ctx, key, value, profile):
    """Set a configuration value."""
    store: ConfigStore = ctx.obj['store']
    section, field = CONFIG_KEYS[key]

    try:
        if section == 'openai':
            store.set_openai(profile_name=profile, **{field: value})
        else:
            store.set_language(profile_name=profile, **{field: value})
        Logger.success(f"Set {key} in profile '{profile or store.get_active_profile()}'")
    except QuartzError as e:
        _fail(e)


# ==================== profile ====================

@cli.group()
def profile():
    """Manage configuration profiles."""


@profile.command('list')
@click.pass_context
def profile_list(ctx):
    """List all profiles."""
    store: ConfigStore = ctx.obj['store']
    active = store.get_active_profile()

    for name in store.list_profiles():
        marker = "*" if name == active else " "
        style = "green" if name == active else None
        console.print(f"  {marker} {name}", style=style)


@profile.command('create')
@click.argument('name')
@click.option('--from', 'from_profile', help='Profile to copy settings from')
@click.option('--use', 'activate', is_flag=True, help='Make the new profile active')
@click.pass_context
def profile_create(ctx, name, from_profile, activate):
    """Create a new profile."""
    store: ConfigStore = ctx.obj['store']
    try:
        store.create_profile(name, from_profile)
        if activate:
            store.set_active_profile(name)
        Logger.success(f"Created profile: {name}")
    except QuartzError as e:
        _fail(e)


@profile.command('use')
@click.argument('name')
@click.pass_context
def profile_use(ctx, name):
    """Switch the active profile."""
    try:
        ctx.obj['store'].set_active_profile(name)
        Logger.success(f"Switched to profile: {name}")
    except QuartzError as e:
        _fail(e)


@profile.command('delete')
@click.argument('name')
@click.option('--force', '-f', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def profile_delete(ctx, name, force):
    """Delete a profile."""
    try:
        if not force:
            if not Confirm.ask(f"Delete profile '{name}'?"):
                return

        ctx.obj['store'].delete_profile(name)
        Logger.success(f"Deleted profile: {name}")
    except QuartzError as e:
        _fail(e)


@profile.command('copy')
@click.argument('source')
@click.argument('target')
@click.pass_context
def profile_copy(ctx, source, target):
    """Copy a profile under a new name."""
    try:
        ctx.obj['store'].copy_profile(source, target)
        Logger.success(f"Copied profile {source} → {target}")
    except QuartzError as e:
        _fail(e)


@profile.command('rename')
@click.argument('old_name')
@click.argument('new_name')
@click.pass_context
def profile_rename(ctx, old_name, new_name):
    """Rename a profile."""
    try:
        ctx.obj['store'].rename_profile(old_name, new_name)
        Logger.success(f"Renamed profile {old_name} → {new_name}")
    except QuartzError as e:
        _fail(e)


@profile.command('export')
@click.argument('name', required=False)
@click.option('--format', '-f', 'fmt', type=click.Choice(['json', 'yaml']), default='json')
@click.option('--output', '-o', type=click.File('w'), default='-', help='File to write (default: stdout)')
@click.pass_context
def profile_export(ctx, name, fmt, output):
    """Export a profile's configuration."""
    store: ConfigStore = ctx.obj['store']
    if name and not store.profile_exists(name):
        _fail(ProfileNotFoundError(name))

    text = store.export_config(name, fmt)
    output.write(text if text.endswith("\n") else text + "\n")


@profile.command('import')
@click.argument('source', type=click.File('r'))
@click.option('--profile', '-p', help='Profile to import into (defaults to the active one)')
@click.pass_context
def profile_import(ctx, source, profile):
    """Import configuration exported as JSON."""
    try:
        written = ctx.obj['store'].import_config(source.read(), profile)
        Logger.success(f"Imported configuration into profile: {written}")
    except QuartzError as e:
        _fail(e)


# ==================== platform ====================

@cli.group()
def platform():
    """Manage GitHub/GitLab credentials."""


@platform.command('list')
@click.option('--profile', '-p', help='Profile to show (defaults to the active one)')
@click.pass_context
def platform_list(ctx, profile):
    """List configured platforms."""
    platforms = ctx.obj['store'].get_platform_configs(profile)
    if not platforms:
        console.print("No platforms configured")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("URL")
    table.add_column("Token")
    for p in platforms:
        table.add_row(p.type, p.url or "public", _mask(p.token))
    console.print(table)


def _platform_url(platform_type: str, url: Optional[str]) -> Optional[str]:
    """Store urls the way migrated files hold them."""
    url = (url or "").strip().rstrip('/')
    if not url and platform_type == "gitlab":
        return GITLAB_PUBLIC_URL
    return url or None


@platform.command('add')
@click.argument('platform_type', type=click.Choice(sorted(STRATEGIES)))
@click.option('--token', '-t', prompt=True, hide_input=True, help='Personal access token')
@click.option('--url', '-u', help='Base URL of a self-hosted or enterprise instance')
@click.option('--profile', '-p', help='Profile to change (defaults to the active one)')
@click.pass_context
def platform_add(ctx, platform_type, token, url, profile):
    """Add or update platform credentials."""
    try:
        replaced = ctx.obj['store'].upsert_platform_config(
            PlatformConfig(type=platform_type, url=_platform_url(platform_type, url), token=token),
            profile
        )
        action = "Updated" if replaced else "Added"
        Logger.success(f"{action} {platform_type} credentials ({url or 'public'})")
    except QuartzError as e:
        _fail(e)


@platform.command('remove')
@click.argument('platform_type', type=click.Choice(sorted(STRATEGIES)))
@click.option('--url', '-u', help='Only remove the entry for this URL')
@click.option('--profile', '-p', help='Profile to change (defaults to the active one)')
@click.pass_context
def platform_remove(ctx, platform_type, url, profile):
    """Remove platform credentials."""
    try:
        removed = ctx.obj['store'].remove_platform_config(platform_type, url, profile)
        if removed:
            Logger.success(f"Removed {removed} {platform_type} entr{'y' if removed == 1 else 'ies'}")
        else:
            console.print(f"No {platform_type} entries matched")
    except QuartzError as e:
        _fail(e)


# ==================== pr ====================

@cli.group()
def pr():
    """Pull/merge requests."""


def _pick_platform(platforms, platform_type: str, host: Optional[str]) -> Optional[PlatformConfig]:
    """Prefer the entry whose host matches the remote, else the first of the type."""
    candidates = [p for p in platforms if p.type == platform_type]
    for candidate in candidates:
        candidate_host = urlparse(candidate.url).hostname if candidate.url else PUBLIC_HOSTS[candidate.type]
        if host and candidate_host == host:
            return candidate
    return candidates[0] if candidates else None


@pr.command('create')
@click.option('--title', '-t', required=True, help='Pull request title')
@click.option('--body', '-b', default='', help='Pull request description')
@click.option('--body-file', type=click.File('r'), help='Read the description from a file')
@click.option('--head', help='Source branch (defaults to the current branch)')
@click.option('--base', default='main', show_default=True, help='Target branch')
@click.option('--remote', default='origin', show_default=True, help='Git remote to push to')
@click.option('--profile', '-p', help='Profile holding the platform token')
@click.pass_context
def pr_create(ctx, title, body, body_file, head, base, remote, profile):
    """Push the branch if needed and open a pull/merge request."""
    store: ConfigStore = ctx.obj['store']
    git = GitRemote(remote=remote)

    try:
        info = git.get_repo_info()
        if info is None:
            raise QuartzError(f"Could not determine GitHub/GitLab repository from remote '{remote}'")

        platform_config = _pick_platform(
            ctx.obj['env'].apply(store.read_config(profile)).platforms, info.platform, info.host
        )
        if platform_config is None:
            raise QuartzError(
                f"No {info.platform} token configured. Run: quartz platform add {info.platform}"
            )

        head = head or git.get_current_branch()
        if not head:
            raise QuartzError("Could not determine the current branch; pass --head")

        if body_file:
            body = body_file.read()

        strategy = create_strategy(platform_config, git)
        with console.status(f"Creating pull request {head} → {base}..."):
            result = strategy.create_pull_request(info.owner, info.repo, title, body, head, base)
    except QuartzError as e:
        _fail(e)

    Logger.success(f"Created {result.reference}: {result.url}")


def main():
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        Logger.error(f"Unexpected error: {e}")
        if Logger.is_debug():
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()

"""
splashy settings

Inspect and change the persisted settings. Values given to 'set' are read as JSON when possible,
so 'true', '3' and '{"a": 1}' become a boolean, a number and an object; anything else is stored
as a plain string.
"""

import click

from splashy.context import SplashContext
from splashy.unsplash_handler import try_parse
from splashy.utils import is_path
from splashy.utils import path_fixer
from splashy.cli_utils.console import confirm_success
from splashy.cli_utils.console import console
from splashy.cli_utils.console import highlight_json
from splashy.cli_utils.decorators import catch_errors


HIDDEN_KEYS = {"client_secret"}


def _visible(settings: dict) -> dict:
    settings = {key: value for key, value in settings.items() if key not in HIDDEN_KEYS}

    user = dict(settings.get("user") or {})
    if user.get("token"):
        user["token"] = "********"
        settings["user"] = user

    return settings


@click.group(name="settings", invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context):
    """Show or change splashy settings."""

    if ctx.invoked_subcommand is None:
        ctx.invoke(show)


@cli.command()
@click.pass_obj
@catch_errors
def show(obj: SplashContext):
    """Print every setting."""

    console.print(highlight_json(_visible(obj.settings.all())))


@cli.command()
@click.argument("key")
@click.pass_obj
@catch_errors
def get(obj: SplashContext, key):
    """Print a single setting."""

    console.print(highlight_json(_visible({key: obj.settings.get(key)})[key]))


@cli.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
@catch_errors
def set_(obj: SplashContext, key, value):
    """Change a setting."""

    value = try_parse(value)

    if isinstance(value, str) and (key == "directory" or is_path(value)):
        value = path_fixer(value)

    obj.settings.set(key, value)
    confirm_success(f"{key} = {value!r}", markup=False, emoji=False)


@cli.command()
@click.pass_obj
@catch_errors
def clear(obj: SplashContext):
    """Restore the default settings."""

    if not obj.settings.clear_settings():
        raise click.ClickException("Settings could not be restored to their defaults.")

    confirm_success(":white_check_mark-emoji: Settings restored to their defaults.")

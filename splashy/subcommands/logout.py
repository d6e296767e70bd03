import click

from splashy.config import DEFAULT_SETTINGS
from splashy.context import SplashContext
from splashy.cli_utils.console import confirm_success
from splashy.cli_utils.decorators import catch_errors
from splashy.cli_utils.decorators import require_login


@click.command(name="logout")
@click.pass_obj
@catch_errors
@require_login
def cli(obj: SplashContext):
    """Forget the stored Unsplash token and profile."""

    obj.settings.set("user", DEFAULT_SETTINGS["user"])
    confirm_success(":wave-emoji: Logged out.")

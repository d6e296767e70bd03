import click

from splashy.context import SplashContext
from splashy.unsplash_handler import UnsplashClient
from splashy.cli_utils.console import confirm_success
from splashy.cli_utils.console import spinner
from splashy.cli_utils.decorators import catch_errors


@click.command(name="keys")
@click.pass_obj
@catch_errors
def cli(obj: SplashContext):
    """Download the shared Unsplash application keys and save them."""

    with spinner("Fetching application keys"):
        UnsplashClient(obj).grab_keys(update_config=True)

    confirm_success(":key-emoji: Application keys saved.")

"""
splashy

Beautiful Unsplash photos as your desktop wallpaper, from the command line.

This module defines the entry point to the splashy CLI. Running 'splashy' without a subcommand
picks a photo (random by default, or the one selected with --id) and hands it to the download
pipeline. Subcommands (login, settings, alias, ...) live in the subcommands directory and are
attached to the 'cli' group at startup by splashy.__main__.
"""

import click

from splashy.aliases import parse_collections
from splashy.cli_utils.console import describe
from splashy.cli_utils.console import print_block
from splashy.cli_utils.console import set_quiet
from splashy.cli_utils.console import setup_logging
from splashy.cli_utils.console import spinner
from splashy.cli_utils.console import warn
from splashy.cli_utils.decorators import catch_errors
from splashy.context import init
from splashy.download import DownloadFlags
from splashy.download import DownloadRequest
from splashy.download import download
from splashy.prompts import NonInteractivePrompter
from splashy.unsplash_handler import UnsplashClient
from splashy.unsplash_handler import parse_photo_id
from splashy.utils import get_user_info


@click.group(invoke_without_command=True)
@click.option("--quiet", "-q", is_flag=True, help="Silence all informational output.")
@click.option("--verbose", is_flag=True, help="Log debug information to stderr.")
@click.option(
    "--save",
    "-s",
    type=str,
    help="Save the photo without setting it as wallpaper. Accepts a directory or an image file path.",
)
@click.option(
    "--screen",
    type=str,
    help="(MacOS only) Screen to set the wallpaper on: main, all or a screen number.",
)
@click.option(
    "--scale",
    type=str,
    help="(MacOS only) Scaling method: auto, fill, fit, stretch or center.",
)
@click.option("--info", "-i", is_flag=True, help="Show detailed information about the photo.")
@click.option("--id", "photo_id", type=str, help="Get a specific photo by id or url.")
@click.option("--query", type=str, help="Limit the random photo to a search term.")
@click.option("--user", "username", type=str, help="Get a random photo from a specific user.")
@click.option("--featured", is_flag=True, help="Limit the random photo to featured photos.")
@click.option(
    "--collection",
    type=str,
    help="Get a random photo from a collection. Accepts ids or aliases, comma separated.",
)
@click.option(
    "--orientation",
    type=click.Choice(["landscape", "portrait", "squarish"]),
    help="Filter by photo orientation.",
)
@click.option(
    "--no-wallpaper",
    is_flag=True,
    help="Download the photo without setting it as wallpaper.",
)
@click.version_option(package_name="splashy")
@click.pass_context
@catch_errors
def cli(
    ctx: click.Context,
    quiet,
    verbose,
    save,
    screen,
    scale,
    info,
    photo_id,
    query,
    username,
    featured,
    collection,
    orientation,
    no_wallpaper,
):
    """
    splashy

    Beautiful Unsplash photos as your desktop wallpaper.

    Examples:

        $ splashy

        $ splashy --query mountains --orientation landscape

        $ splashy --collection nature --save ~/Pictures

        $ splashy login
    """

    setup_logging(verbose)

    if ctx.obj is None:
        ctx.obj = init()

    context = ctx.obj
    context.quiet = quiet

    if quiet:
        set_quiet(True)

    if ctx.invoked_subcommand is not None:
        return

    # first run: write the defaults and greet the user
    if not context.settings.has("directory"):
        context.settings.clear_settings()
        print_block(
            f"Welcome to splashy [bold]@{get_user_info()['username']}[/]",
            "[dim]Application setup [green]completed[/green]![/dim]",
            '[bold]Enjoy "[yellow]splashy[/yellow]" running [green]splashy[/green][/bold]',
        )
        return

    client = UnsplashClient(context)

    with spinner("Connecting to Unsplash"):
        photo = None

        if photo_id and parse_photo_id(photo_id):
            photo = client.get_photo(parse_photo_id(photo_id))

        else:
            if photo_id:
                warn(f'Invalid ID: "{photo_id}"')

            photo = client.get_random_photo(
                query=query,
                username=username,
                featured=featured,
                collections=parse_collections(collection, context.aliases)
                if collection
                else None,
                orientation=orientation,
            )

        if isinstance(photo, list):
            if not photo:
                raise click.ClickException("Unsplash returned no photos.")
            photo = photo[0]

        url = client.track_download(photo)

    describe(":earth_asia-emoji: Connected!")

    download(
        context,
        DownloadRequest(
            photo=photo,
            url=url,
            flags=DownloadFlags(
                quiet=quiet, save=save, screen=screen, scale=scale, info=info
            ),
            set_as_wallpaper=not no_wallpaper,
        ),
        prompter=NonInteractivePrompter() if quiet else None,
        client=client,
    )

"""
splashy download pipeline

Everything that happens once a photo has been picked:

    1) resolve the target directory (optionally a per-photographer '@username' folder)
    2) resolve the filename (<photo-id>.jpg, or the --save location)
    3) download the image and bump the download counter
    4) set it as the desktop wallpaper, or report where it was stored with --save
    5) show a summary of the photo
    6) ask (depending on settings) to keep the wallpaper, like the photo and add it to a collection

The steps run strictly in order and download() only returns once the last prompt is answered.
Declining to keep the wallpaper restores the previous one and skips the remaining prompts.

Errors in steps 1-3 propagate to the caller. Failures while liking the photo or adding it to a
collection are handed to the error handler and the pipeline carries on.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape

from splashy import image_handler
from splashy import wallpaper_handler
from splashy.aliases import parse_collection
from splashy.cli_utils.console import confirm_success
from splashy.cli_utils.console import console
from splashy.cli_utils.console import describe
from splashy.cli_utils.console import logger
from splashy.cli_utils.console import print_block
from splashy.cli_utils.console import set_quiet
from splashy.cli_utils.console import spinner
from splashy.errors import error_handler
from splashy.prompts import Decision
from splashy.prompts import TerminalPrompter
from splashy.unsplash_handler import UnsplashClient
from splashy.utils import path_fixer
from splashy.wallpaper_handler import NO_SCREEN
from splashy.wallpaper_handler import Scale
from splashy.wallpaper_handler import WallpaperUpdateError
from splashy.wallpaper_handler import parse_scale
from splashy.wallpaper_handler import parse_screen


@dataclass
class DownloadFlags:
    quiet: bool = False
    save: str = None
    screen: str = None
    scale: str = None
    info: bool = False


@dataclass
class DownloadRequest:
    photo: dict
    url: str
    flags: DownloadFlags = field(default_factory=DownloadFlags)
    set_as_wallpaper: bool = True


def resolve_directory(photo: dict, settings) -> Path:
    """Base directory from the settings, plus '@<username>' when userFolder is on."""

    directory = Path(path_fixer(settings.get("directory")))

    if settings.get("userFolder") is True:
        directory = directory / f"@{photo['user']['username']}"

    return directory


def set_wallpaper(filename: Path, flags: DownloadFlags, wallpaper=wallpaper_handler, platform: str = None):
    """
    Set filename as the wallpaper. A valid scale wins over a valid screen; invalid values are
    ignored. On platforms without screen/scale support a warning is logged and the wallpaper is
    set without them.
    """

    platform = platform or sys.platform
    screen, scale = NO_SCREEN, Scale.NONE

    if flags.screen or flags.scale:
        if not wallpaper.supports_screen_options(platform):
            option = '"screen"' if flags.screen else '"scale"'
            logger.warning("Sorry, this function (%s) is available only on MacOS", option)
        else:
            screen, scale = parse_screen(flags.screen), parse_scale(flags.scale)

    if scale is not Scale.NONE:
        wallpaper.update_wallpaper(filename, scale=scale)
    elif screen:
        wallpaper.update_wallpaper(filename, screen=screen)
    else:
        wallpaper.update_wallpaper(filename)


def show_photo(photo: dict, info: bool = False):
    """
    Print who took the photo and where to find it. With info, also print the description,
    camera, location and stats.
    """

    user = photo.get("user") or {}
    name = escape(user.get("name") or user.get("username") or "unknown")
    link = (photo.get("links") or {}).get("html", "")

    describe(f"Photo by [bold]{name}[/] [muted](@{escape(user.get('username', ''))})[/] on Unsplash")
    if link:
        describe(f"[underline]{escape(link)}[/]")

    if not info:
        return

    describe("")

    description = photo.get("description") or photo.get("alt_description")
    if description:
        describe(f"[muted]Description:[/] {escape(description)}")

    exif = photo.get("exif") or {}
    camera = " ".join(filter(None, [exif.get("make"), exif.get("model")]))
    if camera:
        describe(f"[muted]Camera:[/] {escape(camera)}")

    location = (photo.get("location") or {}).get("title")
    if location:
        describe(f"[muted]Location:[/] {escape(location)}")

    if photo.get("width") and photo.get("height"):
        describe(f"[muted]Size:[/] {photo['width']}x{photo['height']}")

    for stat in ("likes", "downloads", "views"):
        if photo.get(stat) is not None:
            describe(f"[muted]{stat.capitalize()}:[/] {photo[stat]}")


def download(context, request: DownloadRequest, prompter=None, client: UnsplashClient = None, wallpaper=wallpaper_handler) -> Path:
    """
    Run the whole pipeline for one photo and return where it was stored.
    """

    directory = resolve_directory(request.photo, context.settings)
    directory.mkdir(parents=True, exist_ok=True)

    previous_quiet = console.quiet
    if request.flags.quiet:
        set_quiet(True)

    try:
        return _run_pipeline(
            context,
            request,
            directory,
            prompter or TerminalPrompter(),
            client or UnsplashClient(context),
            wallpaper,
        )

    finally:
        set_quiet(previous_quiet)


def _run_pipeline(context, request, directory, prompter, client, wallpaper) -> Path:

    settings = context.settings
    photo, flags = request.photo, request.flags

    filename = image_handler.resolve_destination(photo["id"], directory, flags.save)

    with spinner():
        filename = image_handler.download_image(request.url, filename)

    settings.increment("counter")
    confirm_success(":white_check_mark-emoji: Downloaded!")

    wallpaper_set = request.set_as_wallpaper and not flags.save

    if wallpaper_set:
        set_wallpaper(filename, flags, wallpaper)
    else:
        print_block(f"Picture stored at: [underline]{escape(str(filename))}[/]")

    show_photo(photo, flags.info)
    console.print()

    if not settings.token:
        describe("[muted]Login to like this photo.[/]")
        return filename

    if photo.get("liked_by_user"):
        describe("[muted]Photo liked by user.[/]")

    if flags.save:
        return filename

    prompt_like = settings.get("askForLike")
    prompt_collection = settings.get("askForCollection")
    confirm_wallpaper = settings.get("confirm-wallpaper")

    if wallpaper_set:
        if confirm_wallpaper and not prompter.decide(Decision.CONFIRM_WALLPAPER):
            last_wallpaper = settings.get("lastWP")
            if last_wallpaper:
                try:
                    wallpaper.update_wallpaper(last_wallpaper)
                except WallpaperUpdateError as error:
                    error_handler(error, context, prompter=prompter)
            return filename

        settings.set("lastWP", str(wallpaper.get_current_wallpaper()))

    photo_id = photo.get("_id") or photo["id"]

    if prompt_like and not flags.quiet and not photo.get("liked_by_user"):
        if prompter.decide(Decision.LIKE_PHOTO):
            try:
                client.like_photo(photo_id)
                confirm_success("Photo liked.")
            except Exception as error:
                error_handler(error, context, prompter=prompter)

    if prompt_collection and not flags.quiet:
        if prompter.decide(Decision.ADD_TO_COLLECTION):
            try:
                chosen = prompter.choose_collection(client.get_user_collections())

                if chosen is None:
                    describe("No collection chosen.")
                else:
                    client.add_photo_to_collection(
                        parse_collection(chosen, context.aliases), photo_id
                    )
                    confirm_success("Photo added to the collection.")

            except Exception as error:
                error_handler(error, context, prompter=prompter)

    return filename

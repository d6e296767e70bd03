"""
Wallpaper Handler

This module reads and updates the desktop wallpaper. The work is done by tools the operating
system already ships, splashy only shells out to them:

- GNOME (Linux): the gsettings CLI, schema org.gnome.desktop.background, keys picture-uri and
  picture-uri-dark.
  https://github.com/GNOME/gsettings-desktop-schemas/blob/master/schemas/org.gnome.desktop.background.gschema.xml.in
- MacOS: the 'wallpaper' CLI (https://github.com/sindresorhus/macos-wallpaper), the only backend
  that supports picking a screen and a scaling mode.
- Windows: SystemParametersInfoW from user32 through ctypes, and the registry to read it back.

Screen and scale options arrive from the command line as raw strings. They are parsed once into
ScreenChoice and Scale, invalid values become the explicit "no preference" variants.
"""

import re
import subprocess
import sys
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import unquote, urlparse

from splashy.cli_utils.console import logger
from splashy.image_handler import InvalidImageError
from splashy.image_handler import validate_image


SPI_SETDESKWALLPAPER = 0x0014
SPIF_UPDATEINIFILE = 0x01
SPIF_SENDCHANGE = 0x02


class WallpaperUpdateError(Exception):
    """
    Raised when an attempt to read or update the desktop background fails.
    """

    pass


class Scale(Enum):
    AUTO = "auto"
    FILL = "fill"
    FIT = "fit"
    STRETCH = "stretch"
    CENTER = "center"
    NONE = None


class ScreenKind(Enum):
    MAIN = "main"
    ALL = "all"
    INDEX = "index"
    NONE = None


@dataclass(frozen=True)
class ScreenChoice:
    kind: ScreenKind = ScreenKind.NONE
    index: int = None

    def __bool__(self):
        return self.kind is not ScreenKind.NONE

    def __str__(self):
        if self.kind is ScreenKind.INDEX:
            return str(self.index)
        return self.kind.value or ""


NO_SCREEN = ScreenChoice()


def parse_screen(value) -> ScreenChoice:
    """Parse 'main', 'all' or a screen number. Anything else means no preference."""

    if value is None or value is False:
        return NO_SCREEN

    value = str(value).strip().lower()

    if re.fullmatch(r"\d+", value):
        return ScreenChoice(ScreenKind.INDEX, int(value))

    if value in ("main", "all"):
        return ScreenChoice(ScreenKind(value))

    return NO_SCREEN


def parse_scale(value) -> Scale:
    """Parse auto|fill|fit|stretch|center. Anything else means no preference."""

    if not value:
        return Scale.NONE

    try:
        return Scale(str(value).strip().lower())
    except ValueError:
        return Scale.NONE


def supports_screen_options(platform: str = None) -> bool:
    """Only the MacOS backend can pick a screen or a scaling mode."""

    return (platform or sys.platform) == "darwin"


def _run(args: list) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            args,
            check=True,
            text=True,
            stdin=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdout=subprocess.PIPE,
        )

    except (subprocess.CalledProcessError, FileNotFoundError) as error:
        raise WallpaperUpdateError(f"Could not run {args[0]}: {error}")


def _clean_location(raw: str) -> Path:
    """
    gsettings wraps values in quotes and GNOME stores file:// uris; strip both.
    """

    value = raw.strip().removeprefix("'").removesuffix("'")

    if value.startswith("file://"):
        value = unquote(urlparse(value).path)

    return Path(value)


def get_current_wallpaper(platform: str = None) -> Path:
    """
    Retrieve the path of the current desktop wallpaper.
    """

    platform = platform or sys.platform

    if platform == "darwin":
        process = _run(["wallpaper", "get"])
        return _clean_location(process.stdout.splitlines()[0] if process.stdout else "")

    if platform == "win32":
        import winreg

        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"Control Panel\Desktop") as key:
                value, _ = winreg.QueryValueEx(key, "Wallpaper")
        except OSError as error:
            raise WallpaperUpdateError(f"Could not retrieve current background: {error}")

        return Path(value)

    get_desktop_background = OrderedDict(
        [
            ("cmd", "gsettings"),
            ("subcmd", "get"),
            ("schema", "org.gnome.desktop.background"),
            ("key", "picture-uri"),
        ]
    )

    process = _run(list(get_desktop_background.values()))
    return _clean_location(process.stdout)


def update_wallpaper(
    img_path,
    screen: ScreenChoice = NO_SCREEN,
    scale: Scale = Scale.NONE,
    platform: str = None,
) -> None:
    """
    Update the background image to the one at img_path. Raise WallpaperUpdateError if the file is
    missing, is not an image, or the OS tool fails. screen and scale are only honoured on MacOS.
    """

    platform = platform or sys.platform
    wallpaper_location = Path(str(img_path).removeprefix("file://")).expanduser().resolve()

    # subsequent operations will fail if path does not exist or is not a file, so catch this.
    if not wallpaper_location.is_file():
        raise WallpaperUpdateError(
            f"Invalid path provided for image location: {img_path} does not exist."
        )

    try:
        validate_image(wallpaper_location)
    except InvalidImageError:
        raise WallpaperUpdateError(
            f"Invalid image type provided. {wallpaper_location.name} is not a valid image."
        )

    if platform == "darwin":
        args = ["wallpaper", "set", str(wallpaper_location)]
        if screen:
            args += ["--screen", str(screen)]
        if scale is not Scale.NONE:
            args += ["--scale", scale.value]
        _run(args)
        return

    if platform == "win32":
        import ctypes

        result = ctypes.windll.user32.SystemParametersInfoW(
            SPI_SETDESKWALLPAPER,
            0,
            str(wallpaper_location),
            SPIF_UPDATEINIFILE | SPIF_SENDCHANGE,
        )
        if not result:
            raise WallpaperUpdateError("Could not set desktop background.")
        return

    set_desktop_background = OrderedDict(
        [
            ("cmd", "gsettings"),
            ("subcmd", "set"),
            ("schema", "org.gnome.desktop.background"),
            ("key", "picture-uri"),
            ("value", wallpaper_location.as_uri()),
        ]
    )
    _run(list(set_desktop_background.values()))

    # GNOME 42+ shows picture-uri-dark with the dark style; older schemas lack the key
    set_desktop_background["key"] = "picture-uri-dark"
    try:
        _run(list(set_desktop_background.values()))
    except WallpaperUpdateError as error:
        logger.debug("picture-uri-dark not updated: %s", error)

"""
Image Handler

Utilities for deciding where a photo goes on disk and for downloading it there.

Downloading images: supports only plain GET requests for image files specified by URL. Unsplash
download urls redirect to the image resource on their CDN; requests follows the redirect for us.
Anything that needs API authentication is done by the unsplash handler before we get here.

The downloaded bytes are checked with Pillow before anything is written, so a failed or
non-image response never leaves a broken file behind.
"""

import io
from pathlib import Path

import requests
from PIL import Image, UnidentifiedImageError

from splashy.utils import is_path
from splashy.utils import path_fixer
from splashy.utils import random_string


class InvalidImageError(Exception):
    """
    Raised when a provided binary input file is not an image. Wrapper around the PIL
    UnidentifiedImageError for better identification of errors during debugging
    and custom error messaging.
    """

    pass


class ImageDownloadError(Exception):
    """
    Raised when an image download is unsuccessful.
    """

    pass


def validate_image(input) -> str:
    """
    Determine whether input is a valid image. PIL open method accepts a Path object, string, or file object (buffered stream).
    The PIL method reads the content header to determine file type but doesn't actually load the
    pixel data, so it is cheap enough to use as a validation method. Returns the image format.
    """

    try:
        with Image.open(input) as image:

            return image.format

    except UnidentifiedImageError:
        raise InvalidImageError(f"Input {str(input)} does not appear to be an image.")

    except FileNotFoundError:
        raise InvalidImageError(f"Input {str(input)} could not be found.")


def is_image_path(path) -> bool:
    """
    True when path names an image file: either an existing file Pillow can open, or a path whose
    extension is one Pillow knows how to write (e.g. ~/Desktop/mountains.jpg).
    """

    path = Path(path)

    if path.is_file():
        try:
            validate_image(path)
            return True
        except InvalidImageError:
            return False

    if path.is_dir():
        return False

    return path.suffix.lower() in Image.registered_extensions()


def resolve_destination(photo_id: str, directory, save: str = None) -> Path:
    """
    Work out where a photo is written.

    Without save, or when save does not look like a path, the photo goes to
    <directory>/<photo_id>.jpg. Otherwise a leading '~' is expanded; an image file path is used
    exactly as given, anything else is treated as a directory that receives <photo_id>.jpg.
    """

    filename = f"{photo_id}.jpg"

    if not save or not is_path(save):
        return Path(directory) / filename

    save_path = Path(path_fixer(save))

    if is_image_path(save_path):
        return save_path

    return save_path / filename


def download_image(url: str, file_path) -> Path:
    """
    Download the image at url to file_path, replacing any file already there. Missing parent
    directories are created. Returns the location on the filesystem where the image was saved.

    If downloading fails for one of various reasons, an ImageDownloadError is raised instead of
    failing silently.
    """

    destination_path = Path(file_path).expanduser().resolve()

    if destination_path.is_dir():
        raise ImageDownloadError(f"Destination file {destination_path} is a directory.")

    try:
        r = requests.get(url)

    except requests.exceptions.RequestException as error:
        raise ImageDownloadError(str(error))

    # successful request but received a bad response from the server.
    try:
        r.raise_for_status()
    except requests.exceptions.HTTPError:
        raise ImageDownloadError(
            f"Download error: something went wrong trying to access {url} (status code {r.status_code})"
        )

    # successful request but did not get back image data as the response.
    try:
        validate_image(io.BytesIO(r.content))
    except InvalidImageError:
        raise ImageDownloadError(
            f"Download error: the target resource at {url} does not appear to be an image."
        )

    destination_path.parent.mkdir(parents=True, exist_ok=True)

    # swap in a fully written file
    partial = destination_path.with_name(f".{destination_path.name}.{random_string()}.part")
    partial.write_bytes(r.content)
    partial.replace(destination_path)

    return destination_path

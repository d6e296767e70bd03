"""
splashy utilities

Small helpers shared across commands: path handling for user supplied locations, random
identifiers and a snapshot of the system and user that 'splashy info' prints and error
reports include.
"""

import getpass
import os
import platform
import re
import sys
from pathlib import Path
from random import choice

import psutil

from splashy import __version__


MACOS_RELEASES = {
    12: "MacOS Mountain Lion",
    13: "MacOS Mavericks",
    14: "MacOS Yosemite",
    15: "MacOS El Capitan",
    16: "MacOS Sierra",
    17: "MacOS High Sierra",
    18: "MacOS Mojave",
    19: "MacOS Catalina",
    20: "MacOS Big Sur",
    21: "MacOS Monterey",
    22: "MacOS Ventura",
    23: "MacOS Sonoma",
    24: "MacOS Sequoia",
}


def path_fixer(path: str) -> str:
    """
    Replace a leading '~' with the home directory. Any other path is returned unchanged.
    """

    path = str(path)

    if path.startswith("~"):
        return str(Path.home()) + path[1:]

    return path


def is_path(value: str) -> bool:
    """
    Loose check that value looks like a filesystem path (contains a separator followed by a name).
    """

    return bool(re.search(r"([a-z]:|)(\w+|~+|\.|)\\\w+|(\w+|~+|\.|)/\w+", str(value), re.I))


def random_string(length: int = 7) -> str:
    """Return a random string of lowercase hex characters."""

    return "".join(choice("0123456789abcdef") for _ in range(length))


def get_release(system: str = None, release: str = None) -> str:
    """
    Human readable OS release. Darwin kernel versions are mapped to MacOS release names, other
    systems report the kernel release string.
    """

    system = system or platform.system()
    release = release or platform.release()

    if system == "Darwin":
        try:
            return MACOS_RELEASES.get(int(release.split(".")[0]), release)
        except ValueError:
            return release

    return release


def get_system_infos() -> dict:
    system = platform.system()

    return {
        "CLIENT_VERSION": f"v{__version__}",
        "PYTHON": platform.python_version(),
        "PLATFORM": {
            "OS": "MacOS" if system == "Darwin" else sys.platform,
            "RELEASE": get_release(system),
            "RAM": f"{psutil.virtual_memory().total // 1024 // 1024 // 1024}GB",
            "CPU": f"{psutil.cpu_count() or os.cpu_count()} CORES",
        },
    }


def get_user_info() -> dict:
    return {
        "username": getpass.getuser(),
        "shell": os.environ.get("SHELL") or os.environ.get("COMSPEC"),
    }

"""
splashy Configuration Management

This file handles utilities related to loading and persisting splashy settings. Settings are a
small flat key/value mapping (tokens, preferences, counters) with a default for every known key.
Raise a SplashConfigError for any issues that arise in processing or retrieving these values.

Storage is pluggable. A Settings object never touches the filesystem itself, instead it reads
and writes through a backend exposing read/write/delete/has. The JSON backend is used by the
CLI and stores "settings.json" at ~/.config/splashy (override with SPLASHY_CONFIG_DIR). The
memory backend is used by the test suite.
"""

import json
import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path, PurePath

from dotenv import load_dotenv


DEFAULT_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

DEFAULT_SETTINGS = {
    "directory": str(Path("~/Pictures/splash_photos").expanduser()),
    "userFolder": False,
    "counter": 0,
    "askForLike": False,
    "askForCollection": False,
    "confirm-wallpaper": False,
    "lastWP": None,
    "user": {"token": None, "profile": None},
    "lastError": None,
    "lastEventId": None,
    "shouldReportErrors": False,
    "shouldReportErrorsAutomatically": False,
}


class SplashConfigError(Exception):
    """Raise when an issue occurs with handling splashy configuration."""

    pass


class PathEncoder(json.JSONEncoder):
    """
    custom encoder adds support for serializing pathlib objects as strings
    """

    def default(self, o):
        if isinstance(o, PurePath):
            return str(o)

        else:
            return json.JSONEncoder.default(self, o)


class MemorySettingsBackend:
    """Keep settings in a dict. Nothing is persisted."""

    def __init__(self, data: dict = None):
        self.data = dict(data or {})

    def read(self, key: str):
        return deepcopy(self.data[key])

    def write(self, key: str, value) -> None:
        self.data[key] = deepcopy(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self.data

    def dump(self) -> dict:
        return deepcopy(self.data)


class JsonSettingsBackend(MemorySettingsBackend):
    """
    Persist settings to a single flat JSON file. The whole file is rewritten on every change and
    there is no locking.
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        super().__init__(self._load())

    def _load(self) -> dict:
        if not self.path.exists():
            return {}

        try:
            with self.path.open("r") as file:
                data = json.loads(file.read() or "{}")

        except json.JSONDecodeError as error:
            raise SplashConfigError(f"There was an issue reading {self.path}: {error}")

        except OSError as error:
            raise SplashConfigError(f"There was an issue opening {self.path}: {error}")

        if not isinstance(data, dict):
            raise SplashConfigError(f"{self.path} does not contain a JSON object.")

        return data

    def _save(self) -> None:
        try:
            to_json = json.dumps(self.data, sort_keys=True, indent=4, cls=PathEncoder)

        except TypeError as error:
            raise SplashConfigError(
                f"There was an error trying to serialize settings to JSON: {error}"
            )

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w") as file:
                file.write(to_json)

        except OSError as error:
            raise SplashConfigError(
                f"There was an error saving the settings file: {error}."
            )

    def write(self, key: str, value) -> None:
        super().write(key, value)
        self._save()

    def delete(self, key: str) -> None:
        super().delete(key)
        self._save()


class Settings:
    """
    Typed-ish facade over a settings backend. Every read falls back to the default for known
    keys, so callers never have to care whether a value was ever written.
    """

    def __init__(self, backend=None, defaults: dict = None):
        self.backend = backend if backend is not None else MemorySettingsBackend()
        self.defaults = deepcopy(DEFAULT_SETTINGS if defaults is None else defaults)

    def get(self, key: str, default=None):
        if self.backend.has(key):
            return self.backend.read(key)

        if key in self.defaults:
            return deepcopy(self.defaults[key])

        return default

    def set(self, key: str, value) -> None:
        self.backend.write(key, value)

    def has(self, key: str) -> bool:
        return self.backend.has(key)

    def delete(self, key: str) -> None:
        self.backend.delete(key)

    def increment(self, key: str, step: int = 1) -> int:
        value = (self.get(key) or 0) + step
        self.set(key, value)
        return value

    def all(self) -> dict:
        """Return defaults overlaid with every stored value."""

        merged = deepcopy(self.defaults)
        merged.update(self.backend.dump())
        return merged

    @property
    def token(self):
        return (self.get("user") or {}).get("token")

    def clear_settings(self) -> bool:
        """
        Restore the default settings. Keys that are not part of the defaults (e.g. application keys
        written by grab_keys) are dropped. Returns True only when reading back the full settings
        mapping gives exactly the defaults.
        """

        for key in self.backend.dump():
            self.backend.delete(key)

        for key, value in self.defaults.items():
            self.backend.write(key, deepcopy(value))

        return self.backend.dump() == self.defaults


@dataclass
class SplashConfig:
    """
    Directories and files splashy uses on the filesystem. Application code references these
    attributes instead of building paths by hand.
    """

    SPLASHY_CONFIG_DIR: Path = Path("~/.config/splashy").expanduser()

    def __post_init__(self):
        self.SPLASHY_CONFIG_DIR = Path(self.SPLASHY_CONFIG_DIR).expanduser()

    @property
    def settings_file(self) -> Path:
        return self.SPLASHY_CONFIG_DIR / "settings.json"

    @property
    def aliases_file(self) -> Path:
        return self.SPLASHY_CONFIG_DIR / "aliases.json"


def load_config() -> SplashConfig:
    """
    Build a SplashConfig from the environment. A .env file in the working directory is loaded
    first so SPLASHY_* variables can live there.
    """

    load_dotenv()

    try:
        return SplashConfig(SPLASHY_CONFIG_DIR=Path(os.environ["SPLASHY_CONFIG_DIR"]))

    except KeyError:
        return SplashConfig()


def get_keys(settings: Settings) -> dict:
    """
    Application keys for the OAuth flow. Values saved by 'splashy keys' win over the environment.
    """

    load_dotenv()

    return {
        "client_id": settings.get("client_id") or os.getenv("SPLASHY_CLIENT_ID"),
        "client_secret": settings.get("client_secret")
        or os.getenv("SPLASHY_CLIENT_SECRET"),
        "redirect_uri": os.getenv("SPLASHY_REDIRECT_URI", DEFAULT_REDIRECT_URI),
    }

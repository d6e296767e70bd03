"""
conftest.py

Test configuration for splashy tests.

Defines Pytest fixtures for supplying test data to tests across the entire
test suite. Fixtures used within only a single module are defined
directly in that module.

No test touches the real settings files, the network or the desktop: settings and aliases use
the memory backend, HTTP goes through mocked sessions or a patched requests.get, and wallpaper
calls are patched or replaced with a MagicMock.
"""

import io
import json

import pytest
import requests
from PIL import Image

from splashy.aliases import AliasStore
from splashy.config import MemorySettingsBackend
from splashy.config import Settings
from splashy.config import SplashConfig
from splashy.context import SplashContext
from splashy.cli_utils.console import set_quiet


@pytest.fixture(autouse=True)
def reset_console():
    yield
    set_quiet(False)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the developer's .env and real config dir out of the tests."""

    monkeypatch.setenv("SPLASHY_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("SPLASHY_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("SPLASHY_CLIENT_SECRET", "test-client-secret")
    monkeypatch.delenv("SPLASHY_REDIRECT_URI", raising=False)
    monkeypatch.delenv("SPLASHY_SENTRY_DSN", raising=False)


@pytest.fixture(scope="session")
def jpeg_bytes() -> bytes:
    """A tiny valid JPEG."""

    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 120, 40)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def test_image(tmp_path, jpeg_bytes):
    path = tmp_path / "test_image.jpg"
    path.write_bytes(jpeg_bytes)
    return path


@pytest.fixture
def settings() -> Settings:
    settings = Settings(MemorySettingsBackend())
    settings.clear_settings()
    return settings


@pytest.fixture
def context(settings, tmp_path) -> SplashContext:
    settings.set("directory", str(tmp_path / "photos"))
    return SplashContext(
        settings=settings,
        aliases=AliasStore(),
        config=SplashConfig(SPLASHY_CONFIG_DIR=tmp_path / "config"),
    )


@pytest.fixture
def logged_in_context(context) -> SplashContext:
    context.settings.set(
        "user", {"token": "test-token", "profile": {"username": "tester"}}
    )
    return context


@pytest.fixture
def photo() -> dict:
    return {
        "id": "Dwu85P9SOIk",
        "width": 6000,
        "height": 4000,
        "description": "A lake between mountains",
        "liked_by_user": False,
        "likes": 42,
        "user": {"username": "jdoe", "name": "Jane Doe"},
        "links": {
            "html": "https://unsplash.com/photos/Dwu85P9SOIk",
            "download_location": "https://api.unsplash.com/photos/Dwu85P9SOIk/download?ixid=abc",
        },
        "exif": {"make": "Canon", "model": "EOS 5D"},
        "location": {"title": "Lake Louise, Canada"},
    }


@pytest.fixture
def make_response():
    """Build real requests.Response objects with a given status and body."""

    def inner(status_code: int = 200, body="", url: str = "https://api.unsplash.com/"):
        response = requests.Response()
        response.status_code = status_code
        response.url = url
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        response._content = body.encode() if isinstance(body, str) else body
        response.encoding = "utf-8"
        return response

    return inner

"""
Tests for unsplash_handler.py

Network calls never leave the test: every UnsplashClient is built around a MagicMock session
whose request/get/post methods return real requests.Response objects (see make_response in
conftest.py) so status and body handling is exercised exactly as in production.
"""

import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from splashy.unsplash_handler import PARSED_STATUS_CODES
from splashy.unsplash_handler import UnsplashAPIError
from splashy.unsplash_handler import UnsplashClient
from splashy.unsplash_handler import VALID_SCOPES
from splashy.unsplash_handler import parse_photo_id
from splashy.unsplash_handler import try_parse


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(logged_in_context, session):
    return UnsplashClient(logged_in_context, session=session)


def scope_of(url: str) -> str:
    return url.split("&scope=", 1)[1]


@pytest.mark.parametrize(
    "scopes, expected",
    [
        (("public",), "public"),
        (("public", "write_likes", "read_collections"), "public+write_likes+read_collections"),
        (("public", "admin", "write_likes", "delete_everything"), "public+write_likes"),
        (("admin", "root"), ""),
        ((), ""),
    ],
)
def test_generate_authentication_url_scopes(context, scopes, expected):
    url = UnsplashClient(context, session=MagicMock()).generate_authentication_url(*scopes)

    assert scope_of(url) == expected
    assert "," not in scope_of(url)
    for scope in filter(None, scope_of(url).split("+")):
        assert scope in VALID_SCOPES


def test_generate_authentication_url_base(context):
    url = UnsplashClient(context, session=MagicMock()).generate_authentication_url(*VALID_SCOPES)
    parsed = urlparse(url)
    query = parse_qs(parsed.query.split("&scope=")[0])

    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://unsplash.com/oauth/authorize"
    assert query["client_id"] == ["test-client-id"]
    assert query["redirect_uri"] == ["urn:ietf:wg:oauth:2.0:oob"]
    assert query["response_type"] == ["code"]
    assert scope_of(url) == "+".join(VALID_SCOPES)


def test_authenticate_posts_authorization_code(client, session, make_response):
    session.post.return_value = make_response(200, {"access_token": "token"})

    response = client.authenticate(
        client_id="id", client_secret="secret", code="the-code", redirect_uri="urn:x"
    )

    assert response.json() == {"access_token": "token"}

    url = session.post.call_args.args[0]
    kwargs = session.post.call_args.kwargs
    assert url == "https://unsplash.com/oauth/token"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert json.loads(kwargs["data"]) == {
        "client_id": "id",
        "client_secret": "secret",
        "redirect_uri": "urn:x",
        "grant_type": "authorization_code",
        "code": "the-code",
    }


def test_authenticate_failure_propagates(client, session, make_response):
    session.post.return_value = make_response(401, {"error": "invalid_grant"})

    with pytest.raises(requests.HTTPError):
        client.authenticate(client_id="id", client_secret="s", code="c", redirect_uri="r")


def test_grab_keys_updates_config(client, session, make_response):
    session.get.return_value = make_response(200, {"client_id": "cid", "client_secret": "cs"})

    response = client.grab_keys(update_config=True)

    assert response.status_code == 200
    assert client.settings.get("client_id") == "cid"
    assert client.settings.get("client_secret") == "cs"


def test_grab_keys_without_update(client, session, make_response):
    session.get.return_value = make_response(200, {"client_id": "cid", "client_secret": "cs"})

    client.grab_keys()

    assert not client.settings.has("client_id")


@pytest.mark.parametrize("status_code", sorted(PARSED_STATUS_CODES))
def test_authenticated_request_parses_json(client, session, make_response, status_code):
    session.request.return_value = make_response(status_code, {"id": "abc"})

    assert client.authenticated_request("photos/abc") == {"id": "abc"}


@pytest.mark.parametrize("status_code", sorted(PARSED_STATUS_CODES))
def test_authenticated_request_falls_back_to_text(client, session, make_response, status_code):
    session.request.return_value = make_response(status_code, "<html>nope</html>")

    assert client.authenticated_request("photos/abc") == "<html>nope</html>"


@pytest.mark.parametrize("status_code", [204, 301, 400, 401, 403, 429, 502, 503])
def test_authenticated_request_passes_other_statuses_through(
    client, session, make_response, status_code
):
    response = make_response(status_code, {"errors": ["nope"]})
    session.request.return_value = response

    assert client.authenticated_request("photos/abc") is response


def test_authenticated_request_headers(client, session, make_response):
    session.request.return_value = make_response(201, {})

    client.authenticated_request(
        "/collections/1/add", method="POST", json={"photo_id": "x"}, headers={"X-Test": "1"}
    )

    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert method == "POST"
    assert url == "https://api.unsplash.com/collections/1/add"
    assert kwargs["headers"] == {
        "X-Test": "1",
        "Content-Type": "application/json",
        "Authorization": "Bearer test-token",
    }
    assert kwargs["json"] == {"photo_id": "x"}


def test_authenticated_request_warns_but_does_not_block(context, session, make_response):
    session.request.return_value = make_response(200, {"ok": True})
    client = UnsplashClient(context, session=session)

    assert client.warn_if_not_logged() is False
    assert client.authenticated_request("me") == {"ok": True}
    assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer None"


def test_public_request_uses_client_id(context, session, make_response):
    session.get.return_value = make_response(200, [{"id": "abc"}])

    photos = UnsplashClient(context, session=session).get_random_photo(
        query="lake", featured=True, collections=["1", "2"]
    )

    assert photos == [{"id": "abc"}]
    kwargs = session.get.call_args.kwargs
    assert kwargs["headers"] == {"Authorization": "Client-ID test-client-id"}
    assert kwargs["params"] == {
        "count": 1,
        "query": "lake",
        "featured": "true",
        "collections": "1,2",
    }


def test_track_download(client, session, make_response, photo):
    session.request.return_value = make_response(200, {"url": "https://images.unsplash.com/x"})

    assert client.track_download(photo) == "https://images.unsplash.com/x"
    assert session.request.call_args.args[1] == (
        "https://api.unsplash.com/photos/Dwu85P9SOIk/download?ixid=abc"
    )


def test_like_photo_unexpected_status_raises(client, session, make_response):
    session.request.return_value = make_response(401, "unauthorized")

    with pytest.raises(UnsplashAPIError):
        client.like_photo("abc")


def test_api_errors_payload_raises(client, session, make_response):
    session.request.return_value = make_response(404, {"errors": ["Couldn't find Photo"]})

    with pytest.raises(UnsplashAPIError, match="Couldn't find Photo"):
        client.get_photo("missing")


def test_add_photo_to_collection(client, session, make_response):
    session.request.return_value = make_response(201, {"photo": {"id": "abc"}})

    client.add_photo_to_collection("123", "abc")

    method, url = session.request.call_args.args
    assert (method, url) == ("POST", "https://api.unsplash.com/collections/123/add")
    assert session.request.call_args.kwargs["json"] == {"photo_id": "abc"}


def test_get_user_collections_uses_cached_profile(client, session, make_response):
    session.request.return_value = make_response(200, [{"id": 1, "title": "Lakes"}])

    assert client.get_user_collections() == [{"id": 1, "title": "Lakes"}]
    assert session.request.call_args.args[1] == "https://api.unsplash.com/users/tester/collections"


def test_check_user_auth_caches_profile(context, session, make_response):
    context.settings.set("user", {"token": "t", "profile": None})
    session.request.return_value = make_response(200, {"username": "fresh"})

    assert UnsplashClient(context, session=session).check_user_auth() is True
    assert context.settings.get("user")["profile"] == {"username": "fresh"}


def test_check_user_auth_without_token(context, session):
    assert UnsplashClient(context, session=session).check_user_auth() is False
    session.request.assert_not_called()


@pytest.mark.parametrize(
    "text, expected",
    [('{"a": 1}', {"a": 1}), ("[1, 2]", [1, 2]), ("not json", "not json"), ("", "")],
)
def test_try_parse(text, expected):
    assert try_parse(text) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Dwu85P9SOIk", "Dwu85P9SOIk"),
        ("https://unsplash.com/photos/Dwu85P9SOIk", "Dwu85P9SOIk"),
        ("https://unsplash.com/photos/a-mountain-lake-Dwu85P9SOIk", "Dwu85P9SOIk"),
        ("https://unsplash.com/photos/Dwu85P9SOIk?utm_source=x", "Dwu85P9SOIk"),
        ("not an id!", None),
        ("", None),
    ],
)
def test_parse_photo_id(value, expected):
    assert parse_photo_id(value) == expected

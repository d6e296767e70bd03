"""
Unsplash API Handler

This module is a wrapper around the Unsplash API (https://unsplash.com/documentation). It builds
the OAuth authorization url, exchanges authorization codes for tokens and issues bearer
authenticated requests on behalf of the logged in user.

Requests that do not need a user (random photos, photo details) fall back to the public
'Client-ID' authorization so splashy works before login.

Response handling for authenticated requests is intentionally asymmetric: a fixed set of status
codes has its body parsed as JSON (falling back to the raw text when it is not JSON) while any
other status hands back the requests.Response untouched so the caller can inspect it.
"""

import json
import re
from functools import wraps
from urllib.parse import urlencode

import requests

from splashy.config import get_keys
from splashy.errors import error_handler
from splashy.cli_utils.console import print_block
from splashy.cli_utils.console import logger


API_URL = "https://api.unsplash.com"
OAUTH_URL = "https://unsplash.com/oauth"
KEYS_URL = "https://keys.splash-cli.app"

VALID_SCOPES = [
    "public",
    "read_user",
    "write_user",
    "read_photos",
    "write_photos",
    "write_likes",
    "write_followers",
    "read_collections",
    "write_collections",
]

PARSED_STATUS_CODES = {200, 201, 203, 404, 500, 302, 422}


class UnsplashAPIError(Exception):
    """
    Raised when the Unsplash API answers with an error payload or an unexpected response.
    """

    pass


def make_unsplash_url(path_components: list, query: str = "") -> str:
    return "".join(["/".join(path_components).removesuffix("/"), query])


def try_parse(text):
    """Parse text as JSON, returning text itself when it is not valid JSON."""

    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return text


def parse_photo_id(value: str):
    """
    Accept either a bare photo id or a photo url such as
    https://unsplash.com/photos/a-mountain-lake-Dwu85P9SOIk and return the id.
    Returns None when nothing id-like can be found.
    """

    if not value:
        return None

    value = str(value).strip()
    match = re.search(r"unsplash\.com/photos/([^/?#]+)", value)

    if match:
        slug = match.group(1)
        # ids are 11 chars of [A-Za-z0-9_-]; slugs prefix them with words joined by '-'
        return slug[-11:] if len(slug) > 11 and slug[-12] == "-" else slug

    if re.fullmatch(r"[A-Za-z0-9_-]+", value):
        return value

    return None


def expect_json(func):
    """
    Decorate client methods whose result must be a parsed JSON payload. Raw responses (status
    codes outside the parsed set), plain strings and payloads carrying 'errors' become
    UnsplashAPIError.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        result = func(*args, **kwargs)

        if isinstance(result, requests.Response):
            raise UnsplashAPIError(
                f"'{func.__name__}' got an unexpected response from Unsplash (status code {result.status_code})"
            )

        if isinstance(result, str):
            raise UnsplashAPIError(
                f"'{func.__name__}' got a non JSON response from Unsplash: {result[:80]}"
            )

        if isinstance(result, dict) and result.get("errors"):
            raise UnsplashAPIError(", ".join(str(error) for error in result["errors"]))

        return result

    return wrapper


class UnsplashClient:
    """
    Unsplash API client bound to a SplashContext. Pass a requests.Session (or a mock of one) to
    control networking.
    """

    def __init__(self, context, session: requests.Session = None):
        self.context = context
        self.session = session if session is not None else requests.Session()

    @property
    def settings(self):
        return self.context.settings

    """
    Authentication
    """

    def generate_authentication_url(self, *scopes: str) -> str:
        """
        Build the url the user opens to authorize splashy. Unknown scopes are silently dropped and
        the remaining ones joined with '+'.
        """

        keys = get_keys(self.settings)
        valid = "+".join(scope for scope in scopes if scope in VALID_SCOPES)

        query = urlencode(
            {
                "client_id": keys["client_id"] or "",
                "redirect_uri": keys["redirect_uri"],
                "response_type": "code",
            }
        )

        return make_unsplash_url([OAUTH_URL, "authorize"], f"?{query}&scope={valid}")

    def authenticate(
        self, client_id: str, client_secret: str, code: str, redirect_uri: str
    ) -> requests.Response:
        """
        Exchange an authorization code for an access token. The raw response is returned, it is up
        to the caller to read the token out of it. Network errors and non-2xx responses raise.
        """

        payload = {
            "client_id": client_id,
            "client_secret": client_secret,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
            "code": code,
        }

        response = self.session.post(
            make_unsplash_url([OAUTH_URL, "token"]),
            data=json.dumps(payload, indent=2),
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()

        return response

    def grab_keys(self, update_config: bool = False) -> requests.Response:
        """
        Fetch the shared application keys. With update_config the keys are saved to the settings.
        """

        response = self.session.get(KEYS_URL, headers={"Accept": "application/json"})
        response.raise_for_status()

        if update_config:
            body = response.json()
            self.settings.set("client_id", body.get("client_id"))
            self.settings.set("client_secret", body.get("client_secret"))

        return response

    def warn_if_not_logged(self) -> bool:
        """Print a login hint when there is no token. Never blocks the caller."""

        if not self.settings.token:
            print_block("Please log in.")
            return False

        return True

    def authenticated_request(self, endpoint: str, method: str = "GET", **options):
        """
        Request api.unsplash.com/<endpoint> with the stored bearer token.

        Status codes 200, 201, 203, 404, 500, 302 and 422 return the body parsed as JSON (or the
        raw text if it does not parse). Every other status returns the requests.Response as is.
        """

        self.warn_if_not_logged()

        headers = dict(options.pop("headers", None) or {})
        if options.get("json") is not None:
            headers["Content-Type"] = "application/json"
        headers["Authorization"] = f"Bearer {self.settings.token}"

        options.setdefault("allow_redirects", False)

        url = make_unsplash_url([API_URL, endpoint.lstrip("/")])
        logger.debug("%s %s", method, url)
        response = self.session.request(method, url, headers=headers, **options)

        if response.status_code in PARSED_STATUS_CODES:
            return try_parse(response.text)

        return response

    def public_request(self, endpoint: str, params: dict = None):
        """
        GET a public endpoint. Uses the user token when logged in so fields like liked_by_user are
        filled in, otherwise the application 'Client-ID'.
        """

        if self.settings.token:
            return self.authenticated_request(endpoint, params=params)

        client_id = get_keys(self.settings)["client_id"]
        if not client_id:
            raise UnsplashAPIError(
                "No application key found. Run 'splashy keys' or set SPLASHY_CLIENT_ID."
            )

        response = self.session.get(
            make_unsplash_url([API_URL, endpoint.lstrip("/")]),
            params=params,
            headers={"Authorization": f"Client-ID {client_id}"},
        )
        response.raise_for_status()

        return response.json()

    def check_user_auth(self) -> bool:
        """
        True when a token is stored. A missing cached profile is fetched and saved; failures are
        handed to the error handler.
        """

        user = self.settings.get("user") or {}

        if not user.get("token"):
            return False

        if not user.get("profile"):
            try:
                user["profile"] = self.get_me()
                self.settings.set("user", user)
            except Exception as error:
                error_handler(error, self.context)

        return True

    """
    Photos
    """

    @expect_json
    def get_random_photo(
        self,
        query: str = None,
        username: str = None,
        featured: bool = False,
        collections: list = None,
        orientation: str = None,
    ):
        params = {"count": 1}

        if query:
            params["query"] = query
        if username:
            params["username"] = username
        if featured:
            params["featured"] = "true"
        if collections:
            params["collections"] = ",".join(str(item) for item in collections)
        if orientation:
            params["orientation"] = orientation

        return self.public_request("photos/random", params=params)

    @expect_json
    def get_photo(self, photo_id: str):
        return self.public_request(f"photos/{photo_id}")

    def track_download(self, photo: dict) -> str:
        """
        Hit the photo's download_location (required by the API guidelines) and return the url of
        the binary image.
        """

        location = photo["links"]["download_location"].removeprefix(API_URL)
        result = expect_json(self.public_request)(location)

        return result["url"]

    @expect_json
    def like_photo(self, photo_id: str):
        return self.authenticated_request(f"photos/{photo_id}/like", method="POST")

    @expect_json
    def unlike_photo(self, photo_id: str):
        return self.authenticated_request(f"photos/{photo_id}/like", method="DELETE")

    """
    User and collections
    """

    @expect_json
    def get_me(self):
        return self.authenticated_request("me")

    @expect_json
    def get_user_collections(self, per_page: int = 30):
        profile = (self.settings.get("user") or {}).get("profile") or self.get_me()

        return self.authenticated_request(
            f"users/{profile['username']}/collections", params={"per_page": per_page}
        )

    @expect_json
    def add_photo_to_collection(self, collection_id, photo_id: str):
        return self.authenticated_request(
            f"collections/{collection_id}/add",
            method="POST",
            json={"photo_id": photo_id},
        )

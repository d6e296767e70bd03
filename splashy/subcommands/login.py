"""
splashy login

Authorize splashy with an Unsplash account. The authorization page is opened in the browser;
after approving, Unsplash shows a code which is pasted back here and exchanged for a token.
"""

import click

from splashy.config import get_keys
from splashy.context import SplashContext
from splashy.unsplash_handler import UnsplashClient
from splashy.cli_utils.console import confirm_success
from splashy.cli_utils.console import describe
from splashy.cli_utils.decorators import catch_errors

SCOPES = [
    "public",
    "read_user",
    "write_user",
    "read_photos",
    "write_likes",
    "read_collections",
    "write_collections",
]


@click.command(name="login")
@click.option(
    "--code",
    type=str,
    help="Authorization code from Unsplash. Prompted for when omitted.",
)
@click.option(
    "--no-browser",
    is_flag=True,
    help="Print the authorization url instead of opening it.",
)
@click.pass_obj
@catch_errors
def cli(obj: SplashContext, code, no_browser):
    """Log in to Unsplash to like photos and manage collections."""

    client = UnsplashClient(obj)
    keys = get_keys(obj.settings)

    if not keys["client_id"] or not keys["client_secret"]:
        raise click.UsageError(
            "No application keys found. Run 'splashy keys' or set SPLASHY_CLIENT_ID and SPLASHY_CLIENT_SECRET."
        )

    if not code:
        url = client.generate_authentication_url(*SCOPES)
        describe(f"Authorize splashy at: [underline]{url}[/]")

        if not no_browser:
            click.launch(url)

        code = click.prompt("Paste the authorization code")

    response = client.authenticate(
        client_id=keys["client_id"],
        client_secret=keys["client_secret"],
        code=code.strip(),
        redirect_uri=keys["redirect_uri"],
    )

    obj.settings.set(
        "user", {"token": response.json()["access_token"], "profile": None}
    )
    client.check_user_auth()

    profile = obj.settings.get("user").get("profile") or {}
    confirm_success(
        f":white_check_mark-emoji: Logged in as [bold]@{profile.get('username', 'unknown')}[/]"
    )

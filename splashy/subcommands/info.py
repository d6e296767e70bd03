import click

from splashy.context import SplashContext
from splashy.utils import get_system_infos
from splashy.utils import get_user_info
from splashy.cli_utils.console import console
from splashy.cli_utils.console import highlight_json
from splashy.cli_utils.decorators import catch_errors


@click.command(name="info")
@click.pass_obj
@catch_errors
def cli(obj: SplashContext):
    """Print system, user and splashy details (useful in bug reports)."""

    console.print(
        highlight_json(
            {
                "SYSTEM": get_system_infos(),
                "USER": get_user_info(),
                "DOWNLOADS": obj.settings.get("counter"),
                "LAST_EVENT_ID": obj.settings.get("lastEventId"),
                "LAST_ERROR": obj.settings.get("lastError"),
            }
        )
    )

"""
splashy Decorators

Decorators shared by the splashy command callbacks.

catch_errors is applied to every command: anything a command does not handle itself is passed to
the splashy error handler (saved, shown, optionally reported) and the application exits with
status 1. Click's own exceptions (usage errors, aborts, --help exits) are left alone so click
can render them.

require_login guards commands that only make sense for an authenticated user:

    @click.command(name="logout")
    @click.pass_obj
    @require_login
    def cli(obj):
        ...
"""

from sys import exit
from functools import wraps

import click

from splashy.context import SplashContext
from splashy.errors import error_handler
from splashy.cli_utils.console import fail


def catch_errors(func):
    """
    Route errors to the splashy error handler and gracefully exit the application with an
    error code.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)

        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise

        except Exception as error:
            ctx = click.get_current_context(silent=True)
            context = ctx.find_object(SplashContext) if ctx else None

            if context is not None:
                error_handler(error, context)
            else:
                fail(str(error))

            exit(1)

    return wrapper


def require_login(func):
    """
    Fail with a usage hint when the command is run without a stored token. The decorated
    function must receive the SplashContext as its first argument (@click.pass_obj).
    """

    @wraps(func)
    def wrapper(obj: SplashContext, *args, **kwargs):
        if not obj.settings.token:
            name = click.get_current_context().info_name
            raise click.UsageError(
                f"'{name}' requires a logged in user. Run 'splashy login' first."
            )
        return func(obj, *args, **kwargs)

    return wrapper

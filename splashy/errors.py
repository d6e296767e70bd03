"""
splashy error reporting

Unhandled errors end up in error_handler: the error is saved as 'lastError', a short block
asks the user to report it, and when the user opted in the error is sent to Sentry. The
resulting event id is saved as 'lastEventId' so it can be quoted in a GitHub issue.
"""

import os

import sentry_sdk

from splashy import __version__
from splashy.cli_utils.console import error_console
from splashy.cli_utils.console import logger
from splashy.cli_utils.console import print_block
from splashy.prompts import Decision
from splashy.prompts import TerminalPrompter


ISSUES_URL = "https://github.com/splash-cli/splash-cli/issues"

_sentry_initialized = False


def capture_with_sentry(error: BaseException):
    """
    Send error to Sentry and return the event id. The client is initialized on first use from
    SPLASHY_SENTRY_DSN; without a DSN nothing is sent and None is returned.
    """

    global _sentry_initialized

    if not _sentry_initialized:
        sentry_sdk.init(
            dsn=os.getenv("SPLASHY_SENTRY_DSN"),
            release=f"splashy@{__version__}",
            default_integrations=False,
        )
        _sentry_initialized = True

    return sentry_sdk.capture_exception(error)


def report_prompt(error: BaseException, context, prompter=None, sink=capture_with_sentry):
    """
    Ask the user whether to report error, unless reports are sent automatically. On consent the
    error goes to sink and the returned event id is saved.
    """

    settings = context.settings
    automatic = settings.get("shouldReportErrorsAutomatically") is True

    should_report = automatic or (prompter or TerminalPrompter()).decide(
        Decision.REPORT_ERROR
    )

    if should_report:
        event_id = sink(error)
        settings.set("lastEventId", event_id)
        return event_id

    return None


def error_handler(error: BaseException, context, prompter=None, sink=capture_with_sentry):
    """
    Save, display, optionally report and log error.
    """

    settings = context.settings
    settings.set("lastError", {"type": type(error).__name__, "message": str(error)})

    print_block(
        "",
        "[bold red]OOps! We got an error![/]",
        "",
        f"Please report it: [underline green][link={ISSUES_URL}]on GitHub[/link][/]",
        "",
        "[yellow][bold]Splash Error[/bold]:[/]",
        "",
        target=error_console,
    )

    if settings.get("shouldReportErrors") is True or settings.get(
        "shouldReportErrorsAutomatically"
    ):
        report_prompt(error, context, prompter=prompter, sink=sink)

    logger.error("%s: %s", type(error).__name__, error)

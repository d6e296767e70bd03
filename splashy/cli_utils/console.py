"""
splashy console utilities

This module provides application-wide access to Rich Console objects for
handling writing to stdout and stderr, the 'splashy' logger and a few block
formatting helpers. Quiet mode silences the informational console and the
spinner; the error console keeps printing.
"""

import json
import logging
import re
from contextlib import contextmanager
from random import choice

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

splashy_theme = Theme(
    {
        "warning": "orange_red1",
        "fail": "bold red",
        "confirm": "green",
        "describe": "",
        "muted": "dim",
    }
)

console = Console(theme=splashy_theme)
error_console = Console(theme=splashy_theme, stderr=True)

logger = logging.getLogger("splashy")


class QuietFilter(logging.Filter):
    """Drop records below ERROR while the console is quiet."""

    def filter(self, record):
        return not console.quiet or record.levelno >= logging.ERROR


logger.addFilter(QuietFilter())


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Attach a RichHandler writing to stderr. Safe to call more than once.
    """

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=error_console, show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


def set_quiet(quiet: bool = True):
    """Silence (or restore) informational output and the spinner."""

    console.quiet = quiet


"""
Formatting helpers
"""


def warn(msg: str):
    """
    Format msg and print to stderr. Nothing is printed in quiet mode.
    """

    if console.quiet:
        return

    error_console.print(
        f":exclamation_mark-emoji: [bold]warning: [/] {msg}", style="warning"
    )


def describe(msg: str, **kwargs):
    """
    Format descriptive msg and print to stdout.
    """

    console.print(f"{msg}", style="describe", **kwargs)


def confirm_success(msg: str, **kwargs):
    """
    Format confirmation msg and print to stdout. Accept any additional kwargs that console.print from
    rich module exposes.
    """

    console.print(f"{msg}", style="confirm", **kwargs)


def fail(msg: str):
    """
    Format failure msg and print to stderr.
    """

    error_console.print(f":x-emoji: failed. {escape(msg)}", style="fail")


def print_block(*lines: str, target: Console = None):
    """
    Clear the screen and print lines surrounded by a blank line on each side.
    """

    target = target or console

    target.clear()
    target.print()
    for line in lines:
        target.print(line)
    target.print()


SPINNER_SENTENCES = [
    "Making something awesome",
    "Something is happening...",
    "Magic stuff",
    "Doing something... else",
    "You know, backend stuff..",
]


@contextmanager
def spinner(text: str = None):
    """
    Show a spinner while the body runs. Nothing is drawn in quiet mode.
    """

    text = text or choice(SPINNER_SENTENCES)

    if console.quiet:
        yield None
        return

    with console.status(f"[yellow]{text}", spinner="earth") as status:
        yield status


def highlight_json(data) -> str:
    """
    Dump data as indented JSON and return it with rich markup applied per token type:
    punctuation dim, strings yellow, numbers cyan, true/false magenta and null dim.
    """

    token = re.compile(
        r'(?P<string>"(?:\\.|[^"\\])*")'
        r"|(?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)"
        r"|(?P<boolean>\btrue\b|\bfalse\b)"
        r"|(?P<null>\bnull\b)"
        r"|(?P<punctuation>[{}\[\],:])"
    )
    styles = {
        "string": "yellow",
        "number": "cyan",
        "boolean": "magenta",
        "null": "dim",
        "punctuation": "dim",
    }

    def paint(match):
        kind = match.lastgroup
        return f"[{styles[kind]}]{escape(match.group(kind))}[/]"

    return token.sub(paint, json.dumps(data, indent=2, default=str))

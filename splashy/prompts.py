"""
splashy prompts

The download pipeline never talks to the terminal directly when it needs a yes/no answer.
Instead it names the Decision it needs and asks a prompter for it. TerminalPrompter asks the
user with click, ScriptedPrompter replays fixed answers (used by tests), NonInteractivePrompter
takes every default.
"""

import re
from enum import Enum

import click

from splashy.cli_utils.console import console
from splashy.cli_utils.console import describe


class Decision(Enum):
    """A yes/no question the pipeline may ask, with its message and default answer."""

    CONFIRM_WALLPAPER = ("Keep this wallpaper?", True)
    LIKE_PHOTO = ("Do you like this photo?", True)
    ADD_TO_COLLECTION = ("Do you want add this photo to a collection?", False)
    REPORT_ERROR = ("Report the error?", True)

    def __init__(self, message: str, default: bool):
        self.message = message
        self.default = default


def collection_label(collection: dict) -> str:
    return f"[{collection['id']}] {collection.get('title') or ''}".rstrip()


def extract_collection_id(label: str):
    """Read the id back out of a '[id] title' label. Returns None if there is none."""

    match = re.match(r"\s*\[([^\]]+)\]", label)
    return match.group(1).strip() if match else None


def fuzzy_filter(pattern: str, choices: list) -> list:
    """
    Keep the choices containing every character of pattern in order (case insensitive). Matches
    are sorted so that longer runs of consecutive characters come first; ties keep their
    original order. An empty pattern keeps everything.
    """

    pattern = (pattern or "").lower()

    if not pattern:
        return list(choices)

    scored = []

    for position, item in enumerate(choices):
        text = str(item).lower()
        index, run, score = 0, 0, 0

        for char in text:
            if index < len(pattern) and char == pattern[index]:
                index += 1
                run += 1
                score += run
            else:
                run = 0

        if index == len(pattern):
            scored.append((-score, position, item))

    return [item for _, _, item in sorted(scored, key=lambda entry: entry[:2])]


class TerminalPrompter:
    """Ask the user in the terminal."""

    def decide(self, decision: Decision) -> bool:
        return click.confirm(decision.message, default=decision.default)

    def choose_collection(self, collections: list):
        labels = [collection_label(collection) for collection in collections]

        if not labels:
            raise click.ClickException("You have no collections yet.")

        matches = []
        while not matches:
            search = click.prompt(
                "Please choose a collection (type to filter)", default="", show_default=False
            )
            matches = fuzzy_filter(search, labels)
            if not matches:
                describe(f"No collection matches '{search}'.")

        for number, label in enumerate(matches, start=1):
            console.print(f"  {number}) {label}", highlight=False, markup=False)

        number = click.prompt(
            "Collection number", type=click.IntRange(1, len(matches)), default=1
        )

        return extract_collection_id(matches[number - 1])


class ScriptedPrompter:
    """
    Answer decisions from a mapping. Unlisted decisions get their default. Every decision asked
    is recorded in 'asked', in order.
    """

    def __init__(self, answers: dict = None, collection=None):
        self.answers = dict(answers or {})
        self.collection = collection
        self.asked = []

    def decide(self, decision: Decision) -> bool:
        self.asked.append(decision)
        return self.answers.get(decision, decision.default)

    def choose_collection(self, collections: list):
        return self.collection


class NonInteractivePrompter(ScriptedPrompter):
    """Take the default answer for everything and never pick a collection."""

    def __init__(self):
        super().__init__()

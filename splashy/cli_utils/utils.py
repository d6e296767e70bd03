"""
splashy CLI Utilities

This module contains utilities for working across Click subcommands: importing subcommands from
the subcommands directory and attaching them to the entry point group.
"""

import sys
import inspect
import importlib.util

from pathlib import Path
from collections.abc import Iterable

import click

import splashy

from splashy.cli_utils.console import warn


def import_commands(module_paths: Iterable = None) -> list:
    """
    Retrieve a set of click Commands from module_paths. Default directory is the built in
    subcommands directory for commands that come pre-installed with splashy.

    A valid splashy command module defines a "cli" function that is wrapped as a click Command
    (or Group) object. Set the 'name' keyword argument in the @click.command decorator to set the
    name of the command intended for the end user.
    """

    if module_paths is None:
        module_paths = sorted(Path(splashy.__file__).parent.glob("subcommands/*.py"))

    commands = []

    for path in module_paths:
        name = inspect.getmodulename(path)
        if name == "__init__":
            continue

        # Recipe for loading and executing modules from given filepath
        # comes from importlib docs:
        # https://docs.python.org/3/library/importlib.html#importing-a-source-file-directly

        qualified_name = f"splashy.subcommands.{name}"
        spec = importlib.util.spec_from_file_location(qualified_name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[qualified_name] = module
        spec.loader.exec_module(module)

        try:
            commands.append(getattr(module, "cli"))

        except AttributeError:
            warn(f"Cannot add command {name}: no 'cli' function found.")

    return commands


def attach_commands(group: click.Group, commands: list):
    """
    Attach each command in a list of click Command objects to a provided group. Useful when
    retrieving a dynamic list of subcommands with import_commands().
    """

    for command in commands:
        group.add_command(command)

"""
splashy alias

Manage collection aliases: short names that can be used wherever splashy expects a collection id,
e.g. 'splashy alias set nature 3330445' then 'splashy --collection nature'.
"""

import click

from splashy.context import SplashContext
from splashy.cli_utils.console import confirm_success
from splashy.cli_utils.console import console
from splashy.cli_utils.console import describe
from splashy.cli_utils.decorators import catch_errors


@click.group(name="alias", invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context):
    """Manage collection aliases."""

    if ctx.invoked_subcommand is None:
        ctx.invoke(list_)


@cli.command(name="set")
@click.argument("name")
@click.argument("collection_id")
@click.pass_obj
@catch_errors
def set_(obj: SplashContext, name, collection_id):
    """Save NAME as an alias for COLLECTION_ID."""

    obj.aliases.set(name, collection_id)
    confirm_success(f":white_check_mark-emoji: '{name}' now points to collection {collection_id}")


@cli.command()
@click.argument("name")
@click.pass_obj
@catch_errors
def remove(obj: SplashContext, name):
    """Delete the alias NAME."""

    if not obj.aliases.has(name):
        raise click.UsageError(f"No alias named '{name}'.")

    obj.aliases.remove(name)
    confirm_success(f":wastebasket-emoji: Removed alias '{name}'")


@cli.command(name="list")
@click.pass_obj
@catch_errors
def list_(obj: SplashContext):
    """List every alias."""

    aliases = obj.aliases.all()

    if not aliases:
        describe("No aliases yet. Add one with 'splashy alias set <name> <collection id>'.")
        return

    for name, record in sorted(aliases.items()):
        console.print(f"[yellow]{name}[/] [dim]->[/] {record['id']}")

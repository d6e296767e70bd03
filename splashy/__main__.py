"""
__main__.py

This file adds support for running splashy as a python module (python -m splashy) and is also
the target of the 'splashy' console script.
"""


import splashy.cli_utils.utils as utils
from splashy.cli import cli


def main():

    commands = utils.import_commands()
    utils.attach_commands(cli, commands)
    cli()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3

import click

from codewall.commands.config import config_cmd
from codewall.commands.estimate import estimate_handler
from codewall.commands.generate import generate_handler


@click.group(invoke_without_command=True)
@click.version_option(package_name='codewall')
@click.pass_context
def cli(ctx):
    """codewall - Desktop wallpaper from a random file of a random GitHub repository.

    Run with no command to generate one wallpaper in the current directory.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(generate_handler)


cli.add_command(generate_handler, name='generate')
cli.add_command(estimate_handler, name='estimate-max-id')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()

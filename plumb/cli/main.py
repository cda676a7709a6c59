"""Main CLI entry point for Plumb."""

import logging

import click
from colorama import init

from plumb import __version__
from plumb.cli.output import BANNER
from plumb.cli.commands import (init_cmd, cat_file_cmd, hash_object_cmd, ls_tree_cmd,
                                write_tree_cmd, commit_tree_cmd, clone_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class PlumbGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=PlumbGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr')
def cli(verbose):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s %(name)s %(levelname)s: %(message)s',
        )


cli.add_command(init_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(ls_tree_cmd)
cli.add_command(write_tree_cmd)
cli.add_command(commit_tree_cmd)
cli.add_command(clone_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()

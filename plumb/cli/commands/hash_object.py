"""Compute a blob hash for a file, optionally storing it."""

import click
from plumb.core.errors import PlumbError
from plumb.core.objects import Blob
from plumb.core.repository import Repository
from plumb.cli.output import abort


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the blob into the object store')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def hash_object_cmd(write, file):
    """
    Compute the object hash of FILE as a blob.

    Examples:
        plumb hash-object README.md       # Print the hash only
        plumb hash-object -w README.md    # Also store the blob
    """
    blob = Blob.from_file(file)

    if not write:
        click.echo(blob.hash)
        return

    repo = Repository.find_repository()
    if not repo:
        abort("Not a git repository")

    try:
        click.echo(repo.write_object(blob))
    except PlumbError as e:
        abort(f"hash-object failed: {e}")

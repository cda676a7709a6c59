"""Show the content, type or size of a stored object."""

import click
from plumb.core.errors import PlumbError
from plumb.core.objects import content
from plumb.core.repository import Repository
from plumb.cli.output import abort


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Pretty-print object content')
@click.argument('object_hash')
def cat_file_cmd(show_type, show_size, pretty, object_hash):
    """
    Show object content, type, or size.

    Examples:
        plumb cat-file -t abc123...     # Show object type
        plumb cat-file -s abc123...     # Show payload size
        plumb cat-file -p abc123...     # Pretty-print object content
    """
    repo = Repository.find_repository()
    if not repo:
        abort("Not a git repository")

    if not (show_type or show_size or pretty):
        abort("One of -t, -s or -p is required")

    try:
        obj = repo.read_object(object_hash)

        if show_type:
            click.echo(obj.type)
        elif show_size:
            click.echo(len(obj.serialize()))
        else:
            click.echo(content(obj), nl=False)

    except PlumbError as e:
        abort(f"cat-file failed: {e}")

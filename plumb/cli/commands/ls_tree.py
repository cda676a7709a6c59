"""List tree contents."""

import click
from plumb.core.errors import PlumbError
from plumb.core.objects import Tree, Commit
from plumb.core.repository import Repository
from plumb.cli.output import abort


@click.command('ls-tree')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.argument('treeish', required=False, default='HEAD')
def ls_tree_cmd(name_only, treeish):
    """
    List contents of a tree object.

    TREEISH can be a tree or commit hash, a branch name, or HEAD.

    Examples:
        plumb ls-tree HEAD               # Show tree for HEAD
        plumb ls-tree --name-only <hash> # Only show entry names
    """
    repo = Repository.find_repository()
    if not repo:
        abort("Not a git repository")

    obj_hash = repo.refs.resolve_reference(treeish)
    if not obj_hash:
        abort(f"Not a valid reference: {treeish}")

    try:
        obj = repo.read_object(obj_hash)
        if isinstance(obj, Commit):
            obj = repo.read_object(obj.tree)
        if not isinstance(obj, Tree):
            abort(f"Not a tree object: {treeish}")

        if name_only:
            for entry in obj.entries:
                click.echo(entry.name)
        else:
            click.echo(obj.content(), nl=False)

    except PlumbError as e:
        abort(f"ls-tree failed: {e}")

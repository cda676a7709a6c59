"""Write the working directory as a tree object."""

import click
from plumb.core.errors import PlumbError
from plumb.core.objects import Tree
from plumb.core.repository import Repository
from plumb.cli.output import abort


@click.command('write-tree')
def write_tree_cmd():
    """
    Create tree objects from the current working directory.

    Every file is stored as a blob and every subdirectory as a tree;
    the hash of the root tree is printed.
    """
    repo = Repository.find_repository()
    if not repo:
        abort("Not a git repository")

    try:
        tree = Tree.from_directory(repo, str(repo.work_tree))
        click.echo(repo.write_object(tree))
    except (PlumbError, OSError) as e:
        abort(f"write-tree failed: {e}")

"""Create a commit object from a tree."""

import click
from plumb.core.config import get_config
from plumb.core.errors import PlumbError
from plumb.core.objects import Commit, Tree
from plumb.core.repository import Repository
from plumb.cli.output import abort


@click.command('commit-tree')
@click.argument('tree_hash')
@click.option('-p', '--parent', 'parents', multiple=True, help='Parent commit (repeatable)')
@click.option('-m', '--message', required=True, help='Commit message')
def commit_tree_cmd(tree_hash, parents, message):
    """
    Create a commit for TREE_HASH and print its hash.

    Author and committer come from GIT_AUTHOR_*/GIT_COMMITTER_* environment
    variables, then user.name/user.email in the config.

    Examples:
        plumb commit-tree <tree> -m "Initial commit"
        plumb commit-tree <tree> -p <parent> -m "Second commit"
    """
    repo = Repository.find_repository()
    if not repo:
        abort("Not a git repository")

    config = get_config(repo)
    author_name, author_email = config.get_identity('author')
    committer_name, committer_email = config.get_identity('committer')

    if not message.endswith('\n'):
        message += '\n'

    try:
        tree = repo.read_object(tree_hash)
        if not isinstance(tree, Tree):
            abort(f"{tree_hash} is not a tree")

        commit = Commit.create(
            tree_hash=tree_hash,
            parent_hashes=list(parents),
            author=f"{author_name} <{author_email}>",
            committer=f"{committer_name} <{committer_email}>",
            message=message,
        )
        click.echo(repo.write_object(commit))
    except PlumbError as e:
        abort(f"commit-tree failed: {e}")

"""Initialize a new Git repository."""

import click
from pathlib import Path
from plumb.core.errors import PlumbError
from plumb.core.repository import Repository
from plumb.cli.output import success, error, info, abort


@click.command('init')
@click.argument('path', default='.')
def init_cmd(path):
    """
    Initialize a new repository.

    Creates a .git directory with the object store, refs and HEAD.

    Examples:
        plumb init                    # Initialize in current directory
        plumb init my-project         # Initialize in my-project directory
    """
    repo_path = Path(path).resolve()

    try:
        repo = Repository(str(repo_path))
        repo.init()
    except PermissionError:
        abort(f"Permission denied: Cannot create repository at {path}")
    except PlumbError as e:
        click.echo(error(str(e)))
        click.echo(info("Use an empty directory or different path"))
        raise click.Abort()

    click.echo(success(f"Initialized empty Git repository in {repo.git_dir}"))

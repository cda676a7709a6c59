"""Clone command - clone a repository into a new directory."""

import click
from plumb.core.errors import PlumbError
from plumb.core.repository import Repository
from plumb.cli.output import success, info, warning, abort


def default_directory(repository: str) -> str:
    """Infer the clone directory from the last path segment of the URL."""
    name = repository.rstrip('/').rsplit('/', 1)[-1]
    if name.endswith('.git'):
        name = name[:-4]
    return name or 'repo'


@click.command('clone')
@click.argument('repository')
@click.argument('directory', required=False)
def clone_cmd(repository, directory):
    """
    Clone a repository into a new directory.

    Fetches the branch the remote's HEAD points to over smart HTTP,
    stores every object and checks out its tree.

    REPOSITORY: http:// or https:// URL of the source repository
    DIRECTORY: Destination directory (optional, inferred from the URL)

    Examples:
        plumb clone https://github.com/user/project.git
        plumb clone https://github.com/user/project.git my-project
    """
    if not directory:
        directory = default_directory(repository)

    click.echo(info(f"Cloning into '{directory}'..."))

    try:
        cloned_repo = Repository(directory).remote.clone(repository, directory)
    except PlumbError as e:
        abort(f"Failed to clone repository: {e}")

    object_count = sum(1 for p in cloned_repo.objects_dir.rglob('*') if p.is_file())
    branch = cloned_repo.refs.get_current_branch()

    click.echo(success(f"Cloned repository with {object_count} objects"))
    if branch:
        click.echo(info(f"Checked out branch '{branch}'"))
    else:
        click.echo(warning(f"HEAD detached at {cloned_repo.refs.resolve_head()}"))

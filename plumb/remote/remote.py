"""Remote repository operations for Plumb."""

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from plumb.core.config import Config
from plumb.core.errors import PlumbError, ProtocolError, RepositoryError
from plumb.core.repository import Repository
from plumb.core.refs import check_ref_format
from plumb.operations.checkout import checkout_commit
from plumb.remote.protocol import Ref, fetch_ref, get_refs

logger = logging.getLogger(__name__)

HTTP_SCHEMES = ('http://', 'https://')


class RemoteManager:
    """
    Manages remote repository operations.

    Remotes are recorded in .git/config; cloning speaks the smart HTTP
    protocol (http:// and https:// URLs).
    """

    def __init__(self, repo: Repository):
        self.repo = repo

    @property
    def config(self) -> Config:
        return Config(self.repo.config_file)

    def add_remote(self, name: str, url: str) -> None:
        """
        Add a remote repository.

        Args:
            name: Remote name (e.g., 'origin')
            url: Remote URL
        """
        section = f'remote "{name}"'
        config = self.config
        config.set(section, 'url', url)
        config.set(section, 'fetch', f'+refs/heads/*:refs/remotes/{name}/*')

    def list_remotes(self) -> Dict[str, str]:
        """
        List all configured remotes.

        Returns:
            Dict mapping remote names to URLs
        """
        config = self.config
        remotes = {}
        for section in config.sections('remote "'):
            if section.endswith('"'):
                remotes[section[8:-1]] = config.get(section, 'url')
        return remotes

    def get_remote_url(self, name: str) -> Optional[str]:
        """Get URL for a remote."""
        return self.list_remotes().get(name)

    def clone(self, source_url: str, dest_path: str, remote_name: str = 'origin') -> Repository:
        """
        Clone a repository from a remote source.

        Fetches the pack for the remote's HEAD, stores every object,
        sets up the branch HEAD points to and checks it out.

        Args:
            source_url: http(s) URL of the source repository
            dest_path: Destination path for cloned repository
            remote_name: Name for the remote (default: 'origin')

        Returns:
            Repository: The cloned repository

        Raises:
            RepositoryError: If the destination is a non-empty directory
            PlumbError: If the protocol is unsupported or the fetch fails
        """
        dest = Path(dest_path).resolve()
        if dest.exists() and (not dest.is_dir() or any(dest.iterdir())):
            raise RepositoryError(f"Destination already exists and is not empty: {dest}")

        if not source_url.startswith(HTTP_SCHEMES):
            raise PlumbError(
                f"Cannot clone {source_url}: only http:// and https:// URLs are supported"
            )

        created = not dest.exists()
        try:
            return self._clone_http(source_url, dest, remote_name)
        except PlumbError:
            if created:
                shutil.rmtree(dest, ignore_errors=True)
            raise

    def _clone_http(self, source_url: str, dest: Path, remote_name: str) -> Repository:
        dest_repo = Repository(str(dest))
        dest_repo.init()
        dest_repo.remote.add_remote(remote_name, source_url)

        refs = get_refs(source_url)
        if not refs:
            raise ProtocolError(f"Remote {source_url} advertised no refs")
        head = refs[0]

        logger.info("Fetching %s (%s) from %s", head.name, head.hash, source_url)
        objects = fetch_ref(source_url, head.hash)
        if head.hash not in objects:
            raise ProtocolError(f"Pack from {source_url} does not contain {head.hash}")

        for obj in objects.values():
            dest_repo.write_object(obj)
        logger.info("Stored %d objects", len(objects))

        self._write_refs(dest_repo, refs, head, objects, remote_name)
        checkout_commit(dest_repo, head.hash)
        return dest_repo

    def _write_refs(self, repo: Repository, refs: List[Ref], head: Ref,
                    objects: Dict, remote_name: str) -> None:
        """Record remote-tracking branches and point HEAD at the fetched commit."""
        branch = None
        for ref in refs:
            if not ref.name.startswith('refs/heads/') or ref.hash not in objects:
                continue
            if not check_ref_format(ref.name):
                logger.warning("Skipping invalid ref name from remote: %r", ref.name)
                continue
            short_name = ref.name[len('refs/heads/'):]
            repo.refs.write_ref(f'refs/remotes/{remote_name}/{short_name}', ref.hash)
            if branch is None and ref.hash == head.hash:
                branch = short_name

        if branch:
            repo.refs.write_ref(f'refs/heads/{branch}', head.hash)
            repo.refs.set_head(branch)
        else:
            repo.refs.set_head(head.hash, symbolic=False)

"""Configuration for Plumb.

Values are looked up in layers, first hit wins:

1. ``PLUMB_<SECTION>_<KEY>`` environment variables
2. the repository's ``.git/config``
3. the user's ``~/.plumbconfig``

Only the repository file is ever written (remote bookkeeping during clone).
"""

import configparser
import os
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

DEFAULT_NAME = 'plumb'
DEFAULT_EMAIL = 'plumb@localhost'


def _read_ini(path: Optional[Path]) -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    if path is not None and path.exists():
        parser.read(path)
    return parser


class Config:
    """Layered view over the repository and global INI files."""

    GLOBAL_CONFIG_PATH = Path.home() / '.plumbconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        self.repo_config_path = repo_config_path
        self._repo = _read_ini(repo_config_path)
        self._global = _read_ini(self.GLOBAL_CONFIG_PATH)

    def _files(self) -> Iterator[configparser.ConfigParser]:
        yield self._repo
        yield self._global

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        value = os.environ.get(f"PLUMB_{section.upper()}_{key.upper()}")
        if value is not None:
            return value
        for parser in self._files():
            if parser.has_option(section, key):
                return parser.get(section, key)
        return fallback

    def set(self, section: str, key: str, value: str) -> None:
        """Set section.key in the repository file and save it."""
        if self.repo_config_path is None:
            raise ValueError("No repository config path available")
        if not self._repo.has_section(section):
            self._repo.add_section(section)
        self._repo.set(section, key, value)
        with open(self.repo_config_path, 'w') as f:
            self._repo.write(f)

    def sections(self, prefix: str = '') -> List[str]:
        """Repository sections whose name starts with prefix."""
        return [s for s in self._repo.sections() if s.startswith(prefix)]

    def get_identity(self, role: str = 'author') -> Tuple[str, str]:
        """
        Name and email for a commit author or committer.

        ``GIT_<ROLE>_NAME``/``GIT_<ROLE>_EMAIL`` win over ``user.name`` and
        ``user.email``; DEFAULT_NAME/DEFAULT_EMAIL fill whatever is left.
        """
        prefix = f'GIT_{role.upper()}'
        name = os.environ.get(f'{prefix}_NAME') or self.get('user', 'name')
        email = os.environ.get(f'{prefix}_EMAIL') or self.get('user', 'email')
        return name or DEFAULT_NAME, email or DEFAULT_EMAIL


def get_config(repo=None) -> Config:
    """Config for repo, or global-only when repo is None."""
    return Config(repo.config_file if repo else None)

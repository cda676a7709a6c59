"""Reference management for Plumb."""

import logging
import re
from typing import Optional

from .errors import PlumbError

logger = logging.getLogger(__name__)

HEX_HASH = re.compile(r'^[0-9a-f]{40}$')
BAD_REF_CHARS = set('\177 ~^:?*[')


def check_ref_format(ref_name: str) -> bool:
    """
    Check a ref name against the rules of git check-ref-format.

    Returns:
        True if ref_name is well formed, False otherwise
    """
    if '/.' in ref_name or ref_name.startswith(('.', '/')):
        return False
    if '/' not in ref_name or '..' in ref_name or '//' in ref_name:
        return False
    if any(ord(c) < 0o40 or c in BAD_REF_CHARS for c in ref_name):
        return False
    if ref_name[-1] in '/.' or ref_name.endswith('.lock'):
        return False
    return '@{' not in ref_name and '\\' not in ref_name


class RefManager:
    """
    Manages Git references (branches, tags, HEAD).

    Handles:
    - Symbolic references (HEAD pointing to branch)
    - Direct references (detached HEAD)
    - Branch references (refs/heads/*)
    - Tag and remote-tracking references
    """

    def __init__(self, repo):
        self.repo = repo
        self.git_dir = repo.git_dir
        self.heads_dir = repo.heads_dir
        self.tags_dir = repo.tags_dir
        self.head_file = repo.head_file

    def read_ref(self, ref_name: str) -> Optional[str]:
        """
        Read a reference and return the hash it points to.

        Args:
            ref_name: Reference name (e.g., 'refs/heads/master', 'HEAD', 'master')

        Returns:
            Object hash or None if reference doesn't exist
        """
        if ref_name == 'HEAD':
            return self.resolve_head()

        for ref_path in (self.git_dir / ref_name,
                         self.heads_dir / ref_name,
                         self.tags_dir / ref_name):
            if ref_path.is_file():
                content = ref_path.read_text().strip()
                if content.startswith('ref: '):
                    return self.read_ref(content[5:])
                return content

        return None

    def write_ref(self, ref_name: str, obj_hash: str) -> None:
        """
        Write a reference to point to an object.

        Args:
            ref_name: Full reference name (e.g., 'refs/heads/master')
            obj_hash: 40-character hash to point to
        """
        if not HEX_HASH.match(obj_hash):
            raise PlumbError(f"Invalid hash for {ref_name}: {obj_hash!r}")
        if not check_ref_format(ref_name):
            raise PlumbError(f"Invalid ref name: {ref_name!r}")

        ref_path = self.git_dir / ref_name
        if not ref_path.resolve().is_relative_to(self.git_dir.resolve()):
            raise PlumbError(f"Ref {ref_name!r} resolves outside {self.git_dir}")
        ref_path.parent.mkdir(parents=True, exist_ok=True)
        ref_path.write_text(obj_hash + '\n')
        logger.debug("Updated %s to %s", ref_name, obj_hash)

    def resolve_head(self) -> Optional[str]:
        """
        Resolve HEAD to a hash.

        Returns:
            Hash or None if HEAD doesn't exist or points at an unborn branch
        """
        if not self.head_file.exists():
            return None

        content = self.head_file.read_text().strip()
        if content.startswith('ref: '):
            return self.read_ref(content[5:])
        return content

    def get_current_branch(self) -> Optional[str]:
        """
        Get the current branch name.

        Returns:
            Branch name or None if in detached HEAD state
        """
        if not self.head_file.exists():
            return None

        content = self.head_file.read_text().strip()
        if content.startswith('ref: refs/heads/'):
            return content[16:]
        return None

    def set_head(self, target: str, symbolic: bool = True) -> None:
        """
        Set HEAD to point to a branch or directly at a commit.

        Args:
            target: Branch name (if symbolic) or commit hash (if direct)
            symbolic: If True, create symbolic reference; if False, detach
        """
        if symbolic:
            if not target.startswith('refs/'):
                target = f'refs/heads/{target}'
            if not check_ref_format(target):
                raise PlumbError(f"Invalid ref name for HEAD: {target!r}")
            self.head_file.write_text(f'ref: {target}\n')
        else:
            if not HEX_HASH.match(target):
                raise PlumbError(f"Invalid hash for HEAD: {target!r}")
            self.head_file.write_text(target + '\n')

    def resolve_reference(self, ref: str) -> Optional[str]:
        """
        Resolve HEAD, a branch, a tag, or a full hash to an object hash.

        Args:
            ref: Reference string (e.g., 'HEAD', 'master', full hash)

        Returns:
            Hash or None if the reference can't be resolved
        """
        if HEX_HASH.match(ref.lower()):
            return ref.lower()
        return self.read_ref(ref)

"""Capability interface for listing repository files."""

from abc import ABC, abstractmethod

from mdxsync.vcs.models import FileNode


class TreeProvider(ABC):
    """Lists the files of a repository at a ref.

    Job enumeration depends only on this interface, so the hosting
    provider can be swapped without touching title derivation or
    job mapping.
    """

    @abstractmethod
    async def list_files(self, owner: str, repo: str, ref: str) -> list[FileNode]:
        """Return every file and directory in the tree of ref.

        Args:
            owner: Repository owner (user or organization).
            repo: Repository name.
            ref: Branch name, tag, or commit sha.
        """
        ...

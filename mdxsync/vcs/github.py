"""GitHub tree provider using PyGithub."""

import asyncio
import os
from functools import cached_property

from github import Auth, Github, GithubException

from mdxsync.errors import EnumerationError
from mdxsync.vcs.base import TreeProvider
from mdxsync.vcs.models import FileNode


class GitHubProvider(TreeProvider):
    """GitHub implementation of TreeProvider using PyGithub.

    Resolves the ref to its head commit, then reads that commit's tree
    recursively in a single API call. PyGithub is synchronous, so the
    blocking calls are wrapped with asyncio.to_thread().
    """

    def __init__(self, token: str | None = None):
        # Anonymous access is fine for public repos, at a lower rate limit.
        self._token = token if token is not None else os.environ.get("GITHUB_TOKEN", "")

    @cached_property
    def _client(self) -> Github:
        if self._token:
            return Github(auth=Auth.Token(self._token))
        return Github()

    async def list_files(self, owner: str, repo: str, ref: str) -> list[FileNode]:
        repo_id = f"{owner}/{repo}"

        def _sync() -> list[FileNode]:
            repository = self._client.get_repo(repo_id)
            sha = repository.get_branch(ref).commit.sha
            tree = repository.get_git_tree(sha, recursive=True)
            return [
                FileNode(
                    path=element.path,
                    type="dir" if element.type == "tree" else "file",
                    size=element.size,
                    sha=element.sha,
                )
                for element in tree.tree
            ]

        try:
            return await asyncio.to_thread(_sync)
        except GithubException as e:
            raise EnumerationError(repo_id, ref, e) from e

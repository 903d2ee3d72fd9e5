"""Repository tree providers and job enumeration."""

import os

from mdxsync.config.models import VCSConfig
from mdxsync.vcs.base import TreeProvider
from mdxsync.vcs.enumerator import JobEnumerator, job_for_file, output_name
from mdxsync.vcs.github import GitHubProvider
from mdxsync.vcs.models import FileNode


def create_provider(config: VCSConfig) -> TreeProvider:
    """Create a tree provider from config.

    Reads the token from the environment variable named in config.token_env;
    an unset variable means anonymous access.
    """
    if config.provider != "github":
        raise ValueError(
            f"Unsupported VCS provider: {config.provider!r}. "
            "Currently only 'github' is supported."
        )
    return GitHubProvider(token=os.environ.get(config.token_env, ""))


__all__ = [
    "FileNode",
    "GitHubProvider",
    "JobEnumerator",
    "TreeProvider",
    "create_provider",
    "job_for_file",
    "output_name",
]

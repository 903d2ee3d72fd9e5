"""Builds job lists by enumerating a repository's Markdown files."""

from __future__ import annotations

import fnmatch
import logging
import posixpath

from mdxsync.config.models import RepoSourceConfig
from mdxsync.jobs.models import Job
from mdxsync.jobs.titles import title_for_path
from mdxsync.vcs.base import TreeProvider
from mdxsync.vcs.models import FileNode

logger = logging.getLogger(__name__)

RAW_HOST = "https://raw.githubusercontent.com"
BROWSE_HOST = "https://github.com"


def output_name(filename: str) -> str:
    """README.md -> index.mdx, guide.md -> guide.mdx"""
    stem, _, ext = filename.rpartition(".")
    if not stem:
        return filename
    if stem.lower() == "readme":
        return "index.mdx"
    if ext.lower() == "md":
        return f"{stem}.mdx"
    return filename


def _matches(node: FileNode, source: RepoSourceConfig) -> bool:
    if node.type != "file":
        return False
    if source.path_prefix and not node.path.startswith(source.path_prefix):
        return False
    extensions = {e.lower() for e in source.extensions}
    if posixpath.splitext(node.path)[1].lower() not in extensions:
        return False
    for pattern in source.exclude:
        # Patterns with '/' match against full path, others match filename only
        target = node.path if "/" in pattern else node.name
        if fnmatch.fnmatch(target, pattern):
            return False
    return True


def job_for_file(path: str, source: RepoSourceConfig) -> Job:
    """Map one repository file to the job that mirrors it."""
    rel = path[len(source.path_prefix):] if source.path_prefix else path
    rel = rel.lstrip("/")
    rel_dir, filename = posixpath.split(rel)
    output_path = posixpath.join(source.output_dir, rel_dir, output_name(filename))
    title = title_for_path(path)
    return Job(
        source_url=f"{RAW_HOST}/{source.owner}/{source.repo}/{source.branch}/{path}",
        content_url=f"{BROWSE_HOST}/{source.owner}/{source.repo}/blob/{source.branch}/{path}",
        output_path=output_path,
        title=title,
        description=source.description.replace("{title}", title),
    )


class JobEnumerator:
    """Turns a repository source description into a job list via a TreeProvider."""

    def __init__(self, provider: TreeProvider) -> None:
        self.provider = provider

    async def enumerate(self, source: RepoSourceConfig) -> list[Job]:
        """List the repository tree and map matching files to jobs, sorted by path.

        EnumerationError from the provider propagates: without the tree
        there is no job list to run.
        """
        nodes = await self.provider.list_files(source.owner, source.repo, source.branch)
        matched = sorted((n for n in nodes if _matches(n, source)), key=lambda n: n.path)
        logger.info(
            "%s@%s: %d of %d tree entries match",
            source.repo_id, source.branch, len(matched), len(nodes),
        )
        return [job_for_file(n.path, source) for n in matched]

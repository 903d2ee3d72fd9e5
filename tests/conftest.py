"""Shared test fixtures for mdxsync."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from mdxsync.config.models import (
    FetchConfig,
    MdxsyncConfig,
    OutputConfig,
    RepoSourceConfig,
)
from mdxsync.jobs.models import Job, TransformMeta
from mdxsync.vcs.base import TreeProvider
from mdxsync.vcs.models import FileNode


@pytest.fixture
def sample_job():
    return Job(
        source_url="https://raw.githubusercontent.com/acme/widget/main/docs/guide.md",
        content_url="https://github.com/acme/widget/blob/main/docs/guide.md",
        output_path="content/docs/widget/guide.mdx",
        title="Widget Guide",
        description="How to use the widget.",
    )


@pytest.fixture
def sample_meta():
    return TransformMeta(
        title="Widget Guide",
        description="How to use the widget.",
        source_base_url="https://github.com/acme/widget/blob/main/docs/",
        edit_url="https://github.com/acme/widget/edit/main/docs/guide.md",
    )


@pytest.fixture
def sample_file_tree():
    """Mix of files and dirs under docs/, plus noise at the root."""
    return [
        FileNode(path="docs", type="dir"),
        FileNode(path="docs/README.md", type="file", size=900, sha="a1"),
        FileNode(path="docs/getting-started.md", type="file", size=2000, sha="a2"),
        FileNode(path="docs/validatormanager", type="dir"),
        FileNode(path="docs/validatormanager/README.md", type="file", size=700, sha="a3"),
        FileNode(path="docs/validatormanager/diagram.png", type="file", size=5000, sha="a4"),
        FileNode(path="docs/drafts/wip.md", type="file", size=100, sha="a5"),
        FileNode(path="docs/CHANGELOG.md", type="file", size=300, sha="a6"),
        FileNode(path="README.md", type="file", size=1200, sha="a7"),
        FileNode(path="src/main.go", type="file", size=800, sha="a8"),
    ]


@pytest.fixture
def mock_tree_provider(sample_file_tree):
    provider = MagicMock(spec=TreeProvider)
    provider.list_files = AsyncMock(return_value=sample_file_tree)
    return provider


@pytest.fixture
def repo_source():
    return RepoSourceConfig(
        name="widget-docs",
        owner="acme",
        repo="widget",
        branch="main",
        path_prefix="docs/",
        extensions=[".md"],
        exclude=["CHANGELOG.md", "docs/drafts/*"],
        output_dir="content/docs/widget",
        pipeline="sdks",
    )


@pytest.fixture
def output_config(tmp_path):
    return OutputConfig(base_dir=str(tmp_path), gitignore_path=".gitignore")


@pytest.fixture
def sample_config(tmp_path):
    return MdxsyncConfig(output=OutputConfig(base_dir=str(tmp_path)))


@pytest.fixture
def fetch_config():
    return FetchConfig(timeout=5.0)

"""Tests for the mdxsync CLI commands."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import yaml
from typer.testing import CliRunner

from mdxsync.cli import app
from mdxsync.driver import HttpFetcher
from mdxsync.errors import EnumerationError
from mdxsync.vcs.base import TreeProvider
from mdxsync.vcs.models import FileNode

runner = CliRunner()

RAW = "https://raw.githubusercontent.com/acme/widget/main"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate(tmp_path, monkeypatch):
    """Run every command from an empty directory with no user config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    with patch("mdxsync.cli.configure_logging") as configure:
        yield configure


def _write_config(tmp_path, **overrides) -> str:
    data = {
        "output": {"base_dir": str(tmp_path / "site"), "gitignore_marker": "remote"},
        "sections": [
            {
                "name": "a",
                "pipeline": "default",
                "jobs": [
                    {"source_url": f"{RAW}/alpha.md", "output_path": "out/alpha.mdx", "title": "Alpha"},
                    {"source_url": f"{RAW}/gone.md", "output_path": "out/gone.mdx", "title": "Gone"},
                ],
            },
            {
                "name": "b",
                "pipeline": "sdks",
                "jobs": [
                    {"source_url": f"{RAW}/beta.md", "output_path": "out/beta.mdx", "title": "Beta"},
                ],
            },
        ],
        **overrides,
    }
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


@pytest.fixture
def fake_fetcher():
    """Route HttpFetcher through an in-memory transport: alpha and beta exist, gone is 404."""
    routes = {
        f"{RAW}/alpha.md": (200, "# Alpha\n\nHello.\n"),
        f"{RAW}/beta.md": (200, "Beta {x}\n"),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        status, body = routes.get(str(request.url), (404, "Not Found"))
        return httpx.Response(status, text=body)

    def factory(config):
        return HttpFetcher(config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    with patch("mdxsync.cli.HttpFetcher", side_effect=factory):
        yield


# ---------------------------------------------------------------------------
# callback
# ---------------------------------------------------------------------------


def test_logging_configured_from_config(tmp_path, _isolate):
    cfg = _write_config(tmp_path, log_level="debug", log_format="json")
    result = runner.invoke(app, ["--config", cfg, "pipelines"])
    assert result.exit_code == 0
    _isolate.assert_called_once_with("debug", "json")


def test_missing_config_file_exits(tmp_path):
    result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "pipelines"])
    assert result.exit_code == 1
    assert "not found" in result.output


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


def test_run_reports_and_writes(tmp_path, fake_fetcher):
    cfg = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", cfg, "run"])

    assert result.exit_code == 0, result.output
    assert "Processed 2/3" in result.output
    assert "Failed (1)" in result.output
    site = tmp_path / "site"
    assert (site / "out" / "alpha.mdx").read_text().endswith("\nHello.\n")
    assert (site / "out" / "beta.mdx").read_text().endswith("\nBeta \\{x\\}\n")
    assert not (site / "out" / "gone.mdx").exists()
    assert (site / ".gitignore").read_text() == (
        "# BEGIN remote\nout/alpha.mdx\nout/beta.mdx\nout/gone.mdx\n# END remote\n"
    )


def test_run_dry_run(tmp_path, fake_fetcher):
    cfg = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", cfg, "run", "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "dry run" in result.output
    assert not (tmp_path / "site").exists()


def test_run_no_gitignore(tmp_path, fake_fetcher):
    cfg = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", cfg, "run", "--no-gitignore"])
    assert result.exit_code == 0, result.output
    assert not (tmp_path / "site" / ".gitignore").exists()


def test_run_section_filter(tmp_path, fake_fetcher):
    cfg = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", cfg, "run", "--section", "b"])
    assert result.exit_code == 0, result.output
    assert "Processed 1/1" in result.output
    assert not (tmp_path / "site" / "out" / "alpha.mdx").exists()


def test_run_unknown_pipeline_exits(tmp_path, fake_fetcher):
    cfg = _write_config(
        tmp_path,
        sections=[{"name": "x", "pipeline": "nope", "jobs": []}],
    )
    result = runner.invoke(app, ["--config", cfg, "run"])
    assert result.exit_code == 1
    assert "Unknown pipeline" in result.output


def test_run_with_no_jobs(tmp_path):
    cfg = _write_config(tmp_path, sections=[])
    result = runner.invoke(app, ["--config", cfg, "run"])
    assert result.exit_code == 0
    assert "No jobs" in result.output


def test_run_enumeration_failure_exits(tmp_path):
    cfg = _write_config(
        tmp_path,
        repos=[{"owner": "acme", "repo": "widget", "output_dir": "out/widget"}],
    )
    provider = MagicMock(spec=TreeProvider)
    provider.list_files = AsyncMock(
        side_effect=EnumerationError("acme/widget", "main", RuntimeError("rate limited"))
    )
    with patch("mdxsync.cli.create_provider", return_value=provider):
        result = runner.invoke(app, ["--config", cfg, "run"])
    assert result.exit_code == 1
    assert "acme/widget@main" in result.output


# ---------------------------------------------------------------------------
# jobs
# ---------------------------------------------------------------------------


def test_jobs_lists_static_and_enumerated(tmp_path):
    cfg = _write_config(
        tmp_path,
        repos=[{"name": "w", "owner": "acme", "repo": "widget", "output_dir": "w"}],
    )
    provider = MagicMock(spec=TreeProvider)
    provider.list_files = AsyncMock(return_value=[FileNode(path="intro.md", type="file")])
    with patch("mdxsync.cli.create_provider", return_value=provider):
        result = runner.invoke(app, ["--config", cfg, "jobs"])
    assert result.exit_code == 0, result.output
    assert "Jobs (4)" in result.output
    assert "w/intro.mdx" in result.output


def test_jobs_skip_repos(tmp_path):
    cfg = _write_config(
        tmp_path,
        repos=[{"owner": "acme", "repo": "widget", "output_dir": "w"}],
    )
    with patch("mdxsync.cli.create_provider") as create:
        result = runner.invoke(app, ["--config", cfg, "jobs", "--skip-repos"])
    assert result.exit_code == 0
    assert "Jobs (3)" in result.output
    create.assert_not_called()


# ---------------------------------------------------------------------------
# transform
# ---------------------------------------------------------------------------


def test_transform_prints_document(tmp_path):
    src = tmp_path / "getting-started.md"
    src.write_text("# Getting Started\n\nUse x ≤ 3.\n")
    result = runner.invoke(app, ["transform", str(src)])
    assert result.exit_code == 0, result.output
    assert result.output == (
        "---\n"
        'title: "Getting Started"\n'
        'description: ""\n'
        "edit_url: \n"
        "---\n"
        "\n"
        "Use x &lt;= 3.\n"
    )


def test_transform_escapes_quoted_edit_url(tmp_path):
    src = tmp_path / "a.md"
    src.write_text("body\n")
    result = runner.invoke(
        app, ["transform", str(src), "--title", "A", "--edit-url", 'https://x.dev/e/a"b.md']
    )
    assert result.exit_code == 0, result.output
    assert 'edit_url: "https://x.dev/e/a\\"b.md"\n' in result.output


def test_transform_to_file(tmp_path):
    src = tmp_path / "a.md"
    src.write_text("```golang\nx\n```\n")
    out = tmp_path / "build" / "a.mdx"
    result = runner.invoke(
        app,
        ["transform", str(src), "--pipeline", "primary-network", "--title", "A", "--output", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert "```go\n" in out.read_text()


def test_transform_unknown_pipeline(tmp_path):
    src = tmp_path / "a.md"
    src.write_text("x")
    result = runner.invoke(app, ["transform", str(src), "--pipeline", "nope"])
    assert result.exit_code == 1


# ---------------------------------------------------------------------------
# gitignore / pipelines / config
# ---------------------------------------------------------------------------


def test_gitignore_command_is_idempotent(tmp_path):
    cfg = _write_config(tmp_path)
    first = runner.invoke(app, ["--config", cfg, "gitignore"])
    assert first.exit_code == 0, first.output
    content = (tmp_path / "site" / ".gitignore").read_bytes()

    second = runner.invoke(app, ["--config", cfg, "gitignore"])
    assert second.exit_code == 0
    assert "Already up to date" in second.output
    assert (tmp_path / "site" / ".gitignore").read_bytes() == content


def test_pipelines_lists_names():
    result = runner.invoke(app, ["pipelines"])
    assert result.exit_code == 0
    for name in ("default", "sdks", "acps"):
        assert name in result.output


def test_config_init_and_show(tmp_path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "mdxsync.yaml").exists()

    again = runner.invoke(app, ["config", "init"])
    assert again.exit_code == 1
    assert "already exists" in again.output

    forced = runner.invoke(app, ["config", "init", "--force"])
    assert forced.exit_code == 0

    shown = runner.invoke(app, ["config", "show"])
    assert shown.exit_code == 0
    assert "primary-network" in shown.output

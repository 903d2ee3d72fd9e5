"""CLI entry point for mdxsync."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table

from mdxsync.config import MdxsyncConfig, SectionConfig, load_config
from mdxsync.config.loader import DEFAULT_CONFIG_TEMPLATE
from mdxsync.driver import HttpFetcher, IngestDriver, IngestReport, ignore_entries
from mdxsync.errors import MdxsyncError
from mdxsync.jobs import TransformMeta, title_for_path
from mdxsync.log import configure_logging
from mdxsync.output import IgnoreList, MdxWriter
from mdxsync.transform import PIPELINE_NAMES, get_pipeline, postprocess
from mdxsync.vcs import JobEnumerator, create_provider

app = typer.Typer(
    name="mdxsync",
    help="Pull remote Markdown into MDX documentation pages.",
)

config_app = typer.Typer(help="Manage mdxsync configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: MdxsyncConfig | None = None


def _get_config() -> MdxsyncConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to mdxsync.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _wanted(name: str, only: list[str] | None) -> bool:
    return not only or name in only


async def _resolve_sections(
    cfg: MdxsyncConfig, only: list[str] | None, skip_repos: bool
) -> list[SectionConfig]:
    """Static sections plus one section per enumerated repository source.

    Raises EnumerationError if a repository tree cannot be listed and
    UnknownPipelineError if any selected section names an unregistered pipeline.
    """
    sections = [s for s in cfg.sections if _wanted(s.name, only)]
    sources = [] if skip_repos else [r for r in cfg.repos if _wanted(r.section_name, only)]
    if sources:
        enumerator = JobEnumerator(create_provider(cfg.vcs))
        for source in sources:
            jobs = await enumerator.enumerate(source)
            sections.append(
                SectionConfig(name=source.section_name, pipeline=source.pipeline, jobs=jobs)
            )
    for s in sections:
        get_pipeline(s.pipeline)
    return sections


def _load_sections(
    cfg: MdxsyncConfig, only: list[str] | None, skip_repos: bool
) -> list[SectionConfig]:
    try:
        return asyncio.run(_resolve_sections(cfg, only, skip_repos))
    except (MdxsyncError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _ignore_list(cfg: MdxsyncConfig) -> IgnoreList:
    path = Path(cfg.output.base_dir) / cfg.output.gitignore_path
    return IgnoreList(path, cfg.output.gitignore_marker)


def _display_report(report: IngestReport, dry_run: bool) -> None:
    """Print the success count and a table of failed jobs."""
    colour = "green" if not report.failed else "yellow"
    rprint(
        f"[{colour}]Processed {report.succeeded}/{report.total}[/{colour}] "
        f"job(s) in {report.duration:.1f}s"
    )
    if dry_run:
        rprint("[yellow](dry run: nothing written)[/yellow]")
    elif report.gitignore_updated:
        rprint("[green]Updated[/green] ignore-list")

    if report.failed:
        table = Table(title=f"Failed ({len(report.failed)})")
        table.add_column("Source URL", style="cyan")
        table.add_column("Error", style="red")
        for f in report.failed:
            table.add_row(f.source_url, f.error)
        rprint(table)


_SECTION_OPTION = typer.Option(
    None, "--section", "-s", help="Only this section (repeatable)"
)
_SKIP_REPOS_OPTION = typer.Option(
    False, "--skip-repos", help="Skip repository enumeration; static sections only"
)


@app.command()
def run(
    section: list[str] | None = _SECTION_OPTION,
    skip_repos: bool = _SKIP_REPOS_OPTION,
    dry_run: bool = typer.Option(False, "--dry-run", help="Fetch and transform without writing"),
    gitignore: bool | None = typer.Option(
        None, "--gitignore/--no-gitignore", help="Record outputs in the ignore-list"
    ),
) -> None:
    """Fetch every job, transform it and write the MDX pages."""
    cfg = _get_config()
    sections = _load_sections(cfg, section, skip_repos)
    n_jobs = sum(len(s.jobs) for s in sections)
    if not n_jobs:
        rprint("[yellow]No jobs to run.[/yellow]")
        raise typer.Exit(0)

    update_ignore = gitignore if gitignore is not None else cfg.output.update_gitignore
    writer = MdxWriter(cfg.output)
    ignore = _ignore_list(cfg) if update_ignore else None
    rprint(f"[bold]Running[/bold] {n_jobs} job(s) across {len(sections)} section(s)...")

    async def _run() -> IngestReport:
        async with HttpFetcher(cfg.fetch) as fetcher:
            driver = IngestDriver(fetcher, writer, ignore, dry_run=dry_run)
            return await driver.run(sections)

    try:
        report = asyncio.run(_run())
    except (OSError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _display_report(report, dry_run)


@app.command()
def jobs(
    section: list[str] | None = _SECTION_OPTION,
    skip_repos: bool = _SKIP_REPOS_OPTION,
) -> None:
    """List the resolved jobs without fetching anything."""
    cfg = _get_config()
    sections = _load_sections(cfg, section, skip_repos)
    table = Table(title=f"Jobs ({sum(len(s.jobs) for s in sections)})")
    table.add_column("Section", style="cyan")
    table.add_column("Pipeline", style="magenta")
    table.add_column("Output", style="green")
    table.add_column("Title")
    for s in sections:
        for job in s.jobs:
            table.add_row(s.name, s.pipeline, job.output_path, job.title)
    rprint(table)


@app.command()
def transform(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local Markdown file"),
    pipeline: str = typer.Option("default", "--pipeline", "-p", help="Pipeline name"),
    title: str | None = typer.Option(None, "--title", help="Page title (default: from filename)"),
    description: str = typer.Option("", "--description", help="Page description"),
    base_url: str = typer.Option("", "--base-url", help="Base URL for relative links"),
    edit_url: str | None = typer.Option(None, "--edit-url", help="Front-matter edit_url"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
) -> None:
    """Run one pipeline plus the final repair pass over a local file."""
    try:
        stages = get_pipeline(pipeline)
    except MdxsyncError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    meta = TransformMeta(
        title=title or title_for_path(file.name),
        description=description,
        source_base_url=base_url,
        edit_url=edit_url,
    )
    result = postprocess(stages.apply(file.read_text(encoding="utf-8"), meta))

    if output is None:
        typer.echo(result, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    rprint(f"[green]Wrote[/green] {output}")


@app.command()
def pipelines() -> None:
    """List registered pipelines and their stages."""
    table = Table(title="Pipelines")
    table.add_column("Name", style="cyan")
    table.add_column("Stages")
    for name in PIPELINE_NAMES:
        table.add_row(name, " -> ".join(get_pipeline(name).stage_names()))
    rprint(table)


@app.command()
def gitignore(
    section: list[str] | None = _SECTION_OPTION,
    skip_repos: bool = _SKIP_REPOS_OPTION,
) -> None:
    """Add every job's output path to the ignore-list without fetching."""
    cfg = _get_config()
    sections = _load_sections(cfg, section, skip_repos)
    writer = MdxWriter(cfg.output)
    ignore = _ignore_list(cfg)
    all_jobs = [job for s in sections for job in s.jobs]
    try:
        changed = ignore.update(ignore_entries(all_jobs, writer, ignore))
    except (OSError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if changed:
        rprint(f"[green]Updated[/green] {ignore.path}")
    else:
        rprint(f"[dim]Already up to date:[/dim] {ignore.path}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    import yaml

    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default mdxsync.yaml in current directory."""
    target = Path("mdxsync.yaml")
    if target.exists() and not force:
        rprint("[yellow]mdxsync.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")

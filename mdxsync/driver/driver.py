"""IngestDriver: fetch, transform and emit every declared job."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from mdxsync.config.models import SectionConfig
from mdxsync.driver.fetcher import HttpFetcher
from mdxsync.driver.models import IngestReport, JobFailure
from mdxsync.driver.urls import build_meta
from mdxsync.errors import FetchError
from mdxsync.jobs.models import Job
from mdxsync.output.gitignore import IgnoreList
from mdxsync.output.writer import MdxWriter
from mdxsync.transform.pipeline import TransformPipeline
from mdxsync.transform.registry import get_pipeline
from mdxsync.transform.repair import postprocess

logger = logging.getLogger(__name__)


def render(content: str, job: Job, pipeline: TransformPipeline) -> str:
    """Run a job's fetched content through its pipeline and the final repair pass."""
    meta = build_meta(job)
    return postprocess(pipeline.apply(content, meta))


def ignore_entries(jobs: Sequence[Job], writer: MdxWriter, ignore_list: IgnoreList) -> list[str]:
    """Ignore-list lines for the files the given jobs write."""
    return [ignore_list.relative_entry(writer.resolve(job.output_path)) for job in jobs]


class IngestDriver:
    """Processes sections of jobs one at a time.

    A failed fetch is logged, recorded in the report and skipped; the batch
    moves on. Write errors propagate. The ignore-list is updated once, after
    every job has run.
    """

    def __init__(
        self,
        fetcher: HttpFetcher,
        writer: MdxWriter,
        ignore_list: IgnoreList | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.fetcher = fetcher
        self.writer = writer
        self.ignore_list = ignore_list
        self.dry_run = dry_run

    async def run_job(self, job: Job, pipeline: TransformPipeline) -> str:
        """Fetch, transform and write one job. Returns the written path."""
        raw = await self.fetcher.fetch_text(job.source_url)
        document = render(raw, job, pipeline)
        dest = self.writer.write(job.output_path, document, dry_run=self.dry_run)
        return str(dest)

    async def run(self, sections: Sequence[SectionConfig]) -> IngestReport:
        start = time.monotonic()
        report = IngestReport()
        all_jobs: list[Job] = []

        for section in sections:
            pipeline = get_pipeline(section.pipeline)
            logger.info(
                "section %s: %d job(s), pipeline %s",
                section.name, len(section.jobs), section.pipeline,
            )
            for job in section.jobs:
                all_jobs.append(job)
                try:
                    written = await self.run_job(job, pipeline)
                except FetchError as exc:
                    report.failed.append(
                        JobFailure(
                            source_url=job.source_url,
                            output_path=job.output_path,
                            error=str(exc),
                        )
                    )
                    logger.error("skipping %s: %s", job.source_url, exc)
                    continue
                report.succeeded += 1
                report.written.append(written)

        if self.ignore_list is not None and not self.dry_run:
            report.gitignore_updated = self.update_ignore_list(all_jobs)

        report.duration = time.monotonic() - start
        logger.info("processed %d/%d job(s)", report.succeeded, report.total)
        return report

    def update_ignore_list(self, jobs: Sequence[Job]) -> bool:
        """Merge every job's output path into the ignore-list."""
        if self.ignore_list is None:
            return False
        return self.ignore_list.update(ignore_entries(jobs, self.writer, self.ignore_list))

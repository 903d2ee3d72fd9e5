"""Fetch/emit driver: runs jobs end to end."""

from mdxsync.driver.driver import IngestDriver, ignore_entries, render
from mdxsync.driver.fetcher import HttpFetcher
from mdxsync.driver.models import IngestReport, JobFailure
from mdxsync.driver.urls import build_meta, derive_edit_url, source_base_url

__all__ = [
    "HttpFetcher",
    "IngestDriver",
    "IngestReport",
    "JobFailure",
    "build_meta",
    "derive_edit_url",
    "ignore_entries",
    "render",
    "source_base_url",
]

"""URL derivations for a job: edit link and link-resolution base."""

from __future__ import annotations

import re

from mdxsync.jobs.models import Job, TransformMeta

_RAW_RE = re.compile(r"^https?://raw\.githubusercontent\.com/([^/]+)/([^/]+)/([^/]+)/(.*)$")
_BLOB_RE = re.compile(r"^(https?://github\.com/[^/]+/[^/]+)/blob/(.*)$")


def derive_edit_url(source_url: str) -> str | None:
    """raw.githubusercontent.com/o/r/main/a.md -> github.com/o/r/edit/main/a.md

    Browsable blob URLs map to their edit form too. Anything else has no
    edit URL.
    """
    m = _RAW_RE.match(source_url)
    if m:
        owner, repo, branch, path = m.groups()
        return f"https://github.com/{owner}/{repo}/edit/{branch}/{path}"
    m = _BLOB_RE.match(source_url)
    if m:
        return f"{m.group(1)}/edit/{m.group(2)}"
    return None


def source_base_url(job: Job) -> str:
    """Directory-level URL of the document, for resolving its relative links."""
    url = job.content_url or job.source_url
    url = url.split("#", 1)[0].split("?", 1)[0]
    return url[: url.rfind("/") + 1] if "/" in url else url


def build_meta(job: Job) -> TransformMeta:
    return TransformMeta(
        title=job.title,
        description=job.description,
        source_base_url=source_base_url(job),
        edit_url=derive_edit_url(job.source_url),
    )

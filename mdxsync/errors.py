"""Exception types raised across mdxsync."""

from __future__ import annotations


class MdxsyncError(Exception):
    """Base class for mdxsync errors."""


class FetchError(MdxsyncError):
    """Wraps an HTTP client failure with the URL being fetched."""

    def __init__(
        self, source_url: str, cause: Exception, status_code: int | None = None
    ) -> None:
        self.source_url = source_url
        self.status_code = status_code
        detail = f"HTTP {status_code}" if status_code is not None else str(cause)
        super().__init__(f"fetch {source_url} failed: {detail}")
        self.__cause__ = cause


class EnumerationError(MdxsyncError):
    """Listing a repository tree failed; the job list cannot be built."""

    def __init__(self, repo_id: str, ref: str, cause: Exception) -> None:
        self.repo_id = repo_id
        self.ref = ref
        super().__init__(f"listing {repo_id}@{ref} failed: {cause}")
        self.__cause__ = cause


class UnknownPipelineError(KeyError, MdxsyncError):
    """Raised when a section names a pipeline that is not registered."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        super().__init__(f"Unknown pipeline {name!r}. Known pipelines: {', '.join(known)}")

    def __str__(self) -> str:
        return self.args[0]

"""Pydantic models for content-migration jobs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Job(BaseModel):
    """One remote document and the MDX file it becomes."""

    model_config = ConfigDict(frozen=True)

    source_url: str = Field(description="Raw-content URL fetched as text")
    output_path: str = Field(description="Destination path, relative to output.base_dir")
    title: str
    description: str = ""
    content_url: str = Field(
        default="",
        description="Browsable URL of the document; its directory resolves relative links",
    )


class TransformMeta(BaseModel):
    """Per-job context handed read-only to every transform in a pipeline."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    source_base_url: str = ""
    edit_url: str | None = None

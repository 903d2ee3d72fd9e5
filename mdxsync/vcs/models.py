"""Pydantic models for VCS data."""

from typing import Literal

from pydantic import BaseModel


class FileNode(BaseModel):
    """A file or directory in a repository tree."""

    path: str
    type: Literal["file", "dir"]
    size: int | None = None
    sha: str | None = None

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

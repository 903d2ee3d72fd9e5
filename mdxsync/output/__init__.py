"""Output subsystem: writes MDX files and maintains the ignore-list."""

from mdxsync.output.gitignore import IgnoreList
from mdxsync.output.writer import MdxWriter

__all__ = [
    "IgnoreList",
    "MdxWriter",
]

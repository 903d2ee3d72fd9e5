"""MdxWriter: writes transformed documents to disk."""

from __future__ import annotations

import logging
from pathlib import Path

from mdxsync.config.models import OutputConfig

logger = logging.getLogger(__name__)


class MdxWriter:
    """Writes documents under output.base_dir.

    Creates missing directories, overwrites existing files unconditionally,
    and supports dry-run mode. OSError is never caught here: a page that
    cannot be written must fail the run.
    """

    def __init__(self, config: OutputConfig) -> None:
        self.config = config
        self.base_dir = Path(config.base_dir)

    def resolve(self, output_path: str) -> Path:
        """Destination for output_path; refuses paths that escape base_dir."""
        dest = self.base_dir / output_path
        if not dest.resolve().is_relative_to(self.base_dir.resolve()):
            raise ValueError(f"Output path escapes base directory: {output_path}")
        return dest

    def write(self, output_path: str, content: str, *, dry_run: bool = False) -> Path:
        """Write one document. Returns the Path of the written (or would-be) file."""
        dest = self.resolve(output_path)

        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding="utf-8")
        logger.info("wrote %s (%d bytes)", dest, len(content))
        return dest

"""Maintains a generated, append-only section of a .gitignore file."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


class IgnoreList:
    """A marked section inside an ignore file listing generated output paths.

    Lines outside the section are never touched. Inside it, entries are
    only ever added, and the section is kept sorted, so updating twice with
    the same paths leaves the file byte-identical.
    """

    def __init__(self, path: str | Path, marker: str) -> None:
        self.path = Path(path)
        self.begin = f"# BEGIN {marker}"
        self.end = f"# END {marker}"

    def _split(self, text: str) -> tuple[list[str], list[str] | None, list[str]]:
        """(lines before, section entries or None if absent, lines after)"""
        lines = text.splitlines()
        try:
            start = lines.index(self.begin)
        except ValueError:
            return lines, None, []
        try:
            stop = lines.index(self.end, start + 1)
        except ValueError:
            stop = len(lines)
        entries = [line.strip() for line in lines[start + 1:stop] if line.strip()]
        return lines[:start], entries, lines[stop + 1:]

    def entries(self) -> list[str]:
        if not self.path.exists():
            return []
        _, section, _ = self._split(self.path.read_text(encoding="utf-8"))
        return section or []

    def relative_entry(self, output_file: str | Path) -> str:
        """Path of output_file relative to the ignore file's directory, posix style."""
        rel = os.path.relpath(Path(output_file).resolve(), self.path.parent.resolve())
        return Path(rel).as_posix()

    def update(self, paths: Iterable[str]) -> bool:
        """Merge paths into the section. Returns True if the file was rewritten."""
        text = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        before, section, after = self._split(text)
        existing = section or []
        missing = sorted(set(paths) - set(existing))
        if section is not None and not missing:
            logger.debug("%s already lists all %d paths", self.path, len(existing))
            return False

        merged = sorted(set(existing) | set(missing))
        block = [self.begin, *merged, self.end]
        if section is None:
            head = "\n".join(before).rstrip("\n")
            lines = ([head, ""] if head else []) + block
        else:
            lines = before + block + after

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        logger.info("added %d path(s) to %s", len(missing), self.path)
        return True

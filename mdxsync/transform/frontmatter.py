"""Generates the title/description/edit_url front-matter block for each page."""

from __future__ import annotations

import re

from mdxsync.jobs.models import TransformMeta

from .pipeline import Transform

_FRONTMATTER_RE = re.compile(r"\A\ufeff?[ \t\n]*---[ \t]*\n(.*?\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)
# no whitespace, quotes or backslashes: safe as a bare YAML scalar
_PLAIN_URL_RE = re.compile(r"""[A-Za-z][^\s"'\\]*""")


def split_frontmatter(document: str) -> tuple[str, str]:
    """Split a document into (front-matter block, body).

    The block includes its closing delimiter line; the body is returned
    untouched. Documents without front-matter yield ``("", document)``.
    """
    m = _FRONTMATTER_RE.match(document)
    if m is None:
        return "", document
    return document[: m.end()], document[m.end():]


def strip_frontmatter(content: str) -> str:
    _, body = split_frontmatter(content)
    return body


def escape_value(value: str) -> str:
    """Make value safe inside a double-quoted YAML scalar."""
    value = " ".join(value.split())
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_url(url: str | None) -> str:
    """Plain scalar for an ordinary URL; quoted and escaped otherwise."""
    if not url or _PLAIN_URL_RE.fullmatch(url):
        return url or ""
    return f'"{escape_value(url)}"'


def render_frontmatter(meta: TransformMeta) -> str:
    lines = [
        "---",
        f'title: "{escape_value(meta.title)}"',
        f'description: "{escape_value(meta.description)}"',
        f"edit_url: {render_url(meta.edit_url)}",
        "---",
    ]
    return "\n".join(lines) + "\n"


def add_frontmatter(content: str, meta: TransformMeta) -> str:
    """Replace any existing front-matter with one generated from meta."""
    body = strip_frontmatter(content).lstrip("\n")
    return f"{render_frontmatter(meta)}\n{body}"


class FrontmatterInjector(Transform):
    def apply(self, content: str, meta: TransformMeta) -> str:
        return add_frontmatter(content, meta)

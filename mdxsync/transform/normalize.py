"""Rewrites GitHub-flavored Markdown idioms into MDX-safe equivalents.

Each rewrite is a plain ``str -> str`` function so it can be tested and
composed on its own; ``MarkdownNormalizer`` runs them in order inside a
placeholder-vault scope so code and math are never touched.
"""

from __future__ import annotations

import re

from mdxsync.jobs.models import TransformMeta

from .pipeline import Transform
from .placeholders import CODE_AND_MATH, PlaceholderVault

# GitHub alert kinds -> directive names understood by the docs framework.
ADMONITION_KINDS: dict[str, str] = {
    "NOTE": "note",
    "TIP": "tip",
    "INFO": "info",
    "IMPORTANT": "info",
    "WARNING": "warning",
    "CAUTION": "danger",
    "DANGER": "danger",
}

_ADMONITION_RE = re.compile(
    r"^>[ \t]*\[!?(" + "|".join(ADMONITION_KINDS) + r")\][ \t]*(.*)(\n?)"
    r"((?:^>.*(?:\n|$))*)",
    re.MULTILINE | re.IGNORECASE,
)
_DIRECTIVE_INDENT_RE = re.compile(r"^[ \t]+(:{2,3}[\w\[\]-]*)[ \t]*$", re.MULTILINE)
_IMAGE_RE = re.compile(r'(?<!\[)!\[([^\]\n]*)\]\(\s*([^)\s]+)(?:\s+"[^"]*")?\s*\)')
_TRIPLE_BANG_RE = re.compile(r"^!!![ \t]*(\w+)", re.MULTILINE)
_DOUBLE_BANG_RE = re.compile(r"^!![ \t]*(\w+)", re.MULTILINE)
_STRAY_BANG_RE = re.compile(r"^!(?![\[{!])", re.MULTILINE)
_HTML_COMMENT_RE = re.compile(r"<!--(.*?)-->", re.DOTALL)
_BR_RE = re.compile(r"<br\s*/?\s*>", re.IGNORECASE)
_HEADING_RE = re.compile(r"^(#{1,6})([ \t]+.*)$", re.MULTILINE)
_TITLE_HEADING_RE = re.compile(r"^#[ \t]+.*(?:\n|$)", re.MULTILINE)


def convert_admonitions(content: str) -> str:
    """> [NOTE] text  ->  :::note / text / :::"""

    def _replace(m: re.Match) -> str:
        kind = ADMONITION_KINDS[m.group(1).upper()]
        lines = [m.group(2).strip()] if m.group(2).strip() else []
        for line in m.group(4).splitlines():
            lines.append(re.sub(r"^>[ \t]?", "", line))
        body = "\n".join(lines).strip("\n")
        consumed_newline = bool(m.group(3)) or m.group(4).endswith("\n")
        tail = "\n" if consumed_newline and m.end() < len(m.string) else ""
        return f":::{kind}\n{body}\n:::{tail}"

    return _ADMONITION_RE.sub(_replace, content)


def normalize_directives(content: str) -> str:
    """Strip indentation in front of ::: directive lines."""
    return _DIRECTIVE_INDENT_RE.sub(r"\1", content)


def convert_images(content: str) -> str:
    """![alt](src) -> <img alt="alt" src="src" />, except inside a link."""

    def _replace(m: re.Match) -> str:
        alt = m.group(1).replace('"', "&quot;")
        return f'<img alt="{alt}" src="{m.group(2)}" />'

    return _IMAGE_RE.sub(_replace, content)


def convert_bang_admonitions(content: str) -> str:
    """!!! note -> :::note and !! note -> ::note"""
    content = _TRIPLE_BANG_RE.sub(r":::\1", content)
    return _DOUBLE_BANG_RE.sub(r"::\1", content)


def strip_stray_bangs(content: str) -> str:
    """Drop a leading ! that does not start an image or expression."""
    return _STRAY_BANG_RE.sub("", content)


def convert_comments(content: str) -> str:
    """<!-- text --> -> {/* text */}"""

    def _replace(m: re.Match) -> str:
        text = m.group(1).strip().replace("*/", "* /")
        return f"{{/* {text} */}}" if text else "{/* */}"

    return _HTML_COMMENT_RE.sub(_replace, content)


def normalize_breaks(content: str) -> str:
    return _BR_RE.sub("<br />", content)


def remove_title_heading(content: str) -> str:
    """Drop the document's leading # heading; the title lives in front-matter."""
    first = _HEADING_RE.search(content)
    if first is None or first.group(1) != "#":
        return content
    m = _TITLE_HEADING_RE.match(content, first.start())
    if m is None:
        return content
    return content[: m.start()] + content[m.end():].lstrip("\n")


def shift_headings(content: str) -> str:
    """Demote every heading one level, capped at h6."""

    def _replace(m: re.Match) -> str:
        level = min(len(m.group(1)) + 1, 6)
        return "#" * level + m.group(2)

    return _HEADING_RE.sub(_replace, content)


def normalize_headings(content: str) -> str:
    return shift_headings(remove_title_heading(content))


# Applied in this order by MarkdownNormalizer.
NORMALIZE_STEPS = [
    convert_admonitions,
    convert_bang_admonitions,
    strip_stray_bangs,
    convert_images,
    convert_comments,
    normalize_breaks,
    normalize_headings,
    normalize_directives,
]


def normalize(content: str, steps=None) -> str:
    """Run the normalizer steps with code and math held out of reach."""
    vault = PlaceholderVault()
    content = vault.protect_all(content, CODE_AND_MATH)
    for step in steps if steps is not None else NORMALIZE_STEPS:
        content = step(content)
    return vault.restore_all(content)


class MarkdownNormalizer(Transform):
    def __init__(self, steps=None):
        self.steps = list(steps) if steps is not None else list(NORMALIZE_STEPS)

    def apply(self, content: str, meta: TransformMeta) -> str:
        return normalize(content, self.steps)

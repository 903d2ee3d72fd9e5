"""Resolves relative Markdown link targets and <img src> values to absolute URLs."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

from mdxsync.jobs.models import TransformMeta

from .pipeline import Transform

IMAGE_EXTENSIONS: tuple[str, ...] = (".png", ".jpg", ".jpeg", ".gif", ".svg")

# The "](target)" tail of a Markdown link or image. Anchoring on the tail
# rather than the whole [text](target) form also catches the outer link of
# nested badges like [![ci](badge.svg)](actions).
_MD_LINK_RE = re.compile(r'\]\(\s*([^)\s]+)((?:\s+"[^"]*")?)\s*\)')

_IMG_TAG_RE = re.compile(
    r"<img\b((?:[^>\"']|\"[^\"]*\"|'[^']*')*?)"
    r"\bsrc\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s>\"']+))"
    r"((?:[^>\"']|\"[^\"]*\"|'[^']*')*?)\s*/?\s*>",
    re.IGNORECASE,
)

_BLOB_RE = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/blob/(.+)$")


def is_absolute(target: str) -> bool:
    """True for URLs with a scheme (http:, mailto:, ...), protocol-relative URLs and anchors."""
    if target.startswith(("#", "//")):
        return True
    return bool(urlparse(target).scheme)


def is_image_url(url: str) -> bool:
    path = urlparse(url).path.lower()
    return path.endswith(IMAGE_EXTENSIONS)


def blob_to_raw(url: str) -> str:
    """github.com/o/r/blob/main/a.png -> raw.githubusercontent.com/o/r/main/a.png

    Only image URLs are rewritten; anything else is returned unchanged.
    """
    m = _BLOB_RE.match(url)
    if not m or not is_image_url(url):
        return url
    owner, repo, rest = m.groups()
    return f"https://raw.githubusercontent.com/{owner}/{repo}/{rest}"


def resolve_target(target: str, base_url: str) -> str:
    """Resolve one Markdown link target against base_url."""
    if is_absolute(target):
        return blob_to_raw(target)
    if not base_url:
        return target
    return blob_to_raw(urljoin(base_url, target))


def resolve_src(value: str, base_url: str) -> str:
    """Resolve an <img src> value.

    Whitespace and query-string debris are dropped from relative values.
    Relative images under a GitHub blob base are served from the repo's
    /raw/ path so they render outside GitHub.
    """
    value = re.sub(r"\s+", "", value)
    if is_absolute(value):
        return blob_to_raw(value)
    value = value.split("?", 1)[0]
    if not base_url:
        return value
    resolved = urljoin(base_url, value)
    if _BLOB_RE.match(resolved):
        resolved = resolved.replace("/blob/", "/raw/", 1)
    return resolved


def resolve_links(content: str, base_url: str) -> str:
    """Rewrite every relative link target and image src in content to an absolute URL."""

    def _link(m: re.Match) -> str:
        target, title = m.group(1), m.group(2)
        return f"]({resolve_target(target, base_url)}{title})"

    def _img(m: re.Match) -> str:
        before = m.group(1).strip()
        src = m.group(2) if m.group(2) is not None else (
            m.group(3) if m.group(3) is not None else m.group(4)
        )
        after = m.group(5).strip().rstrip("/").strip()
        parts = ["<img"]
        if before:
            parts.append(before)
        parts.append(f'src="{resolve_src(src, base_url)}"')
        if after:
            parts.append(after)
        return " ".join(parts) + " />"

    content = _MD_LINK_RE.sub(_link, content)
    return _IMG_TAG_RE.sub(_img, content)


class LinkResolver(Transform):
    """Absolutizes links against the job's source_base_url."""

    def apply(self, content: str, meta: TransformMeta) -> str:
        return resolve_links(content, meta.source_base_url)

"""Placeholder vault: swap fragile regions for opaque tokens and back.

Regex passes over MDX cannot tell a ``<`` in prose from a ``<`` inside a
code span or a LaTeX expression. Before such passes run, every region that
must survive verbatim is moved into the vault and replaced by a token;
afterwards the tokens are swapped back.

Tokens are delimited by Unicode private-use code points, which never occur
in real documentation and which no rewrite rule matches. Each vault
instance stamps its own id into its tokens so that nested vaults (a repair
pass running inside an already protected stage) never restore each
other's entries.
"""

from __future__ import annotations

import itertools
import re

_TOKEN_OPEN = "\ue000"
_TOKEN_CLOSE = "\ue001"
_CATEGORY = r"[^:\s" + _TOKEN_OPEN + _TOKEN_CLOSE + r"]+"
_CATEGORY_RE = re.compile(_CATEGORY)
_TOKEN_RE = re.compile(_TOKEN_OPEN + r"(\d+):(" + _CATEGORY + r"):(\d+)" + _TOKEN_CLOSE)

_vault_ids = itertools.count(1)

CODE_BLOCKS = "code_blocks"
INLINE_CODE = "inline_code"
PRESERVED_COMPONENTS = "preserved_components"
MATH_EXPRESSIONS = "math_expressions"
FLOWCHARTS = "flowcharts"
DIV_BLOCKS = "div_blocks"
TABLE_ROWS = "table_rows"

# Fenced blocks other than mermaid; mermaid fences go to FLOWCHARTS.
CODE_BLOCK_RE = re.compile(
    r"^[ \t]*(`{3,}|~{3,})(?!\s*mermaid\b)[^\n]*\n.*?^[ \t]*\1[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
INLINE_CODE_RE = re.compile(r"``[^\n]+?``|`[^`\n]+`")
# JSX components whose attributes carry {expressions}, e.g. <Callout type={x}>
PRESERVED_COMPONENT_RE = re.compile(
    r"<(?:Callout|Tabs|Tab|Steps|Step|Cards|Card|Accordion|Accordions)\b"
    r"[^>]*=\{[^}]*\}[^>]*>"
)
BLOCK_MATH_RE = re.compile(r"\$\$.+?\$\$|\\\[.+?\\\]", re.DOTALL)
# Single line only; a lone character ($x$, $<$) is a valid expression.
INLINE_MATH_RE = re.compile(
    r"(?<![\\$])\$(?=[^\s$])[^\n$]*?(?<=[^\s\\])\$(?!\$)|\\\([^\n]+?\\\)"
)
MERMAID_RE = re.compile(
    r"^[ \t]*(`{3,})[ \t]*mermaid\b[^\n]*\n.*?^[ \t]*\1[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
DIV_BLOCK_RE = re.compile(r"<div\b[^>]*>.*?</div\s*>", re.DOTALL)
TABLE_ROW_RE = re.compile(r"^[ \t]*\|.*\|[ \t]*$", re.MULTILINE)

# Order matters: earlier categories are captured before later patterns can
# see (and split) them.
PROTECTION_ORDER: list[tuple[str, re.Pattern[str]]] = [
    (CODE_BLOCKS, CODE_BLOCK_RE),
    (INLINE_CODE, INLINE_CODE_RE),
    (PRESERVED_COMPONENTS, PRESERVED_COMPONENT_RE),
    (MATH_EXPRESSIONS, BLOCK_MATH_RE),
    (MATH_EXPRESSIONS, INLINE_MATH_RE),
    (FLOWCHARTS, MERMAID_RE),
    (DIV_BLOCKS, DIV_BLOCK_RE),
    (TABLE_ROWS, TABLE_ROW_RE),
]

# Regions a Markdown-level rewrite must not reach into.
CODE_AND_MATH: frozenset[str] = frozenset({
    CODE_BLOCKS, INLINE_CODE, MATH_EXPRESSIONS, FLOWCHARTS,
})
ALL_CATEGORIES: frozenset[str] = frozenset(c for c, _ in PROTECTION_ORDER)


class PlaceholderVault:
    """Index-addressed store of protected substrings, one list per category."""

    def __init__(self) -> None:
        self.id = next(_vault_ids)
        self._store: dict[str, list[str]] = {}

    def __len__(self) -> int:
        return sum(len(v) for v in self._store.values())

    def entries(self, category: str) -> list[str]:
        return list(self._store.get(category, []))

    def token(self, category: str, index: int) -> str:
        return f"{_TOKEN_OPEN}{self.id}:{category}:{index}{_TOKEN_CLOSE}"

    def protect(self, content: str, pattern: re.Pattern[str] | str, category: str) -> str:
        """Replace every non-overlapping match of pattern with a token."""
        if not _CATEGORY_RE.fullmatch(category):
            raise ValueError(f"Category name cannot be carried in a token: {category!r}")
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        bucket = self._store.setdefault(category, [])

        def _stash(m: re.Match) -> str:
            bucket.append(m.group(0))
            return self.token(category, len(bucket) - 1)

        return regex.sub(_stash, content)

    def restore(self, content: str, category: str | None = None) -> str:
        """Swap this vault's tokens (optionally one category) back for their text."""

        def _unstash(m: re.Match) -> str:
            vault_id, cat, index = int(m.group(1)), m.group(2), int(m.group(3))
            if vault_id != self.id or (category is not None and cat != category):
                return m.group(0)
            bucket = self._store.get(cat)
            if bucket is None or index >= len(bucket):
                return m.group(0)
            return bucket[index]

        return _TOKEN_RE.sub(_unstash, content)

    def protect_all(
        self, content: str, categories: frozenset[str] | None = None
    ) -> str:
        """Protect the given categories (default: all) in PROTECTION_ORDER."""
        for category, pattern in PROTECTION_ORDER:
            if categories is None or category in categories:
                content = self.protect(content, pattern, category)
        return content

    def restore_all(self, content: str) -> str:
        # A later region (a div block, a table row) can enclose tokens of an
        # earlier category, so restore until nothing of ours is left.
        for _ in range(len(PROTECTION_ORDER) + 1):
            restored = self.restore(content)
            if restored == content:
                break
            content = restored
        return content

    def pending(self, content: str) -> list[str]:
        """Tokens of this vault still present in content."""
        return [
            m.group(0) for m in _TOKEN_RE.finditer(content) if int(m.group(1)) == self.id
        ]


def has_tokens(content: str) -> bool:
    """True if any vault token (from any vault) remains in content."""
    return _TOKEN_RE.search(content) is not None

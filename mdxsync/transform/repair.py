"""Repair engine for markup that a JSX parser would reject.

README files rendered fine on GitHub routinely break an MDX compiler:
half-closed tags, attributes stranded after ``/>``, prose braces, ``≤``
and friends, lowercase pseudo-tags like ``<address>`` placeholders. Each
rule below targets one such pattern with a regex substitution. Rules are
run in a fixed order over text whose code, math, tables and div blocks
have been moved into a placeholder vault. ``RepairEngine.repair`` repeats
that pass until the text stops changing, so ``repair(repair(s)) ==
repair(s)``.

None of this guarantees valid JSX. A rule that does not match leaves the
text alone.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import NamedTuple

from mdxsync.jobs.models import TransformMeta

from .frontmatter import split_frontmatter
from .pipeline import Transform
from .placeholders import ALL_CATEGORIES, PlaceholderVault

# Lowercase tags that are real HTML and may stay as markup. Any other
# lowercase <tag> is taken to be literal text.
HTML_TAGS: frozenset[str] = frozenset({
    "a", "b", "blockquote", "br", "code", "div", "em", "h1", "h2", "h3", "h4",
    "h5", "h6", "hr", "i", "img", "li", "ol", "p", "pre", "span", "strong",
    "table", "td", "th", "tr", "ul",
    # block and inline elements GitHub READMEs lean on
    "details", "summary", "thead", "tbody", "sub", "sup", "kbd", "picture",
    "source", "video",
})

VOID_ELEMENTS: frozenset[str] = frozenset({
    "area", "br", "col", "embed", "hr", "img", "input", "link", "meta",
    "source", "track", "wbr",
})

# Symbols that trip JSX tokenizers, with their entity or ASCII-safe form.
UNICODE_SYMBOLS: dict[str, str] = {
    "≤": "&lt;=",
    "≥": "&gt;=",
    "≠": "!=",
    "≈": "~=",
    "≡": "===",
    "±": "+/-",
    "×": "x",
    "÷": "/",
    "∞": "infinity",
    "∆": "delta",
    "∇": "nabla",
    "↔": "&lt;-&gt;",
    "⇔": "&lt;=&gt;",
    "→": "-&gt;",
    "←": "&lt;-",
    "⇒": "=&gt;",
}

CODE_FENCE_ALIASES: dict[str, str] = {
    "golang": "go",
    "shellscript": "bash",
    "yml": "yaml",
}

# quoted attribute, e.g. alt="pic"
_ATTR = r"""[\w:.-]+\s*=\s*(?:"[^"]*"|'[^']*')"""
# body of a tag up to its closing '>', skipping '>' inside quoted values
_TAG_BODY = r"""(?:[^<>"']|"[^"]*"|'[^']*')*?"""

_FENCE_ALIAS_RE = re.compile(
    r"^([ \t]*(?:`{3,}|~{3,})[ \t]*)(" + "|".join(CODE_FENCE_ALIASES) + r")\b",
    re.MULTILINE,
)
_URL_SPACE_RE = re.compile(r"\b(https?):[ \t]+//")
_URL_SLASHES_RE = re.compile(r"\b(https?):/{3,}")
_SPACED_CLOSE_RE = re.compile(r"<[ \t]*/[ \t]*([A-Za-z][\w.-]*)[ \t]*>")
_SPACED_BR_RE = re.compile(r"<[ \t]*br[ \t]*/?[ \t]*>", re.IGNORECASE)
_IMG_CLOSE_RE = re.compile(r"</[ \t]*img[ \t]*>", re.IGNORECASE)
_SPLIT_ATTR_RE = re.compile(
    r"<([A-Za-z][\w.-]*)((?:\s+" + _ATTR + r")*)\s*/>[ \t]*((?:" + _ATTR + r"[ \t]*)+)/?>"
)
_REPEATED_SELF_CLOSE_RE = re.compile(r"\s*/>(?:\s*/>)+")
_DOUBLE_SLASH_CLOSE_RE = re.compile(r"""(?<=[\w"'])[ \t]*/[ \t]*/[ \t]*>""")
_SELF_CLOSE_SPACING_RE = re.compile(r"""(?<=[\w"'])[ \t]*/>""")
_OPEN_TAG_RE = re.compile(r"<([a-z][a-z0-9]*)\b(" + _TAG_BODY + r")\s*(/?)>")
_CLOSE_TAG_RE = re.compile(r"</\s*([A-Za-z][\w.-]*)\s*>")
_AUTOLINK_RE = re.compile(r"<(https?://[^\s<>]+)>")
_SYMBOL_RE = re.compile("[" + "".join(UNICODE_SYMBOLS) + "]")
_LTE_RE = re.compile(r"<=")
_GTE_RE = re.compile(r"(?<=\s)>=")
_ARROW_RE = re.compile(r"(?<=\s)<->(?=\s)")
_DIAMOND_RE = re.compile(r"(?<=\s)<>(?=\s)")
_BARE_LT_RE = re.compile(r"<(?![A-Za-z/!])")
_DETAILS_OPEN_RE = re.compile(r"\s*(<details\b[^>]*>)\s*", re.IGNORECASE)
_SUMMARY_RE = re.compile(r"\s*(<summary\b[^>]*>.*?</summary\s*>)\s*", re.IGNORECASE | re.DOTALL)
_DETAILS_CLOSE_RE = re.compile(r"\s*(</details\s*>)\s*", re.IGNORECASE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_OPEN_BRACE_RE = re.compile(r"(?<!\\)\{(?!/\*)")
_CLOSE_BRACE_RE = re.compile(r"(?<!\\)(?<!\*/)\}")
_LOWER_TAG_RE = re.compile(
    r"<(/?)([a-z][a-z0-9-]*)((?:\s" + _TAG_BODY + r")?)(/?)>"
)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def fix_code_fence_aliases(content: str) -> str:
    """```golang -> ```go"""
    return _FENCE_ALIAS_RE.sub(lambda m: m.group(1) + CODE_FENCE_ALIASES[m.group(2)], content)


def fix_url_corruption(content: str) -> str:
    """https:   //host -> https://host, https:///host -> https://host"""
    content = _URL_SPACE_RE.sub(r"\1://", content)
    return _URL_SLASHES_RE.sub(r"\1://", content)


def fix_tag_spacing(content: str) -> str:
    """< / div > -> </div>, < br / > -> <br />"""
    content = _SPACED_CLOSE_RE.sub(r"</\1>", content)
    return _SPACED_BR_RE.sub("<br />", content)


def remove_invalid_closing_tags(content: str) -> str:
    """img is void; any </img> is debris."""
    return _IMG_CLOSE_RE.sub("", content)


def merge_split_attributes(content: str) -> str:
    """<img src="x" /> alt="y" />  ->  <img src="x" alt="y" />"""

    def _merge(m: re.Match) -> str:
        return f"<{m.group(1)}{m.group(2)} {m.group(3).strip()} />"

    return _SPLIT_ATTR_RE.sub(_merge, content)


def collapse_self_closing(content: str) -> str:
    """/> />, / />, // > -> a single ' />'"""
    content = _REPEATED_SELF_CLOSE_RE.sub(" />", content)
    content = _DOUBLE_SLASH_CLOSE_RE.sub(" />", content)
    return _SELF_CLOSE_SPACING_RE.sub(" />", content)


def self_close_unmatched_tags(content: str) -> str:
    """Self-close void elements, and HTML tags that are never closed."""
    closed = {name.lower() for name in _CLOSE_TAG_RE.findall(content)}

    def _close(m: re.Match) -> str:
        name, body, slash = m.group(1), m.group(2), m.group(3)
        if slash or name not in HTML_TAGS:
            return m.group(0)
        if name in VOID_ELEMENTS or name not in closed:
            return f"<{name}{body.rstrip()} />"
        return m.group(0)

    return _OPEN_TAG_RE.sub(_close, content)


def convert_autolinks(content: str) -> str:
    """<https://x.dev> -> [https://x.dev](https://x.dev)"""
    return _AUTOLINK_RE.sub(r"[\1](\1)", content)


def replace_unicode_symbols(content: str) -> str:
    """≤ -> &lt;=, ↔ -> &lt;-&gt;, and ASCII <=, >=, <->, <> likewise."""
    content = _SYMBOL_RE.sub(lambda m: UNICODE_SYMBOLS[m.group(0)], content)
    content = _LTE_RE.sub("&lt;=", content)
    content = _GTE_RE.sub("&gt;=", content)
    content = _ARROW_RE.sub("&lt;-&gt;", content)
    return _DIAMOND_RE.sub("&lt;&gt;", content)


def escape_bare_angles(content: str) -> str:
    """A '<' that cannot open a tag (a < 3, <5ms) becomes &lt;."""
    return _BARE_LT_RE.sub("&lt;", content)


def isolate_details_blocks(content: str) -> str:
    """Put <details>, <summary>...</summary> and </details> on their own paragraphs."""
    if "<details" not in content.lower() and "</details" not in content.lower():
        return _BLANK_RUN_RE.sub("\n\n", content)
    content = _DETAILS_OPEN_RE.sub(r"\n\n\1\n\n", content)
    content = _SUMMARY_RE.sub(r"\n\n\1\n\n", content)
    content = _DETAILS_CLOSE_RE.sub(r"\n\n\1\n\n", content)
    return _BLANK_RUN_RE.sub("\n\n", content)


def escape_braces(content: str) -> str:
    """{ and } outside {/* */} comments are escaped so JSX leaves them alone."""
    content = _OPEN_BRACE_RE.sub(r"\\{", content)
    return _CLOSE_BRACE_RE.sub(r"\\}", content)


def escape_nonstandard_tags(content: str) -> str:
    """<foo> -> &lt;foo&gt; for lowercase tags that are not real HTML."""

    def _escape(m: re.Match) -> str:
        if m.group(2) in HTML_TAGS:
            return m.group(0)
        return f"&lt;{m.group(1)}{m.group(2)}{m.group(3)}{m.group(4)}&gt;"

    return _LOWER_TAG_RE.sub(_escape, content)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class RepairRule(NamedTuple):
    name: str
    fn: Callable[[str], str]


# Run on the raw text: fences are what the vault hides.
PRE_PROTECTION_RULES: list[RepairRule] = [
    RepairRule("code_fence_aliases", fix_code_fence_aliases),
]

MAX_PASSES = 10

REPAIR_RULES: list[RepairRule] = [
    RepairRule("url_corruption", fix_url_corruption),
    RepairRule("tag_spacing", fix_tag_spacing),
    RepairRule("invalid_closing_tags", remove_invalid_closing_tags),
    RepairRule("unmatched_tags", self_close_unmatched_tags),
    RepairRule("split_attributes", merge_split_attributes),
    RepairRule("self_closing", collapse_self_closing),
    RepairRule("details_blocks", isolate_details_blocks),
    RepairRule("autolinks", convert_autolinks),
    RepairRule("unicode_symbols", replace_unicode_symbols),
    RepairRule("bare_angles", escape_bare_angles),
    RepairRule("braces", escape_braces),
    RepairRule("nonstandard_tags", escape_nonstandard_tags),
]


def rules_named(*names: str) -> list[RepairRule]:
    """Subset of the registered rules, in registration order."""
    known = {r.name for r in PRE_PROTECTION_RULES + REPAIR_RULES}
    unknown = [n for n in names if n not in known]
    if unknown:
        raise KeyError(f"Unknown repair rule(s): {', '.join(unknown)}")
    return [r for r in PRE_PROTECTION_RULES + REPAIR_RULES if r.name in names]


class RepairEngine(Transform):
    """Applies repair rules in order under placeholder protection."""

    def __init__(
        self,
        rules: Sequence[RepairRule] | None = None,
        pre_rules: Sequence[RepairRule] | None = None,
        categories: frozenset[str] = ALL_CATEGORIES,
    ):
        self.rules = list(REPAIR_RULES if rules is None else rules)
        self.pre_rules = list(PRE_PROTECTION_RULES if pre_rules is None else pre_rules)
        self.categories = categories

    @property
    def name(self) -> str:
        names = [r.name for r in self.pre_rules + self.rules]
        return f"RepairEngine({', '.join(names)})"

    def repair_once(self, content: str) -> str:
        for rule in self.pre_rules:
            content = rule.fn(content)
        vault = PlaceholderVault()
        content = vault.protect_all(content, self.categories)
        for rule in self.rules:
            content = rule.fn(content)
        return vault.restore_all(content)

    def repair(self, content: str) -> str:
        # One rule can expose work for an earlier one (self-closing a tag
        # strands a trailing attribute), so repeat until the text settles.
        for _ in range(MAX_PASSES):
            repaired = self.repair_once(content)
            if repaired == content:
                break
            content = repaired
        return content

    def apply(self, content: str, meta: TransformMeta) -> str:
        return self.repair(content)


_DEFAULT_ENGINE = RepairEngine()


def repair(content: str) -> str:
    """Run the full rule set once."""
    return _DEFAULT_ENGINE.repair(content)


def postprocess(document: str) -> str:
    """Final pass applied to every emitted file: repair the body, keep front-matter."""
    frontmatter, body = split_frontmatter(document)
    return frontmatter + repair(body)

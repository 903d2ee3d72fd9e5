"""Tests for mdxsync.transform.repair: malformed markup rules and the engine."""

import random

import pytest

from mdxsync.jobs.models import TransformMeta
from mdxsync.transform.placeholders import has_tokens
from mdxsync.transform.repair import (
    REPAIR_RULES,
    RepairEngine,
    collapse_self_closing,
    convert_autolinks,
    escape_bare_angles,
    escape_braces,
    escape_nonstandard_tags,
    fix_code_fence_aliases,
    fix_tag_spacing,
    fix_url_corruption,
    isolate_details_blocks,
    merge_split_attributes,
    postprocess,
    remove_invalid_closing_tags,
    repair,
    replace_unicode_symbols,
    rules_named,
    self_close_unmatched_tags,
)


# ── individual rules ────────────────────────────────────────────────


class TestCodeFenceAliases:
    def test_golang(self):
        assert fix_code_fence_aliases("```golang\nfunc main() {}\n```") == "```go\nfunc main() {}\n```"

    def test_other_languages_untouched(self):
        text = "```go\n```\n```python\n```"
        assert fix_code_fence_aliases(text) == text

    def test_alias_prefix_of_longer_name_untouched(self):
        assert fix_code_fence_aliases("```ymlx") == "```ymlx"


class TestUrlAndTagSpacing:
    def test_space_after_scheme(self):
        assert fix_url_corruption("see https:  //x.dev") == "see https://x.dev"

    def test_extra_slashes(self):
        assert fix_url_corruption("http:///x.dev") == "http://x.dev"

    def test_spaced_closing_tag(self):
        assert fix_tag_spacing("< / div >") == "</div>"

    def test_spaced_br(self):
        assert fix_tag_spacing("a< br / >b") == "a<br />b"

    def test_img_closing_tag_removed(self):
        assert remove_invalid_closing_tags('<img src="a.png"></img>') == '<img src="a.png">'


class TestSelfClosing:
    def test_split_attributes_merged(self):
        assert merge_split_attributes('<img src="x.png" /> alt="pic" />') == '<img src="x.png" alt="pic" />'

    def test_split_attributes_without_trailing_slash(self):
        assert merge_split_attributes('<img src="x.png" /> alt="pic">') == '<img src="x.png" alt="pic" />'

    @pytest.mark.parametrize("broken", ['<img src="a" /> />', '<img src="a" //>', '<img src="a"/>'])
    def test_collapse(self, broken):
        assert collapse_self_closing(broken) == '<img src="a" />'

    def test_void_element_self_closed(self):
        assert self_close_unmatched_tags('<img src="a.png">') == '<img src="a.png" />'
        assert self_close_unmatched_tags("a<br>b") == "a<br />b"

    def test_unclosed_allow_listed_tag_self_closed(self):
        assert self_close_unmatched_tags("<p>text") == "<p />text"

    def test_closed_tag_left_alone(self):
        text = "<p>text</p>"
        assert self_close_unmatched_tags(text) == text

    def test_unknown_tag_left_alone(self):
        assert self_close_unmatched_tags("<foo>") == "<foo>"


class TestSymbols:
    def test_less_equal(self):
        assert replace_unicode_symbols("a ≤ b") == "a &lt;= b"

    def test_arrows_and_operators(self):
        assert replace_unicode_symbols("x → y ≠ z ± 1") == "x -&gt; y != z +/- 1"

    def test_ascii_comparisons(self):
        assert replace_unicode_symbols("a <= b and c >= d and a <-> b") == "a &lt;= b and c &gt;= d and a &lt;-&gt; b"

    def test_bare_angles(self):
        assert escape_bare_angles("latency < 5ms, <3") == "latency &lt; 5ms, &lt;3"

    def test_bare_angles_keep_tags(self):
        text = "<div></div><!-- c -->"
        assert escape_bare_angles(text) == text


class TestAutolinksAndBraces:
    def test_autolink(self):
        assert convert_autolinks("<https://x.dev/a>") == "[https://x.dev/a](https://x.dev/a)"

    def test_braces_escaped(self):
        assert escape_braces("set {key: value}") == "set \\{key: value\\}"

    def test_comment_braces_kept(self):
        assert escape_braces("{/* note */}") == "{/* note */}"

    def test_already_escaped(self):
        assert escape_braces("\\{x\\}") == "\\{x\\}"


class TestDetailsBlocks:
    def test_isolated_on_own_paragraphs(self):
        text = "<details><summary>More</summary>Body</details>"
        assert isolate_details_blocks(text) == "\n\n<details>\n\n<summary>More</summary>\n\nBody\n\n</details>\n\n"

    def test_blank_runs_collapse(self):
        assert isolate_details_blocks("a\n\n\n\nb") == "a\n\nb"


class TestNonstandardTags:
    def test_placeholder_tag_escaped(self):
        assert escape_nonstandard_tags("send to <address>") == "send to &lt;address&gt;"

    def test_closing_and_attrs(self):
        assert escape_nonstandard_tags('<node id="1"></node>') == '&lt;node id="1"&gt;&lt;/node&gt;'

    def test_html_and_components_kept(self):
        text = '<div><Callout type="x" /></div>'
        assert escape_nonstandard_tags(text) == text


# ── engine ──────────────────────────────────────────────────────────


class TestRepairEngine:
    def test_scenario_img_split(self):
        assert repair('<img src="x.png" /> alt="pic" />') == '<img src="x.png" alt="pic" />'

    def test_scenario_less_equal(self):
        assert repair("a ≤ b") == "a &lt;= b"

    def test_code_is_protected(self):
        text = "Use `a <= b` and:\n\n```js\nif (a < b) { x() }\n```\n"
        assert repair(text) == text

    def test_math_is_protected(self):
        text = "where $a < b$ and $$\\{x\\}$$"
        assert repair(text) == text

    def test_div_and_table_protected(self):
        text = '<div class="x">{raw}</div>\n\n| a < b | {c} |\n'
        assert repair(text) == text

    def test_code_fence_alias_runs_before_protection(self):
        assert repair("```golang\nx\n```\n") == "```go\nx\n```\n"

    @pytest.mark.parametrize(
        "text",
        [
            '<img src="x.png" /> alt="pic" />',
            "a ≤ b < c and {x}",
            "<details><summary>S</summary>\nBody\n</details>",
            "<p>unclosed <br> <https://x.dev> <address>",
            "https:  //x.dev < / div > <img src=a.png></img>",
            "plain text without anything to fix",
            '<img src="a.png"> />',
            "<p> />",
            "Intro</details>>= 5",
            '<img src="x.png"> alt="pic" />',
        ],
    )
    def test_idempotent(self, text):
        once = repair(text)
        assert repair(once) == once

    def test_open_tag_with_stray_close(self):
        assert repair('<img src="a.png"> />') == '<img src="a.png" />'
        assert repair("<p> />") == "<p />"

    def test_symbols_after_details_escaped_in_one_call(self):
        assert repair("Intro</details>>= 5").endswith("</details>\n\n&gt;= 5")

    def test_repeats_until_settled(self):
        text = '<img a="1" /> b="2" /> c="3" />'
        engine = RepairEngine()
        assert engine.repair_once(text) == '<img a="1" b="2" /> c="3" />'
        assert engine.repair(text) == '<img a="1" b="2" c="3" />'

    def test_idempotent_on_random_fragments(self):
        atoms = [
            '<img src="a.png">', "<p>", "</p>", " />", "/>", 'alt="y"',
            "<details>", "</details>", "<summary>s</summary>", "<foo>",
            "<https://x.dev>", "{", "}", "≤", "↔", ">=", "<=", "<", ">",
            " ", "\n", "x", "`c`", "$m$", "|",
        ]
        rng = random.Random(20241019)
        for _ in range(500):
            text = "".join(rng.choice(atoms) for _ in range(rng.randint(1, 12)))
            once = repair(text)
            assert repair(once) == once, text

    def test_no_placeholder_survives(self):
        text = "`a` $b$ <div>c</div>\n| d |\n"
        assert not has_tokens(repair(text))

    def test_rule_subset(self):
        engine = RepairEngine(rules=rules_named("braces"), pre_rules=[])
        assert engine.apply("{x} ≤", TransformMeta(title="t")) == "\\{x\\} ≤"

    def test_rules_named_unknown(self):
        with pytest.raises(KeyError, match="nope"):
            rules_named("nope")

    def test_rules_named_keeps_registration_order(self):
        names = [r.name for r in rules_named("braces", "url_corruption")]
        assert names == ["url_corruption", "braces"]

    def test_name_lists_rules(self):
        assert RepairEngine().name.startswith("RepairEngine(code_fence_aliases, url_corruption")
        assert len(REPAIR_RULES) == 12


# ── postprocess ─────────────────────────────────────────────────────


class TestPostprocess:
    def test_front_matter_untouched(self):
        doc = '---\ntitle: "a <= b {x}"\ndescription: ""\nedit_url: \n---\n\nbody {x}\n'
        assert postprocess(doc) == '---\ntitle: "a <= b {x}"\ndescription: ""\nedit_url: \n---\n\nbody \\{x\\}\n'

    def test_without_front_matter(self):
        assert postprocess("a ≤ b") == "a &lt;= b"

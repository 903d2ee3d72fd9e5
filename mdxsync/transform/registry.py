"""Named pipelines, one per documentation section.

All pipelines share the same backbone (links, Markdown normalization,
front-matter); they differ only in which early repair stages run and in
what order. The final repair pass is not part of any pipeline: the driver
applies it to every document.
"""

from __future__ import annotations

from collections.abc import Callable

from mdxsync.errors import UnknownPipelineError

from .frontmatter import FrontmatterInjector
from .links import LinkResolver
from .normalize import MarkdownNormalizer
from .pipeline import Protected, Transform, TransformPipeline
from .placeholders import CODE_AND_MATH
from .repair import RepairEngine, rules_named


def _backbone(early_repairs: list[Transform]) -> list[Transform]:
    return [
        Protected([LinkResolver()], CODE_AND_MATH),
        MarkdownNormalizer(),
        *early_repairs,
        FrontmatterInjector(),
    ]


def _default() -> list[Transform]:
    return _backbone([])


def _primary_network() -> list[Transform]:
    # avalanchego and friends fence Go as ```golang
    return _backbone([
        RepairEngine(rules=[], pre_rules=rules_named("code_fence_aliases")),
    ])


def _cross_chain() -> list[Transform]:
    return _backbone([
        RepairEngine(rules=rules_named("details_blocks"), pre_rules=[]),
    ])


def _sdks() -> list[Transform]:
    return _backbone([RepairEngine()])


def _acps() -> list[Transform]:
    return _backbone([
        RepairEngine(rules=rules_named("nonstandard_tags"), pre_rules=[]),
        RepairEngine(),
    ])


PIPELINES: dict[str, Callable[[], list[Transform]]] = {
    "default": _default,
    "primary-network": _primary_network,
    "cross-chain": _cross_chain,
    "sdks": _sdks,
    "acps": _acps,
}

PIPELINE_NAMES: list[str] = list(PIPELINES)


def get_pipeline(name: str) -> TransformPipeline:
    """Build a fresh pipeline instance for a registered name."""
    try:
        factory = PIPELINES[name]
    except KeyError:
        raise UnknownPipelineError(name, PIPELINE_NAMES) from None
    return TransformPipeline(factory(), name=name)

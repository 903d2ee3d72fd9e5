"""Transform pipeline for converting remote Markdown into framework-ready MDX."""

from .pipeline import FunctionTransform, Protected, Transform, TransformPipeline, compose
from .placeholders import PlaceholderVault
from .links import LinkResolver, resolve_links
from .normalize import MarkdownNormalizer, normalize
from .repair import RepairEngine, postprocess, repair
from .frontmatter import FrontmatterInjector, add_frontmatter, split_frontmatter
from .registry import PIPELINE_NAMES, get_pipeline

__all__ = [
    "FrontmatterInjector",
    "FunctionTransform",
    "LinkResolver",
    "MarkdownNormalizer",
    "PIPELINE_NAMES",
    "PlaceholderVault",
    "Protected",
    "RepairEngine",
    "Transform",
    "TransformPipeline",
    "add_frontmatter",
    "compose",
    "get_pipeline",
    "normalize",
    "postprocess",
    "repair",
    "resolve_links",
    "split_frontmatter",
]

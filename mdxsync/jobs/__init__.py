"""Job models and title derivation."""

from mdxsync.jobs.models import Job, TransformMeta
from mdxsync.jobs.titles import ACRONYMS, VOCABULARY, slug_to_title, title_for_path

__all__ = [
    "ACRONYMS",
    "Job",
    "TransformMeta",
    "VOCABULARY",
    "slug_to_title",
    "title_for_path",
]

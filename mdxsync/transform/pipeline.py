"""TransformPipeline: runs ordered text transforms over fetched content."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from mdxsync.jobs.models import TransformMeta

from .placeholders import PlaceholderVault


class Transform(ABC):
    @abstractmethod
    def apply(self, content: str, meta: TransformMeta) -> str:
        """Transform document text. meta is shared, read-only job context."""
        ...

    @property
    def name(self) -> str:
        return type(self).__name__


class FunctionTransform(Transform):
    """Adapts a plain function to the Transform interface.

    Accepts ``fn(content)`` or ``fn(content, meta)``.
    """

    def __init__(self, fn: Callable[..., str], name: str | None = None):
        self._fn = fn
        self._name = name or fn.__name__
        self._wants_meta = len(inspect.signature(fn).parameters) >= 2

    @property
    def name(self) -> str:
        return self._name

    def apply(self, content: str, meta: TransformMeta) -> str:
        if self._wants_meta:
            return self._fn(content, meta)
        return self._fn(content)


class TransformPipeline:
    def __init__(self, transforms: Sequence[Transform], name: str = ""):
        self.transforms = list(transforms)
        self.name = name

    def apply(self, content: str, meta: TransformMeta) -> str:
        for t in self.transforms:
            content = t.apply(content, meta)
        return content

    def stage_names(self) -> list[str]:
        return [t.name for t in self.transforms]


def compose(transforms: Sequence[Transform]) -> Callable[[str, TransformMeta], str]:
    """Fold transforms left to right into one ``(content, meta) -> content`` callable."""
    return TransformPipeline(transforms).apply


class Protected(Transform):
    """Runs inner transforms with the given regions held in one placeholder vault."""

    def __init__(self, transforms: Sequence[Transform], categories: frozenset[str]):
        self.transforms = list(transforms)
        self.categories = categories

    @property
    def name(self) -> str:
        return f"Protected({', '.join(t.name for t in self.transforms)})"

    def apply(self, content: str, meta: TransformMeta) -> str:
        vault = PlaceholderVault()
        content = vault.protect_all(content, self.categories)
        for t in self.transforms:
            content = t.apply(content, meta)
        return vault.restore_all(content)

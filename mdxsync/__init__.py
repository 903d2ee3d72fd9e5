"""mdxsync: fetch remote Markdown and re-emit it as framework-ready MDX."""

__version__ = "0.1.0"

"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import MdxsyncConfig

# ${VAR} or ${VAR:-fallback}
_ENV_REF_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def config_paths(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest priority first."""
    if cli_path:
        return [Path(cli_path)]
    return [Path("mdxsync.yaml"), Path.home() / ".mdxsync" / "config.yaml"]


def load_config(cli_path: str | None = None) -> MdxsyncConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    An explicit ``--config`` path must exist; it never falls through to
    the other locations.
    """
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_paths(cli_path):
        if not path.exists():
            continue
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            return MdxsyncConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}:\n{_describe(e)}") from e

    return MdxsyncConfig()


def _read_yaml(path: Path) -> dict | None:
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}")
    return raw


def _describe(error: ValidationError) -> str:
    """One line per failing field, e.g. ``sections.0.jobs.1.title: Field required``."""
    lines = []
    for err in error.errors():
        where = ".".join(str(part) for part in err["loc"]) or "(root)"
        lines.append(f"  {where}: {err['msg']}")
    return "\n".join(lines)


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} and ${VAR:-fallback} references in strings.

    Unset variables without a fallback expand to the empty string.
    """
    if isinstance(obj, str):
        return _ENV_REF_RE.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `mdxsync config init`
DEFAULT_CONFIG_TEMPLATE = """\
# mdxsync.yaml

# HTTP fetching (one attempt per job, no retries)
fetch:
  timeout: 30
  user_agent: "mdxsync/0.1"
  follow_redirects: true

# Repository tree enumeration
vcs:
  provider: "github"
  token_env: "GITHUB_TOKEN"      # optional; public repos work anonymously

# Output
output:
  base_dir: "."
  gitignore_path: ".gitignore"
  gitignore_marker: "Remote content (generated by mdxsync)"
  update_gitignore: true

# Static job lists, one pipeline per section
# pipelines: default | primary-network | cross-chain | sdks | acps
sections:
  - name: "primary-network"
    pipeline: "primary-network"
    jobs:
      - source_url: "https://raw.githubusercontent.com/ava-labs/avalanchego/master/README.md"
        content_url: "https://github.com/ava-labs/avalanchego/blob/master/README.md"
        output_path: "content/docs/nodes/avalanchego.mdx"
        title: "AvalancheGo"
        description: "The Go implementation of an Avalanche node."

# Repositories enumerated into jobs at run time
# repos:
#   - name: "acps"
#     owner: "avalanche-foundation"
#     repo: "ACPs"
#     branch: "main"
#     path_prefix: "ACPs/"
#     extensions: [".md"]
#     output_dir: "content/docs/acps"
#     pipeline: "acps"

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""

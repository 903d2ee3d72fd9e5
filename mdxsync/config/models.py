from typing import Literal

from pydantic import BaseModel, Field

from mdxsync.jobs.models import Job


class FetchConfig(BaseModel):
    timeout: float = 30.0
    user_agent: str = "mdxsync/0.1"
    follow_redirects: bool = True


class VCSConfig(BaseModel):
    provider: Literal["github"] = "github"
    token_env: str = "GITHUB_TOKEN"


class OutputConfig(BaseModel):
    base_dir: str = "."
    gitignore_path: str = ".gitignore"
    gitignore_marker: str = "Remote content (generated by mdxsync)"
    update_gitignore: bool = True


class SectionConfig(BaseModel):
    """A static list of jobs sharing one pipeline."""

    name: str
    pipeline: str = "default"
    jobs: list[Job] = Field(default_factory=list)


class RepoSourceConfig(BaseModel):
    """A repository whose Markdown files are enumerated into jobs at run time."""

    name: str = ""
    owner: str
    repo: str
    branch: str = "main"
    path_prefix: str = ""
    extensions: list[str] = [".md", ".mdx"]
    exclude: list[str] = []
    output_dir: str
    pipeline: str = "default"
    description: str = "Documentation for {title}."

    @property
    def repo_id(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def section_name(self) -> str:
        return self.name or self.repo_id


class MdxsyncConfig(BaseModel):
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    vcs: VCSConfig = Field(default_factory=VCSConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    sections: list[SectionConfig] = Field(default_factory=list)
    repos: list[RepoSourceConfig] = Field(default_factory=list)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

from .loader import load_config
from .models import (
    FetchConfig,
    MdxsyncConfig,
    OutputConfig,
    RepoSourceConfig,
    SectionConfig,
    VCSConfig,
)

__all__ = [
    "FetchConfig",
    "MdxsyncConfig",
    "OutputConfig",
    "RepoSourceConfig",
    "SectionConfig",
    "VCSConfig",
    "load_config",
]

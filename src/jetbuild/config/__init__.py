"""Configuration parsing modules for Jetbuild."""

from .project_config import (
    CONFIG_FILE,
    JetBuildConfig,
    ProjectConfigError,
    ProjectConfigLoader,
)

__all__ = [
    "CONFIG_FILE",
    "JetBuildConfig",
    "ProjectConfigError",
    "ProjectConfigLoader",
]

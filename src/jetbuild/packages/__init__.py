"""Toolchain discovery for Jetbuild.

This module locates and validates the external AOT toolchain installation
and provides host platform detection.
"""

from .platform_utils import PlatformDetector, PlatformError
from .toolchain import ToolchainHandle, ToolchainLocator, ToolchainNotFoundError

__all__ = [
    "PlatformDetector",
    "PlatformError",
    "ToolchainHandle",
    "ToolchainLocator",
    "ToolchainNotFoundError",
]

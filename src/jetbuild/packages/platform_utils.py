"""Platform Detection Utilities.

This module provides utilities for detecting the host platform family, which
controls executable naming and the Windows-only compiler flags.

Supported Platforms:
    - Windows: executables carry the .exe suffix, icon and console flags apply
    - Linux / macOS: Unix permission bits are modelled
"""

import os
import platform
from typing import Literal

PlatformFamily = Literal["windows", "unix"]


class PlatformError(Exception):
    """Raised when platform detection fails or platform is unsupported."""

    pass


class PlatformDetector:
    """Detects the host platform family."""

    @staticmethod
    def detect_family() -> PlatformFamily:
        """Detect the platform family of the current host.

        Returns:
            'windows' or 'unix'

        Raises:
            PlatformError: If the platform is neither Windows nor Unix-like
        """
        system = platform.system().lower()

        if system == "windows":
            return "windows"
        elif system in ("linux", "darwin", "freebsd", "openbsd", "netbsd", "sunos") or os.name == "posix":
            return "unix"
        else:
            raise PlatformError(f"Unsupported platform: {system}")

    @staticmethod
    def is_windows() -> bool:
        return platform.system().lower() == "windows"

    @staticmethod
    def is_unix() -> bool:
        return not PlatformDetector.is_windows() and os.name == "posix"

    @staticmethod
    def exe_suffix() -> str:
        """Executable file suffix for the host ('.exe' on Windows, '' elsewhere)."""
        return ".exe" if PlatformDetector.is_windows() else ""

    @staticmethod
    def mangle_exe_name(name: str) -> str:
        """Append the host executable suffix to a bare executable name.

        Args:
            name: Executable name without suffix (e.g., 'App')

        Returns:
            'App.exe' on Windows, 'App' elsewhere
        """
        suffix = PlatformDetector.exe_suffix()
        if suffix and name.lower().endswith(suffix):
            return name
        return f"{name}{suffix}"

    @staticmethod
    def get_platform_info() -> dict:
        """Get detailed information about the current platform.

        Returns:
            Dictionary with platform information
        """
        return {
            "system": platform.system(),
            "machine": platform.machine(),
            "platform": platform.platform(),
            "python_version": platform.python_version(),
            "family": PlatformDetector.detect_family(),
        }

"""Toolchain discovery for the Excelsior JET AOT toolchain.

This module resolves the toolchain installation directory ("JET home") and
validates it before anything downstream may use it.

Search order (first match wins):
    1. Explicit location (configuration / --jet-home)
    2. JET_HOME environment variable
    3. Directories on PATH, in order; a PATH entry is the toolchain's bin/
       directory, so its parent is the candidate root

An explicit location or JET_HOME that fails validation is an error; only the
PATH scan moves on to the next candidate.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Mapping, Optional, Tuple

from ..errors import PrerequisiteError
from .platform_utils import PlatformDetector


class ToolchainNotFoundError(PrerequisiteError):
    """Raised when no candidate directory validates as a toolchain root."""

    pass


@dataclass(frozen=True)
class ToolchainHandle:
    """Validated toolchain installation."""

    root: Path
    source: str

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    def get_tool_path(self, tool_name: str) -> Path:
        """Get path to a toolchain executable.

        Args:
            tool_name: Tool name without suffix (e.g., 'jc', 'xpack')

        Returns:
            Path to the executable under bin/
        """
        return self.bin_dir / PlatformDetector.mangle_exe_name(tool_name)


# A candidate step yields (source label, path, strict) tuples. Strict
# candidates fail the search when they do not validate.
CandidateStep = Callable[[], Iterator[Tuple[str, Path, bool]]]


class ToolchainLocator:
    """Resolves and validates the toolchain installation directory."""

    ENV_VAR = "JET_HOME"

    # Executable whose presence under bin/ marks a toolchain root
    MARKER_TOOL = "jc"

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize toolchain locator.

        Args:
            environ: Environment mapping to consult (defaults to os.environ)
            logger: Log sink (defaults to this module's logger)
        """
        self.environ = environ if environ is not None else os.environ
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def is_toolchain_dir(cls, candidate: Path) -> bool:
        """Check whether a directory has the expected toolchain layout.

        A candidate that cannot be inspected (name too long, permission
        denied) does not validate.
        """
        marker = candidate / "bin" / PlatformDetector.mangle_exe_name(cls.MARKER_TOOL)
        try:
            return marker.is_file()
        except OSError as e:
            logging.getLogger(__name__).debug(f"Cannot inspect {marker}: {e}")
            return False

    def resolve(self, explicit_path: Optional[str] = None) -> ToolchainHandle:
        """Resolve the toolchain root.

        Args:
            explicit_path: Explicit toolchain location, or None/'' to search

        Returns:
            Validated ToolchainHandle

        Raises:
            ToolchainNotFoundError: If no candidate validates
        """
        steps: Tuple[CandidateStep, ...] = (
            lambda: self._explicit_candidates(explicit_path),
            self._env_candidates,
            self._path_candidates,
        )

        for step in steps:
            for source, candidate, strict in step():
                if self.is_toolchain_dir(candidate):
                    root = candidate.resolve()
                    self.logger.debug(f"Toolchain found via {source}: {root}")
                    return ToolchainHandle(root=root, source=source)

                if strict:
                    raise ToolchainNotFoundError(
                        f"{candidate} is not a valid Excelsior JET installation "
                        f"(set via {source}; expected bin/{self.MARKER_TOOL})",
                        path=candidate,
                    )

                self.logger.debug(f"Skipping {candidate}: not a toolchain directory")

        raise ToolchainNotFoundError(
            "Excelsior JET installation not found. Specify it with --jet-home, "
            f"the jet_home setting, the {self.ENV_VAR} environment variable, "
            "or add its bin directory to PATH."
        )

    def _explicit_candidates(self, explicit_path: Optional[str]) -> Iterator[Tuple[str, Path, bool]]:
        if explicit_path:
            yield "explicit location", Path(explicit_path), True

    def _env_candidates(self) -> Iterator[Tuple[str, Path, bool]]:
        value = self.environ.get(self.ENV_VAR)
        if value:
            yield f"{self.ENV_VAR} environment variable", Path(value), True

    def _path_candidates(self) -> Iterator[Tuple[str, Path, bool]]:
        for entry in self.environ.get("PATH", "").split(os.pathsep):
            if not entry:
                continue
            yield "PATH", Path(entry).parent, False

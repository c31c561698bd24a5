"""Dependency Stager.

This module copies the primary artifact and its runtime dependencies into the
build directory and produces the compiler's dependency arguments.

Layout:
    <build>/<primary artifact>
    <build>/lib/<dependency>...

Existing destination files are never overwritten, so a dependency whose
contents change under the same file name keeps its stale copy until the
build directory is cleared.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import JetBuildError
from .build_utils import ensure_directory


class StagingError(JetBuildError):
    """Raised when a build input cannot be staged."""

    pass


@dataclass(frozen=True)
class DependencyEntry:
    """A staged file: its source and its build-relative location."""

    source: Path
    relative_path: str


class DependencyStager:
    """Stages build inputs into a deterministic build directory layout."""

    LIB_DIR = "lib"

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize dependency stager.

        Args:
            logger: Log sink
        """
        self.logger = logger or logging.getLogger(__name__)
        self.entries: List[DependencyEntry] = []
        self.copied_count = 0

    def stage(
        self,
        build_root: Path,
        primary_artifact: Path,
        dependencies: Iterable[Path],
    ) -> List[str]:
        """Copy the primary artifact and dependencies into the build directory.

        Args:
            build_root: Build directory (must exist)
            primary_artifact: Application artifact, staged at the build root
            dependencies: Runtime dependencies, staged under lib/ in this order

        Returns:
            Staged paths relative to build_root, primary artifact first

        Raises:
            StagingError: If a file cannot be copied
            DirectoryCreateError: If lib/ cannot be created
        """
        lib_dir = ensure_directory(build_root / self.LIB_DIR, self.logger)

        self.entries = []
        self.copied_count = 0

        self._stage_file(primary_artifact, build_root / primary_artifact.name, build_root)

        for dependency in dependencies:
            dependency = Path(dependency)
            if not dependency.is_file():
                self.logger.warning(f"Skipping dependency {dependency}: not a regular file")
                continue
            self._stage_file(dependency, lib_dir / dependency.name, build_root)

        self.logger.debug(
            f"Staged {len(self.entries)} files ({self.copied_count} copied) into {build_root}"
        )
        return [entry.relative_path for entry in self.entries]

    def _stage_file(self, source: Path, destination: Path, build_root: Path) -> None:
        try:
            if not destination.exists():
                shutil.copy2(source, destination)
                self.copied_count += 1
        except OSError as e:
            raise StagingError(
                f"Failed to copy dependency {source} to {destination}: {e}",
                path=source,
                cause=e,
            ) from e

        relative = destination.relative_to(build_root).as_posix()
        self.entries.append(DependencyEntry(source=source, relative_path=relative))

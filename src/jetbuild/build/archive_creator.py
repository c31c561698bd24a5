"""Archive Creator.

This module packs the final package directory into a portable ZIP archive.

Design:
    - Recursively walks the source directory in sorted order
    - Writes only regular files, under their path relative to the source root
      (forward slashes); directories are implied by the file paths
    - On Unix hosts, executable files get mode 0777 so the bit survives
      extraction on another Unix-like system
    - A failed archive is left on disk as-is
"""

import logging
import os
import stat
import zipfile
from pathlib import Path
from typing import Iterator, List, Optional

from tqdm import tqdm

from ..errors import JetBuildError
from ..packages.platform_utils import PlatformDetector

EXECUTABLE_MODE = 0o777


class ArchiveError(JetBuildError):
    """Raised when archive creation operations fail."""

    pass


class ArchiveCreator:
    """Creates ZIP archives of directory trees.

    This class handles:
    - Collecting every leaf file of a directory tree
    - Writing entries with normalized relative paths
    - Preserving the Unix executable bit
    - Showing progress information
    """

    def __init__(self, show_progress: bool = True, logger: Optional[logging.Logger] = None):
        """Initialize archive creator.

        Args:
            show_progress: Whether to show archive creation progress
            logger: Log sink
        """
        self.show_progress = show_progress
        self.logger = logger or logging.getLogger(__name__)

    def create_archive(self, source_dir: Path, output_file: Path) -> Path:
        """Pack a directory tree into a ZIP archive.

        Args:
            source_dir: Directory whose contents are archived
            output_file: Path for the output .zip file

        Returns:
            Path to the generated archive

        Raises:
            ArchiveError: If the source cannot be read or an entry cannot be written
        """
        if not source_dir.is_dir():
            raise ArchiveError(f"Archive source is not a directory: {source_dir}", path=source_dir)

        preserve_exec = PlatformDetector.is_unix()

        try:
            files = list(self._walk(source_dir))
            output_file.parent.mkdir(parents=True, exist_ok=True)

            with zipfile.ZipFile(output_file, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for path in self._progress(files, output_file):
                    archive_name = path.relative_to(source_dir).as_posix()
                    info = zipfile.ZipInfo.from_file(path, archive_name, strict_timestamps=False)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    if preserve_exec and os.access(path, os.X_OK):
                        info.external_attr = (stat.S_IFREG | EXECUTABLE_MODE) << 16
                    with open(path, "rb") as src, archive.open(info, "w") as dst:
                        while True:
                            chunk = src.read(1024 * 1024)
                            if not chunk:
                                break
                            dst.write(chunk)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(
                f"Failed to create archive {output_file.name}: {e}",
                path=output_file,
                cause=e,
            ) from e

        size = output_file.stat().st_size
        self.logger.info(f"Created {output_file.name}: {len(files)} files, {size:,} bytes")
        return output_file

    def _walk(self, root: Path) -> Iterator[Path]:
        for child in sorted(root.iterdir(), key=lambda p: p.name):
            if child.is_symlink() and child.is_dir():
                self.logger.debug(f"Skipping symlinked directory {child}")
            elif child.is_dir():
                yield from self._walk(child)
            elif child.is_file():
                yield child

    def _progress(self, files: List[Path], output_file: Path):
        if not self.show_progress:
            return files
        return tqdm(files, desc=f"Archiving {output_file.name}", unit="file")

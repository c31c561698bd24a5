"""Build directory utilities.

Directory creation tolerates a concurrent creator: if mkdir fails but the
directory exists afterwards, the failure is only a warning.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from ..errors import JetBuildError


class DirectoryCreateError(JetBuildError):
    """Raised when a required directory cannot be created."""

    pass


def ensure_directory(path: Path, logger: Optional[logging.Logger] = None) -> Path:
    """Create a directory (and parents) if it does not exist.

    Args:
        path: Directory to create
        logger: Log sink for the lost-race warning

    Returns:
        The directory path

    Raises:
        DirectoryCreateError: If the directory still does not exist after the attempt
    """
    logger = logger or logging.getLogger(__name__)

    if path.is_dir():
        return path

    try:
        path.mkdir(parents=True)
    except OSError as e:
        if not path.is_dir():
            raise DirectoryCreateError(
                f"Failed to create directory {path}: {e}", path=path, cause=e
            ) from e
        logger.warning(f"Directory {path} was created concurrently by another process")

    return path


def clean_directory(path: Path, logger: Optional[logging.Logger] = None) -> Path:
    """Recursively empty a directory, creating it if missing.

    Args:
        path: Directory to clean
        logger: Log sink

    Returns:
        The (now empty) directory path

    Raises:
        DirectoryCreateError: If the directory cannot be emptied or created
    """
    logger = logger or logging.getLogger(__name__)

    if path.is_dir():
        for child in path.iterdir():
            try:
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
            except OSError as e:
                raise DirectoryCreateError(
                    f"Failed to clean {child}: {e}", path=child, cause=e
                ) from e
        logger.debug(f"Cleaned {path}")
        return path

    return ensure_directory(path, logger)

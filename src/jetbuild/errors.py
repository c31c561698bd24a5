"""Base error types shared by all build components.

Every failure carries enough context to be logged once where it is
detected and then propagated unchanged to the top-level run:
    - stage: name of the pipeline stage that failed (if known)
    - path: filesystem path involved (if any)
    - cause: underlying exception (also chained via ``raise ... from``)
"""

from pathlib import Path
from typing import Optional


class JetBuildError(Exception):
    """Base class for all jetbuild failures."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        path: Optional[Path] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.path = path
        self.cause = cause

    @property
    def kind(self) -> str:
        """Error tag used for failure attribution."""
        return type(self).__name__


class PrerequisiteError(JetBuildError):
    """Raised when a build input is missing (artifact, entry point, toolchain)."""

    pass

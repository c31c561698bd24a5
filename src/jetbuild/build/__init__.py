"""
Build system components for Jetbuild.

This module provides the build system implementation including:
- Dependency staging
- External tool execution (jc, xpack)
- Archive creation
- Build orchestration
"""

from .archive_creator import ArchiveCreator, ArchiveError
from .build_utils import DirectoryCreateError, clean_directory, ensure_directory
from .dependency_stager import DependencyEntry, DependencyStager, StagingError
from .jet_tools import JetCompiler, JetPackager, JetTool
from .orchestrator import (
    BuildContext,
    BuildOrchestrator,
    BuildResult,
    BuildStage,
    CompilationError,
    PackagingError,
)
from .process_invoker import Invocation, InvocationResult, ProcessInvoker, ProcessLaunchError

__all__ = [
    "ArchiveCreator",
    "ArchiveError",
    "DirectoryCreateError",
    "clean_directory",
    "ensure_directory",
    "DependencyEntry",
    "DependencyStager",
    "StagingError",
    "JetCompiler",
    "JetPackager",
    "JetTool",
    "BuildContext",
    "BuildOrchestrator",
    "BuildResult",
    "BuildStage",
    "CompilationError",
    "PackagingError",
    "Invocation",
    "InvocationResult",
    "ProcessInvoker",
    "ProcessLaunchError",
]

"""
Build orchestration for Jetbuild projects.

This module coordinates the entire native build, from locating the toolchain
to producing the distributable package. It integrates all build components:
- Toolchain discovery (explicit location, JET_HOME, PATH)
- Dependency staging into the build directory
- Compilation (jc)
- Packaging (xpack)
- Archiving the package directory (.zip)

The pipeline is linear:

    INIT -> RESOLVED -> STAGED -> COMPILED -> PACKAGED -> ARCHIVED|DIRIFIED -> DONE

and any transition may end in FAILED. Nothing is retried and nothing is rolled
back: build and package directories stay on disk after a failure so the
toolchain's output can be inspected.
"""

import enum
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple, TypeVar

from ..config.project_config import JetBuildConfig
from ..errors import JetBuildError, PrerequisiteError
from ..packages.platform_utils import PlatformDetector
from ..packages.toolchain import ToolchainHandle, ToolchainLocator
from .archive_creator import ArchiveCreator
from .build_utils import clean_directory, ensure_directory
from .dependency_stager import DependencyStager
from .jet_tools import JetCompiler, JetPackager
from .process_invoker import ProcessInvoker

T = TypeVar("T")

BUILD_DIR = "build"
PACKAGE_DIR = "app"


class CompilationError(JetBuildError):
    """Raised when the compiler runs but exits with a nonzero code."""

    pass


class PackagingError(JetBuildError):
    """Raised when the packager runs but exits with a nonzero code."""

    pass


class BuildStage(enum.Enum):
    """Pipeline states."""

    INIT = "init"
    RESOLVED = "resolved"
    STAGED = "staged"
    COMPILED = "compiled"
    PACKAGED = "packaged"
    ARCHIVED = "archived"
    DIRIFIED = "dirified"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BuildContext:
    """Per-run build settings derived from configuration."""

    output_dir: Path
    build_dir: Path
    package_dir: Path
    main_jar: Path
    main_class: str
    output_name: str
    archive_path: Optional[Path]
    dependencies: List[Path] = field(default_factory=list)
    icon: Optional[Path] = None
    hide_console: bool = False
    windows: bool = False
    compiler_args: List[str] = field(default_factory=list)

    @property
    def executable_name(self) -> str:
        return PlatformDetector.mangle_exe_name(self.output_name)

    @staticmethod
    def normalize_main_class(main_class: str) -> str:
        """Convert a dotted entry point to the slash-separated compiler form."""
        return main_class.strip().replace(".", "/")

    @staticmethod
    def simple_name(main_class: str) -> str:
        """Last segment of a slash-separated entry point."""
        return main_class.rsplit("/", 1)[-1]

    @classmethod
    def from_config(cls, config: JetBuildConfig) -> "BuildContext":
        """Create the run context. The entry point must already be validated."""
        main_class = cls.normalize_main_class(config.main_class or "")
        output_dir = config.output_dir
        return cls(
            output_dir=output_dir,
            build_dir=output_dir / BUILD_DIR,
            package_dir=output_dir / PACKAGE_DIR,
            main_jar=config.main_jar,
            main_class=main_class,
            output_name=config.output_name or cls.simple_name(main_class),
            archive_path=output_dir / f"{config.final_name}.zip" if config.zip_output else None,
            dependencies=list(config.dependencies),
            icon=config.icon,
            hide_console=config.hide_console,
            windows=PlatformDetector.is_windows(),
        )


@dataclass
class BuildResult:
    """Result of a complete build operation."""

    success: bool
    stage: BuildStage
    failed_stage: Optional[BuildStage]
    error: Optional[JetBuildError]
    package_dir: Optional[Path]
    archive_path: Optional[Path]
    executable_path: Optional[Path]
    compiler_args: List[str]
    build_time: float
    message: str

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error else None

    @property
    def deliverable(self) -> Optional[Path]:
        """The archive if one was produced, otherwise the package directory."""
        return self.archive_path or self.package_dir


class BuildOrchestrator:
    """
    Orchestrates the complete native build of an application.

    This class coordinates all phases of the build:
    1. Check the main artifact and entry point, resolve the toolchain
    2. Create the build directory and empty the package directory
    3. Stage the main artifact and dependencies, derive compiler arguments
    4. Compile with jc
    5. Package with xpack
    6. Archive the package directory (optional)

    Example usage:
        orchestrator = BuildOrchestrator()
        result = orchestrator.build(config)
        if result.success:
            print(f"Package: {result.deliverable}")
    """

    def __init__(
        self,
        locator: Optional[ToolchainLocator] = None,
        stager: Optional[DependencyStager] = None,
        invoker: Optional[ProcessInvoker] = None,
        archiver: Optional[ArchiveCreator] = None,
        logger: Optional[logging.Logger] = None,
        show_progress: bool = True,
    ):
        """
        Initialize build orchestrator.

        Args:
            locator: Toolchain locator
            stager: Dependency stager
            invoker: Process invoker for jc/xpack
            archiver: Archive creator
            logger: Log sink shared by every component created here
            show_progress: Show the archive progress bar
        """
        self.logger = logger or logging.getLogger(__name__)
        self.locator = locator or ToolchainLocator(logger=self.logger)
        self.stager = stager or DependencyStager(logger=self.logger)
        self.invoker = invoker or ProcessInvoker(logger=self.logger)
        self.archiver = archiver or ArchiveCreator(show_progress=show_progress, logger=self.logger)
        self.stage = BuildStage.INIT

    def build(self, config: JetBuildConfig) -> BuildResult:
        """
        Execute the complete build pipeline.

        Args:
            config: Project build configuration

        Returns:
            BuildResult with the final stage, outputs, and the error on failure
        """
        start_time = time.time()
        self.stage = BuildStage.INIT
        context: Optional[BuildContext] = None

        try:
            toolchain, context = self._transition(
                BuildStage.RESOLVED, "[1/5] Checking prerequisites...",
                lambda: self._resolve(config),
            )
            self._transition(
                BuildStage.STAGED, "[2/5] Staging dependencies...",
                lambda: self._stage(context),
            )
            self._transition(
                BuildStage.COMPILED, "[3/5] Compiling...",
                lambda: self._compile(toolchain, context),
            )
            self._transition(
                BuildStage.PACKAGED, "[4/5] Packaging...",
                lambda: self._package(toolchain, context),
            )
            if context.archive_path is not None:
                self._transition(
                    BuildStage.ARCHIVED, "[5/5] Creating archive...",
                    lambda: self._archive(context),
                )
            else:
                self._transition(
                    BuildStage.DIRIFIED, "[5/5] Package directory is the deliverable",
                    lambda: None,
                )
            self.stage = BuildStage.DONE

        except JetBuildError as e:
            failed_stage = BuildStage(e.stage) if e.stage else None
            self.stage = BuildStage.FAILED
            return BuildResult(
                success=False,
                stage=BuildStage.FAILED,
                failed_stage=failed_stage,
                error=e,
                package_dir=context.package_dir if context else None,
                archive_path=None,
                executable_path=None,
                compiler_args=list(context.compiler_args) if context else [],
                build_time=time.time() - start_time,
                message=str(e),
            )

        build_time = time.time() - start_time
        self.logger.info(f"Build successful ({build_time:.2f}s)")

        return BuildResult(
            success=True,
            stage=BuildStage.DONE,
            failed_stage=None,
            error=None,
            package_dir=context.package_dir,
            archive_path=context.archive_path,
            executable_path=context.package_dir / context.executable_name,
            compiler_args=list(context.compiler_args),
            build_time=build_time,
            message="Build successful",
        )

    def _transition(self, target: BuildStage, banner: str, action: Callable[[], T]) -> T:
        """Run one pipeline step and advance to ``target`` on success.

        Failures are tagged with the target stage and logged once here.
        """
        self.logger.info(banner)
        try:
            result = action()
        except JetBuildError as e:
            if e.stage is None:
                e.stage = target.value
            self.logger.error(f"{e.kind} at stage '{e.stage}': {e}")
            raise
        except Exception as e:
            self.logger.exception(f"Unexpected error at stage '{target.value}'")
            raise JetBuildError(
                f"Unexpected error: {e}", stage=target.value, cause=e
            ) from e

        self.stage = target
        return result

    def _resolve(self, config: JetBuildConfig) -> Tuple[ToolchainHandle, BuildContext]:
        """Check prerequisites and resolve the toolchain. Creates no directories."""
        if not config.main_jar.is_file():
            raise PrerequisiteError(
                f"Main artifact not found: {config.main_jar}. Build the application artifact first.",
                path=config.main_jar,
            )

        if not config.main_class or not config.main_class.strip():
            raise PrerequisiteError("Main class is not specified (set main_class or --main-class)")

        toolchain = self.locator.resolve(config.jet_home)
        self.logger.info(f"      Toolchain: {toolchain.root}")

        context = BuildContext.from_config(config)
        self.logger.info(f"      Main class: {context.main_class}")
        self.logger.info(f"      Output name: {context.output_name}")
        return toolchain, context

    def _stage(self, context: BuildContext) -> None:
        ensure_directory(context.build_dir, self.logger)
        clean_directory(context.package_dir, self.logger)

        dependency_args = self.stager.stage(context.build_dir, context.main_jar, context.dependencies)
        context.compiler_args = JetCompiler.build_args(
            dependency_args,
            main_class=context.main_class,
            output_name=context.output_name,
            windows=context.windows,
            icon=context.icon,
            hide_console=context.hide_console,
        )
        self.logger.info(f"      Staged {len(dependency_args)} files into {context.build_dir}")

    def _compile(self, toolchain: ToolchainHandle, context: BuildContext) -> None:
        invocation = JetCompiler(toolchain).invocation(context.compiler_args, context.build_dir)
        result = self.invoker.execute(invocation)
        if not result.succeeded:
            raise CompilationError(
                f"Compilation failed: jc exited with code {result.exit_code}",
                path=context.build_dir,
            )

    def _package(self, toolchain: ToolchainHandle, context: BuildContext) -> None:
        args = JetPackager.build_args(context.executable_name, context.package_dir)
        invocation = JetPackager(toolchain).invocation(args, context.build_dir)
        result = self.invoker.execute(invocation)
        if not result.succeeded:
            raise PackagingError(
                f"Packaging failed: xpack exited with code {result.exit_code}",
                path=context.package_dir,
            )

    def _archive(self, context: BuildContext) -> None:
        assert context.archive_path is not None
        self.archiver.create_archive(context.package_dir, context.archive_path)

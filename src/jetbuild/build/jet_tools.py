"""Excelsior JET tool invocations.

The compiler (jc) and packager (xpack) are external executables under the
toolchain's bin/ directory. These classes only build Invocation objects; the
argument lists are the contract with the toolchain's CLI grammar.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..packages.toolchain import ToolchainHandle
from .process_invoker import Invocation


class JetTool:
    """An executable shipped with the toolchain."""

    TOOL_NAME = ""

    def __init__(self, toolchain: ToolchainHandle):
        self.toolchain = toolchain

    @property
    def executable(self) -> Path:
        return self.toolchain.get_tool_path(self.TOOL_NAME)

    def invocation(
        self,
        args: Sequence[str],
        working_dir: Path,
        sink: Optional[logging.Logger] = None,
    ) -> Invocation:
        return Invocation(
            executable=self.executable,
            args=list(args),
            working_dir=working_dir,
            sink=sink,
        )


class JetCompiler(JetTool):
    """AOT compiler."""

    TOOL_NAME = "jc"

    DECORATION_FLAGS = ["-decor=ht"]

    @staticmethod
    def build_args(
        dependency_args: Sequence[str],
        main_class: str,
        output_name: str,
        windows: bool = False,
        icon: Optional[Path] = None,
        hide_console: bool = False,
    ) -> List[str]:
        """Build the compiler argument list.

        Args:
            dependency_args: Staged paths relative to the build directory
            main_class: Entry point in slash-separated form
            output_name: Executable name without suffix
            windows: Whether the Windows-only icon/console flags apply
            icon: Icon file (attached only on Windows and only if it exists)
            hide_console: Suppress the console window (Windows only)

        Returns:
            Ordered argument list
        """
        args = list(dependency_args)

        if windows:
            if icon is not None and icon.is_file():
                args.append(str(icon.resolve()))
            if hide_console:
                args.append("-gui+")

        args.append(f"-main={main_class}")
        args.append(f"-outputname={output_name}")
        args.extend(JetCompiler.DECORATION_FLAGS)
        return args


class JetPackager(JetTool):
    """Packager that assembles the self-contained application directory."""

    TOOL_NAME = "xpack"

    @staticmethod
    def build_args(executable_name: str, package_dir: Path) -> List[str]:
        """Build the packager argument list.

        Args:
            executable_name: Compiled executable file name (with platform suffix)
            package_dir: Target package directory

        Returns:
            Ordered argument list
        """
        return [
            "-add-file", executable_name, "/",
            "-target", str(package_dir.resolve()),
        ]

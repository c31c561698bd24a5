"""Process Invoker.

This module runs the external toolchain executables as child processes and
streams their output into a log sink.

Design:
    - Wraps subprocess.Popen with a working directory and ordered arguments
    - Drains stdout and stderr on two reader threads so a child blocked on one
      full pipe can never deadlock the wait on the other
    - A nonzero exit code is a normal result, not an exception
    - Launch failures (missing binary, permission denied) raise ProcessLaunchError
    - On KeyboardInterrupt the whole child process tree is terminated
"""

import logging
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional

import psutil

from ..errors import JetBuildError


class ProcessLaunchError(JetBuildError):
    """Raised when an external executable cannot be started."""

    pass


@dataclass
class Invocation:
    """A single external tool call.

    Argument order is preserved exactly as constructed.
    """

    executable: Path
    args: List[str] = field(default_factory=list)
    working_dir: Optional[Path] = None
    sink: Optional[logging.Logger] = None

    @property
    def command(self) -> List[str]:
        return [str(self.executable)] + list(self.args)


@dataclass(frozen=True)
class InvocationResult:
    """Completion status of an external tool call."""

    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProcessInvoker:
    """Executes external tools, forwarding their output to a log sink."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize process invoker.

        Args:
            logger: Default log sink for child output
        """
        self.logger = logger or logging.getLogger(__name__)

    def execute(self, invocation: Invocation) -> InvocationResult:
        """Run an invocation to completion.

        Args:
            invocation: Executable, arguments, working directory and sink

        Returns:
            InvocationResult with the child's exit code

        Raises:
            ProcessLaunchError: If the executable cannot be started
        """
        sink = invocation.sink or self.logger
        sink.debug(f"Executing: {' '.join(invocation.command)}")

        try:
            process = subprocess.Popen(
                invocation.command,
                cwd=str(invocation.working_dir) if invocation.working_dir else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ProcessLaunchError(
                f"Failed to start {invocation.executable}: {e}",
                path=invocation.executable,
                cause=e,
            ) from e

        readers = [
            threading.Thread(
                target=self._drain,
                args=(process.stdout, sink, logging.INFO),
                name=f"{invocation.executable.name}-stdout",
                daemon=True,
            ),
            threading.Thread(
                target=self._drain,
                args=(process.stderr, sink, logging.WARNING),
                name=f"{invocation.executable.name}-stderr",
                daemon=True,
            ),
        ]

        try:
            for reader in readers:
                reader.start()
            for reader in readers:
                reader.join()
            exit_code = process.wait()
        except KeyboardInterrupt:
            self._kill_process_tree(process.pid, sink)
            raise

        sink.debug(f"{invocation.executable.name} exited with code {exit_code}")
        return InvocationResult(exit_code=exit_code)

    @staticmethod
    def _drain(stream: Optional[IO[str]], sink: logging.Logger, level: int) -> None:
        """Forward every line of a child stream to the sink, in order."""
        if stream is None:
            return
        with stream:
            for line in iter(stream.readline, ""):
                sink.log(level, line.rstrip("\r\n"))

    @staticmethod
    def _kill_process_tree(root_pid: int, sink: logging.Logger) -> None:
        """Terminate a child process and all of its descendants."""
        try:
            root = psutil.Process(root_pid)
            processes = root.children(recursive=True) + [root]
        except psutil.NoSuchProcess:
            return

        for proc in processes:
            try:
                proc.terminate()
            except psutil.NoSuchProcess:
                pass

        _gone, alive = psutil.wait_procs(processes, timeout=3)
        for proc in alive:
            try:
                proc.kill()
                sink.warning(f"Force killed stubborn process {proc.pid}")
            except psutil.NoSuchProcess:
                pass

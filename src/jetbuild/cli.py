"""
Command-line interface for Jetbuild.

This module provides the `jetbuild` CLI tool for building native executables
with the Excelsior JET toolchain.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from jetbuild import __version__
from jetbuild.build import BuildOrchestrator
from jetbuild.cli_utils import ErrorFormatter, PathValidator, setup_logging
from jetbuild.config import ProjectConfigError, ProjectConfigLoader
from jetbuild.errors import JetBuildError
from jetbuild.packages import PlatformDetector, ToolchainLocator


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    main_class: Optional[str] = None
    main_jar: Optional[str] = None
    jet_home: Optional[str] = None
    output_dir: Optional[str] = None
    output_name: Optional[str] = None
    icon: Optional[str] = None
    hide_console: Optional[bool] = None
    zip_output: Optional[bool] = None
    dependencies: Optional[List[str]] = None
    verbose: bool = False


@dataclass
class LocateArgs:
    """Arguments for the locate command."""

    project_dir: Path
    jet_home: Optional[str] = None
    verbose: bool = False


def build_command(args: BuildArgs) -> None:
    """Build a native executable and package for the project.

    Examples:
        jetbuild build                             # Build project in current directory
        jetbuild build path/to/project             # Build specific project
        jetbuild build -m com.example.App          # Set the main class
        jetbuild build --jet-home /opt/jet         # Use a specific toolchain
        jetbuild build --no-zip                    # Keep only the package directory
    """
    print(f"Jetbuild v{__version__}")
    print()

    setup_logging(args.verbose)

    try:
        config = ProjectConfigLoader(args.project_dir).load(
            overrides={
                "main_class": args.main_class,
                "main_jar": args.main_jar,
                "jet_home": args.jet_home,
                "output_dir": args.output_dir,
                "output_name": args.output_name,
                "icon": args.icon,
                "hide_console": args.hide_console,
                "zip_output": args.zip_output,
                "dependencies": args.dependencies,
            }
        )

        orchestrator = BuildOrchestrator(show_progress=not args.verbose)
        result = orchestrator.build(config)

        if result.success:
            ErrorFormatter.print_success("Build successful!")
            print()
            print(f"Executable: {result.executable_path}")
            if result.archive_path:
                print(f"Archive: {result.archive_path}")
            else:
                print(f"Package directory: {result.package_dir}")
            print(f"Build time: {result.build_time:.2f}s")
            sys.exit(0)
        else:
            stage = result.failed_stage.value if result.failed_stage else "unknown"
            ErrorFormatter.print_error(
                f"Build failed at stage '{stage}' ({result.error_kind})", result.message
            )
            if result.package_dir:
                print(f"Intermediate output kept in {config.output_dir}")
            sys.exit(1)

    except ProjectConfigError as e:
        ErrorFormatter.print_error("Configuration error", str(e))
        sys.exit(1)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def locate_command(args: LocateArgs) -> None:
    """Print the toolchain installation that a build would use.

    Examples:
        jetbuild locate                      # Search configuration, JET_HOME, PATH
        jetbuild locate --jet-home /opt/jet  # Validate a specific location
    """
    setup_logging(args.verbose)

    try:
        jet_home = args.jet_home
        if jet_home is None:
            jet_home = ProjectConfigLoader(args.project_dir).load().jet_home

        toolchain = ToolchainLocator().resolve(jet_home)
        print(f"{toolchain.root}")
        if args.verbose:
            print(f"  Found via: {toolchain.source}")
            for key, value in PlatformDetector.get_platform_info().items():
                print(f"  {key}: {value}")
        sys.exit(0)

    except (JetBuildError, ProjectConfigError) as e:
        ErrorFormatter.print_error("Toolchain not found", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()


def main(argv: Optional[List[str]] = None) -> None:
    """Jetbuild - native executables from JVM applications."""
    parser = argparse.ArgumentParser(
        prog="jetbuild",
        description="Build native executables and self-contained packages with Excelsior JET",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"jetbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Compile and package the application",
    )
    build_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    build_parser.add_argument(
        "-m",
        "--main-class",
        default=None,
        help="Application main class (e.g., com.example.App)",
    )
    build_parser.add_argument(
        "--main-jar",
        default=None,
        help="Application jar (default: target/<final_name>.jar)",
    )
    build_parser.add_argument(
        "--jet-home",
        default=None,
        help="Excelsior JET installation directory (default: JET_HOME, then PATH)",
    )
    build_parser.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="Output root directory (default: target/jet)",
    )
    build_parser.add_argument(
        "-n",
        "--output-name",
        default=None,
        help="Executable name (default: simple name of the main class)",
    )
    build_parser.add_argument(
        "--icon",
        default=None,
        help="Windows .ico file for the executable",
    )
    build_parser.add_argument(
        "--hide-console",
        action="store_const",
        const=True,
        default=None,
        help="Do not show a console window for the executable (Windows)",
    )
    build_parser.add_argument(
        "--show-console",
        dest="hide_console",
        action="store_const",
        const=False,
        help="Show a console window even if hide_console is set in jetbuild.ini",
    )
    build_parser.add_argument(
        "--no-zip",
        dest="zip_output",
        action="store_const",
        const=False,
        default=None,
        help="Do not create a ZIP archive of the package directory",
    )
    build_parser.add_argument(
        "--zip",
        dest="zip_output",
        action="store_const",
        const=True,
        help="Create the ZIP archive even if zip_output is off in jetbuild.ini",
    )
    build_parser.add_argument(
        "-d",
        "--dependency",
        dest="dependencies",
        action="append",
        default=None,
        help="Runtime dependency file (repeatable, order is kept)",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Locate command
    locate_parser = subparsers.add_parser(
        "locate",
        help="Show the Excelsior JET installation that would be used",
    )
    locate_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    locate_parser.add_argument(
        "--jet-home",
        default=None,
        help="Excelsior JET installation directory to validate",
    )
    locate_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Parse arguments
    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    # Validate project directory exists
    PathValidator.validate_project_dir(parsed_args.project_dir)

    # Execute command
    if parsed_args.command == "build":
        build_args = BuildArgs(
            project_dir=parsed_args.project_dir,
            main_class=parsed_args.main_class,
            main_jar=parsed_args.main_jar,
            jet_home=parsed_args.jet_home,
            output_dir=parsed_args.output_dir,
            output_name=parsed_args.output_name,
            icon=parsed_args.icon,
            hide_console=parsed_args.hide_console,
            zip_output=parsed_args.zip_output,
            dependencies=parsed_args.dependencies,
            verbose=parsed_args.verbose,
        )
        build_command(build_args)
    elif parsed_args.command == "locate":
        locate_args = LocateArgs(
            project_dir=parsed_args.project_dir,
            jet_home=parsed_args.jet_home,
            verbose=parsed_args.verbose,
        )
        locate_command(locate_args)


if __name__ == "__main__":
    main()

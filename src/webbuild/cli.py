"""
Command-line interface for webbuild.

This module provides the `webbuild` CLI tool for building script and
stylesheet bundles described in webbuild.ini.
"""

import argparse
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from webbuild import __version__
from webbuild.build import BuildOrchestrator, BuildResult
from webbuild.build.orchestrator import BuildOrchestratorError
from webbuild.cli_utils import (
    BundleSelector,
    ErrorFormatter,
    PathValidator,
    configure_logging,
)
from webbuild.config import CONFIG_FILE_NAME, BundleConfigError, WebBuildConfig, find_config


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    bundles: List[str] = field(default_factory=list)
    clean: bool = False
    verbose: bool = False
    progress: bool = False


@dataclass
class ListArgs:
    """Arguments for the list command."""

    project_dir: Path


def print_result(result: BuildResult) -> None:
    """Print the artifacts of a successful bundle build."""
    ErrorFormatter.print_success(f"Bundle '{result.bundle}' built")
    if result.output_path is None:
        print(result.message)
        return

    print(f"Output:     {result.output_path} ({result.size:,} bytes)")
    if result.map_path:
        print(f"Source map: {result.map_path}")
    if result.gzip_path:
        print(f"Gzip:       {result.gzip_path}")
    print(f"Sources:    {len(result.sources)} files")


def build_command(args: BuildArgs) -> None:
    """Build bundles.

    Examples:
        webbuild build                    # Build default bundles
        webbuild build site/              # Build a specific project
        webbuild build -b app -b styles   # Build selected bundles
        webbuild build --clean            # Remove previous artifacts first
        webbuild build --verbose          # Verbose output
    """
    print(f"webbuild v{__version__}")
    print()

    try:
        bundles = BundleSelector.select_bundles(args.project_dir, args.bundles)

        if args.verbose:
            print(f"Building project: {args.project_dir}")
            print(f"Bundles: {', '.join(bundles)}")
            print()
        else:
            print(f"Building bundles: {', '.join(bundles)}...")

        orchestrator = BuildOrchestrator(verbose=args.verbose, show_progress=args.progress)

        start_time = time.time()
        results = orchestrator.build(
            project_dir=args.project_dir,
            bundles=bundles,
            clean=args.clean,
            verbose=args.verbose,
        )
        build_time = time.time() - start_time

        failed = [result for result in results if not result.success]
        for result in results:
            if result.success:
                print_result(result)
            else:
                ErrorFormatter.print_error(f"Bundle '{result.bundle}' failed!", result.message)

        print()
        print(f"Build time: {build_time:.2f}s")
        sys.exit(1 if failed else 0)

    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except BundleConfigError as e:
        ErrorFormatter.handle_config_error(e)
    except ValueError as e:
        ErrorFormatter.handle_invalid_selection(e)
    except BuildOrchestratorError as e:
        ErrorFormatter.print_error("Build failed!", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def list_command(args: ListArgs) -> None:
    """List the bundles defined in webbuild.ini."""
    try:
        ini_path = find_config(args.project_dir)
        if ini_path is None:
            raise FileNotFoundError(f"{CONFIG_FILE_NAME} not found in {args.project_dir}")

        config = WebBuildConfig(ini_path)
        defaults = set(config.get_default_bundles())

        for name in config.get_bundles():
            bundle = config.get_bundle_config(name)
            marker = "*" if name in defaults else " "
            sources = ", ".join(source.name for source in bundle.sources)
            print(f"{marker} {name:<16} {bundle.output}  [{sources}]")

        sys.exit(0)

    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except BundleConfigError as e:
        ErrorFormatter.handle_config_error(e)
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e)


def main() -> None:
    """webbuild - declarative script and stylesheet bundler."""
    parser = argparse.ArgumentParser(
        prog="webbuild",
        description="webbuild - declarative script and stylesheet bundler",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"webbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Build bundles defined in webbuild.ini",
    )
    build_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    build_parser.add_argument(
        "-b",
        "--bundle",
        dest="bundles",
        action="append",
        default=[],
        help="Bundle to build, may be repeated (default: default_bundles from webbuild.ini)",
    )
    build_parser.add_argument(
        "-c",
        "--clean",
        action="store_true",
        help="Remove previous bundle artifacts before building",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose build output",
    )
    build_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while compiling sources",
    )

    # List command
    list_parser = subparsers.add_parser(
        "list",
        help="List bundles defined in webbuild.ini",
    )
    list_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )

    # Parse arguments
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    # Validate project directory exists
    PathValidator.validate_project_dir(parsed_args.project_dir)

    # Execute command
    if parsed_args.command == "build":
        configure_logging(parsed_args.verbose)
        build_args = BuildArgs(
            project_dir=parsed_args.project_dir,
            bundles=parsed_args.bundles,
            clean=parsed_args.clean,
            verbose=parsed_args.verbose,
            progress=parsed_args.progress,
        )
        build_command(build_args)
    elif parsed_args.command == "list":
        configure_logging()
        list_command(ListArgs(project_dir=parsed_args.project_dir))


if __name__ == "__main__":
    main()

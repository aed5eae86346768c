"""CLI utility functions for webbuild.

This module provides common utilities used across CLI commands including:
- Bundle selection from webbuild.ini
- Error handling and formatting
- Logging setup
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from webbuild.config import CONFIG_FILE_NAME, BundleConfigError, WebBuildConfig, find_config


class BundleSelector:
    """Handles bundle selection from webbuild.ini."""

    @staticmethod
    def select_bundles(project_dir: Path, bundles: Optional[Sequence[str]] = None) -> List[str]:
        """Detect or validate the bundles to build.

        Args:
            project_dir: Project directory containing webbuild.ini
            bundles: Optional explicit bundle names

        Returns:
            Bundle names to build

        Raises:
            FileNotFoundError: If webbuild.ini doesn't exist
            ValueError: If no bundles are defined, or a requested bundle is unknown
            BundleConfigError: If webbuild.ini cannot be parsed
        """
        ini_path = find_config(project_dir)
        if ini_path is None:
            raise FileNotFoundError(f"{CONFIG_FILE_NAME} not found in {project_dir}")

        config = WebBuildConfig(ini_path)

        if bundles:
            unknown = [name for name in bundles if not config.has_bundle(name)]
            if unknown:
                available = ", ".join(config.get_bundles()) or "none"
                raise ValueError(
                    f"Unknown bundle(s): {', '.join(unknown)}. Available bundles: {available}"
                )
            return list(bundles)

        selected = config.get_default_bundles()
        if not selected:
            raise ValueError(f"No bundles found in {CONFIG_FILE_NAME}")

        return selected


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "File not found", "Build failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message."""
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message."""
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        """Handle FileNotFoundError with standard formatting.

        Args:
            error: The FileNotFoundError to handle
        """
        ErrorFormatter.print_error("Error: File not found", str(error))
        print(f"Make sure you're in a webbuild project directory with a {CONFIG_FILE_NAME} file.")
        sys.exit(1)

    @staticmethod
    def handle_invalid_selection(error: ValueError) -> None:
        """Handle an invalid bundle selection."""
        ErrorFormatter.print_error("Error: Invalid bundle selection", str(error))
        sys.exit(1)

    @staticmethod
    def handle_config_error(error: BundleConfigError) -> None:
        """Handle a malformed webbuild.ini.

        Args:
            error: The BundleConfigError to handle
        """
        ErrorFormatter.print_error(f"Error: Invalid {CONFIG_FILE_NAME}", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
        if not project_dir.is_dir():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)


def configure_logging(verbose: bool = False) -> None:
    """Send webbuild log records to stderr.

    Args:
        verbose: Log debug records (capability resolution, written files)
    """
    logger = logging.getLogger("webbuild")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Replace handlers from an earlier call; sys.stderr may have been swapped since
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)

"""
Build orchestration for webbuild projects.

This module coordinates a project build, from parsing webbuild.ini to
writing every requested bundle:
- Configuration parsing (webbuild.ini)
- Builder setup per bundle
- Cleaning previous artifacts
- Bundle assembly
"""

import os
import time
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from ..config.ini_parser import CONFIG_FILE_NAME, BundleConfigError, WebBuildConfig, find_config
from .builder import Builder, BuildResult, EmptySourceError, InvalidOutputPathError
from .bundle_factory import BundleFactory
from .capabilities import CapabilityMissingError, CapabilityRegistry
from .compiler import BuilderStateError
from .path_table import ValidationError
from .source_scanner import SourceScannerError


class BuildOrchestratorError(Exception):
    """Exception raised for build orchestration errors."""
    pass


class BuildOrchestrator:
    """
    Orchestrates the build of a webbuild project.

    For every requested bundle:
    1. Load the bundle definition from webbuild.ini
    2. Create a configured Builder
    3. Remove previous artifacts (clean builds)
    4. Build and collect the BuildResult

    Example usage:
        orchestrator = BuildOrchestrator()
        results = orchestrator.build(project_dir=Path("."), bundles=["app"])
        for result in results:
            print(f"{result.bundle}: {result.output_path}")
    """

    def __init__(
        self,
        capabilities: Optional[CapabilityRegistry] = None,
        verbose: bool = False,
        show_progress: bool = False
    ):
        """
        Initialize build orchestrator.

        Args:
            capabilities: Capability registry shared by every bundle (default: installed libraries)
            verbose: Enable verbose output
            show_progress: Show a progress bar per bundle
        """
        self.capabilities = capabilities
        self.verbose = verbose
        self.show_progress = show_progress

    def load_config(self, project_dir: Path) -> WebBuildConfig:
        """
        Parse the project's webbuild.ini.

        Raises:
            BuildOrchestratorError: If the project has no webbuild.ini
        """
        ini_path = find_config(project_dir)
        if ini_path is None:
            raise BuildOrchestratorError(f"{CONFIG_FILE_NAME} not found in {project_dir}")
        return WebBuildConfig(ini_path)

    def build(
        self,
        project_dir: Path,
        bundles: Optional[Sequence[str]] = None,
        clean: bool = False,
        verbose: Optional[bool] = None
    ) -> List[BuildResult]:
        """
        Build several bundles.

        Args:
            project_dir: Project root directory containing webbuild.ini
            bundles: Bundle names (defaults to the configured default bundles)
            clean: Remove previous artifacts before building
            verbose: Override verbose setting

        Returns:
            One BuildResult per bundle, in order

        Raises:
            BuildOrchestratorError: If the configuration cannot be loaded
        """
        verbose_mode = verbose if verbose is not None else self.verbose
        project_dir = Path(os.path.abspath(project_dir))

        try:
            config = self.load_config(project_dir)
            names = list(bundles) if bundles else config.get_default_bundles()
        except BundleConfigError as e:
            raise BuildOrchestratorError(str(e)) from e

        if not names:
            raise BuildOrchestratorError(f"No bundles defined in {CONFIG_FILE_NAME}")

        return [
            self.build_bundle(project_dir, name, clean=clean, verbose=verbose_mode, config=config)
            for name in names
        ]

    def build_bundle(
        self,
        project_dir: Path,
        bundle_name: str,
        clean: bool = False,
        verbose: Optional[bool] = None,
        config: Optional[WebBuildConfig] = None
    ) -> BuildResult:
        """
        Build a single bundle.

        Configuration and build errors are reported through the returned
        BuildResult instead of being raised.

        Args:
            project_dir: Project root directory
            bundle_name: Bundle to build
            clean: Remove previous artifacts before building
            verbose: Override verbose setting
            config: Already parsed configuration

        Returns:
            BuildResult with build status and output paths
        """
        start_time = time.time()
        verbose_mode = verbose if verbose is not None else self.verbose
        project_dir = Path(os.path.abspath(project_dir))

        try:
            if config is None:
                config = self.load_config(project_dir)

            if verbose_mode:
                print(f"[1/3] Loading bundle '{bundle_name}'...")

            bundle = config.get_bundle_config(bundle_name)

            if verbose_mode:
                print(f"      Output: {bundle.output}")
                print(f"      Sources: {', '.join(s.name for s in bundle.sources)}")

            builder = BundleFactory.create_builder(
                bundle,
                base_dir=project_dir,
                capabilities=self.capabilities,
                verbose=verbose_mode,
                show_progress=self.show_progress,
            )

            if clean:
                if verbose_mode:
                    print("[2/3] Removing previous artifacts...")
                self.clean_bundle(project_dir, bundle.output)

            if verbose_mode:
                print("[3/3] Building bundle...")

            result = builder.build(bundle.output)
            return replace(result, bundle=bundle_name, build_time=time.time() - start_time)

        except (
            BuildOrchestratorError,
            BundleConfigError,
            BuilderStateError,
            CapabilityMissingError,
            EmptySourceError,
            InvalidOutputPathError,
            SourceScannerError,
            ValidationError
        ) as e:
            return BuildResult(
                success=False,
                output_path=None,
                build_time=time.time() - start_time,
                message=str(e),
                bundle=bundle_name,
            )
        except Exception as e:
            return BuildResult(
                success=False,
                output_path=None,
                build_time=time.time() - start_time,
                message=f"Unexpected error: {e}",
                bundle=bundle_name,
            )

    @staticmethod
    def clean_bundle(project_dir: Path, output: str) -> List[Path]:
        """
        Remove a bundle's previous artifacts (bundle, .map and .gz).

        Args:
            project_dir: Project root directory
            output: Bundle output path from the configuration

        Returns:
            Removed paths
        """
        directory, file_name = Builder.split_output(output)
        dest_dir = project_dir / directory

        removed = []
        for name in (file_name, f"{file_name}.map", f"{file_name}.gz"):
            path = dest_dir / name
            if path.is_file():
                path.unlink()
                removed.append(path)
        return removed

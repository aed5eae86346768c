"""
Bundle factory for the webbuild build system.

This module turns BundleConfig definitions (from webbuild.ini) into
configured Builder instances. It centralizes the mapping from config
fields to fluent compiler calls.
"""

from pathlib import Path
from typing import Optional

from ..config.bundle_config import BundleConfig, SourceConfig
from ..config.ini_parser import BundleConfigError
from .builder import Builder
from .capabilities import CapabilityRegistry
from .compiler import Compiler, ScriptCompiler, StyleCompiler
from .dialects import parse_dialect
from .path_table import ValidationError


class BundleFactory:
    """
    Factory for creating builders from bundle configuration.

    Example usage:
        config = WebBuildConfig(Path("webbuild.ini"))
        builder = BundleFactory.create_builder(
            config.get_bundle_config("app"),
            base_dir=Path("."),
        )
        builder.build("public/app.js")
    """

    @staticmethod
    def create_builder(
        bundle: BundleConfig,
        base_dir: Path,
        capabilities: Optional[CapabilityRegistry] = None,
        verbose: bool = False,
        show_progress: bool = False
    ) -> Builder:
        """
        Create a builder configured for a bundle.

        Compilers are added in this order: CommonJS runtime, polyfill,
        then the bundle's sources as listed.

        Args:
            bundle: Bundle configuration
            base_dir: Project directory
            capabilities: Capability registry (default: installed libraries)
            verbose: Enable verbose output
            show_progress: Show a progress bar

        Returns:
            Configured Builder

        Raises:
            BundleConfigError: If a source uses an unknown dialect or invalid option
        """
        builder = Builder(
            capabilities=capabilities,
            base_dir=base_dir,
            verbose=verbose,
            show_progress=show_progress
        )

        if bundle.commonjs:
            builder.with_common_js()
        if bundle.polyfill:
            builder.with_polyfill(bundle.polyfill)

        for source in bundle.sources:
            try:
                dialect = parse_dialect(source.dialect)
                BundleFactory.configure_compiler(builder.add_compiler(dialect), source)
            except (ValueError, ValidationError) as e:
                raise BundleConfigError(f"Source '{source.name}': {e}") from e

        builder.with_source_maps(bundle.sourcemaps)
        builder.with_minify(bundle.minify, bundle.minify_options)
        builder.with_gzip(bundle.gzip)

        return builder

    @staticmethod
    def configure_compiler(compiler: Compiler, source: SourceConfig) -> Compiler:
        """
        Apply a source configuration to a compiler.

        Args:
            compiler: Compiler created for the source's dialect
            source: Source configuration

        Returns:
            The configured compiler

        Raises:
            ValidationError: If an option is not supported by the dialect
        """
        for file in source.files:
            compiler.register_file(file)
        for path in source.paths:
            compiler.register_directory(path, source.extension)

        if isinstance(compiler, ScriptCompiler):
            if source.namespace:
                compiler.namespace(source.namespace, auto_require=source.auto_require)
            if source.presets:
                compiler.preset(*source.presets)
            if source.plugins:
                compiler.plugin(*source.plugins)
            if source.bare:
                compiler.bare()
            if source.autoprefix:
                raise ValidationError("autoprefix is only supported by stylesheet dialects")
        elif isinstance(compiler, StyleCompiler):
            if source.namespace or source.presets or source.plugins or source.bare:
                raise ValidationError(
                    "namespace, presets, plugins and bare are only supported by script dialects"
                )
            if source.autoprefix:
                compiler.autoprefix(True, source.autoprefix_options)

        return compiler

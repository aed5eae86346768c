"""
Build system components for webbuild.

This module provides the bundle build implementation including:
- Selector registration (files and directories per compiler)
- Script and style compilers with pluggable transform capabilities
- Module identifier rewriting for CommonJS namespaces
- Bundle assembly (concatenation, source maps, minification, gzip)
- Build orchestration from webbuild.ini
"""

from .builder import Builder, BuildResult, EmptySourceError, InvalidOutputPathError
from .bundle_factory import BundleFactory
from .capabilities import (
    CapabilityMissingError,
    CapabilityRegistry,
    commonjs_wrap,
    default_capabilities,
)
from .compiler import BuilderStateError, Compiler, ScriptCompiler, StyleCompiler, create_compiler
from .dialects import Dialect, DialectSpec, Family, get_dialect_spec, parse_dialect
from .module_path import rewrite_module_path
from .orchestrator import BuildOrchestrator, BuildOrchestratorError
from .path_table import PathTable, SelectorEntry, SelectorKind, ValidationError
from .source_scanner import SourceFile, SourceScanner, SourceScannerError
from .sourcemap import SourceMapBuilder

__all__ = [
    'Builder',
    'BuildResult',
    'EmptySourceError',
    'InvalidOutputPathError',
    'BundleFactory',
    'CapabilityMissingError',
    'CapabilityRegistry',
    'commonjs_wrap',
    'default_capabilities',
    'BuilderStateError',
    'Compiler',
    'ScriptCompiler',
    'StyleCompiler',
    'create_compiler',
    'Dialect',
    'DialectSpec',
    'Family',
    'get_dialect_spec',
    'parse_dialect',
    'rewrite_module_path',
    'BuildOrchestrator',
    'BuildOrchestratorError',
    'PathTable',
    'SelectorEntry',
    'SelectorKind',
    'ValidationError',
    'SourceFile',
    'SourceScanner',
    'SourceScannerError',
    'SourceMapBuilder',
]

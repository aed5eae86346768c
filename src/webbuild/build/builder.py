"""
Bundle builder.

The Builder collects compilers (one per dialect invocation) and global
switches, then assembles everything into a single output file:

1. Freeze configuration and resolve every needed capability
2. Create one stream per compiler
3. Merge the streams
4. Concatenate contents (tracking source map lines when enabled)
5. Minify with the first registered compiler's minifier
6. Write the source map and append the sourceMappingURL comment
7. Write a gzip copy
8. Write the bundle

Example usage:
    builder = Builder()
    builder.es6(lambda c: c.register_directory('src/app/').namespace('app'))
    builder.js(lambda c: c.register_file('vendor/jquery.js'))
    result = builder.with_minify().with_gzip().build('public/app.js')
"""

import gzip
import itertools
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from tqdm import tqdm

from .capabilities import CapabilityRegistry, default_capabilities
from .compiler import BuilderStateError, Compiler, create_compiler
from .dialects import Dialect
from .source_scanner import SourceFile, SourceScanner
from .sourcemap import SourceMapBuilder, source_mapping_comment

logger = logging.getLogger(__name__)

RUNTIME_DIR = Path(__file__).resolve().parent.parent / 'runtime'
COMMONJS_RUNTIME = RUNTIME_DIR / 'commonjs-require.js'

DEFAULT_OUTPUT = './compiled'

CompilerCallback = Optional[Callable[[Any], Any]]


@dataclass
class BuildResult:
    """Result of a bundle build."""

    success: bool
    output_path: Optional[Path]
    map_path: Optional[Path] = None
    gzip_path: Optional[Path] = None
    sources: List[Path] = field(default_factory=list)
    size: int = 0
    build_time: float = 0.0
    message: str = ''
    bundle: Optional[str] = None


class EmptySourceError(Exception):
    """Raised when building without any registered compiler."""
    pass


class InvalidOutputPathError(Exception):
    """Raised when the output path has no file name."""
    pass


class Builder:
    """
    Assembles the output of several compilers into one bundle.

    A builder is single use: build() freezes it and every later
    configuration call (or a second build) raises BuilderStateError.
    """

    def __init__(
        self,
        capabilities: Optional[CapabilityRegistry] = None,
        base_dir: Optional[Path] = None,
        verbose: bool = False,
        show_progress: bool = False
    ):
        """
        Initialize builder.

        Args:
            capabilities: Transform capabilities (defaults to default_capabilities())
            base_dir: Directory selectors and the output path are relative to (default: cwd)
            verbose: Print selected files and written artifacts
            show_progress: Show a progress bar while sources are compiled
        """
        self.capabilities = capabilities if capabilities is not None else default_capabilities()
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.verbose = verbose
        self.show_progress = show_progress

        self._compilers: List[Compiler] = []
        self._source_maps = False
        self._minify = False
        self._minify_options: Dict[str, Any] = {}
        self._gzip = False
        self._built = False

    @property
    def compilers(self) -> Tuple[Compiler, ...]:
        return tuple(self._compilers)

    @property
    def source_maps_enabled(self) -> bool:
        return self._source_maps

    @property
    def minify_enabled(self) -> bool:
        return self._minify

    @property
    def minify_options(self) -> Dict[str, Any]:
        return dict(self._minify_options)

    @property
    def gzip_enabled(self) -> bool:
        return self._gzip

    def _check_mutable(self) -> None:
        if self._built:
            raise BuilderStateError("Builder has already been built; create a new Builder")

    def add_compiler(self, dialect: Dialect) -> Compiler:
        """
        Append a compiler for a dialect.

        Args:
            dialect: Source dialect

        Returns:
            The new compiler
        """
        self._check_mutable()
        compiler = create_compiler(dialect, verbose=self.verbose)
        self._compilers.append(compiler)
        return compiler

    def _add(self, dialect: Dialect, callback: CompilerCallback) -> 'Builder':
        compiler = self.add_compiler(dialect)
        if callback is not None:
            callback(compiler)
        return self

    def js(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.JS, callback)

    def babel(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.BABEL, callback)

    def es6(self, callback: CompilerCallback = None) -> 'Builder':
        """Babel compiler with the es2015 preset."""
        return self._add(Dialect.ES6, callback)

    def es7(self, callback: CompilerCallback = None) -> 'Builder':
        """Babel compiler with the es2015 and stage-0 presets."""
        return self._add(Dialect.ES7, callback)

    def coffee(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.COFFEE, callback)

    def css(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.CSS, callback)

    def sass(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.SASS, callback)

    def scss(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.SCSS, callback)

    def less(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.LESS, callback)

    def stylus(self, callback: CompilerCallback = None) -> 'Builder':
        return self._add(Dialect.STYLUS, callback)

    def with_common_js(self) -> 'Builder':
        """Add the CommonJS require() runtime namespaced modules register with."""
        return self.js(lambda compiler: compiler.register_file(str(COMMONJS_RUNTIME)))

    def with_polyfill(self, path: str) -> 'Builder':
        """
        Add a polyfill script.

        Args:
            path: Polyfill file (e.g. node_modules/babel-polyfill/dist/polyfill.js)
        """
        return self.js(lambda compiler: compiler.register_file(path))

    def with_source_maps(self, enabled: bool = True) -> 'Builder':
        self._check_mutable()
        self._source_maps = bool(enabled)
        return self

    def with_minify(self, enabled: bool = True, options: Optional[Dict[str, Any]] = None) -> 'Builder':
        """
        Toggle minification of the concatenated bundle.

        Only the first registered compiler's minifier runs, whatever
        dialects the bundle mixes.

        Args:
            enabled: Whether to minify
            options: Options forwarded to the minifier
        """
        self._check_mutable()
        self._minify = bool(enabled)
        self._minify_options = dict(options or {})
        return self

    def with_gzip(self, enabled: bool = True) -> 'Builder':
        self._check_mutable()
        self._gzip = bool(enabled)
        return self

    @staticmethod
    def split_output(output: str) -> Tuple[str, str]:
        """
        Split an output path into destination directory and file name.

        Args:
            output: Output path (e.g. 'public/js/app.js')

        Returns:
            Tuple of (directory, file name)

        Raises:
            InvalidOutputPathError: If the file name is empty
        """
        output = str(output).replace('\\', '/')
        directory, _, file_name = output.rpartition('/')
        if not file_name.strip():
            raise InvalidOutputPathError(f"Invalid output path {output}")
        if not directory:
            directory = '/' if output.startswith('/') else '.'
        return directory, file_name

    def _freeze(self) -> None:
        self._built = True
        for compiler in self._compilers:
            compiler.freeze()

    def _resolve_capabilities(self) -> None:
        for compiler in self._compilers:
            for name in compiler.required_capabilities():
                self.capabilities.get(name)
                logger.debug(f"Resolved capability '{name}' for {compiler.dialect.value}")

        if self._minify:
            self._compilers[0].resolve_minifier(self.capabilities)

    def _merge(self, streams: List[Iterator[SourceFile]]) -> Iterator[SourceFile]:
        merged: Iterator[SourceFile] = itertools.chain.from_iterable(streams)
        if self.show_progress:
            merged = tqdm(merged, unit="file", desc="Compiling")
        return merged

    def build(self, output: str = DEFAULT_OUTPUT) -> BuildResult:
        """
        Build the bundle.

        Args:
            output: Output file path, relative to base_dir

        Returns:
            BuildResult describing the written artifacts

        Raises:
            EmptySourceError: If no compiler is registered
            InvalidOutputPathError: If output has no file name
            BuilderStateError: If the builder was already built
            CapabilityMissingError: If a needed capability is not registered
            SourceScannerError: If a selected file is missing or unreadable
        """
        self._check_mutable()

        if not self._compilers:
            raise EmptySourceError("Building error. Empty sources list")

        directory, file_name = self.split_output(output)
        start_time = time.time()

        self._freeze()
        self._resolve_capabilities()

        scanner = SourceScanner(self.base_dir)
        streams = [compiler.create_stream(scanner, self.capabilities) for compiler in self._compilers]

        dest_dir = self.base_dir / directory
        source_map = SourceMapBuilder(file_name) if self._source_maps else None

        parts: List[str] = []
        sources: List[Path] = []
        for source in self._merge(streams):
            parts.append(source.contents)
            sources.append(source.origin)
            if source_map is not None:
                source_map.add_source(self._map_source_name(source, dest_dir), source.contents)

        if not parts:
            logger.warning(f"No source files selected for {file_name}")
            return BuildResult(
                success=True,
                output_path=None,
                build_time=time.time() - start_time,
                message=f"No source files selected for {file_name}; nothing written",
            )

        contents = '\n'.join(parts)

        if self._minify:
            contents = self._compilers[0].minify(contents, self.capabilities, self._minify_options)

        dest_dir.mkdir(parents=True, exist_ok=True)

        map_path = None
        if source_map is not None:
            map_path = dest_dir / f"{file_name}.map"
            map_path.write_text(source_map.to_json(include_mappings=not self._minify), encoding='utf-8')
            contents += '\n' + source_mapping_comment(map_path.name, file_name)
            self._report_written(map_path)

        data = contents.encode('utf-8')

        gzip_path = None
        if self._gzip:
            gzip_path = dest_dir / f"{file_name}.gz"
            gzip_path.write_bytes(gzip.compress(data))
            self._report_written(gzip_path)

        output_path = dest_dir / file_name
        output_path.write_bytes(data)
        self._report_written(output_path)

        return BuildResult(
            success=True,
            output_path=output_path,
            map_path=map_path,
            gzip_path=gzip_path,
            sources=sources,
            size=len(data),
            build_time=time.time() - start_time,
            message=f"Built {file_name} from {len(sources)} source files",
        )

    @staticmethod
    def _map_source_name(source: SourceFile, dest_dir: Path) -> str:
        return Path(os.path.relpath(source.origin, os.path.abspath(dest_dir))).as_posix()

    def _report_written(self, path: Path) -> None:
        logger.debug(f"Wrote {path}")
        if self.verbose:
            print(f"Wrote {path} ({path.stat().st_size:,} bytes)")

"""
Bundle compilers.

A compiler selects source files of one dialect, runs them through the
dialect's transform capability and applies its family's post-processing:
- ScriptCompiler: CommonJS module wrapping under a namespace
- StyleCompiler: autoprefixing

Dialect specifics (transform capability, default extension, Babel presets)
come from the dialect table in dialects.py.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from .capabilities import CapabilityRegistry
from .dialects import Dialect, DialectSpec, Family, get_dialect_spec
from .module_path import normalize_namespace, rewrite_module_path
from .path_table import PathTable, SelectorEntry, ValidationError
from .source_scanner import SourceFile, SourceScanner

Minifier = Callable[[str, Dict[str, Any]], str]
PostProcessor = Callable[[SourceFile], SourceFile]


class BuilderStateError(Exception):
    """Raised when a builder or compiler is used after build() started."""
    pass


@dataclass
class DialectOptions:
    """Dialect-specific compiler options."""

    namespace: str = ''
    presets: List[str] = field(default_factory=list)
    plugins: List[str] = field(default_factory=list)
    bare: bool = False
    autoprefix: bool = False
    autoprefix_options: Dict[str, Any] = field(default_factory=dict)


def _identity_minifier(contents: str, options: Dict[str, Any]) -> str:
    return contents


class Compiler(ABC):
    """
    Base class for bundle compilers.

    Selectors are registered fluently before the build:
        compiler.register_file('vendor/jquery.js').register_directory('src/')

    Once the owning builder starts building, the compiler is frozen and
    further configuration raises BuilderStateError.
    """

    family: Family
    minifier_capability: Optional[str] = None

    def __init__(self, dialect: Dialect, verbose: bool = False):
        """
        Initialize compiler.

        Args:
            dialect: Source dialect
            verbose: Print every file passing through the compiler

        Raises:
            ValidationError: If the dialect belongs to another family
        """
        self.spec: DialectSpec = get_dialect_spec(dialect)
        if self.spec.family is not self.family:
            raise ValidationError(
                f"Dialect '{dialect.value}' cannot be compiled by {type(self).__name__}"
            )

        self.verbose = verbose
        self.paths = PathTable()
        self.options = DialectOptions(presets=list(self.spec.presets))
        self._frozen = False

    @property
    def dialect(self) -> Dialect:
        return self.spec.dialect

    @property
    def files(self) -> List[SelectorEntry]:
        """Registered selectors in registration order."""
        return self.paths.entries

    @property
    def patterns(self) -> List[str]:
        return self.paths.patterns

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise BuilderStateError("Compiler configuration is frozen once the build has started")

    def register_file(self, path: str) -> 'Compiler':
        """
        Add a single source file.

        Args:
            path: File path relative to the builder working directory

        Returns:
            The compiler, for chaining
        """
        self._check_mutable()
        self.paths.register_file(path)
        return self

    def register_directory(self, path: str, extension: Optional[str] = None) -> 'Compiler':
        """
        Add every file below a directory.

        Args:
            path: Directory path ending with '/'
            extension: Extension filter (defaults to the dialect's extension)

        Returns:
            The compiler, for chaining

        Raises:
            ValidationError: If path does not end with a separator
        """
        self._check_mutable()
        if extension is None:
            extension = self.spec.extension
        self.paths.register_directory(path, extension)
        return self

    def required_capabilities(self) -> List[str]:
        """Names of the capabilities create_stream() will look up."""
        names = []
        if self.spec.capability:
            names.append(self.spec.capability)
        return names

    def transform_options(self) -> Dict[str, Any]:
        """Options forwarded to the dialect transform capability."""
        return {}

    @abstractmethod
    def post_processors(self, capabilities: CapabilityRegistry) -> List[PostProcessor]:
        """
        Family-specific steps applied after the dialect transform.

        Args:
            capabilities: Registry to resolve post-processing capabilities from

        Returns:
            Ordered list of per-file processors
        """
        pass

    def create_stream(
        self,
        scanner: SourceScanner,
        capabilities: CapabilityRegistry
    ) -> Iterator[SourceFile]:
        """
        Create the lazily evaluated stream of compiled files.

        Capabilities are resolved here, before any file is read.

        Args:
            scanner: Source scanner used to select files
            capabilities: Capability registry

        Returns:
            Iterator of compiled SourceFile objects

        Raises:
            CapabilityMissingError: If a needed capability is not registered
        """
        transform = None
        if self.spec.capability:
            transform = capabilities.get(self.spec.capability)
        processors = self.post_processors(capabilities)

        return self._stream(scanner.scan(self.patterns), transform, processors)

    def _stream(
        self,
        sources: Iterator[SourceFile],
        transform: Optional[Callable[..., str]],
        processors: List[PostProcessor]
    ) -> Iterator[SourceFile]:
        options = self.transform_options()

        for source in sources:
            if transform is not None:
                compiled = transform(source.contents, str(source.path), options)
                source = source.with_contents(compiled).with_suffix(self.spec.output_extension)

            for process in processors:
                source = process(source)

            if self.verbose:
                print(f"+ {source.relative}")

            yield source

    def resolve_minifier(self, capabilities: CapabilityRegistry) -> Minifier:
        """
        Resolve the minifier of this compiler's family.

        Raises:
            CapabilityMissingError: If the family minifier is not registered
        """
        if self.minifier_capability is None:
            return _identity_minifier
        return capabilities.get(self.minifier_capability)

    def minify(
        self,
        contents: str,
        capabilities: CapabilityRegistry,
        options: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Minify concatenated output with this compiler's family minifier.

        Args:
            contents: Concatenated bundle contents
            capabilities: Capability registry
            options: Options forwarded to the minifier

        Returns:
            Minified contents
        """
        return self.resolve_minifier(capabilities)(contents, options or {})


class ScriptCompiler(Compiler):
    """
    Compiler for JavaScript and script dialects (Babel, CoffeeScript).

    When a namespace is set, every file is wrapped as a CommonJS module whose
    identifier is derived from its path (see module_path.rewrite_module_path).
    """

    family = Family.SCRIPT
    minifier_capability = 'js-minify'

    def __init__(self, dialect: Dialect = Dialect.JS, verbose: bool = False):
        super().__init__(dialect, verbose)
        self.wrap_options: Dict[str, Any] = {}

    def namespace(self, name: str, **wrap_options: Any) -> 'ScriptCompiler':
        """
        Wrap files as CommonJS modules under a namespace.

        Args:
            name: Namespace prefix (e.g. 'app')
            **wrap_options: Options forwarded to the module wrapper (e.g. auto_require=True)

        Returns:
            The compiler, for chaining
        """
        self._check_mutable()
        self.options.namespace = normalize_namespace(name) if name else ''
        self.wrap_options = dict(wrap_options)
        return self

    def preset(self, *presets: str) -> 'ScriptCompiler':
        """Append Babel presets."""
        self._check_mutable()
        self._require_babel('presets')
        self.options.presets.extend(presets)
        return self

    def plugin(self, *plugins: str) -> 'ScriptCompiler':
        """Append Babel plugins."""
        self._check_mutable()
        self._require_babel('plugins')
        self.options.plugins.extend(plugins)
        return self

    def bare(self, enabled: bool = True) -> 'ScriptCompiler':
        """Compile CoffeeScript without the top-level function wrapper."""
        self._check_mutable()
        if self.dialect is not Dialect.COFFEE:
            raise ValidationError(f"Bare mode is only supported by coffee, not '{self.dialect.value}'")
        self.options.bare = bool(enabled)
        return self

    def _require_babel(self, option: str) -> None:
        if not self.spec.is_babel:
            raise ValidationError(
                f"{option.capitalize()} are only supported by babel dialects, not '{self.dialect.value}'"
            )

    def module_id(self, source: SourceFile) -> str:
        """Module identifier a file is registered under."""
        return rewrite_module_path(str(source.origin), self.files, self.options.namespace)

    def transform_options(self) -> Dict[str, Any]:
        if self.spec.is_babel:
            return {
                'presets': list(self.options.presets),
                'plugins': list(self.options.plugins),
            }
        if self.dialect is Dialect.COFFEE and self.options.bare:
            return {'bare': True}
        return {}

    def required_capabilities(self) -> List[str]:
        names = super().required_capabilities()
        if self.options.namespace:
            names.append('commonjs')
        return names

    def post_processors(self, capabilities: CapabilityRegistry) -> List[PostProcessor]:
        if not self.options.namespace:
            return []

        wrap = capabilities.get('commonjs')

        def wrap_module(source: SourceFile) -> SourceFile:
            return source.with_contents(wrap(source.contents, self.module_id(source), self.wrap_options))

        return [wrap_module]


class StyleCompiler(Compiler):
    """Compiler for CSS and stylesheet dialects (Sass, Scss, Less, Stylus)."""

    family = Family.STYLE
    minifier_capability = 'css-minify'

    def __init__(self, dialect: Dialect = Dialect.CSS, verbose: bool = False):
        super().__init__(dialect, verbose)

    def autoprefix(self, enabled: bool = True, options: Optional[Dict[str, Any]] = None) -> 'StyleCompiler':
        """
        Toggle vendor prefixing of the compiled CSS.

        Args:
            enabled: Whether to run the autoprefixer capability
            options: Options forwarded to the autoprefixer

        Returns:
            The compiler, for chaining
        """
        self._check_mutable()
        self.options.autoprefix = bool(enabled)
        self.options.autoprefix_options = dict(options or {})
        return self

    def required_capabilities(self) -> List[str]:
        names = super().required_capabilities()
        if self.options.autoprefix:
            names.append('autoprefixer')
        return names

    def post_processors(self, capabilities: CapabilityRegistry) -> List[PostProcessor]:
        if not self.options.autoprefix:
            return []

        prefix = capabilities.get('autoprefixer')
        options = self.options.autoprefix_options

        def autoprefix(source: SourceFile) -> SourceFile:
            return source.with_contents(prefix(source.contents, str(source.path), options))

        return [autoprefix]


COMPILER_CLASSES = {
    Family.SCRIPT: ScriptCompiler,
    Family.STYLE: StyleCompiler,
}


def create_compiler(dialect: Dialect, verbose: bool = False) -> Compiler:
    """
    Create the compiler for a dialect.

    Args:
        dialect: Source dialect
        verbose: Print every file passing through the compiler

    Returns:
        ScriptCompiler or StyleCompiler
    """
    family = get_dialect_spec(dialect).family
    return COMPILER_CLASSES[family](dialect, verbose)

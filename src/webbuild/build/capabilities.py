"""
Transform capabilities for bundle compilers.

Capabilities are plain callables looked up by name:
- Dialect transforms and autoprefixer: (contents, path, options) -> str
- Minifiers: (contents, options) -> str
- Module wrapper: (contents, module_id, options) -> str

Builders receive a CapabilityRegistry at construction time. The registry
returned by default_capabilities() holds an adapter for every supported
library that is importable, plus the built-in CommonJS wrapper.
"""

import importlib.util
import io
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)

Capability = Callable[..., str]


@dataclass(frozen=True)
class CapabilityRequirement:
    """What has to be installed to provide a capability."""

    label: str
    requirement: str


CAPABILITY_REQUIREMENTS = {
    'sass': CapabilityRequirement('Sass compiler', 'libsass>=0.22'),
    'less': CapabilityRequirement('Less compiler', 'lesscpy>=0.15'),
    'stylus': CapabilityRequirement('Stylus compiler', 'stylus>=0.1'),
    'babel': CapabilityRequirement('Babel compiler', 'dukpy>=0.3'),
    'coffee': CapabilityRequirement('CoffeeScript compiler', 'dukpy>=0.3'),
    'autoprefixer': CapabilityRequirement('Autoprefixer', 'autoprefixer>=10.0'),
    'js-minify': CapabilityRequirement('JavaScript minifier', 'rjsmin>=1.2'),
    'css-minify': CapabilityRequirement('CSS minifier', 'rcssmin>=1.1'),
    'commonjs': CapabilityRequirement('CommonJS module wrapper', 'webbuild'),
}


class CapabilityMissingError(Exception):
    """Raised when a required capability is not registered."""

    def __init__(self, name: str):
        self.name = name
        requirement = CAPABILITY_REQUIREMENTS.get(name)
        if requirement is None:
            message = f"Capability '{name}' is not registered"
        else:
            message = (
                f"{requirement.label} not defined (capability '{name}'). "
                f"Please add \"{requirement.requirement}\" to your project dependencies"
            )
        super().__init__(message)


class CapabilityRegistry:
    """
    Name -> capability mapping.

    Example usage:
        registry = CapabilityRegistry()
        registry.register('js-minify', lambda contents, options: contents.strip())
        minify = registry.get('js-minify')
    """

    def __init__(self, capabilities: Optional[Mapping[str, Capability]] = None):
        self._capabilities: Dict[str, Capability] = dict(capabilities or {})

    def register(self, name: str, capability: Capability) -> 'CapabilityRegistry':
        """
        Register (or replace) a capability.

        Args:
            name: Capability name (e.g. 'sass', 'js-minify')
            capability: Callable implementing it

        Returns:
            The registry, for chaining
        """
        self._capabilities[name] = capability
        return self

    def get(self, name: str) -> Capability:
        """
        Look up a capability.

        Raises:
            CapabilityMissingError: If nothing is registered under the name
        """
        try:
            return self._capabilities[name]
        except KeyError:
            raise CapabilityMissingError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._capabilities

    def __iter__(self) -> Iterator[str]:
        return iter(self._capabilities)

    def __len__(self) -> int:
        return len(self._capabilities)


def commonjs_wrap(contents: str, module_id: str, options: Dict[str, Any]) -> str:
    """
    Wrap a script as a CommonJS module registration.

    Args:
        contents: Script source
        module_id: Identifier the module is registered under
        options: 'auto_require' also requires the module right after registering it

    Returns:
        Wrapped script
    """
    name = json.dumps(module_id)
    wrapped = (
        f"require.register({name}, function(exports, require, module){{\n"
        f"{contents}\n"
        f"}});"
    )
    if options.get('auto_require'):
        wrapped += f"\nrequire({name});"
    return wrapped


def _sass_transform(contents: str, path: str, options: Dict[str, Any]) -> str:
    import sass

    kwargs = dict(options)
    kwargs.setdefault('include_paths', [os.path.dirname(path)])
    return sass.compile(string=contents, indented=path.endswith('.sass'), **kwargs)


def _less_transform(contents: str, path: str, options: Dict[str, Any]) -> str:
    import lesscpy

    return lesscpy.compile(io.StringIO(contents), **options)


def _stylus_transform(contents: str, path: str, options: Dict[str, Any]) -> str:
    from stylus import Stylus

    return Stylus().compile(contents)


def _babel_transform(contents: str, path: str, options: Dict[str, Any]) -> str:
    import dukpy

    return dukpy.babel_compile(contents, **options)['code']


def _coffee_transform(contents: str, path: str, options: Dict[str, Any]) -> str:
    import dukpy

    # dukpy always compiles with the default (wrapped) CoffeeScript options
    return dukpy.coffee_compile(contents)


def _js_minify(contents: str, options: Dict[str, Any]) -> str:
    import rjsmin

    return rjsmin.jsmin(contents, keep_bang_comments=bool(options.get('keep_bang_comments', False)))


def _css_minify(contents: str, options: Dict[str, Any]) -> str:
    import rcssmin

    return rcssmin.cssmin(contents, keep_bang_comments=bool(options.get('keep_bang_comments', False)))


# Capability name -> (importable module, adapter)
LIBRARY_ADAPTERS = {
    'sass': ('sass', _sass_transform),
    'less': ('lesscpy', _less_transform),
    'stylus': ('stylus', _stylus_transform),
    'babel': ('dukpy', _babel_transform),
    'coffee': ('dukpy', _coffee_transform),
    'js-minify': ('rjsmin', _js_minify),
    'css-minify': ('rcssmin', _css_minify),
}


def is_module_available(module: str) -> bool:
    return importlib.util.find_spec(module) is not None


def default_capabilities() -> CapabilityRegistry:
    """
    Build a registry from the libraries installed in this environment.

    Returns:
        CapabilityRegistry with the CommonJS wrapper and every available adapter
    """
    registry = CapabilityRegistry({'commonjs': commonjs_wrap})

    for name, (module, adapter) in LIBRARY_ADAPTERS.items():
        if is_module_available(module):
            registry.register(name, adapter)
        else:
            logger.debug(f"Capability '{name}' unavailable: module '{module}' not installed")

    return registry

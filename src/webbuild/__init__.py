"""webbuild - declarative script and stylesheet bundler."""

from .build import Builder, BuildResult, CapabilityRegistry, Dialect, default_capabilities

__version__ = "0.1.0"

__all__ = [
    "Builder",
    "BuildResult",
    "CapabilityRegistry",
    "Dialect",
    "default_capabilities",
    "__version__",
]

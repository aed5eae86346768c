"""
Bundle and source definitions read from webbuild.ini.

A bundle names one output file and the ordered list of sources feeding it.
A source describes a single compiler: its dialect, selectors and options.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SourceConfig:
    """Configuration of one compiler of a bundle."""

    name: str
    dialect: str
    files: List[str] = field(default_factory=list)
    paths: List[str] = field(default_factory=list)
    extension: Optional[str] = None  # None means the dialect default
    namespace: str = ''
    auto_require: bool = False
    presets: List[str] = field(default_factory=list)
    plugins: List[str] = field(default_factory=list)
    bare: bool = False
    autoprefix: bool = False
    autoprefix_options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BundleConfig:
    """Configuration of one output bundle."""

    name: str
    output: str
    sources: List[SourceConfig] = field(default_factory=list)
    sourcemaps: bool = False
    minify: bool = False
    minify_options: Dict[str, Any] = field(default_factory=dict)
    gzip: bool = False
    commonjs: bool = False
    polyfill: Optional[str] = None

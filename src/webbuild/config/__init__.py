"""Configuration parsing modules for webbuild."""

from .bundle_config import BundleConfig, SourceConfig
from .ini_parser import CONFIG_FILE_NAME, BundleConfigError, WebBuildConfig, find_config

__all__ = [
    "WebBuildConfig",
    "BundleConfig",
    "BundleConfigError",
    "SourceConfig",
    "CONFIG_FILE_NAME",
    "find_config",
]

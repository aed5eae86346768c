"""
webbuild.ini configuration parser.

This module provides functionality to parse webbuild.ini files and extract
bundle and source definitions.
"""

import configparser
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .bundle_config import BundleConfig, SourceConfig

CONFIG_FILE_NAME = "webbuild.ini"


class BundleConfigError(Exception):
    """Exception raised for webbuild.ini configuration errors."""

    pass


class WebBuildConfig:
    """
    Parser for webbuild.ini configuration files.

    Example webbuild.ini:
        [webbuild]
        default_bundles = app

        [bundle:app]
        output = public/app.js
        minify = yes
        sources =
            vendor
            main

        [source:vendor]
        dialect = js
        files = vendor/jquery.js

        [source:main]
        dialect = es6
        paths = src/app/
        namespace = app

    Values use extended interpolation (${paths:public}); write $$ for a
    literal dollar sign.

    Values use extended interpolation (${paths:public}); write $$ for a
    literal dollar sign.

    Usage:
        config = WebBuildConfig(Path("webbuild.ini"))
        bundles = config.get_bundles()
        app = config.get_bundle_config("app")
    """

    REQUIRED_BUNDLE_FIELDS = {"output", "sources"}
    REQUIRED_SOURCE_FIELDS = {"dialect"}

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a webbuild.ini file.

        Args:
            ini_path: Path to the webbuild.ini file

        Raises:
            BundleConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = ini_path

        if not ini_path.exists():
            raise BundleConfigError(f"Configuration file not found: {ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise BundleConfigError(f"Failed to parse {ini_path}: {e}") from e

    def _sections(self, prefix: str) -> List[str]:
        names = []
        for section in self.config.sections():
            if section.startswith(f"{prefix}:"):
                names.append(section.split(":", 1)[1])
        return names

    def get_bundles(self) -> List[str]:
        """
        Get list of all bundle names defined in the config.

        Example:
            For [bundle:app], [bundle:styles], returns ['app', 'styles']
        """
        return self._sections("bundle")

    def get_sources(self) -> List[str]:
        """Get list of all source names defined in the config."""
        return self._sections("source")

    def has_bundle(self, name: str) -> bool:
        return f"bundle:{name}" in self.config

    def _read_section(self, section: str, base: str) -> Dict[str, str]:
        values = {}
        try:
            # A bare [bundle] or [source] section holds defaults for every named one
            if base in self.config:
                values.update({key: (value or "").strip() for key, value in self.config[base].items()})
            values.update({key: (value or "").strip() for key, value in self.config[section].items()})
        except configparser.Error as e:
            raise BundleConfigError(f"[{section}] {e}") from e
        return values

    def get_bundle_config(self, name: str) -> BundleConfig:
        """
        Get configuration for a bundle, including its sources.

        Args:
            name: Bundle name (e.g. 'app')

        Returns:
            BundleConfig

        Raises:
            BundleConfigError: If the bundle or one of its sources is missing or malformed
        """
        section = f"bundle:{name}"

        if section not in self.config:
            available = ", ".join(self.get_bundles())
            raise BundleConfigError(
                f"Bundle '{name}' not found. "
                + f"Available bundles: {available or 'none'}"
            )

        values = self._read_section(section, "bundle")

        missing_fields = self.REQUIRED_BUNDLE_FIELDS - {k for k, v in values.items() if v}
        if missing_fields:
            raise BundleConfigError(
                f"Bundle '{name}' is missing required fields: "
                + f"{', '.join(sorted(missing_fields))}"
            )

        return BundleConfig(
            name=name,
            output=values["output"],
            sources=[self.get_source_config(source) for source in self._split_list(values["sources"])],
            sourcemaps=self._parse_bool(values, "sourcemaps", section),
            minify=self._parse_bool(values, "minify", section),
            minify_options=self._parse_options(values, "minify_options", section),
            gzip=self._parse_bool(values, "gzip", section),
            commonjs=self._parse_bool(values, "commonjs", section),
            polyfill=values.get("polyfill") or None,
        )

    def get_source_config(self, name: str) -> SourceConfig:
        """
        Get configuration for a source.

        Args:
            name: Source name (e.g. 'main')

        Returns:
            SourceConfig

        Raises:
            BundleConfigError: If the source is missing or malformed
        """
        section = f"source:{name}"

        if section not in self.config:
            available = ", ".join(self.get_sources())
            raise BundleConfigError(
                f"Source '{name}' not found. "
                + f"Available sources: {available or 'none'}"
            )

        values = self._read_section(section, "source")

        missing_fields = self.REQUIRED_SOURCE_FIELDS - {k for k, v in values.items() if v}
        if missing_fields:
            raise BundleConfigError(
                f"Source '{name}' is missing required fields: "
                + f"{', '.join(sorted(missing_fields))}"
            )

        return SourceConfig(
            name=name,
            dialect=values["dialect"],
            files=self._split_list(values.get("files", "")),
            paths=self._split_list(values.get("paths", "")),
            extension=values.get("extension") or None,
            namespace=values.get("namespace", ""),
            auto_require=self._parse_bool(values, "auto_require", section),
            presets=self._split_list(values.get("presets", "")),
            plugins=self._split_list(values.get("plugins", "")),
            bare=self._parse_bool(values, "bare", section),
            autoprefix=self._parse_bool(values, "autoprefix", section),
            autoprefix_options=self._parse_options(values, "autoprefix_options", section),
        )

    def get_default_bundles(self) -> List[str]:
        """
        Get the bundles built when none is requested.

        Returns:
            Bundles listed in [webbuild] default_bundles, or every bundle

        Example:
            If [webbuild] section has default_bundles = app, styles,
            returns ['app', 'styles']
        """
        if "webbuild" in self.config:
            try:
                default_bundles = (self.config["webbuild"].get("default_bundles") or "").strip()
            except configparser.Error as e:
                raise BundleConfigError(f"[webbuild] {e}") from e
            if default_bundles:
                return self._split_list(default_bundles)

        return self.get_bundles()

    @staticmethod
    def _split_list(value: str) -> List[str]:
        """
        Split a multi-line / comma separated value.

        Example:
            For sources =
                vendor
                main, extra
            Returns: ['vendor', 'main', 'extra']
        """
        items = []
        for line in value.split("\n"):
            for item in line.split(","):
                item = item.strip()
                if item:
                    items.append(item)
        return items

    @staticmethod
    def _parse_bool(values: Dict[str, str], key: str, section: str) -> bool:
        value = values.get(key, "")
        if not value:
            return False
        state = configparser.ConfigParser.BOOLEAN_STATES.get(value.lower())
        if state is None:
            raise BundleConfigError(f"[{section}] {key}: expected a boolean, got '{value}'")
        return state

    @staticmethod
    def _parse_options(values: Dict[str, str], key: str, section: str) -> Dict[str, Any]:
        value = values.get(key, "")
        if not value:
            return {}
        try:
            options = json.loads(value)
        except json.JSONDecodeError as e:
            raise BundleConfigError(f"[{section}] {key}: invalid JSON ({e})") from e
        if not isinstance(options, dict):
            raise BundleConfigError(f"[{section}] {key}: expected a JSON object")
        return options


def find_config(project_dir: Path) -> Optional[Path]:
    """Return the project's webbuild.ini, or None if there is none."""
    ini_path = project_dir / CONFIG_FILE_NAME
    return ini_path if ini_path.exists() else None

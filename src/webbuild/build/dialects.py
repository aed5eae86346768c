"""
Source dialect specifications.

This module centralizes what each supported dialect needs: which family it
belongs to, which transform capability compiles it, and which extensions it
reads and writes. Compilers look their behavior up here instead of
subclassing per dialect.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Family(Enum):
    """Output family of a dialect."""

    SCRIPT = 'script'
    STYLE = 'style'


class Dialect(Enum):
    """Supported source dialects."""

    JS = 'js'
    BABEL = 'babel'
    ES6 = 'es6'
    ES7 = 'es7'
    COFFEE = 'coffee'
    CSS = 'css'
    SASS = 'sass'
    SCSS = 'scss'
    LESS = 'less'
    STYLUS = 'stylus'


@dataclass(frozen=True)
class DialectSpec:
    """Static description of a dialect."""

    dialect: Dialect
    family: Family
    extension: str  # Default extension for directory selectors
    capability: Optional[str] = None  # Transform capability, None for native sources
    presets: Tuple[str, ...] = field(default_factory=tuple)  # Babel presets enabled by default

    @property
    def output_extension(self) -> str:
        """Extension of files after the dialect transform."""
        return '.js' if self.family is Family.SCRIPT else '.css'

    @property
    def is_babel(self) -> bool:
        return self.capability == 'babel'


DIALECT_SPECS = {
    Dialect.JS: DialectSpec(Dialect.JS, Family.SCRIPT, '.js'),
    Dialect.BABEL: DialectSpec(Dialect.BABEL, Family.SCRIPT, '.js', 'babel'),
    Dialect.ES6: DialectSpec(
        Dialect.ES6, Family.SCRIPT, '.js', 'babel', presets=('es2015',)
    ),
    Dialect.ES7: DialectSpec(
        Dialect.ES7, Family.SCRIPT, '.js', 'babel', presets=('es2015', 'stage-0')
    ),
    Dialect.COFFEE: DialectSpec(Dialect.COFFEE, Family.SCRIPT, '.coffee', 'coffee'),
    Dialect.CSS: DialectSpec(Dialect.CSS, Family.STYLE, '.css'),
    Dialect.SASS: DialectSpec(Dialect.SASS, Family.STYLE, '.sass', 'sass'),
    Dialect.SCSS: DialectSpec(Dialect.SCSS, Family.STYLE, '.scss', 'sass'),
    Dialect.LESS: DialectSpec(Dialect.LESS, Family.STYLE, '.less', 'less'),
    Dialect.STYLUS: DialectSpec(Dialect.STYLUS, Family.STYLE, '.styl', 'stylus'),
}


def get_dialect_spec(dialect: Dialect) -> DialectSpec:
    """
    Get the specification of a dialect.

    Args:
        dialect: Dialect tag

    Returns:
        DialectSpec for the dialect
    """
    return DIALECT_SPECS[dialect]


def parse_dialect(name: str) -> Dialect:
    """
    Parse a dialect name (e.g. 'es6', 'SCSS').

    Args:
        name: Dialect name, case-insensitive

    Returns:
        Matching Dialect

    Raises:
        ValueError: If the name is not a known dialect
    """
    try:
        return Dialect(name.strip().lower())
    except ValueError:
        known = ', '.join(d.value for d in Dialect)
        raise ValueError(f"Unknown dialect '{name}'. Known dialects: {known}") from None

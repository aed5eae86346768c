"""
Module identifier rewriting for namespaced scripts.

A namespaced script is registered with the CommonJS wrapper under an
identifier derived from its path: selector prefixes are dropped, the
extension is stripped and the namespace is prepended.

Example:
    entries = [SelectorEntry('src/app/', SelectorKind.DIRECTORY)]
    rewrite_module_path('/home/me/site/src/app/views/main.js', entries, 'app')
    # -> 'app/views/main'
"""

import re
from typing import Iterable

from .path_table import SelectorEntry

_EXTENSION_RE = re.compile(r'\.[a-z0-9]+$')


def normalize_separators(path: str) -> str:
    """Convert backslashes to forward slashes."""
    return path.replace('\\', '/')


def normalize_namespace(namespace: str) -> str:
    """Ensure a namespace ends with a single trailing '/'."""
    namespace = normalize_separators(namespace)
    if not namespace.endswith('/'):
        namespace += '/'
    return namespace


def _entry_pattern(entry: SelectorEntry) -> 're.Pattern[str]':
    key = re.escape(normalize_separators(entry.key))
    if entry.is_file:
        return re.compile(f'.*?{key}$')
    return re.compile(f'.*?{key}')


def strip_selector_prefixes(path: str, entries: Iterable[SelectorEntry]) -> str:
    """
    Strip registered selector prefixes from a path.

    Every entry is applied in order, each one to the output of the previous
    one. A file entry collapses the path to the file's base name, a directory
    entry drops everything up to and including the directory.

    Args:
        path: Source file path
        entries: Selector entries in registration order

    Returns:
        Path with matched prefixes removed
    """
    path = normalize_separators(path)

    for entry in entries:
        pattern = _entry_pattern(entry)
        if not pattern.search(path):
            continue
        replacement = normalize_separators(entry.key).split('/')[-1] if entry.is_file else ''
        path = pattern.sub(lambda _match: replacement, path)

    return path


def rewrite_module_path(path: str, entries: Iterable[SelectorEntry], namespace: str) -> str:
    """
    Derive the module identifier of a script.

    Args:
        path: Source file path
        entries: Selector entries of the compiler, in registration order
        namespace: Namespace prefix ('app' or 'app/')

    Returns:
        Module identifier, e.g. 'app/views/main'
    """
    stripped = strip_selector_prefixes(path, entries)
    return normalize_namespace(namespace) + _EXTENSION_RE.sub('', stripped)

"""
Selector registry for a single compiler.

This module tracks the files and directories a compiler was asked to bundle:
- Ordered key -> kind table (last registration of a key wins)
- Ordered glob pattern list handed to the source scanner
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List


PATH_SEPARATORS = ('/', '\\')


class ValidationError(Exception):
    """Raised when a selector or compiler option is malformed."""
    pass


class SelectorKind(Enum):
    """Kind of a registered selector."""

    FILE = 'file'
    DIRECTORY = 'path'


@dataclass(frozen=True)
class SelectorEntry:
    """A registered file or directory selector."""

    key: str
    kind: SelectorKind

    @property
    def is_file(self) -> bool:
        return self.kind is SelectorKind.FILE


class PathTable:
    """
    Ordered registry of file and directory selectors.

    Entries keep the position of their first registration; registering the
    same key again replaces its kind. The pattern list is append-only and
    may hold duplicates.

    Example usage:
        table = PathTable()
        table.register_file('vendor/jquery.js')
        table.register_directory('src/app/', '.js')
        table.patterns  # ['vendor/jquery.js', 'src/app/**/*.js']
    """

    def __init__(self):
        self._entries: Dict[str, SelectorEntry] = {}
        self._patterns: List[str] = []

    def register_file(self, path: str) -> None:
        """
        Register a single file.

        Args:
            path: File path, relative to the builder working directory or absolute
        """
        self._entries[path] = SelectorEntry(path, SelectorKind.FILE)
        self._patterns.append(path)

    def register_directory(self, path: str, extension: str = '') -> None:
        """
        Register every file below a directory that ends with ``extension``.

        Args:
            path: Directory path, must end with a path separator
            extension: File extension filter (e.g. '.js'), empty for all files

        Raises:
            ValidationError: If path does not end with a separator
        """
        if not path or path[-1] not in PATH_SEPARATORS:
            raise ValidationError(
                f'Directory name must end with "/": {path!r}'
            )

        self._entries[path] = SelectorEntry(path, SelectorKind.DIRECTORY)
        self._patterns.append(f'{path}**/*{extension}')

    @property
    def entries(self) -> List[SelectorEntry]:
        """Entries in registration order."""
        return list(self._entries.values())

    @property
    def patterns(self) -> List[str]:
        """Glob patterns in registration order."""
        return list(self._patterns)

    def __iter__(self) -> Iterator[SelectorEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

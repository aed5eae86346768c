"""
Source file discovery for bundle compilers.

This module handles:
- Expanding selector patterns (literal files and recursive directory globs)
- Reading selected files into SourceFile objects
- De-duplicating files matched by more than one pattern
"""

import glob
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterator, List, Optional, Sequence


class SourceScannerError(Exception):
    """Raised when source selection fails."""
    pass


@dataclass(frozen=True)
class SourceFile:
    """A selected source file travelling through a compiler stream."""

    path: Path      # Current path (renamed after dialect transforms)
    base: Path      # Working directory the selectors are relative to
    contents: str
    origin: Optional[Path] = None  # Path as selected on disk

    def __post_init__(self):
        if self.origin is None:
            object.__setattr__(self, 'origin', self.path)

    @property
    def relative(self) -> str:
        """Path relative to the working directory, with forward slashes."""
        try:
            relative = self.path.relative_to(self.base)
        except ValueError:
            relative = self.path
        return relative.as_posix()

    def with_contents(self, contents: str) -> 'SourceFile':
        return replace(self, contents=contents)

    def with_suffix(self, suffix: str) -> 'SourceFile':
        return replace(self, path=self.path.with_suffix(suffix))


class SourceScanner:
    """
    Expands selector patterns into source files.

    Literal patterns must point at an existing file. A pattern naming an
    existing file is read literally even if it contains glob characters
    (e.g. src/[id].js). Other glob patterns may match nothing. Matched paths
    are made absolute without following symlinks. Matches of each pattern
    are sorted; a file matched by several patterns is only emitted for the
    first one.
    """

    def __init__(self, base_dir: Path, encoding: str = 'utf-8'):
        """
        Initialize source scanner.

        Args:
            base_dir: Directory relative patterns are resolved against
            encoding: Text encoding of source files
        """
        self.base_dir = Path(os.path.abspath(base_dir))
        self.encoding = encoding

    def expand(self, patterns: Sequence[str]) -> List[Path]:
        """
        Expand patterns into an ordered list of file paths.

        Args:
            patterns: Literal file paths or recursive glob patterns

        Returns:
            List of absolute file paths

        Raises:
            SourceScannerError: If a literal file pattern does not exist
        """
        seen = set()
        files: List[Path] = []

        for pattern in patterns:
            for path in self._expand_pattern(pattern):
                if path not in seen:
                    seen.add(path)
                    files.append(path)

        return files

    def scan(self, patterns: Sequence[str]) -> Iterator[SourceFile]:
        """
        Lazily read every file selected by the patterns.

        Args:
            patterns: Literal file paths or recursive glob patterns

        Yields:
            SourceFile for each selected file
        """
        for path in self.expand(patterns):
            yield self.read(path)

    def read(self, path: Path) -> SourceFile:
        """
        Read a single source file.

        Raises:
            SourceScannerError: If the file cannot be read
        """
        try:
            contents = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceScannerError(f"Failed to read {path}: {e}") from e

        return SourceFile(path=path, base=self.base_dir, contents=contents)

    def _expand_pattern(self, pattern: str) -> List[Path]:
        literal = self._absolute(pattern)

        # An existing file is taken literally, even when its name looks like a glob
        if not glob.has_magic(pattern) or literal.is_file():
            if not literal.is_file():
                raise SourceScannerError(f"Source file not found: {pattern}")
            return [literal]

        if os.path.isabs(pattern):
            resolved = pattern
        else:
            resolved = os.path.join(glob.escape(str(self.base_dir)), pattern)

        matches = glob.glob(resolved, recursive=True)
        return sorted(self._absolute(m) for m in matches if os.path.isfile(m))

    def _absolute(self, pattern: str) -> Path:
        # Symlinks are kept as matched; module identifiers are derived from these paths
        return Path(os.path.abspath(os.path.join(self.base_dir, pattern)))

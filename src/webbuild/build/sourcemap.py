"""
Source map (v3) generation for concatenated bundles.

Maps every line of the concatenated output to the first column of the
matching line in its source file. Sources are embedded via sourcesContent.
"""

import json
from typing import Any, Dict, List

_BASE64 = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/'


def encode_vlq(value: int) -> str:
    """
    Encode an integer as a base64 VLQ string.

    Example:
        >>> encode_vlq(0), encode_vlq(1), encode_vlq(-1), encode_vlq(16)
        ('A', 'C', 'D', 'gB')
    """
    vlq = (-value << 1) | 1 if value < 0 else value << 1
    encoded = ''
    while True:
        digit = vlq & 0x1F
        vlq >>= 5
        if vlq:
            digit |= 0x20
        encoded += _BASE64[digit]
        if not vlq:
            return encoded


class SourceMapBuilder:
    """
    Accumulates line mappings while sources are concatenated.

    Example usage:
        smap = SourceMapBuilder('app.js')
        smap.add_source('src/a.js', 'var a;\\nvar b;')
        smap.add_source('src/b.js', 'var c;')
        smap.to_json()
    """

    def __init__(self, file: str):
        self.file = file
        self.sources: List[str] = []
        self.sources_content: List[str] = []
        self._lines: List[str] = []
        self._prev_source = 0
        self._prev_line = 0

    def add_source(self, name: str, contents: str) -> None:
        """
        Record a source appended to the output on a new line.

        Args:
            name: Source path as it should appear in the map
            contents: Source text as it appears in the output
        """
        index = len(self.sources)
        self.sources.append(name)
        self.sources_content.append(contents)

        for line in range(len(contents.split('\n'))):
            segment = (
                encode_vlq(0)
                + encode_vlq(index - self._prev_source)
                + encode_vlq(line - self._prev_line)
                + encode_vlq(0)
            )
            self._lines.append(segment)
            self._prev_source = index
            self._prev_line = line

    @property
    def mappings(self) -> str:
        return ';'.join(self._lines)

    def to_dict(self, include_mappings: bool = True) -> Dict[str, Any]:
        """
        Build the source map document.

        Args:
            include_mappings: False to emit an empty mappings string (output
                was rewritten by an opaque transform)

        Returns:
            Source map as a dictionary
        """
        return {
            'version': 3,
            'file': self.file,
            'sources': list(self.sources),
            'sourcesContent': list(self.sources_content),
            'names': [],
            'mappings': self.mappings if include_mappings else '',
        }

    def to_json(self, include_mappings: bool = True) -> str:
        return json.dumps(self.to_dict(include_mappings))


def source_mapping_comment(map_name: str, output_name: str) -> str:
    """
    Build the sourceMappingURL comment for an output file.

    Args:
        map_name: File name of the source map
        output_name: File name of the bundle (decides the comment style)

    Returns:
        Comment line
    """
    if output_name.endswith('.css'):
        return f'/*# sourceMappingURL={map_name} */'
    return f'//# sourceMappingURL={map_name}'

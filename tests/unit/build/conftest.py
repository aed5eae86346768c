"""Shared fixtures for build tests."""

import pytest
from unittest.mock import Mock

from webbuild.build.capabilities import CapabilityRegistry, commonjs_wrap


def _tagging_transform(tag):
    def transform(contents, path, options):
        return f"/* {tag} */\n{contents}"
    return transform


@pytest.fixture
def capabilities():
    """Registry of fake capabilities recording their calls."""
    registry = CapabilityRegistry()
    for name in ('sass', 'less', 'stylus', 'babel', 'coffee', 'autoprefixer'):
        registry.register(name, Mock(side_effect=_tagging_transform(name)))
    registry.register('js-minify', Mock(side_effect=lambda contents, options: f"JSMIN[{len(contents)}]"))
    registry.register('css-minify', Mock(side_effect=lambda contents, options: f"CSSMIN[{len(contents)}]"))
    registry.register('commonjs', commonjs_wrap)
    return registry


@pytest.fixture
def project(tmp_path):
    """Create a small web project."""
    files = {
        'src/a.js': 'var a = 1;',
        'src/b.js': 'var b = 2;',
        'src/app/main.js': 'module.exports = "main";',
        'src/app/views/list.js': 'module.exports = "list";',
        'src/app/readme.txt': 'not a script',
        'styles/base.css': 'body { margin: 0; }',
        'styles/theme.scss': '$c: red; a { color: $c; }',
        'scripts/boot.coffee': 'square = (x) -> x * x',
    }
    for relative, contents in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents)
    return tmp_path

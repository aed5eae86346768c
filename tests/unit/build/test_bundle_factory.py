"""
Unit tests for BundleFactory.
"""

import pytest

from webbuild.build.builder import COMMONJS_RUNTIME
from webbuild.build.bundle_factory import BundleFactory
from webbuild.build.compiler import ScriptCompiler, StyleCompiler
from webbuild.build.dialects import Dialect
from webbuild.build.path_table import ValidationError
from webbuild.config.bundle_config import BundleConfig, SourceConfig
from webbuild.config.ini_parser import BundleConfigError


class TestBundleFactory:
    """Test suite for BundleFactory."""

    def test_compiler_order(self, capabilities, tmp_path):
        """CommonJS runtime and polyfill come before the configured sources."""
        bundle = BundleConfig(
            name='app',
            output='public/app.js',
            commonjs=True,
            polyfill='vendor/polyfill.js',
            sources=[
                SourceConfig(name='main', dialect='es6', paths=['src/app/'], namespace='app'),
                SourceConfig(name='theme', dialect='css', files=['styles/base.css']),
            ],
        )

        builder = BundleFactory.create_builder(bundle, tmp_path, capabilities=capabilities)

        assert [c.dialect for c in builder.compilers] == [Dialect.JS, Dialect.JS, Dialect.ES6, Dialect.CSS]
        assert builder.compilers[0].patterns == [str(COMMONJS_RUNTIME)]
        assert builder.compilers[1].patterns == ['vendor/polyfill.js']
        assert builder.compilers[2].options.namespace == 'app/'
        assert builder.base_dir == tmp_path
        assert builder.capabilities is capabilities

    def test_switches(self, capabilities, tmp_path):
        bundle = BundleConfig(
            name='app',
            output='app.js',
            sourcemaps=True,
            minify=True,
            minify_options={'keep_bang_comments': True},
            gzip=True,
            sources=[SourceConfig(name='main', dialect='js', files=['a.js'])],
        )

        builder = BundleFactory.create_builder(bundle, tmp_path, capabilities=capabilities)

        assert builder.source_maps_enabled
        assert builder.minify_enabled
        assert builder.minify_options == {'keep_bang_comments': True}
        assert builder.gzip_enabled

    def test_unknown_dialect(self, capabilities, tmp_path):
        bundle = BundleConfig(
            name='app', output='app.js',
            sources=[SourceConfig(name='main', dialect='typescript')],
        )

        with pytest.raises(BundleConfigError, match="Source 'main': Unknown dialect 'typescript'"):
            BundleFactory.create_builder(bundle, tmp_path, capabilities=capabilities)

    def test_invalid_directory(self, capabilities, tmp_path):
        bundle = BundleConfig(
            name='app', output='app.js',
            sources=[SourceConfig(name='main', dialect='js', paths=['src'])],
        )

        with pytest.raises(BundleConfigError, match="Source 'main': Directory name must end with"):
            BundleFactory.create_builder(bundle, tmp_path, capabilities=capabilities)


class TestConfigureCompiler:
    """Test mapping of source options onto compilers."""

    def test_files_then_paths(self):
        source = SourceConfig(
            name='main', dialect='coffee',
            files=['boot.coffee'], paths=['scripts/', 'lib/'], extension='.litcoffee',
        )

        compiler = BundleFactory.configure_compiler(ScriptCompiler(Dialect.COFFEE), source)

        assert compiler.patterns == ['boot.coffee', 'scripts/**/*.litcoffee', 'lib/**/*.litcoffee']

    def test_default_extension(self):
        source = SourceConfig(name='theme', dialect='less', paths=['styles/'])

        compiler = BundleFactory.configure_compiler(StyleCompiler(Dialect.LESS), source)

        assert compiler.patterns == ['styles/**/*.less']

    def test_script_options(self):
        source = SourceConfig(
            name='main', dialect='es6', namespace='app', auto_require=True,
            presets=['react'], plugins=['transform-runtime'],
        )

        compiler = BundleFactory.configure_compiler(ScriptCompiler(Dialect.ES6), source)

        assert compiler.options.namespace == 'app/'
        assert compiler.wrap_options == {'auto_require': True}
        assert compiler.options.presets == ['es2015', 'react']
        assert compiler.options.plugins == ['transform-runtime']

    def test_bare(self):
        source = SourceConfig(name='boot', dialect='coffee', bare=True)
        compiler = BundleFactory.configure_compiler(ScriptCompiler(Dialect.COFFEE), source)
        assert compiler.options.bare

    def test_autoprefix(self):
        source = SourceConfig(name='theme', dialect='css', autoprefix=True, autoprefix_options={'cascade': False})

        compiler = BundleFactory.configure_compiler(StyleCompiler(), source)

        assert compiler.options.autoprefix
        assert compiler.options.autoprefix_options == {'cascade': False}

    def test_autoprefix_on_script_rejected(self):
        source = SourceConfig(name='main', dialect='js', autoprefix=True)
        with pytest.raises(ValidationError, match='autoprefix is only supported'):
            BundleFactory.configure_compiler(ScriptCompiler(), source)

    @pytest.mark.parametrize('option', [
        {'namespace': 'app'},
        {'presets': ['es2015']},
        {'plugins': ['x']},
        {'bare': True},
    ])
    def test_script_options_on_style_rejected(self, option):
        source = SourceConfig(name='theme', dialect='css', **option)
        with pytest.raises(ValidationError, match='only supported by script dialects'):
            BundleFactory.configure_compiler(StyleCompiler(), source)

    def test_presets_on_plain_js_rejected(self):
        source = SourceConfig(name='main', dialect='js', presets=['es2015'])
        with pytest.raises(ValidationError, match='only supported by babel'):
            BundleFactory.configure_compiler(ScriptCompiler(), source)

"""Tests for CLI build and list commands."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from webbuild.build import BuildResult
from webbuild.build.orchestrator import BuildOrchestratorError
from webbuild.cli import main

WEBBUILD_INI = """
[webbuild]
default_bundles = app

[bundle:app]
output = public/app.js
sources = main

[bundle:styles]
output = public/app.css
sources = theme

[source:main]
dialect = js
files = src/a.js

[source:theme]
dialect = css
files = styles/base.css
"""


class TestCLIBuild:
    """Tests for the 'webbuild build' command."""

    @pytest.fixture
    def project_dir(self, tmp_path):
        """Create a project directory with a webbuild.ini."""
        (tmp_path / "webbuild.ini").write_text(WEBBUILD_INI)
        return tmp_path

    @pytest.fixture
    def mock_orchestrator(self):
        """Mock BuildOrchestrator used by the CLI."""
        with patch("webbuild.cli.BuildOrchestrator") as mock_orch_class:
            mock_instance = MagicMock()
            mock_orch_class.return_value = mock_instance
            mock_instance.mock_class = mock_orch_class
            yield mock_instance

    @pytest.fixture
    def success_result(self, tmp_path):
        """Create successful build result."""
        output = tmp_path / "public" / "app.js"
        return BuildResult(
            success=True,
            output_path=output,
            gzip_path=output.with_name("app.js.gz"),
            sources=[tmp_path / "src" / "a.js"],
            size=12345,
            build_time=0.5,
            message="Built app.js from 1 source files",
            bundle="app",
        )

    @pytest.fixture
    def failure_result(self):
        """Create failed build result."""
        return BuildResult(
            success=False,
            output_path=None,
            build_time=0.1,
            message="Sass compiler not defined (capability 'sass')",
            bundle="styles",
        )

    def test_build_success(self, mock_orchestrator, success_result, project_dir, monkeypatch, capsys):
        """Test successful build."""
        mock_orchestrator.build.return_value = [success_result]

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "Bundle 'app' built" in captured.out
        assert "app.js" in captured.out
        assert "12,345 bytes" in captured.out
        assert "app.js.gz" in captured.out

        mock_orchestrator.build.assert_called_once()
        call_kwargs = mock_orchestrator.build.call_args.kwargs
        assert call_kwargs["project_dir"] == project_dir
        assert call_kwargs["bundles"] == ["app"]
        assert call_kwargs["clean"] is False
        assert call_kwargs["verbose"] is False

    def test_build_selected_bundles(self, mock_orchestrator, success_result, project_dir, monkeypatch):
        mock_orchestrator.build.return_value = [success_result]

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", "-b", "styles", "--bundle", "app", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert mock_orchestrator.build.call_args.kwargs["bundles"] == ["styles", "app"]

    def test_build_unknown_bundle(self, mock_orchestrator, project_dir, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["webbuild", "build", "-b", "missing", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Invalid bundle selection" in captured.out
        assert "Unknown bundle(s): missing" in captured.out
        mock_orchestrator.build.assert_not_called()

    def test_build_with_clean(self, mock_orchestrator, success_result, project_dir, monkeypatch):
        mock_orchestrator.build.return_value = [success_result]

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", "-c", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert mock_orchestrator.build.call_args.kwargs["clean"] is True

    def test_build_with_verbose(self, mock_orchestrator, success_result, project_dir, monkeypatch, capsys):
        mock_orchestrator.build.return_value = [success_result]

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", "--verbose", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "Building project:" in captured.out
        assert mock_orchestrator.build.call_args.kwargs["verbose"] is True
        mock_orchestrator.mock_class.assert_called_once_with(verbose=True, show_progress=False)

    def test_build_with_progress(self, mock_orchestrator, success_result, project_dir, monkeypatch):
        mock_orchestrator.build.return_value = [success_result]

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", "--progress", str(project_dir)])

        with pytest.raises(SystemExit):
            main()

        mock_orchestrator.mock_class.assert_called_once_with(verbose=False, show_progress=True)

    def test_build_failure(self, mock_orchestrator, success_result, failure_result, project_dir, monkeypatch, capsys):
        """A failed bundle makes the command exit with 1."""
        mock_orchestrator.build.return_value = [success_result, failure_result]

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Bundle 'styles' failed!" in captured.out
        assert "Sass compiler not defined" in captured.out

    def test_build_nothing_written(self, mock_orchestrator, project_dir, monkeypatch, capsys):
        mock_orchestrator.build.return_value = [
            BuildResult(success=True, output_path=None, message="nothing written", bundle="app")
        ]

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert "nothing written" in capsys.readouterr().out

    def test_build_orchestrator_error(self, mock_orchestrator, project_dir, monkeypatch, capsys):
        mock_orchestrator.build.side_effect = BuildOrchestratorError("No bundles defined in webbuild.ini")

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "No bundles defined" in capsys.readouterr().out

    def test_build_keyboard_interrupt(self, mock_orchestrator, project_dir, monkeypatch, capsys):
        mock_orchestrator.build.side_effect = KeyboardInterrupt()

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 130
        assert "Build interrupted" in capsys.readouterr().out

    def test_build_unexpected_error(self, mock_orchestrator, project_dir, monkeypatch, capsys):
        mock_orchestrator.build.side_effect = RuntimeError("disk on fire")

        monkeypatch.setattr(sys, "argv", ["webbuild", "build", "-v", str(project_dir)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "RuntimeError: disk on fire" in captured.out
        assert "Traceback:" in captured.out

    def test_build_missing_config(self, mock_orchestrator, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(tmp_path)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "webbuild.ini not found" in capsys.readouterr().out

    def test_build_invalid_config(self, mock_orchestrator, tmp_path, monkeypatch, capsys):
        (tmp_path / "webbuild.ini").write_text("[webbuild]\ndefault_bundles = $app\n")
        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(tmp_path)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Invalid webbuild.ini" in capsys.readouterr().out
        mock_orchestrator.build.assert_not_called()

    def test_build_nonexistent_project_dir(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(tmp_path / "nope")])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 2
        assert "Path does not exist" in capsys.readouterr().out

    def test_build_project_dir_is_file(self, tmp_path, monkeypatch, capsys):
        project_file = tmp_path / "file.txt"
        project_file.write_text("")
        monkeypatch.setattr(sys, "argv", ["webbuild", "build", str(project_file)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 2
        assert "Path is not a directory" in capsys.readouterr().out

    def test_build_default_project_dir(self, mock_orchestrator, success_result, project_dir, monkeypatch):
        mock_orchestrator.build.return_value = [success_result]
        monkeypatch.chdir(project_dir)

        monkeypatch.setattr(sys, "argv", ["webbuild", "build"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert mock_orchestrator.build.call_args.kwargs["project_dir"] == Path.cwd()


class TestCLIList:
    """Tests for the 'webbuild list' command."""

    def test_list(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "webbuild.ini").write_text(WEBBUILD_INI)
        monkeypatch.setattr(sys, "argv", ["webbuild", "list", str(tmp_path)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("* app")
        assert "public/app.js  [main]" in lines[0]
        assert lines[1].startswith("  styles")

    def test_list_invalid_config(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "webbuild.ini").write_text(WEBBUILD_INI.replace("files = src/a.js", "files = $a.js"))
        monkeypatch.setattr(sys, "argv", ["webbuild", "list", str(tmp_path)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        output = capsys.readouterr().out
        assert "Invalid webbuild.ini" in output
        assert "[source:main]" in output
        assert "Unexpected error" not in output

    def test_list_missing_config(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["webbuild", "list", str(tmp_path)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().out


class TestCLIMain:

    def test_no_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["webbuild"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert "usage: webbuild" in capsys.readouterr().out

    def test_version(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["webbuild", "--version"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert "webbuild 0.1.0" in capsys.readouterr().out

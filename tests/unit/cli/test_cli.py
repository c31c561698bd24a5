"""Tests for the jetbuild command-line interface."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from jetbuild.build.orchestrator import BuildResult, BuildStage, CompilationError
from jetbuild.cli import main


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI runs from installing handlers on the root logger."""
    with patch("jetbuild.cli.setup_logging"):
        yield


@pytest.fixture
def mock_orchestrator():
    with patch("jetbuild.cli.BuildOrchestrator") as mock_orch_class:
        mock_instance = MagicMock()
        mock_orch_class.return_value = mock_instance
        yield mock_instance


def success_result(tmp_path: Path) -> BuildResult:
    package_dir = tmp_path / "target" / "jet" / "app"
    return BuildResult(
        success=True,
        stage=BuildStage.DONE,
        failed_stage=None,
        error=None,
        package_dir=package_dir,
        archive_path=tmp_path / "target" / "jet" / "app.zip",
        executable_path=package_dir / "App",
        compiler_args=[],
        build_time=1.5,
        message="Build successful",
    )


def failure_result(tmp_path: Path) -> BuildResult:
    error = CompilationError("Compilation failed: jc exited with code 1", stage="compiled")
    return BuildResult(
        success=False,
        stage=BuildStage.FAILED,
        failed_stage=BuildStage.COMPILED,
        error=error,
        package_dir=tmp_path / "target" / "jet" / "app",
        archive_path=None,
        executable_path=None,
        compiler_args=[],
        build_time=0.5,
        message=str(error),
    )


class TestCLIBuild:
    """Tests for the 'jetbuild build' command."""

    def test_build_success(self, mock_orchestrator, tmp_path, capsys):
        mock_orchestrator.build.return_value = success_result(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(tmp_path), "-m", "com.example.App"])

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "Build successful!" in out
        assert "app.zip" in out

    def test_build_failure_single_exit_status(self, mock_orchestrator, tmp_path, capsys):
        mock_orchestrator.build.return_value = failure_result(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(tmp_path), "-m", "com.example.App"])

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert "Build failed at stage 'compiled' (CompilationError)" in out
        assert "jc exited with code 1" in out

    def test_options_reach_config(self, mock_orchestrator, tmp_path):
        mock_orchestrator.build.return_value = success_result(tmp_path)

        with pytest.raises(SystemExit):
            main([
                "build", str(tmp_path),
                "-m", "com.example.App",
                "--jet-home", "/opt/jet",
                "--no-zip",
                "--hide-console",
                "-d", "a.jar",
                "-d", "b.jar",
            ])

        config = mock_orchestrator.build.call_args.args[0]
        assert config.main_class == "com.example.App"
        assert config.jet_home == "/opt/jet"
        assert config.zip_output is False
        assert config.hide_console is True
        assert [d.name for d in config.dependencies] == ["a.jar", "b.jar"]

    def test_flags_reverse_ini_settings(self, mock_orchestrator, tmp_path):
        """Test --show-console and --zip override the opposite ini values."""
        (tmp_path / "jetbuild.ini").write_text(
            "[jetbuild]\nhide_console = true\nzip_output = false\n"
        )
        mock_orchestrator.build.return_value = success_result(tmp_path)

        with pytest.raises(SystemExit):
            main(["build", str(tmp_path), "-m", "a.B", "--show-console", "--zip"])

        config = mock_orchestrator.build.call_args.args[0]
        assert config.hide_console is False
        assert config.zip_output is True

    def test_ini_boolean_settings_apply_without_flags(self, mock_orchestrator, tmp_path):
        (tmp_path / "jetbuild.ini").write_text(
            "[jetbuild]\nhide_console = true\nzip_output = false\n"
        )
        mock_orchestrator.build.return_value = success_result(tmp_path)

        with pytest.raises(SystemExit):
            main(["build", str(tmp_path), "-m", "a.B"])

        config = mock_orchestrator.build.call_args.args[0]
        assert config.hide_console is True
        assert config.zip_output is False

    def test_config_error(self, mock_orchestrator, tmp_path, capsys):
        (tmp_path / "jetbuild.ini").write_text("[jetbuild]\nbogus = 1\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(tmp_path)])

        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().out
        mock_orchestrator.build.assert_not_called()

    def test_invalid_project_dir(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(tmp_path / "missing")])
        assert exc_info.value.code == 2

    def test_keyboard_interrupt(self, mock_orchestrator, tmp_path):
        mock_orchestrator.build.side_effect = KeyboardInterrupt()

        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(tmp_path), "-m", "a.B"])

        assert exc_info.value.code == 130


class TestCLILocate:
    """Tests for the 'jetbuild locate' command."""

    def test_locate_explicit(self, tmp_path, jet_home, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["locate", str(tmp_path), "--jet-home", str(jet_home)])

        assert exc_info.value.code == 0
        assert str(jet_home.resolve()) in capsys.readouterr().out

    def test_locate_not_found(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["locate", str(tmp_path), "--jet-home", str(tmp_path / "nojet")])

        assert exc_info.value.code == 1
        assert "Toolchain not found" in capsys.readouterr().out

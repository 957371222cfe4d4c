"""
Unit Tests for run.py Entry Script.

Tests individual functions with mocked dependencies.
"""

import pytest
from unittest.mock import patch
from click.testing import CliRunner

from run import main, validate_project_root
from worship_bff.core.config import get_app_config, get_settings


@pytest.fixture(autouse=True)
def clear_config_caches():
    get_app_config.cache_clear()
    get_settings.cache_clear()
    yield
    get_app_config.cache_clear()
    get_settings.cache_clear()


class TestValidateProjectRoot:
    """Tests for validate_project_root function."""

    def test_succeeds_when_marker_exists(self, tmp_path):
        """Should return path when .project_root exists."""
        (tmp_path / ".project_root").touch()

        with patch("run.PROJECT_ROOT", tmp_path):
            assert validate_project_root() == tmp_path

    def test_exits_when_marker_missing(self, tmp_path):
        """Should exit with error when .project_root is missing."""
        with patch("run.PROJECT_ROOT", tmp_path):
            with pytest.raises(SystemExit) as exc_info:
                validate_project_root()
            assert exc_info.value.code == 1


class TestMainCLI:
    """Tests for main CLI entry point."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    def test_help_displays_usage(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "BFF Application Entry Point" in result.output
        assert "--action" in result.output

    def test_info_action(self, runner):
        """Should display application info with --action info."""
        result = runner.invoke(main, ["--action", "info"])

        assert result.exit_code == 0
        assert "Worship Center BFF" in result.output
        assert "Available Actions:" in result.output

    def test_debug_flag_sets_debug_logging(self, runner):
        with patch("run.setup_logging") as mock_setup:
            runner.invoke(main, ["--action", "info", "--debug"])

        mock_setup.assert_called_once()
        assert "DEBUG" in str(mock_setup.call_args)

    def test_config_action(self, runner):
        """Should print the YAML sections and effective values."""
        result = runner.invoke(main, ["--action", "config"])

        assert result.exit_code == 0
        assert "Application Settings" in result.output
        assert "Content Settings" in result.output
        assert "cors_origins" in result.output

    def test_health_action(self, runner):
        """Should run all checks and report them."""
        with patch("worship_bff.core.startup_checks.run_startup_checks"):
            result = runner.invoke(main, ["--action", "health"])

        assert result.exit_code == 0
        assert "Health Check Results" in result.output
        assert "FastAPI application" in result.output

    def test_server_action_runs_uvicorn(self, runner):
        with patch("run.subprocess.run") as mock_run:
            result = runner.invoke(main, ["--action", "server", "--port", "5050"])

        assert result.exit_code == 0
        cmd = mock_run.call_args[0][0]
        assert "worship_bff.main:app" in cmd
        assert cmd[cmd.index("--port") + 1] == "5050"

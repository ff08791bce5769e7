"""Tests for the command-line interface."""

import pytest
from typer.testing import CliRunner

from logroute import __version__
from logroute.cli import app
from logroute.config_routes import SAMPLE_LOGROUTES
from logroute.stage import LEVEL_ENV_VAR

runner = CliRunner()


@pytest.fixture(autouse=True)
def clear_level_env(monkeypatch):
    """Keep the caller's LOGROUTE_LEVEL out of the tests."""
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)


class TestVersionAndLevels:
    """Tests for informational commands."""

    def test_version(self):
        """--version should print the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_levels(self):
        """levels should list every level."""
        result = runner.invoke(app, ["levels"])
        assert result.exit_code == 0
        for name in ("ALL", "TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL", "NEVER"):
            assert name in result.output


class TestInit:
    """Tests for the init command."""

    def test_creates_sample(self, tmp_path, monkeypatch):
        """init should write the sample file."""
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (tmp_path / ".logroutes").read_text(encoding="utf-8") == SAMPLE_LOGROUTES

    def test_skips_existing(self, tmp_path, monkeypatch):
        """init should not overwrite without --force."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".logroutes").write_text("ROUTE:mine\n", encoding="utf-8")

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Skipped" in result.output
        assert (tmp_path / ".logroutes").read_text(encoding="utf-8") == "ROUTE:mine\n"

    def test_force_overwrites(self, tmp_path, monkeypatch):
        """init --force should replace the file."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".logroutes").write_text("ROUTE:mine\n", encoding="utf-8")

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert (tmp_path / ".logroutes").read_text(encoding="utf-8") == SAMPLE_LOGROUTES


class TestCheck:
    """Tests for the check command."""

    def test_lists_routes(self, tmp_path):
        """check should describe each route."""
        path = tmp_path / ".logroutes"
        path.write_text(SAMPLE_LOGROUTES, encoding="utf-8")

        result = runner.invoke(app, ["check", "--config", str(path)])

        assert result.exit_code == 0
        assert "Global level: INFO" in result.output
        assert "errors level=ERROR" in result.output
        assert "app.log" in result.output

    def test_missing_file(self, tmp_path):
        """check should fail on a missing file."""
        result = runner.invoke(app, ["check", "--config", str(tmp_path / "nope")])
        assert result.exit_code == 1

    def test_parse_error(self, tmp_path):
        """check should fail on invalid content."""
        path = tmp_path / ".logroutes"
        path.write_text("ROUTE:app\nBOGUS:app\n", encoding="utf-8")

        result = runner.invoke(app, ["check", "--config", str(path)])

        assert result.exit_code == 1


class TestEmit:
    """Tests for the emit command."""

    def test_console_default(self):
        """emit without config should print to the console route."""
        result = runner.invoke(app, ["emit", "INFO", "service", "started", "--no-color"])

        assert result.exit_code == 0
        assert "[INFO] service started" in result.output

    def test_below_threshold(self):
        """Messages below INFO should not be printed by default."""
        result = runner.invoke(app, ["emit", "DEBUG", "details", "--no-color"])

        assert result.exit_code == 0
        assert "details" not in result.output

    def test_env_threshold(self):
        """LOGROUTE_LEVEL should lower the threshold."""
        result = runner.invoke(
            app, ["emit", "DEBUG", "details", "--no-color"], env={LEVEL_ENV_VAR: "DEBUG"}
        )

        assert result.exit_code == 0
        assert "[DEBUG] details" in result.output

    def test_invalid_level(self):
        """An unknown level should exit with status 1."""
        result = runner.invoke(app, ["emit", "LOUD", "x"])
        assert result.exit_code == 1

    def test_invalid_env(self):
        """An invalid LOGROUTE_LEVEL should exit with status 1."""
        result = runner.invoke(app, ["emit", "INFO", "x"], env={LEVEL_ENV_VAR: "99"})
        assert result.exit_code == 1

    def test_with_config(self, tmp_path):
        """emit with a config should write to the configured file."""
        path = tmp_path / ".logroutes"
        path.write_text("LEVEL:INFO\nROUTE:app\nFILE:app:out.log\n", encoding="utf-8")

        result = runner.invoke(
            app, ["emit", "WARN", "low", "disk", "--config", str(path), "--stats"]
        )

        assert result.exit_code == 0
        assert "[WARN] low disk" in (tmp_path / "out.log").read_text(encoding="utf-8")
        assert "Accepted: 1" in result.output

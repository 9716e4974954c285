"""Tests for src/influence_engine/cli/main.py."""
from __future__ import annotations

import pytest
from typer.testing import CliRunner

from influence_engine.cli.main import app

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    db_path = (tmp_path / "cli.db").as_posix()
    path.write_text(
        f'[storage]\ndb_path = "{db_path}"\n'
        "[experiments.framing_effects]\ntraffic_split = 1.0\n"
    )
    return str(path)


class TestCommands:
    def test_analyze(self, config_path):
        result = runner.invoke(app, ["--config", config_path, "analyze", "u1"])
        assert result.exit_code == 0
        assert "Risk Tolerance" in result.output

    def test_profile_missing(self, config_path):
        result = runner.invoke(app, ["--config", config_path, "profile", "u1"])
        assert result.exit_code == 1
        assert "No profile" in result.output

    def test_profile_after_analyze(self, config_path):
        runner.invoke(app, ["--config", config_path, "analyze", "u1"])
        result = runner.invoke(app, ["--config", config_path, "profile", "u1"])
        assert result.exit_code == 0

    def test_insights_missing(self, config_path):
        result = runner.invoke(app, ["--config", config_path, "insights", "u1"])
        assert result.exit_code == 1

    def test_strategy(self, config_path):
        runner.invoke(app, ["--config", config_path, "analyze", "u1"])
        result = runner.invoke(app, ["--config", config_path, "strategy", "u1", "--context", "threat"])
        assert result.exit_code == 0
        assert "framing" in result.output

    def test_assign(self, config_path):
        result = runner.invoke(app, ["--config", config_path, "assign", "u1", "framing_effects"])
        assert result.exit_code == 0
        assert "variant" in result.output

    def test_analytics(self, config_path):
        result = runner.invoke(app, ["--config", config_path, "analytics", "u1"])
        assert result.exit_code == 0
        assert "Accepted 0/0" in result.output

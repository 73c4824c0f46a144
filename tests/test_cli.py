"""Tests for the leadscore command line interface."""

import json
import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner
from lead_qualifier.cli.main import cli
from lead_qualifier.core.config import ScoringConfigManager

INTAKE = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "ada@example.com",
    "phone": "555-0100",
    "company": "Analytical Engines",
    "position": "CTO",
    "division": "ai",
    "services": ["automation"],
    "companySize": "enterprise",
    "industry": "Retail",
    "budget": "500k+",
    "timeline": "immediate",
    "urgency": 5,
    "currentTech": ["React", "PostgreSQL"],
    "painPoints": ["cost reduction", "process automation", "legacy systems"],
    "painPointSeverity": {"cost reduction": 5, "process automation": 4, "legacy systems": 3},
    "projectDescription": "Modernize operations",
}


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def paths(temp_data_dir):
    intake_file = temp_data_dir / "intake.json"
    intake_file.write_text(json.dumps(INTAKE))
    return {
        "intake": str(intake_file),
        "config": str(temp_data_dir / "scoring_config.json"),
        "db": str(temp_data_dir / "scores.db"),
        "dir": temp_data_dir,
    }


@pytest.fixture
def runner():
    return CliRunner()


class TestScoreCommand:

    def test_json_output(self, runner, paths):
        result = runner.invoke(cli, ["score", paths["intake"], "--json", "--config", paths["config"]])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_score"] == 91
        assert data["classification"] == "hot"

    def test_with_engagement(self, runner, paths):
        engagement_file = paths["dir"] / "engagement.json"
        engagement_file.write_text(json.dumps({
            "pageViews": [{"url": f"/page/{i}", "timeOnPage": 90} for i in range(4)],
        }))
        result = runner.invoke(cli, [
            "score", paths["intake"], "-e", str(engagement_file), "--json", "--config", paths["config"],
        ])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["engagement_score"] == 18

    def test_table_output(self, runner, paths):
        result = runner.invoke(cli, ["score", paths["intake"], "--config", paths["config"]])
        assert result.exit_code == 0, result.output
        assert "91" in result.output
        assert "Priority Consultation" in result.output

    def test_save_requires_lead_id(self, runner, paths):
        result = runner.invoke(cli, ["score", paths["intake"], "--save", "--db", paths["db"]])
        assert result.exit_code == 2

    def test_invalid_json(self, runner, paths):
        bad_file = paths["dir"] / "bad.json"
        bad_file.write_text("[1, 2")
        result = runner.invoke(cli, ["score", str(bad_file), "--config", paths["config"]])
        assert result.exit_code == 1
        assert "Could not read" in result.output


class TestStoredScores:

    def test_save_list_show_stats(self, runner, paths):
        result = runner.invoke(cli, [
            "score", paths["intake"], "--lead-id", "L-1", "--save",
            "--config", paths["config"], "--db", paths["db"],
        ])
        assert result.exit_code == 0, result.output
        assert "Saved score for L-1" in result.output

        result = runner.invoke(cli, ["list", "--db", paths["db"]])
        assert result.exit_code == 0
        assert "L-1" in result.output

        result = runner.invoke(cli, ["list", "-c", "cold", "--db", paths["db"]])
        assert "No scores found" in result.output

        result = runner.invoke(cli, ["show", "L-1", "--db", paths["db"]])
        assert result.exit_code == 0
        assert "91" in result.output

        result = runner.invoke(cli, ["stats", "--db", paths["db"]])
        assert result.exit_code == 0
        assert "Score Statistics" in result.output

    def test_show_missing(self, runner, paths):
        result = runner.invoke(cli, ["show", "nobody", "--db", paths["db"]])
        assert result.exit_code == 1
        assert "No score stored" in result.output


class TestConfigCommands:

    def test_set_weight(self, runner, paths):
        result = runner.invoke(cli, ["config", "set-weight", "budget", "0.3", "--config", paths["config"]])
        assert result.exit_code == 0, result.output
        assert ScoringConfigManager(Path(paths["config"])).config.weights.budget == 0.3

    def test_unknown_weight(self, runner, paths):
        result = runner.invoke(cli, ["config", "set-weight", "vibes", "0.3", "--config", paths["config"]])
        assert result.exit_code == 2

    def test_set_thresholds(self, runner, paths):
        result = runner.invoke(cli, [
            "config", "set-thresholds", "--hot", "95", "--warm", "70", "--cold", "50",
            "--config", paths["config"],
        ])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["score", paths["intake"], "--json", "--config", paths["config"]])
        assert json.loads(result.output)["classification"] == "warm"

    def test_thresholds_out_of_order(self, runner, paths):
        result = runner.invoke(cli, [
            "config", "set-thresholds", "--hot", "50", "--warm", "70", "--cold", "40",
            "--config", paths["config"],
        ])
        assert result.exit_code == 2

    def test_set_version_and_show(self, runner, paths):
        runner.invoke(cli, ["config", "set-version", "2024-q3", "--config", paths["config"]])
        result = runner.invoke(cli, ["config", "show", "--config", paths["config"]])
        assert result.exit_code == 0
        assert "2024-q3" in result.output

    def test_reset(self, runner, paths):
        runner.invoke(cli, ["config", "set-weight", "budget", "0.5", "--config", paths["config"]])
        result = runner.invoke(cli, ["config", "reset", "--yes", "--config", paths["config"]])
        assert result.exit_code == 0, result.output
        assert ScoringConfigManager(Path(paths["config"])).config.weights.budget == 0.25

"""Tests for the range-balancer command line."""

import json

import pytest
from typer.testing import CliRunner

from range_balancer.cli.main import app
from range_balancer.schema import dump_snapshot


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def snapshot_file(tmp_path, reference_fleet):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(dump_snapshot(reference_fleet)))
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("IMBALANCE_THRESHOLD", "SPLIT_STRATEGY", "CPU_WEIGHT"):
        monkeypatch.delenv(f"RANGE_BALANCER_{name}", raising=False)


class TestPlanCommand:
    """Tests for `range-balancer plan`."""

    def test_text_output(self, runner, snapshot_file):
        result = runner.invoke(app, ["plan", str(snapshot_file)])

        assert result.exit_code == 0
        assert "Most loaded: server-1234 (5265.00)" in result.stdout
        assert "Least loaded: server-5678 (2420.00)" in result.stdout
        assert "Migration plans (split)" in result.stdout

    def test_json_output(self, runner, snapshot_file):
        result = runner.invoke(app, ["plan", str(snapshot_file), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["action"] == "split"
        assert payload["imbalanced"] is True
        assert payload["plans"] == [
            {
                "start_key": "a000",
                "end_key": "a",
                "source_instance": "server-1234",
                "destination_instance": "server-5678",
            },
            {
                "start_key": "a",
                "end_key": "a999",
                "source_instance": "server-1234",
                "destination_instance": "server-1234",
            },
        ]

    def test_threshold_from_environment(self, runner, snapshot_file, monkeypatch):
        monkeypatch.setenv("RANGE_BALANCER_IMBALANCE_THRESHOLD", "0.9")

        result = runner.invoke(app, ["plan", str(snapshot_file)])

        assert result.exit_code == 0
        assert "Fleet is balanced" in result.stdout

    def test_threshold_option_overrides_environment(
        self, runner, snapshot_file, monkeypatch
    ):
        monkeypatch.setenv("RANGE_BALANCER_IMBALANCE_THRESHOLD", "0.9")

        result = runner.invoke(app, ["plan", str(snapshot_file), "-t", "0.1", "--json"])

        assert len(json.loads(result.stdout)["plans"]) == 2

    def test_weights_file(self, runner, snapshot_file, tmp_path):
        weights = tmp_path / "weights.yaml"
        weights.write_text(
            "cpuWeight: 0\n"
            "memoryWeight: 0\n"
            "storageWeight: 0\n"
            "accessFrequencyWeight: 0\n"
            "migrationPenalty: 0\n"
        )

        result = runner.invoke(
            app, ["plan", str(snapshot_file), "--weights", str(weights), "--json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["plans"] == []

    def test_invalid_snapshot(self, runner, tmp_path):
        path = tmp_path / "snapshot.yaml"
        path.write_text(
            "- instance_id: s1\n"
            "  total_processing_load: -1\n"
            "  max_cpu_capacity: 0\n"
            "  max_memory_capacity: 100\n"
        )

        result = runner.invoke(app, ["plan", str(path)])

        assert result.exit_code == 1
        assert "Invalid input (2 error(s))" in result.stdout

    def test_invalid_environment_settings(self, runner, snapshot_file, monkeypatch):
        monkeypatch.setenv("RANGE_BALANCER_CPU_WEIGHT", "-1")

        result = runner.invoke(app, ["plan", str(snapshot_file)])

        assert result.exit_code == 1
        assert "Invalid settings (1 error(s))" in result.stdout
        assert "RANGE_BALANCER_CPU_WEIGHT" in result.stdout

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, ["plan", str(tmp_path / "missing.json")])
        assert result.exit_code != 0


class TestSimulateCommand:
    """Tests for `range-balancer simulate`."""

    def test_json_output(self, runner):
        result = runner.invoke(app, ["simulate", "--steps", "3", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [step["time"] for step in payload["steps"]] == [0, 1, 2]
        assert set(payload["steps"][0]["loads"]) == {"server-1234", "server-5678"}
        assert "score" in payload

    def test_text_output(self, runner):
        result = runner.invoke(app, ["simulate", "-n", "2"])

        assert result.exit_code == 0
        assert "Time step 1" in result.stdout
        assert "Final load difference" in result.stdout

    def test_invalid_environment_settings(self, runner, monkeypatch):
        monkeypatch.setenv("RANGE_BALANCER_SPLIT_STRATEGY", "random")

        result = runner.invoke(app, ["simulate", "-n", "1"])

        assert result.exit_code == 1
        assert "Invalid settings" in result.stdout


class TestTuneCommand:
    """Tests for `range-balancer tune`."""

    def test_small_grid(self, runner, tmp_path):
        grid = tmp_path / "grid.yaml"
        grid.write_text(
            "cpu_weight: {start: 0.5, stop: 1.0, step: 0.5}\n"
            "memory_weight: {start: 0.5, stop: 0.5, step: 1}\n"
            "storage_weight: {start: 0.3, stop: 0.3, step: 1}\n"
            "access_frequency_weight: {start: 0.1, stop: 0.1, step: 1}\n"
            "migration_penalty: {start: 1, stop: 1, step: 1}\n"
            "steps: 2\n"
        )

        result = runner.invoke(app, ["tune", "--grid", str(grid)])

        assert result.exit_code == 0
        assert "Evaluated 2 combinations" in result.stdout

    def test_malformed_grid_yaml(self, runner, tmp_path):
        grid = tmp_path / "grid.yaml"
        grid.write_text("cpu_weight: [unclosed\n")

        result = runner.invoke(app, ["tune", "--grid", str(grid)])

        assert result.exit_code == 1
        assert "Invalid tuning grid" in result.stdout

    def test_invalid_grid(self, runner, tmp_path):
        grid = tmp_path / "grid.yaml"
        grid.write_text("cpu_weight: {start: 2, stop: 1, step: 1}\n")

        result = runner.invoke(app, ["tune", "--grid", str(grid)])

        assert result.exit_code == 1
        assert "Invalid tuning grid" in result.stdout

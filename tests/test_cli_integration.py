"""
CLI integration tests for DataCurator.

Tests end-to-end CLI flows including:
- datacurator --help
- datacurator split / kfold / undo on a dataset file
- datacurator stats
- Error handling for bad input
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from datacurator.cli.app import app, history_path
from datacurator.core.dataset import Dataset


def _load(path: Path) -> Dataset:
    return Dataset.from_dict(json.loads(path.read_text()))


class TestCLIHelp:
    """Test CLI help output."""

    def test_main_help(self, cli_runner: CliRunner):
        """Main help shows all commands."""
        result = cli_runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("stats", "split", "kfold", "undo", "init"):
            assert command in result.output

    def test_split_help(self, cli_runner: CliRunner):
        """Split command help shows its options."""
        result = cli_runner.invoke(app, ["split", "--help"])

        assert result.exit_code == 0
        assert "--split" in result.output
        assert "--stratify" in result.output
        assert "--seed" in result.output


class TestSplitCommand:
    """Test the split command."""

    def test_split_writes_subsets(self, cli_runner: CliRunner, dataset_file: Path):
        """Split moves all samples into subsets and records history."""
        result = cli_runner.invoke(
            app, ["split", str(dataset_file), "--split", "70/20/10", "--no-shuffle"]
        )

        assert result.exit_code == 0, result.output
        dataset = _load(dataset_file)
        assert dataset.sample_count == 0
        assert len(dataset.get_subset("training")) == 7
        assert history_path(dataset_file).exists()

    def test_split_to_output(self, cli_runner: CliRunner, dataset_file: Path, tmp_path: Path):
        """--output leaves the input file unchanged."""
        output = tmp_path / "out" / "split.json"
        result = cli_runner.invoke(
            app, ["split", str(dataset_file), "--stratify", "class", "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert _load(dataset_file).sample_count == 10
        assert _load(output).sample_count == 0

    def test_invalid_split_string(self, cli_runner: CliRunner, dataset_file: Path):
        """Malformed split ratios fail cleanly."""
        result = cli_runner.invoke(app, ["split", str(dataset_file), "--split", "70/30"])
        assert result.exit_code == 1
        assert "3 parts" in result.output

    def test_negative_percent_in_config(
        self, cli_runner: CliRunner, dataset_file: Path, tmp_path: Path
    ):
        """Negative percentages from a config file fail cleanly."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("split:\n  train_percent: -10\n")

        result = cli_runner.invoke(app, ["split", str(dataset_file), "--config", str(config_file)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid split percentages" in result.output
        assert _load(dataset_file).sample_count == 10

    def test_empty_dataset_rejected(self, cli_runner: CliRunner, tmp_path: Path):
        """Splitting an empty dataset fails with a message."""
        path = tmp_path / "empty.json"
        path.write_text(json.dumps(Dataset("empty").to_dict()))
        result = cli_runner.invoke(app, ["split", str(path)])
        assert result.exit_code == 1
        assert "no samples" in result.output

    def test_missing_file(self, cli_runner: CliRunner):
        """Nonexistent dataset file is rejected."""
        result = cli_runner.invoke(app, ["split", "/nonexistent/data_12345.json"])
        assert result.exit_code != 0


class TestKFoldAndUndo:
    """Test the kfold and undo commands."""

    def test_kfold_then_undo(self, cli_runner: CliRunner, dataset_file: Path):
        """K-fold creates folds and undo restores the root pool."""
        result = cli_runner.invoke(app, ["kfold", str(dataset_file), "--folds", "3"])
        assert result.exit_code == 0, result.output
        assert _load(dataset_file).subset_names() == ["fold1", "fold2", "fold3"]

        result = cli_runner.invoke(app, ["undo", str(dataset_file)])
        assert result.exit_code == 0, result.output

        dataset = _load(dataset_file)
        assert dataset.sample_count == 10
        assert not dataset.has_subsets
        assert not history_path(dataset_file).exists()

    def test_kfold_insufficient(self, cli_runner: CliRunner, dataset_file: Path):
        """More folds than samples is rejected."""
        result = cli_runner.invoke(app, ["kfold", str(dataset_file), "--folds", "11"])
        assert result.exit_code == 1
        assert "Insufficient samples" in result.output

    def test_kfold_invalid_fold_count(self, cli_runner: CliRunner, dataset_file: Path):
        """A single fold is rejected."""
        result = cli_runner.invoke(app, ["kfold", str(dataset_file), "--folds", "1"])
        assert result.exit_code == 1

    def test_undo_without_history(self, cli_runner: CliRunner, dataset_file: Path):
        """Undo with nothing recorded fails cleanly."""
        result = cli_runner.invoke(app, ["undo", str(dataset_file)])
        assert result.exit_code == 1
        assert "no split operations" in result.output

    def test_corrupt_history_file(self, cli_runner: CliRunner, dataset_file: Path):
        """A damaged undo history file is reported, not a traceback."""
        sidecar = history_path(dataset_file)
        for content in ("{not json", json.dumps([{"locations": [{"location": "a"}]}])):
            sidecar.write_text(content)
            result = cli_runner.invoke(app, ["undo", str(dataset_file)])

            assert result.exit_code == 1
            assert isinstance(result.exception, SystemExit)
            assert "Invalid undo history" in result.output


class TestStatsAndInit:
    """Test the stats and init commands."""

    def test_stats(self, cli_runner: CliRunner, dataset_file: Path):
        """Stats shows counts and label keys."""
        result = cli_runner.invoke(app, ["stats", str(dataset_file)])
        assert result.exit_code == 0, result.output
        assert "root" in result.output
        assert "class" in result.output

    def test_init_creates_config(self, cli_runner: CliRunner, tmp_path: Path):
        """Init writes a default config file."""
        result = cli_runner.invoke(app, ["init", str(tmp_path)])
        assert result.exit_code == 0
        assert (tmp_path / "datacurator.yaml").exists()

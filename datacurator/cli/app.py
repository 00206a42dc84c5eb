"""
Main CLI application entry point.

Works on datasets stored as JSON in the dict form produced by
``Dataset.to_dict()``. Undo history is kept next to the dataset in
``<name>.history.json`` so splits can be reversed across invocations.

Provides commands for:
- Showing dataset statistics
- Percentage splits and k-fold generation
- Undoing the last split
- Writing a default config file
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from datacurator.core.config import CuratorConfig
from datacurator.core.dataset import Dataset
from datacurator.exceptions import DataCuratorError
from datacurator.history import UndoStack
from datacurator.splitting import auto_split, k_fold, undo_last_split
from datacurator.utils.progress import (
    VerbosityLevel,
    get_console,
    print_error,
    print_info,
    print_success,
    set_verbosity,
    spinner,
)

app = typer.Typer(
    name="datacurator",
    help="Organize labeled samples into subsets and partition them for ML",
    add_completion=False,
)
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
) -> None:
    """Organize labeled samples into subsets and partition them for ML."""
    if quiet:
        set_verbosity(VerbosityLevel.QUIET)
    elif verbose:
        set_verbosity(VerbosityLevel.VERBOSE)
    else:
        set_verbosity(VerbosityLevel.NORMAL)


def history_path(dataset_file: Path) -> Path:
    """Sidecar file holding the undo history of a dataset file."""
    return dataset_file.with_name(f"{dataset_file.stem}.history.json")


def load_dataset(path: Path) -> tuple[Dataset, UndoStack]:
    """Read a dataset file and its undo history."""
    with spinner(f"Loading {path.name}..."):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            print_error(f"Invalid dataset file {path}: {e}")
            raise typer.Exit(1)

        try:
            dataset = Dataset.from_dict(data)
        except DataCuratorError as e:
            print_error(str(e))
            raise typer.Exit(1)

        history = UndoStack()
        sidecar = history_path(path)
        if sidecar.exists():
            try:
                history = UndoStack.from_list(json.loads(sidecar.read_text(encoding="utf-8")))
            except (json.JSONDecodeError, DataCuratorError) as e:
                print_error(f"Invalid undo history file {sidecar}: {e}")
                raise typer.Exit(1)

    return dataset, history


def save_dataset(dataset: Dataset, history: UndoStack, path: Path, source: Path) -> None:
    """Write a dataset file and its undo history."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dataset.to_dict(), indent=2), encoding="utf-8")

    sidecar = history_path(path)
    if history:
        sidecar.write_text(json.dumps(history.to_list(), indent=2), encoding="utf-8")
    elif sidecar.exists():
        sidecar.unlink()

    if path != source:
        print_info(f"Written to {path}")


def _load_config(config_file: Optional[Path]) -> CuratorConfig:
    try:
        if config_file is not None:
            return CuratorConfig.from_yaml(config_file)
        return CuratorConfig.load_default()
    except DataCuratorError as e:
        print_error(str(e))
        raise typer.Exit(1)


def _parse_split(split: str) -> tuple[float, float, float]:
    """Parse a split string like '70/20/10'."""
    parts = split.split("/")
    if len(parts) != 3:
        raise ValueError(f"Split must have 3 parts (train/val/test), got: {split}")

    try:
        values = tuple(float(p) for p in parts)
    except ValueError:
        raise ValueError(f"Split values must be numbers, got: {split}")

    if any(v < 0 for v in values):
        raise ValueError(f"Split values must not be negative, got: {split}")

    return values  # type: ignore[return-value]


@app.command()
def stats(
    dataset_file: Path = typer.Argument(
        ...,
        help="Path to dataset JSON file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Show sample counts, sizes and subset membership of a dataset."""
    dataset, history = load_dataset(dataset_file)
    out = get_console()

    out.print(Panel(
        f"Samples: {dataset.total_sample_count} "
        f"({dataset.sample_count} unassigned, {dataset.subset_count} subsets)\n"
        f"Total size: {dataset.total_size()} bytes\n"
        f"Label keys: {', '.join(dataset.label_keys()) or 'none'}\n"
        f"Undo history: {len(history)} operation(s)",
        title=dataset.metadata.name or dataset_file.stem,
    ))

    table = Table(title="Membership")
    table.add_column("Location", style="cyan")
    table.add_column("Samples", justify="right")
    table.add_column("Share", justify="right")
    for stat in dataset.membership_stats():
        table.add_row(stat.name, str(stat.count), f"{stat.percentage:.1f}%")
    out.print(table)

    types = Table(title="Types")
    types.add_column("Type", style="cyan")
    types.add_column("Samples", justify="right")
    for sample_type, count in sorted(dataset.type_distribution().items()):
        types.add_row(sample_type.value, str(count))
    out.print(types)


@app.command()
def split(
    dataset_file: Path = typer.Argument(
        ...,
        help="Path to dataset JSON file",
        exists=True,
        dir_okay=False,
    ),
    ratios: Optional[str] = typer.Option(
        None,
        "--split",
        help="Train/val/test percentages (e.g., '70/20/10')",
    ),
    stratify: Optional[str] = typer.Option(
        None,
        "--stratify",
        help="Label key to stratify by",
    ),
    no_shuffle: bool = typer.Option(
        False,
        "--no-shuffle",
        help="Keep the root pool order",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed", "-s",
        help="Random seed for reproducibility",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Write the result here instead of overwriting the input",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Config file with split defaults",
    ),
) -> None:
    """
    Split unassigned samples into training/validation/test subsets.

    Examples:
        datacurator split data.json --split 70/20/10
        datacurator split data.json --stratify class --seed 7
    """
    config = _load_config(config_file)
    overrides: dict = {"stratify_by": stratify, "seed": seed}

    if ratios is not None:
        try:
            train, val, test = _parse_split(ratios)
        except ValueError as e:
            print_error(str(e))
            raise typer.Exit(1)
        overrides.update(train_percent=train, val_percent=val, test_percent=test)
    if no_shuffle:
        overrides["shuffle"] = False

    try:
        split_config = config.split_config(**overrides)
    except DataCuratorError as e:
        print_error(str(e))
        raise typer.Exit(1)

    dataset, history = load_dataset(dataset_file)
    result = auto_split(dataset, split_config, history)

    if not result.success:
        for error in result.errors:
            print_error(error)
        raise typer.Exit(1)

    save_dataset(dataset, history, output or dataset_file, dataset_file)
    print_success(result.summary())


@app.command()
def kfold(
    dataset_file: Path = typer.Argument(
        ...,
        help="Path to dataset JSON file",
        exists=True,
        dir_okay=False,
    ),
    folds: Optional[int] = typer.Option(
        None,
        "--folds", "-k",
        help="Number of folds (at least 2)",
    ),
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix",
        help="Subset name prefix for folds",
    ),
    stratify: Optional[str] = typer.Option(
        None,
        "--stratify",
        help="Label key to stratify by",
    ),
    no_shuffle: bool = typer.Option(
        False,
        "--no-shuffle",
        help="Keep the root pool order",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed", "-s",
        help="Random seed for reproducibility",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Write the result here instead of overwriting the input",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Config file with k-fold defaults",
    ),
) -> None:
    """Distribute unassigned samples into k cross-validation folds."""
    config = _load_config(config_file)
    overrides: dict = {
        "folds": folds,
        "prefix": prefix,
        "stratify_by": stratify,
        "seed": seed,
    }
    if no_shuffle:
        overrides["shuffle"] = False

    try:
        kfold_config = config.kfold_config(**overrides)
    except DataCuratorError as e:
        print_error(str(e))
        raise typer.Exit(1)

    dataset, history = load_dataset(dataset_file)
    result = k_fold(dataset, kfold_config, history)

    if not result.success:
        for error in result.errors:
            print_error(error)
        raise typer.Exit(1)

    save_dataset(dataset, history, output or dataset_file, dataset_file)
    print_success(result.summary())
    print_info("Use each fold as the test set and combine the others for training.")


@app.command()
def undo(
    dataset_file: Path = typer.Argument(
        ...,
        help="Path to dataset JSON file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Undo the most recent split or k-fold operation."""
    dataset, history = load_dataset(dataset_file)
    result = undo_last_split(dataset, history)

    if not result.success:
        for error in result.errors:
            print_error(error)
        raise typer.Exit(1)

    save_dataset(dataset, history, dataset_file, dataset_file)
    print_success(result.summary())


@app.command()
def init(
    path: Path = typer.Argument(
        Path("."),
        help="Directory to initialize",
    ),
) -> None:
    """Write a default datacurator.yaml config file."""
    config_file = path / "datacurator.yaml"

    if config_file.exists():
        console.print(f"[yellow]Config already exists: {config_file}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit(0)

    path.mkdir(parents=True, exist_ok=True)
    config_file.write_text(CuratorConfig().to_yaml())

    console.print(f"[green]✓ Created {config_file}[/green]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()

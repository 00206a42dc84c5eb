"""
Partitioning entry points.

Each entry point checks its preconditions, records the current
membership on the caller's undo stack and only then mutates the
dataset. A rejected operation leaves both the dataset and the stack
untouched.

Usage:
    history = UndoStack()
    result = auto_split(dataset, SplitConfig(70, 20, 10), history)
    folds = k_fold(dataset, KFoldConfig(folds=5), history)
    undo_last_split(dataset, history)
"""

from __future__ import annotations

from datacurator.core.dataset import Dataset
from datacurator.history.tracker import UndoResult, UndoStack, snapshot, undo
from datacurator.splitting.kfold import KFoldConfig, KFoldGenerator, KFoldResult
from datacurator.splitting.strategies import DatasetSplitter, SplitConfig, SplitResult
from datacurator.utils.progress import print_debug


def auto_split(
    dataset: Dataset,
    config: SplitConfig,
    history: UndoStack,
) -> SplitResult:
    """Percentage split of the root pool, recorded for undo."""
    if not dataset.samples:
        print_debug("auto_split rejected: empty root pool")
        return SplitResult(
            success=False,
            errors=["Cannot perform auto-split: no samples in the root pool"],
        )

    description = config.describe()
    history.push(snapshot(dataset, description))
    print_debug(f"{description}: {dataset.sample_count} root samples")

    result = DatasetSplitter(config).split(dataset)
    print_debug(result.summary())
    return result


def k_fold(
    dataset: Dataset,
    config: KFoldConfig,
    history: UndoStack,
) -> KFoldResult:
    """K-fold split of the root pool, recorded for undo."""
    n = dataset.sample_count
    if n < config.folds:
        print_debug(f"k_fold rejected: {n} samples for {config.folds} folds")
        return KFoldResult(
            success=False,
            errors=[
                f"Insufficient samples for {config.folds}-fold split: "
                f"need at least {config.folds}, but only {n} available"
            ],
        )

    description = config.describe()
    history.push(snapshot(dataset, description))
    print_debug(f"{description}: {n} root samples")

    result = KFoldGenerator(config).generate(dataset)
    print_debug(result.summary())
    return result


def undo_last_split(dataset: Dataset, history: UndoStack) -> UndoResult:
    """Reverse the most recent recorded split."""
    result = undo(dataset, history)
    print_debug(result.summary())
    return result

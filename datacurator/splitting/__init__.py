"""
Dataset partitioning module.

Provides percentage splits (random or stratified), k-fold generation
and the undo-aware entry points that apply them to a Dataset.
"""

from datacurator.splitting.strategies import (
    SplitStrategy,
    SplitConfig,
    SplitResult,
    DatasetSplitter,
)
from datacurator.splitting.kfold import KFoldConfig, KFoldResult, KFoldGenerator
from datacurator.splitting.engine import auto_split, k_fold, undo_last_split

__all__ = [
    "SplitStrategy",
    "SplitConfig",
    "SplitResult",
    "DatasetSplitter",
    "KFoldConfig",
    "KFoldResult",
    "KFoldGenerator",
    "auto_split",
    "k_fold",
    "undo_last_split",
]

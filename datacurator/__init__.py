"""
DataCurator - dataset curation and partitioning

Organize labeled samples into named subsets and partition them for
machine-learning workflows: train/validation/test splits, k-fold
cross-validation and undo of partitioning operations.
"""

__version__ = "0.1.0"
__author__ = "DataCurator Contributors"

from datacurator.core.dataset import Dataset, Subset
from datacurator.core.sample import Sample, SampleType
from datacurator.core.config import CuratorConfig
from datacurator.history import UndoStack
from datacurator.splitting import (
    SplitConfig,
    KFoldConfig,
    auto_split,
    k_fold,
    undo_last_split,
)

__all__ = [
    "Dataset",
    "Subset",
    "Sample",
    "SampleType",
    "CuratorConfig",
    "UndoStack",
    "SplitConfig",
    "KFoldConfig",
    "auto_split",
    "k_fold",
    "undo_last_split",
    "__version__",
]

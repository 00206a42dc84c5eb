"""
Percentage split strategies.

Assigns the root samples of a Dataset to train/validation/test subsets,
either over the whole pool (random) or per label group (stratified).
"""

from __future__ import annotations

import random
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum

from datacurator.core.dataset import Dataset
from datacurator.exceptions import InvalidSplitPercentError


class SplitStrategy(Enum):
    """Available splitting strategies."""
    RANDOM = "random"  # Whole pool, optionally shuffled
    STRATIFIED = "stratified"  # Each label group split on its own


def make_rng(seed: int | None) -> random.Random:
    """Random source for one invocation. ``None`` seeds from the OS."""
    return random.Random(seed)


def group_indices(
    dataset: Dataset,
    stratify_by: str,
    shuffle: bool,
    rng: random.Random,
) -> list[list[int]]:
    """
    Group root sample indices by the string value of a label.

    Groups keep the order in which their label value first appears in
    the root pool. Samples missing the label share the ``""`` group.
    """
    groups: dict[str, list[int]] = defaultdict(list)
    for index, sample in enumerate(dataset.samples):
        groups[sample.label_value(stratify_by)].append(index)

    result = list(groups.values())
    if shuffle:
        for group in result:
            rng.shuffle(group)
    return result


def ordered_indices(dataset: Dataset, shuffle: bool, rng: random.Random) -> list[int]:
    """Root sample indices 0..n-1, shuffled if requested."""
    indices = list(range(len(dataset.samples)))
    if shuffle:
        rng.shuffle(indices)
    return indices


def bucket_sizes(n: int, train_percent: float, val_percent: float) -> tuple[int, int, int]:
    """
    Floor the train and validation shares; test absorbs the remainder.

    >>> bucket_sizes(10, 33, 33)
    (3, 3, 4)
    """
    train = max(0, int(n * train_percent / 100.0))
    val = max(0, int(n * val_percent / 100.0))
    test = max(0, n - train - val)
    return train, val, test


@dataclass
class SplitConfig:
    """
    Configuration for a percentage split.

    The percentages do not have to sum to 100: train and validation are
    floored and the test bucket takes whatever remains. An empty bucket
    name disables that bucket and leaves its samples in the root pool.
    """
    train_percent: float = 70.0
    val_percent: float = 20.0
    test_percent: float = 10.0
    train_name: str = "training"
    val_name: str = "validation"
    test_name: str = "test"
    shuffle: bool = True
    stratify_by: str | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate config."""
        if min(self.train_percent, self.val_percent, self.test_percent) < 0:
            raise InvalidSplitPercentError(
                self.train_percent, self.val_percent, self.test_percent
            )

    @property
    def strategy(self) -> SplitStrategy:
        return SplitStrategy.STRATIFIED if self.stratify_by else SplitStrategy.RANDOM

    @property
    def bucket_names(self) -> tuple[str, str, str]:
        return self.train_name, self.val_name, self.test_name

    def describe(self) -> str:
        text = f"Auto split {self.train_percent:g}/{self.val_percent:g}/{self.test_percent:g}"
        if self.stratify_by:
            text += f" stratified by '{self.stratify_by}'"
        return text


@dataclass
class SplitResult:
    """Result of a percentage split."""

    success: bool

    # Split statistics
    train_count: int = 0
    val_count: int = 0
    test_count: int = 0

    # Subsets that received samples or were created
    subset_names: list[str] = field(default_factory=list)

    # Issues
    errors: list[str] = field(default_factory=list)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "train": self.train_count,
            "val": self.val_count,
            "test": self.test_count,
        }

    def summary(self) -> str:
        """Get human-readable summary."""
        if not self.success:
            return "Split rejected: " + "; ".join(self.errors)

        total = self.train_count + self.val_count + self.test_count
        if total == 0:
            return "No samples split"

        return (
            f"Split: {self.train_count} train ({self.train_count/total*100:.1f}%), "
            f"{self.val_count} val ({self.val_count/total*100:.1f}%), "
            f"{self.test_count} test ({self.test_count/total*100:.1f}%)"
        )


class DatasetSplitter:
    """Split a dataset's root pool into train/validation/test subsets."""

    def __init__(self, config: SplitConfig | None = None) -> None:
        """
        Initialize splitter.

        Args:
            config: Split configuration
        """
        self.config = config or SplitConfig()

    def plan(self, dataset: Dataset) -> tuple[list[int], list[int], list[int]]:
        """
        Compute which root indices go to each bucket without mutating.

        Returns:
            Root indices for train, validation and test, in split order
        """
        rng = make_rng(self.config.seed)

        if self.config.strategy == SplitStrategy.STRATIFIED:
            return self._stratified_split(dataset, rng)
        return self._random_split(dataset, rng)

    def split(self, dataset: Dataset) -> SplitResult:
        """
        Split the root pool of a dataset.

        Args:
            dataset: Dataset whose root samples are distributed

        Returns:
            SplitResult with per-bucket counts, or a failed result when the
            root pool is empty (the dataset is then left untouched)
        """
        if not dataset.samples:
            return SplitResult(
                success=False,
                errors=["No samples in the root pool to split"],
            )

        buckets = self.plan(dataset)
        names = self.config.bucket_names

        for name in names:
            if name and not dataset.has_subset(name):
                dataset.create_subset(name)

        moves = [
            (index, name)
            for name, bucket in zip(names, buckets)
            if name
            for index in bucket
        ]
        dataset.move_samples_to_subsets(moves)

        counts = [len(bucket) if name else 0 for name, bucket in zip(names, buckets)]
        return SplitResult(
            success=True,
            train_count=counts[0],
            val_count=counts[1],
            test_count=counts[2],
            subset_names=[name for name in names if name],
        )

    def _random_split(
        self, dataset: Dataset, rng: random.Random
    ) -> tuple[list[int], list[int], list[int]]:
        """Split the whole pool in one pass."""
        indices = ordered_indices(dataset, self.config.shuffle, rng)
        return self._slice(indices)

    def _stratified_split(
        self, dataset: Dataset, rng: random.Random
    ) -> tuple[list[int], list[int], list[int]]:
        """Split each label group in the requested proportions, then merge."""
        train_all: list[int] = []
        val_all: list[int] = []
        test_all: list[int] = []

        for group in group_indices(
            dataset, self.config.stratify_by or "", self.config.shuffle, rng
        ):
            train, val, test = self._slice(group)
            train_all.extend(train)
            val_all.extend(val)
            test_all.extend(test)

        return train_all, val_all, test_all

    def _slice(self, indices: list[int]) -> tuple[list[int], list[int], list[int]]:
        train_size, val_size, _ = bucket_sizes(
            len(indices), self.config.train_percent, self.config.val_percent
        )
        train_end = train_size
        val_end = min(len(indices), train_end + val_size)
        return indices[:train_end], indices[train_end:val_end], indices[val_end:]

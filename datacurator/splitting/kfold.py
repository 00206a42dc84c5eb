"""
K-fold generation.

Distributes the root pool into k disjoint folds named ``{prefix}1`` to
``{prefix}k``. Fold i is meant to be used as the test set with the other
folds combined for training; that union is never materialized here.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from datacurator.core.dataset import Dataset
from datacurator.exceptions import InvalidFoldCountError
from datacurator.splitting.strategies import group_indices, make_rng, ordered_indices


@dataclass
class KFoldConfig:
    """Configuration for k-fold generation."""
    folds: int = 5
    prefix: str = "fold"
    shuffle: bool = True
    stratify_by: str | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate config."""
        if self.folds < 2:
            raise InvalidFoldCountError(self.folds)

    def fold_name(self, fold_number: int) -> str:
        """Subset name of a 1-based fold number."""
        return f"{self.prefix}{fold_number}"

    def fold_names(self) -> list[str]:
        return [self.fold_name(n) for n in range(1, self.folds + 1)]

    def describe(self) -> str:
        text = f"{self.folds}-fold split"
        if self.stratify_by:
            text += f" stratified by '{self.stratify_by}'"
        return text


@dataclass
class KFoldResult:
    """Result of k-fold generation."""

    success: bool
    fold_sizes: list[int] = field(default_factory=list)
    subset_names: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def folds(self) -> int:
        return len(self.fold_sizes)

    def train_subsets_for(self, fold_number: int) -> list[str]:
        """
        Names of the folds that form the training set when fold_number is held out.

        Raises:
            ValueError: If fold_number is not between 1 and the number of folds
        """
        if not 1 <= fold_number <= len(self.subset_names):
            raise ValueError(
                f"Fold number must be between 1 and {len(self.subset_names)}, got: {fold_number}"
            )
        return [
            name for i, name in enumerate(self.subset_names, start=1) if i != fold_number
        ]

    def summary(self) -> str:
        """Get human-readable summary."""
        if not self.success:
            return "K-fold rejected: " + "; ".join(self.errors)

        base = min(self.fold_sizes)
        larger = sum(1 for size in self.fold_sizes if size > base)
        if larger:
            return (
                f"{self.folds} folds: {larger} with {base + 1} samples, "
                f"{self.folds - larger} with {base} samples"
            )
        return f"{self.folds} folds with {base} samples each"


class KFoldGenerator:
    """Assign root samples to k cross-validation folds."""

    def __init__(self, config: KFoldConfig | None = None) -> None:
        self.config = config or KFoldConfig()

    def plan(self, dataset: Dataset) -> list[list[int]]:
        """
        Compute the root indices of every fold without mutating.

        Returns:
            One list of root indices per fold, fold 1 first
        """
        rng = make_rng(self.config.seed)
        k = self.config.folds

        if self.config.stratify_by:
            return self._stratified_folds(dataset, k, rng)

        indices = ordered_indices(dataset, self.config.shuffle, rng)
        base_size, remainder = divmod(len(indices), k)

        folds: list[list[int]] = []
        start = 0
        for fold in range(k):
            size = base_size + (1 if fold < remainder else 0)
            folds.append(indices[start:start + size])
            start += size
        return folds

    def generate(self, dataset: Dataset) -> KFoldResult:
        """
        Split the root pool into folds.

        Returns:
            KFoldResult with fold sizes, or a failed result when there are
            fewer root samples than folds (the dataset is then left untouched)
        """
        n = len(dataset.samples)
        k = self.config.folds

        if n < k:
            return KFoldResult(
                success=False,
                errors=[
                    f"Insufficient samples for {k}-fold split: "
                    f"need at least {k}, but only {n} available"
                ],
            )

        folds = self.plan(dataset)
        names = self.config.fold_names()

        for name in names:
            dataset.create_subset(name)

        moves = [(index, name) for name, fold in zip(names, folds) for index in fold]
        dataset.move_samples_to_subsets(moves)

        return KFoldResult(
            success=True,
            fold_sizes=[len(fold) for fold in folds],
            subset_names=names,
        )

    def _stratified_folds(self, dataset, k, rng) -> list[list[int]]:
        # Round-robin within each group; the rotation carries over between
        # groups so fold sizes stay within one of each other.
        folds: list[list[int]] = [[] for _ in range(k)]
        offset = 0
        for group in group_indices(
            dataset, self.config.stratify_by or "", self.config.shuffle, rng
        ):
            for i, index in enumerate(group):
                folds[(offset + i) % k].append(index)
            offset = (offset + len(group)) % k
        return folds

"""
Dataset and subset containers.

A Dataset owns a root pool of unassigned samples plus an ordered list
of named subsets. Every sample lives in exactly one of those places.
Sample indices are positional: removing an element shifts every later
index down by one, so bulk moves must run in descending index order
(see :meth:`Dataset.move_samples_to_subsets`).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from datacurator.core.metadata import DatasetMetadata, SubsetMetadata
from datacurator.core.sample import Sample, SampleType
from datacurator.exceptions import SerializationError


class Subset:
    """A named, ordered collection of samples."""

    def __init__(self, name: str = "", metadata: SubsetMetadata | None = None) -> None:
        self.metadata = metadata or SubsetMetadata()
        if name:
            self.metadata.name = name
        self.samples: list[Sample] = []

    @property
    def name(self) -> str:
        return self.metadata.name

    @name.setter
    def name(self, value: str) -> None:
        self.metadata.name = value

    def add_sample(self, sample: Sample) -> None:
        self.samples.append(sample)

    def add_samples(self, samples: Iterable[Sample]) -> None:
        self.samples.extend(samples)

    def remove_sample(self, index: int) -> Sample | None:
        """Remove and return the sample at index; out-of-range is a no-op."""
        if 0 <= index < len(self.samples):
            return self.samples.pop(index)
        return None

    def clear_samples(self) -> None:
        self.samples.clear()

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def total_size(self) -> int:
        return sum(sample.data_size() for sample in self.samples)

    def type_distribution(self) -> dict[SampleType, int]:
        return dict(Counter(sample.type for sample in self.samples))

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "samples": [sample.to_dict() for sample in self.samples],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subset:
        subset = cls(metadata=SubsetMetadata.from_dict(data.get("metadata", {})))
        subset.samples = [Sample.from_dict(s) for s in data.get("samples", [])]
        return subset

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.samples)

    def __getitem__(self, index: int) -> Sample:
        return self.samples[index]

    def __repr__(self) -> str:
        return f"Subset(name={self.name!r}, samples={len(self.samples)})"


@dataclass
class MembershipStat:
    """Sample count of one location (root pool or a subset)."""

    name: str
    count: int
    percentage: float
    is_root: bool = False


class Dataset:
    """
    Root container for samples and subsets.

    Attributes:
        metadata: Dataset-level metadata; ``modified`` is refreshed on every mutation
        samples: Unassigned samples (the root pool)
        subsets: Named subsets, names unique
    """

    def __init__(self, name: str = "", metadata: DatasetMetadata | None = None) -> None:
        self.metadata = metadata or DatasetMetadata()
        if name:
            self.metadata.name = name
        self.samples: list[Sample] = []
        self.subsets: list[Subset] = []

    # Root pool

    def add_sample(self, sample: Sample) -> None:
        self.samples.append(sample)
        self.metadata.touch()

    def add_samples(self, samples: Iterable[Sample]) -> None:
        self.samples.extend(samples)
        self.metadata.touch()

    def remove_sample(self, index: int) -> Sample | None:
        """Remove and return the root sample at index; out-of-range is a no-op."""
        if 0 <= index < len(self.samples):
            sample = self.samples.pop(index)
            self.metadata.touch()
            return sample
        return None

    def clear_samples(self) -> None:
        self.samples.clear()
        self.metadata.touch()

    @property
    def sample_count(self) -> int:
        """Number of samples in the root pool."""
        return len(self.samples)

    # Subsets

    def add_subset(self, subset: Subset) -> None:
        """Append a subset. Duplicate names are not rejected here."""
        self.subsets.append(subset)
        self.metadata.touch()

    def create_subset(self, name: str) -> Subset:
        """Return the subset with this name, creating an empty one if absent."""
        subset = self.get_subset(name)
        if subset is None:
            subset = Subset(name)
            self.add_subset(subset)
        return subset

    def remove_subset(self, name: str, relocate: bool = True) -> bool:
        """
        Remove the first subset with the given name.

        Args:
            name: Subset name
            relocate: Move the subset's samples back to the root pool first.
                With ``relocate=False`` the samples are discarded.

        Returns:
            True if a subset was removed
        """
        for i, subset in enumerate(self.subsets):
            if subset.name == name:
                if relocate:
                    self.samples.extend(subset.samples)
                self.subsets.pop(i)
                self.metadata.touch()
                return True
        return False

    def get_subset(self, name: str) -> Subset | None:
        for subset in self.subsets:
            if subset.name == name:
                return subset
        return None

    def has_subset(self, name: str) -> bool:
        return self.get_subset(name) is not None

    def subset_names(self) -> list[str]:
        return [subset.name for subset in self.subsets]

    @property
    def subset_count(self) -> int:
        return len(self.subsets)

    @property
    def has_subsets(self) -> bool:
        return bool(self.subsets)

    # Moves

    def move_sample_to_subset(self, sample_index: int, subset_name: str) -> bool:
        """
        Move a root sample into a subset, creating the subset if needed.

        Out-of-range indices are a no-op. Later root indices shift down by one.
        """
        if not 0 <= sample_index < len(self.samples):
            return False

        subset = self.create_subset(subset_name)
        subset.add_sample(self.samples.pop(sample_index))
        self.metadata.touch()
        return True

    def move_sample_from_subset(self, subset_name: str, sample_index: int) -> bool:
        """Move a subset sample to the end of the root pool. No-op if missing."""
        subset = self.get_subset(subset_name)
        if subset is None:
            return False

        sample = subset.remove_sample(sample_index)
        if sample is None:
            return False

        self.samples.append(sample)
        self.metadata.touch()
        return True

    def move_samples_to_subsets(self, moves: Iterable[tuple[int, str]]) -> int:
        """
        Apply many root-to-subset moves computed against the current root pool.

        Samples leave the root pool in descending index order so earlier
        removals never shift an index that is still pending. They are then
        appended to their subsets in ascending original order, so each
        subset keeps the root pool's relative order. Moves with an empty
        subset name, out-of-range indices and repeated indices are skipped.

        Returns:
            Number of samples moved
        """
        removed: list[tuple[int, str, Sample]] = []
        seen: set[int] = set()
        for index, subset_name in sorted(moves, key=lambda move: move[0], reverse=True):
            if not subset_name or index in seen or not 0 <= index < len(self.samples):
                continue
            seen.add(index)
            removed.append((index, subset_name, self.samples.pop(index)))

        for _, subset_name, sample in reversed(removed):
            self.create_subset(subset_name).add_sample(sample)

        if removed:
            self.metadata.touch()
        return len(removed)

    # Statistics

    @property
    def total_sample_count(self) -> int:
        """Samples in the root pool plus all subsets."""
        return len(self.samples) + sum(len(subset) for subset in self.subsets)

    def total_size(self) -> int:
        root = sum(sample.data_size() for sample in self.samples)
        return root + sum(subset.total_size() for subset in self.subsets)

    def type_distribution(self) -> dict[SampleType, int]:
        distribution = Counter(sample.type for sample in self.samples)
        for subset in self.subsets:
            distribution.update(subset.type_distribution())
        return dict(distribution)

    def label_keys(self) -> list[str]:
        """Sorted label keys present on root samples (stratification candidates)."""
        keys: set[str] = set()
        for sample in self.samples:
            keys.update(sample.metadata.labels.keys())
        return sorted(keys)

    def membership_stats(self) -> list[MembershipStat]:
        """Count and share of the root pool and every subset."""
        total = self.total_sample_count
        if total == 0:
            return []

        stats = []
        if self.samples:
            stats.append(MembershipStat(
                name="root",
                count=len(self.samples),
                percentage=len(self.samples) * 100.0 / total,
                is_root=True,
            ))
        for subset in self.subsets:
            stats.append(MembershipStat(
                name=subset.name,
                count=len(subset),
                percentage=len(subset) * 100.0 / total,
            ))
        return stats

    def iter_samples(self) -> Iterator[tuple[str | None, Sample]]:
        """Yield (location, sample) pairs; location is None for the root pool."""
        for sample in self.samples:
            yield None, sample
        for subset in self.subsets:
            for sample in subset.samples:
                yield subset.name, sample

    def find_sample(self, sample_id: str) -> tuple[str | None, Sample] | None:
        """Locate a sample by id. Returns (location, sample) or None."""
        for location, sample in self.iter_samples():
            if sample.id == sample_id:
                return location, sample
        return None

    # Utility

    def clear(self) -> None:
        self.samples.clear()
        self.subsets.clear()
        self.metadata = DatasetMetadata()

    def is_empty(self) -> bool:
        return not self.samples and not self.subsets

    def to_dict(self) -> dict[str, Any]:
        """Convert dataset to dictionary representation."""
        data: dict[str, Any] = {"metadata": self.metadata.to_dict()}
        if self.samples:
            data["samples"] = [sample.to_dict() for sample in self.samples]
        if self.subsets:
            data["subsets"] = [subset.to_dict() for subset in self.subsets]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dataset:
        """Create a Dataset from a dictionary."""
        if not isinstance(data, dict):
            raise SerializationError("dataset", f"expected a mapping, got {type(data).__name__}")

        dataset = cls(metadata=DatasetMetadata.from_dict(data.get("metadata", {})))
        dataset.samples = [Sample.from_dict(s) for s in data.get("samples", [])]
        dataset.subsets = [Subset.from_dict(s) for s in data.get("subsets", [])]
        return dataset

    def __repr__(self) -> str:
        return (
            f"Dataset(name={self.metadata.name!r}, root={len(self.samples)}, "
            f"subsets={len(self.subsets)})"
        )

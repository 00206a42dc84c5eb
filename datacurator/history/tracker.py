"""
Move tracking and undo for partitioning operations.

Before a split runs, :func:`snapshot` records where every sample lives.
:func:`undo` pops the latest record, sends every sample back to the root
pool and replays the recorded locations. The undo stack is a plain
object owned by the caller; nothing here is module-level state.
"""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from datacurator.core.dataset import Dataset
from datacurator.core.sample import Sample
from datacurator.exceptions import EmptyUndoStackError, SerializationError

# Location of samples in the root pool. Any string, including "", is a
# subset name.
ROOT_LOCATION = None


def _location(value: Any) -> str | None:
    return ROOT_LOCATION if value is None else str(value)


@dataclass
class MoveRecord:
    """
    Membership of every sample at one point in time.

    Attributes:
        locations: (sample_id, location) pairs; location is ROOT_LOCATION
            (None) for the root pool or a subset name
        description: Human-readable label of the operation this undoes
        subset_names: Subsets that existed when the record was taken
        created_at: When the record was taken
    """

    locations: list[tuple[str, str | None]] = field(default_factory=list)
    description: str = ""
    subset_names: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    def add_location(self, sample_id: str, location: str | None) -> None:
        self.locations.append((sample_id, location))

    def __len__(self) -> int:
        return len(self.locations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "subset_names": list(self.subset_names),
            "locations": [
                {"id": sample_id, "location": location}
                for sample_id, location in self.locations
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MoveRecord:
        try:
            created = data.get("created_at")
            return cls(
                locations=[
                    (str(item["id"]), _location(item.get("location")))
                    for item in data.get("locations", [])
                ],
                description=str(data.get("description", "")),
                subset_names=[str(name) for name in data.get("subset_names", [])],
                created_at=datetime.fromisoformat(created) if created else datetime.now(),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SerializationError("move record", f"{type(e).__name__}: {e}") from e


class UndoStack:
    """Most-recent-first stack of move records."""

    def __init__(self) -> None:
        self._records: list[MoveRecord] = []

    def push(self, record: MoveRecord) -> None:
        self._records.append(record)

    def pop(self) -> MoveRecord:
        if not self._records:
            raise EmptyUndoStackError()
        return self._records.pop()

    def peek(self) -> MoveRecord | None:
        return self._records[-1] if self._records else None

    def clear(self) -> None:
        self._records.clear()

    def is_empty(self) -> bool:
        return not self._records

    def descriptions(self) -> list[str]:
        """Descriptions of the recorded operations, most recent first."""
        return [record.description for record in reversed(self._records)]

    def to_list(self) -> list[dict[str, Any]]:
        """Serialize records, oldest first."""
        return [record.to_dict() for record in self._records]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> UndoStack:
        if not isinstance(data, list):
            raise SerializationError("undo history", f"expected a list, got {type(data).__name__}")
        stack = cls()
        for item in data:
            stack.push(MoveRecord.from_dict(item))
        return stack

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)


@dataclass
class UndoResult:
    """Result of undoing one operation."""

    success: bool
    description: str = ""
    restored: int = 0
    missing: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def summary(self) -> str:
        if not self.success:
            return "Undo rejected: " + "; ".join(self.errors)
        text = f"Undid '{self.description}': {self.restored} samples returned to subsets"
        if self.missing:
            text += f", {len(self.missing)} recorded samples no longer present"
        return text


def snapshot(dataset: Dataset, description: str = "Split operation") -> MoveRecord:
    """Record the current location of every sample in the dataset."""
    record = MoveRecord(description=description, subset_names=dataset.subset_names())
    for location, sample in dataset.iter_samples():
        record.add_location(sample.id, location)
    return record


def undo(dataset: Dataset, stack: UndoStack) -> UndoResult:
    """
    Restore the membership recorded by the most recent record on the stack.

    Subsets created after the record was taken are removed once they are
    empty again; subsets that already existed are kept even when empty.
    The root pool gets back its recorded order; samples the record does
    not know about stay in the root pool after the recorded ones.

    Returns:
        UndoResult; a failed result when the stack is empty
    """
    if stack.is_empty():
        return UndoResult(success=False, errors=["There are no split operations to undo"])

    record = stack.pop()

    # Works on subset objects directly since names are not guaranteed unique.
    for subset in dataset.subsets:
        dataset.samples.extend(subset.samples)
        subset.clear_samples()

    # Samples sharing an id are handed out in pool order.
    pool: dict[str, deque[Sample]] = defaultdict(deque)
    for sample in dataset.samples:
        pool[sample.id].append(sample)

    root: list[Sample] = []
    placed: set[int] = set()
    restored = 0
    missing: list[str] = []

    for sample_id, location in record.locations:
        queue = pool.get(sample_id)
        if not queue:
            missing.append(sample_id)
            continue

        sample = queue.popleft()
        placed.add(id(sample))
        if location is ROOT_LOCATION:
            root.append(sample)
        else:
            dataset.create_subset(location).add_sample(sample)
            restored += 1

    root.extend(sample for sample in dataset.samples if id(sample) not in placed)
    dataset.samples = root
    dataset.metadata.touch()

    known = set(record.subset_names)
    for name in [s.name for s in dataset.subsets if not s.samples and s.name not in known]:
        dataset.remove_subset(name)

    return UndoResult(
        success=True,
        description=record.description,
        restored=restored,
        missing=missing,
    )

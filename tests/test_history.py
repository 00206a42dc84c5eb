"""Tests for move tracking, undo and the partitioning entry points."""

import pytest

from conftest import ids, make_text_dataset, membership
from datacurator.core.dataset import Dataset, Subset
from datacurator.core.sample import Sample
from datacurator.exceptions import EmptyUndoStackError, SerializationError
from datacurator.history import ROOT_LOCATION, MoveRecord, UndoStack, snapshot, undo
from datacurator.splitting import (
    KFoldConfig,
    SplitConfig,
    auto_split,
    k_fold,
    undo_last_split,
)


class TestSnapshot:
    """Test recording sample locations."""

    def test_records_every_sample(self, text_dataset: Dataset):
        """Snapshot holds one pair per sample with its location."""
        text_dataset.move_sample_to_subset(0, "training")
        record = snapshot(text_dataset, "before split")

        assert len(record) == 10
        assert ("s0", "training") in record.locations
        assert ("s1", ROOT_LOCATION) in record.locations
        assert record.description == "before split"
        assert record.subset_names == ["training"]

    def test_record_roundtrip(self, text_dataset: Dataset):
        """Move records convert to and from dicts."""
        record = snapshot(text_dataset)
        restored = MoveRecord.from_dict(record.to_dict())
        assert restored.locations == record.locations
        assert restored.created_at == record.created_at

    def test_root_distinct_from_empty_subset_name(self, text_dataset: Dataset):
        """A subset named "" is recorded apart from the root pool."""
        text_dataset.move_sample_to_subset(0, "")
        record = MoveRecord.from_dict(snapshot(text_dataset).to_dict())

        assert ("s0", "") in record.locations
        assert ("s1", ROOT_LOCATION) in record.locations
        assert ROOT_LOCATION is None

    def test_corrupt_record_raises(self):
        """A record without sample ids is a serialization error."""
        with pytest.raises(SerializationError):
            MoveRecord.from_dict({"locations": [{"location": "training"}]})
        with pytest.raises(SerializationError):
            UndoStack.from_list({"records": []})


class TestUndoStack:
    """Test the undo stack."""

    def test_starts_empty(self, history: UndoStack):
        """A new stack has nothing to undo."""
        assert history.is_empty()
        assert len(history) == 0
        assert not history

    def test_lifo(self, history: UndoStack):
        """Records pop most recent first."""
        history.push(MoveRecord(description="first"))
        history.push(MoveRecord(description="second"))
        assert history.descriptions() == ["second", "first"]
        assert history.pop().description == "second"
        assert history.peek().description == "first"

    def test_pop_empty_raises(self, history: UndoStack):
        """Popping an empty stack raises."""
        with pytest.raises(EmptyUndoStackError):
            history.pop()

    def test_list_roundtrip(self, history: UndoStack, text_dataset: Dataset):
        """Stacks convert to and from lists, keeping order."""
        history.push(snapshot(text_dataset, "one"))
        history.push(snapshot(text_dataset, "two"))
        restored = UndoStack.from_list(history.to_list())
        assert restored.descriptions() == ["two", "one"]


class TestUndo:
    """Test restoring recorded membership."""

    def test_undo_empty_stack_rejected(self, text_dataset: Dataset, history: UndoStack):
        """Undo with no history is a rejected result, not an exception."""
        result = undo(text_dataset, history)
        assert not result.success
        assert "no split operations" in result.errors[0]

    def test_undo_split_restores_root(self, text_dataset: Dataset, history: UndoStack):
        """Undoing a split returns every sample to the root pool in order."""
        auto_split(text_dataset, SplitConfig(70, 20, 10), history)
        result = undo_last_split(text_dataset, history)

        assert result.success
        assert ids(text_dataset.samples) == [f"s{i}" for i in range(10)]
        assert not text_dataset.has_subsets
        assert history.is_empty()

    def test_undo_restores_prior_subsets(self, text_dataset: Dataset, history: UndoStack):
        """Samples that were in subsets before the split go back there."""
        text_dataset.move_samples_to_subsets([(0, "keep"), (1, "keep"), (2, "other")])
        text_dataset.create_subset("empty")
        before = membership(text_dataset)
        names_before = text_dataset.subset_names()

        k_fold(text_dataset, KFoldConfig(folds=3), history)
        undo_last_split(text_dataset, history)

        assert membership(text_dataset) == before
        assert text_dataset.subset_names() == names_before
        assert ids(text_dataset.get_subset("keep")) == ["s0", "s1"]

    def test_stacked_undo(self, history: UndoStack):
        """Two operations undone in reverse order restore each earlier state."""
        dataset = make_text_dataset(20)
        original = membership(dataset)

        auto_split(dataset, SplitConfig(50, 50, 0, train_name="a", val_name="b", test_name=""), history)
        after_first = membership(dataset)

        dataset.move_sample_from_subset("a", 0)
        dataset.move_sample_from_subset("a", 0)
        dataset.move_sample_from_subset("a", 0)
        k_fold(dataset, KFoldConfig(folds=3), history)
        assert len(history) == 2

        undo_last_split(dataset, history)
        after_undo = membership(dataset)
        # The three samples moved back by hand were in root at the second snapshot.
        assert sum(1 for loc in after_undo.values() if loc is None) == 3
        assert {k: v for k, v in after_undo.items() if v is not None} == {
            k: v for k, v in after_first.items()
            if v is not None and after_undo[k] is not None
        }

        undo_last_split(dataset, history)
        assert membership(dataset) == original
        assert not dataset.has_subsets
        assert undo_last_split(dataset, history).success is False

    def test_missing_samples_reported(self, text_dataset: Dataset, history: UndoStack):
        """Samples removed after the snapshot are reported as missing."""
        auto_split(text_dataset, SplitConfig(shuffle=False), history)
        text_dataset.get_subset("training").remove_sample(0)

        result = undo_last_split(text_dataset, history)

        assert result.success
        assert result.missing == ["s0"]
        assert text_dataset.total_sample_count == 9

    def test_undo_restores_empty_named_subset(self, text_dataset: Dataset, history: UndoStack):
        """Samples in a subset named "" go back there, not to the root pool."""
        text_dataset.add_subset(Subset())
        text_dataset.move_sample_to_subset(0, "")
        before = membership(text_dataset)

        k_fold(text_dataset, KFoldConfig(folds=3), history)
        undo_last_split(text_dataset, history)

        assert membership(text_dataset) == before
        assert before["s0"] == ""
        assert text_dataset.subset_names() == [""]

    def test_undo_duplicate_ids(self, history: UndoStack):
        """Samples sharing an id are each restored to one recorded location."""
        dataset = make_text_dataset(4)
        dataset.add_sample(Sample.from_text("s0", "copy"))
        dataset.move_sample_to_subset(0, "keep")
        before = sorted((str(loc), s.id) for loc, s in dataset.iter_samples())

        auto_split(dataset, SplitConfig(seed=3), history)
        undo_last_split(dataset, history)

        after = sorted((str(loc), s.id) for loc, s in dataset.iter_samples())
        assert after == before
        assert dataset.total_sample_count == 5


class TestEntryPoints:
    """Test that entry points record history only when they run."""

    def test_auto_split_pushes_one_record(self, text_dataset: Dataset, history: UndoStack):
        """A successful split pushes exactly one record."""
        result = auto_split(text_dataset, SplitConfig(), history)
        assert result.success
        assert len(history) == 1
        assert "Auto split 70/20/10" in history.peek().description

    def test_auto_split_empty_rejected(self, history: UndoStack):
        """Empty dataset is rejected and nothing is recorded."""
        dataset = Dataset("empty")
        result = auto_split(dataset, SplitConfig(), history)
        assert not result.success
        assert history.is_empty()
        assert not dataset.has_subsets

    def test_k_fold_insufficient_rejected(self, history: UndoStack):
        """k > n is rejected and nothing is recorded."""
        dataset = make_text_dataset(3)
        result = k_fold(dataset, KFoldConfig(folds=5), history)
        assert not result.success
        assert history.is_empty()
        assert dataset.sample_count == 3

    def test_every_sample_present_once(self, hundred_dataset: Dataset, history: UndoStack):
        """After a split each sample id appears exactly once."""
        k_fold(hundred_dataset, KFoldConfig(folds=4, seed=9), history)
        all_ids = [s.id for _, s in hundred_dataset.iter_samples()]
        assert sorted(all_ids) == sorted(f"s{i}" for i in range(100))

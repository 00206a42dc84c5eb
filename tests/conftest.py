"""
Pytest configuration and shared fixtures for DataCurator tests.
"""

import json
from pathlib import Path

import numpy as np
import pytest

from datacurator.core.dataset import Dataset
from datacurator.core.sample import AudioData, AudioFormat, MultimodalData, Sample
from datacurator.history import UndoStack


# ============================================================================
# Dataset Fixtures
# ============================================================================

def make_text_dataset(count: int, name: str = "test dataset") -> Dataset:
    """Dataset with `count` unassigned text samples s0..s{count-1}."""
    dataset = Dataset(name)
    for i in range(count):
        dataset.add_sample(Sample.from_text(f"s{i}", f"Sample {i} content"))
    return dataset


def make_labeled_dataset(label_counts: dict[str, int], key: str = "class") -> Dataset:
    """Dataset whose samples carry `key` labels with the given counts per value."""
    dataset = Dataset("labeled")
    i = 0
    for value, count in label_counts.items():
        for _ in range(count):
            dataset.add_sample(
                Sample.from_text(f"s{i}", f"text {i}", labels={key: value})
            )
            i += 1
    return dataset


def ids(samples) -> list[str]:
    return [sample.id for sample in samples]


def membership(dataset: Dataset) -> dict[str, str | None]:
    """Map of sample id to location (None for the root pool)."""
    return {sample.id: location for location, sample in dataset.iter_samples()}


@pytest.fixture
def text_dataset() -> Dataset:
    """Dataset with 10 unassigned text samples."""
    return make_text_dataset(10)


@pytest.fixture
def hundred_dataset() -> Dataset:
    """Dataset with 100 unassigned text samples."""
    return make_text_dataset(100)


@pytest.fixture
def labeled_dataset() -> Dataset:
    """Dataset with 60 'cat', 30 'dog' and 10 'bird' samples, grouped by label."""
    return make_labeled_dataset({"cat": 60, "dog": 30, "bird": 10})


@pytest.fixture
def history() -> UndoStack:
    return UndoStack()


@pytest.fixture
def mixed_samples() -> list[Sample]:
    """One sample of every payload type."""
    image = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
    audio = AudioData(
        samples=b"\x00\x01\x02\x03",
        format=AudioFormat(sample_rate=16000, channel_count=1, sample_format="int16"),
        duration_ms=1,
    )
    return [
        Sample.from_text("text", "hello", tags=["a"], labels={"lang": "en"}),
        Sample.from_image("image", image, source_file="img.png"),
        Sample.from_audio("audio", audio),
        Sample.from_binary("binary", b"\xff\x00\x10"),
        Sample.from_multimodal(
            "multi",
            MultimodalData(text="caption", image=image, audio=audio, additional={"k": 1}),
        ),
    ]


# ============================================================================
# CLI Fixtures (for integration tests)
# ============================================================================

@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def dataset_file(tmp_path: Path) -> Path:
    """Dataset JSON file with 10 unassigned samples, half labeled 'a', half 'b'."""
    dataset = make_text_dataset(10, name="cli dataset")
    for i, sample in enumerate(dataset.samples):
        sample.set_label("class", "a" if i < 5 else "b")

    path = tmp_path / "data.json"
    path.write_text(json.dumps(dataset.to_dict()))
    return path

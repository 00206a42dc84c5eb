"""Core module - samples, subsets, datasets and their metadata."""

from datacurator.core.metadata import SampleMetadata, SubsetMetadata, DatasetMetadata
from datacurator.core.sample import (
    Sample,
    SampleType,
    AudioData,
    AudioFormat,
    MultimodalData,
)
from datacurator.core.dataset import Dataset, Subset, MembershipStat

__all__ = [
    "SampleMetadata",
    "SubsetMetadata",
    "DatasetMetadata",
    "Sample",
    "SampleType",
    "AudioData",
    "AudioFormat",
    "MultimodalData",
    "Dataset",
    "Subset",
    "MembershipStat",
]

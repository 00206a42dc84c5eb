"""
Metadata records for samples, subsets and datasets.

Each record converts to and from a plain dict of strings, lists and
scalars. Empty optional fields are left out of the dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_time(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class SampleMetadata:
    """
    Metadata attached to a single sample.

    Attributes:
        id: Caller-assigned identifier, unique within a dataset
        tags: Free-form tags, kept in insertion order without duplicates
        labels: Label values keyed by label name (used for stratification)
        attributes: Free-form key/value pairs
        timestamp: When the sample was created or imported
        source_file: Provenance of the sample (usually the original file path)
        annotations: Format-specific annotations such as boxes or time ranges
    """

    id: str = ""
    tags: list[str] = field(default_factory=list)
    labels: dict[str, Any] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime | None = field(default_factory=datetime.now)
    source_file: str = ""
    annotations: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert metadata to dictionary representation."""
        data: dict[str, Any] = {}
        if self.id:
            data["id"] = self.id
        if self.tags:
            data["tags"] = list(self.tags)
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.attributes:
            data["attributes"] = dict(self.attributes)
        if self.timestamp is not None:
            data["timestamp"] = _format_time(self.timestamp)
        if self.source_file:
            data["source_file"] = self.source_file
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SampleMetadata:
        """Create metadata from a dictionary."""
        tags: list[str] = []
        for tag in data.get("tags", []):
            if tag not in tags:
                tags.append(str(tag))

        return cls(
            id=str(data.get("id", "")),
            tags=tags,
            labels=dict(data.get("labels", {})),
            attributes=dict(data.get("attributes", {})),
            timestamp=_parse_time(data.get("timestamp")),
            source_file=str(data.get("source_file", "")),
            annotations=dict(data.get("annotations", {})),
        )


@dataclass
class SubsetMetadata:
    """Name, description and custom fields of a subset."""

    name: str = ""
    description: str = ""
    custom: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.custom:
            data["metadata"] = dict(self.custom)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SubsetMetadata:
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            custom=dict(data.get("metadata", {})),
        )


@dataclass
class DatasetMetadata:
    """
    Dataset-level metadata.

    The ``modified`` timestamp is refreshed by every mutating Dataset call
    through :meth:`touch`.
    """

    name: str = ""
    description: str = ""
    version: str = ""
    author: str = ""
    license: str = ""
    created: datetime | None = field(default_factory=datetime.now)
    modified: datetime | None = field(default_factory=datetime.now)
    custom: dict[str, Any] = field(default_factory=dict)

    def touch(self) -> None:
        """Mark the dataset as modified now."""
        self.modified = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        """Convert metadata to dictionary representation."""
        data: dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.version:
            data["version"] = self.version
        if self.created is not None:
            data["created"] = _format_time(self.created)
        if self.modified is not None:
            data["modified"] = _format_time(self.modified)
        if self.author:
            data["author"] = self.author
        if self.license:
            data["license"] = self.license
        if self.custom:
            data["custom"] = dict(self.custom)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DatasetMetadata:
        """Create metadata from a dictionary."""
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            version=str(data.get("version", "")),
            author=str(data.get("author", "")),
            license=str(data.get("license", "")),
            created=_parse_time(data.get("created")),
            modified=_parse_time(data.get("modified")),
            custom=dict(data.get("custom", {})),
        )

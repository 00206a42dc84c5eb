"""
Sample data structures.

A Sample is a single labeled data point. Its payload is a tagged union:
the ``type`` tag and the payload always change together through one
setter per variant, so the tag cannot drift from the data it describes.
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

import numpy as np
from PIL import Image

from datacurator.core.metadata import SampleMetadata
from datacurator.exceptions import InvalidImageError, PayloadTypeError, SerializationError


class SampleType(str, Enum):
    """Payload variants a sample can carry."""

    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    BINARY = "binary"
    MULTIMODAL = "multimodal"


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(data: Any) -> bytes:
    if not data:
        return b""
    try:
        return base64.b64decode(data)
    except (ValueError, TypeError) as e:
        raise SerializationError("base64 payload", str(e)) from e


IMAGE_CHANNELS = (3, 4)


def normalize_image(image: Any) -> np.ndarray:
    """
    Check that an array is a PNG-representable image.

    A trailing channel axis of size 1 is dropped, so HxWx1 becomes HxW.
    Empty arrays are accepted as an empty image.

    Raises:
        InvalidImageError: If the dtype is not uint8 or the shape is not
            HxW, HxWx3 or HxWx4
    """
    array = np.asarray(image)
    if array.size == 0:
        return np.zeros((0, 0), dtype=np.uint8)
    if array.ndim == 3 and array.shape[2] == 1:
        array = array[:, :, 0]
    if array.dtype != np.uint8:
        raise InvalidImageError(str(array.dtype), array.shape)
    if array.ndim != 2 and not (array.ndim == 3 and array.shape[2] in IMAGE_CHANNELS):
        raise InvalidImageError(str(array.dtype), array.shape)
    return array


def encode_image(image: np.ndarray) -> str:
    """Encode a pixel array as base64 PNG."""
    buffer = io.BytesIO()
    Image.fromarray(normalize_image(image)).save(buffer, format="PNG")
    return _b64encode(buffer.getvalue())


def decode_image(data: Any) -> np.ndarray | None:
    """Decode a base64 PNG (or any Pillow-readable image) into a pixel array."""
    raw = _b64decode(data)
    if not raw:
        return None
    try:
        with Image.open(io.BytesIO(raw)) as img:
            if img.mode not in ("L", "RGB", "RGBA"):
                img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
            return np.array(img)
    except OSError as e:
        raise SerializationError("image payload", str(e)) from e


@dataclass
class AudioFormat:
    """PCM format descriptor."""

    sample_rate: int = 0
    channel_count: int = 0
    sample_format: str = "int16"


@dataclass
class AudioData:
    """
    Raw PCM audio with its format.

    Attributes:
        samples: Raw interleaved PCM bytes
        format: Sample rate, channel count and sample format
        duration_ms: Duration in milliseconds
    """

    samples: bytes = b""
    format: AudioFormat = field(default_factory=AudioFormat)
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "samples": _b64encode(self.samples),
            "sample_rate": self.format.sample_rate,
            "channel_count": self.format.channel_count,
            "sample_format": self.format.sample_format,
            "duration_ms": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AudioData:
        return cls(
            samples=_b64decode(data.get("samples")),
            format=AudioFormat(
                sample_rate=int(data.get("sample_rate", 0)),
                channel_count=int(data.get("channel_count", 0)),
                sample_format=str(data.get("sample_format", "int16")),
            ),
            duration_ms=int(data.get("duration_ms", 0)),
        )


@dataclass
class MultimodalData:
    """Several payload kinds combined in one sample."""

    text: str = ""
    image: np.ndarray | None = None
    audio: AudioData | None = None
    additional: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.image is not None:
            self.image = normalize_image(self.image)

    def is_empty(self) -> bool:
        return (
            not self.text
            and (self.image is None or self.image.size == 0)
            and (self.audio is None or not self.audio.samples)
        )

    def data_size(self) -> int:
        size = len(self.text.encode("utf-8"))
        if self.image is not None:
            size += int(self.image.nbytes)
        if self.audio is not None:
            size += len(self.audio.samples)
        return size

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.text:
            data["text"] = self.text
        if self.image is not None and self.image.size > 0:
            data["image"] = encode_image(self.image)
        if self.audio is not None and self.audio.samples:
            data["audio"] = self.audio.to_dict()
        if self.additional:
            data["additional"] = dict(self.additional)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MultimodalData:
        audio = data.get("audio")
        return cls(
            text=str(data.get("text", "")),
            image=decode_image(data.get("image")),
            audio=AudioData.from_dict(audio) if audio else None,
            additional=dict(data.get("additional", {})),
        )


Payload = Union[str, np.ndarray, AudioData, bytes, MultimodalData]


class Sample:
    """
    A single labeled data point.

    The payload variant is chosen through ``set_text``, ``set_image``,
    ``set_audio``, ``set_binary`` or ``set_multimodal``; ``type`` is
    read-only. A new sample starts as empty text.

    Example:
        sample = Sample.from_text("s1", "hello", labels={"lang": "en"})
        sample.add_tag("greeting")
    """

    def __init__(
        self,
        sample_id: str = "",
        metadata: SampleMetadata | None = None,
    ) -> None:
        self.metadata = metadata or SampleMetadata()
        if sample_id:
            self.metadata.id = sample_id
        self._type = SampleType.TEXT
        self._payload: Payload = ""

    # Construction helpers

    @classmethod
    def from_text(cls, sample_id: str, text: str, **metadata: Any) -> Sample:
        sample = cls(metadata=SampleMetadata(id=sample_id, **metadata))
        sample.set_text(text)
        return sample

    @classmethod
    def from_image(cls, sample_id: str, image: np.ndarray, **metadata: Any) -> Sample:
        sample = cls(metadata=SampleMetadata(id=sample_id, **metadata))
        sample.set_image(image)
        return sample

    @classmethod
    def from_audio(cls, sample_id: str, audio: AudioData, **metadata: Any) -> Sample:
        sample = cls(metadata=SampleMetadata(id=sample_id, **metadata))
        sample.set_audio(audio)
        return sample

    @classmethod
    def from_binary(cls, sample_id: str, data: bytes, **metadata: Any) -> Sample:
        sample = cls(metadata=SampleMetadata(id=sample_id, **metadata))
        sample.set_binary(data)
        return sample

    @classmethod
    def from_multimodal(cls, sample_id: str, data: MultimodalData, **metadata: Any) -> Sample:
        sample = cls(metadata=SampleMetadata(id=sample_id, **metadata))
        sample.set_multimodal(data)
        return sample

    # Identity and payload

    @property
    def id(self) -> str:
        return self.metadata.id

    @property
    def type(self) -> SampleType:
        return self._type

    @property
    def payload(self) -> Payload:
        return self._payload

    def set_text(self, text: str) -> None:
        self._type = SampleType.TEXT
        self._payload = text

    def set_image(self, image: np.ndarray) -> None:
        """Set a uint8 HxW, HxWx3 or HxWx4 pixel array (HxWx1 is squeezed)."""
        pixels = normalize_image(image)
        self._type = SampleType.IMAGE
        self._payload = pixels

    def set_audio(self, audio: AudioData) -> None:
        self._type = SampleType.AUDIO
        self._payload = audio

    def set_binary(self, data: bytes) -> None:
        self._type = SampleType.BINARY
        self._payload = bytes(data)

    def set_multimodal(self, data: MultimodalData) -> None:
        self._type = SampleType.MULTIMODAL
        self._payload = data

    def _expect(self, expected: SampleType) -> Payload:
        if self._type != expected:
            raise PayloadTypeError(expected.value, self._type.value)
        return self._payload

    def as_text(self) -> str:
        return self._expect(SampleType.TEXT)  # type: ignore[return-value]

    def as_image(self) -> np.ndarray:
        return self._expect(SampleType.IMAGE)  # type: ignore[return-value]

    def as_audio(self) -> AudioData:
        return self._expect(SampleType.AUDIO)  # type: ignore[return-value]

    def as_binary(self) -> bytes:
        return self._expect(SampleType.BINARY)  # type: ignore[return-value]

    def as_multimodal(self) -> MultimodalData:
        return self._expect(SampleType.MULTIMODAL)  # type: ignore[return-value]

    # Tags and labels

    def add_tag(self, tag: str) -> bool:
        """Add a tag. Returns False if the tag was already present."""
        if tag in self.metadata.tags:
            return False
        self.metadata.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> bool:
        """Remove a tag. Returns True if removed."""
        if tag not in self.metadata.tags:
            return False
        self.metadata.tags.remove(tag)
        return True

    def set_label(self, key: str, value: Any) -> None:
        self.metadata.labels[key] = value

    def remove_label(self, key: str) -> bool:
        if key in self.metadata.labels:
            del self.metadata.labels[key]
            return True
        return False

    def label_value(self, key: str) -> str:
        """
        Get the string form of a label, as used for stratification.

        A missing label (or a None value) gives the empty string, so
        unlabeled samples form their own group.
        """
        value = self.metadata.labels.get(key)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    # Utility

    def is_empty(self) -> bool:
        payload = self._payload
        if self._type == SampleType.IMAGE:
            return payload.size == 0  # type: ignore[union-attr]
        if self._type == SampleType.AUDIO:
            return not payload.samples  # type: ignore[union-attr]
        if self._type == SampleType.MULTIMODAL:
            return payload.is_empty()  # type: ignore[union-attr]
        return not payload

    def data_size(self) -> int:
        """Approximate payload size in bytes."""
        payload = self._payload
        if self._type == SampleType.TEXT:
            return len(payload.encode("utf-8"))  # type: ignore[union-attr]
        if self._type == SampleType.IMAGE:
            return int(payload.nbytes)  # type: ignore[union-attr]
        if self._type == SampleType.AUDIO:
            return len(payload.samples)  # type: ignore[union-attr]
        if self._type == SampleType.BINARY:
            return len(payload)  # type: ignore[arg-type]
        return payload.data_size()  # type: ignore[union-attr]

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """Convert sample to dictionary representation."""
        payload = self._payload
        data: dict[str, Any] = {"type": self._type.value}

        if self._type == SampleType.TEXT:
            data["data"] = payload
        elif self._type == SampleType.IMAGE:
            if payload.size > 0:  # type: ignore[union-attr]
                data["data"] = encode_image(payload)  # type: ignore[arg-type]
        elif self._type == SampleType.AUDIO:
            data["data"] = payload.to_dict()  # type: ignore[union-attr]
        elif self._type == SampleType.BINARY:
            data["data"] = _b64encode(payload)  # type: ignore[arg-type]
        else:
            data["data"] = payload.to_dict()  # type: ignore[union-attr]

        data["metadata"] = self.metadata.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sample:
        """Create a Sample from a dictionary."""
        try:
            sample_type = SampleType(data.get("type", SampleType.TEXT.value))
        except ValueError as e:
            raise SerializationError("sample", f"unknown type {data.get('type')!r}") from e

        sample = cls(metadata=SampleMetadata.from_dict(data.get("metadata", {})))
        raw = data.get("data")

        if sample_type == SampleType.TEXT:
            sample.set_text(str(raw or ""))
        elif sample_type == SampleType.IMAGE:
            image = decode_image(raw)
            sample.set_image(image if image is not None else np.zeros((0, 0), dtype=np.uint8))
        elif sample_type == SampleType.AUDIO:
            sample.set_audio(AudioData.from_dict(raw or {}))
        elif sample_type == SampleType.BINARY:
            sample.set_binary(_b64decode(raw))
        else:
            sample.set_multimodal(MultimodalData.from_dict(raw or {}))

        return sample

    def __repr__(self) -> str:
        return f"Sample(id={self.id!r}, type={self._type.value})"

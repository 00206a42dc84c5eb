"""
Custom exception hierarchy for DataCurator.

Ordinary rejected operations (no samples, insufficient samples, empty
undo history) are reported through result objects. The exceptions below
cover programmer errors and corrupt input only.
"""

from __future__ import annotations

from typing import Any


class DataCuratorError(Exception):
    """
    Base exception for all DataCurator errors.

    All custom exceptions inherit from this class, allowing
    for catch-all error handling at the CLI level.
    """

    def __init__(
        self,
        message: str,
        *,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            suggestion: Optional suggestion for how to fix the error
            details: Optional dict with additional error context
        """
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)


class DatasetError(DataCuratorError):
    """
    Errors related to the sample/subset/dataset model.

    Raised during:
    - Payload access with the wrong variant
    - Construction of samples with inconsistent data
    """
    pass


class PayloadTypeError(DatasetError):
    """A typed payload getter was called on a sample of another type."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"Sample payload is {actual}, not {expected}",
            suggestion=f"Check sample.type before calling as_{expected}().",
            details={"expected": expected, "actual": actual},
        )


class InvalidImageError(DatasetError):
    """An image array cannot be stored as a lossless PNG payload."""

    def __init__(self, dtype: str, shape: tuple[int, ...]) -> None:
        super().__init__(
            f"Unsupported image array: dtype={dtype}, shape={shape}",
            suggestion="Use a uint8 array shaped HxW, HxWx3 or HxWx4.",
            details={"dtype": dtype, "shape": list(shape)},
        )


class SplitError(DataCuratorError):
    """
    Errors related to split configuration.

    Raised when a split or k-fold configuration is invalid. Runtime
    rejections such as an empty root pool are reported in the result.
    """
    pass


class InvalidSplitPercentError(SplitError):
    """Split percentages are negative."""

    def __init__(self, train: float, val: float, test: float) -> None:
        super().__init__(
            f"Invalid split percentages: train={train}, val={val}, test={test}",
            suggestion="Percentages must be zero or positive; the test bucket absorbs any remainder.",
            details={"train": train, "val": val, "test": test},
        )


class InvalidFoldCountError(SplitError):
    """K-fold requested with fewer than two folds."""

    def __init__(self, folds: int) -> None:
        super().__init__(
            f"Invalid fold count: {folds}",
            suggestion="Use at least 2 folds.",
            details={"folds": folds},
        )


class HistoryError(DataCuratorError):
    """
    Errors related to the undo history.

    Raised by direct stack access; the undo entry point reports an
    empty history as a failed result instead.
    """
    pass


class EmptyUndoStackError(HistoryError):
    """There is no recorded operation to undo."""

    def __init__(self) -> None:
        super().__init__(
            "There are no split operations to undo.",
            suggestion="Run a split or k-fold operation first.",
        )


class ConfigurationError(DataCuratorError):
    """
    Errors related to configuration.

    Raised during:
    - Config file parsing
    - Invalid settings
    """
    pass


class ConfigFileError(ConfigurationError):
    """Failed to parse a configuration file."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to parse config file: {path}",
            suggestion="Ensure the file is valid YAML.",
            details={"path": path, "reason": reason},
        )


class SerializationError(DataCuratorError):
    """A dict representation could not be converted back into a model object."""

    def __init__(self, what: str, reason: str) -> None:
        super().__init__(
            f"Cannot deserialize {what}: {reason}",
            suggestion="Check that the data was produced by to_dict() of a compatible version.",
            details={"what": what, "reason": reason},
        )

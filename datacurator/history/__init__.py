"""
Undo history for partitioning operations.

Records sample membership before a split so the split can be reversed.
"""

from datacurator.history.tracker import (
    ROOT_LOCATION,
    MoveRecord,
    UndoStack,
    UndoResult,
    snapshot,
    undo,
)

__all__ = [
    "ROOT_LOCATION",
    "MoveRecord",
    "UndoStack",
    "UndoResult",
    "snapshot",
    "undo",
]

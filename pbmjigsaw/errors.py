"""Error taxonomy shared by the generator and the validator."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class JigsawError(Exception):
    """Base class for every fatal jigsaw fault."""

    exit_code = 1


class InvalidArgumentsError(JigsawError, ValueError):
    """Raised when puzzle dimensions are malformed or out of range."""


class AllocationFailureError(JigsawError, MemoryError):
    """Raised when the grid, the piece list or the preview image cannot be allocated."""


class IOFailureError(JigsawError):
    """Raised when an input or output file cannot be opened, read or written."""

    def __init__(self, message: str, *, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class MalformedInputError(JigsawError, ValueError):
    """Raised when a bitmap or solution record does not have the expected shape."""

    def __init__(self, message: str, *, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ValidationFailure(JigsawError):
    """A semantic failure of a proposed solution, reported as an invalid verdict."""

    kind = "invalid"


class CollisionError(ValidationFailure):
    """Two pieces claimed the same grid cell."""

    kind = "collision"

    def __init__(self, existing: int, piece: int, row: int, col: int) -> None:
        super().__init__(f"invalid -- Collision between pieces {existing} and {piece}")
        self.existing = existing
        self.piece = piece
        self.row = row
        self.col = col


class IncompleteError(ValidationFailure):
    """A grid cell was left unclaimed after every piece was placed."""

    kind = "incomplete"

    def __init__(self, row: int, col: int) -> None:
        super().__init__(f"invalid -- missing bit at grid location j={row} i={col}")
        self.row = row
        self.col = col


__all__ = [
    "JigsawError",
    "InvalidArgumentsError",
    "AllocationFailureError",
    "IOFailureError",
    "MalformedInputError",
    "ValidationFailure",
    "CollisionError",
    "IncompleteError",
]

"""Rotation-aware mapping between piece bitmaps and grid cells.

Bit ``(jk, ik)`` of a piece bitmap (row, column) written under a rotation
corresponds to the grid cell ``origin + offset`` where the offset is:

========  ==================  ==================
rotation  row offset          column offset
========  ==================  ==================
0         ``jk``              ``ik``
90        ``edge - 1 - ik``   ``jk``
180       ``edge - 1 - jk``   ``edge - 1 - ik``
270       ``ik``              ``edge - 1 - jk``
========  ==================  ==================

Encoding and decoding both read this one table, so decoding a bitmap under
the rotation it was encoded with lands every bit on the cell it came from.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, Tuple

import numpy as np

from .errors import MalformedInputError
from .grid import Grid


class Rotation(IntEnum):
    """Clockwise rotation of a piece bitmap, in degrees."""

    R0 = 0
    R90 = 90
    R180 = 180
    R270 = 270

    @classmethod
    def from_degrees(cls, degrees: int) -> "Rotation":
        try:
            return cls(int(degrees))
        except ValueError as exc:
            raise ValueError(f"Rotation must be one of 0, 90, 180, 270; got {degrees!r}") from exc

    @classmethod
    def from_quarter_turns(cls, turns: int) -> "Rotation":
        return cls((turns % 4) * 90)

    @property
    def quarter_turns(self) -> int:
        return self.value // 90


_OFFSETS: Dict[Rotation, Callable] = {
    Rotation.R0: lambda jk, ik, last: (jk, ik),
    Rotation.R90: lambda jk, ik, last: (last - ik, jk),
    Rotation.R180: lambda jk, ik, last: (last - jk, last - ik),
    Rotation.R270: lambda jk, ik, last: (ik, last - jk),
}


def local_offset(rotation: Rotation, jk: int, ik: int, edge: int) -> Tuple[int, int]:
    """Offset ``(row, col)`` inside the piece's bounding box for bitmap bit ``(jk, ik)``."""

    return _OFFSETS[Rotation(rotation)](jk, ik, edge - 1)


def offset_table(rotation: Rotation, edge: int) -> Tuple[np.ndarray, np.ndarray]:
    """Row and column offsets for every bitmap bit, each shaped ``(edge, edge)``."""

    jk, ik = np.indices((edge, edge))
    return _OFFSETS[Rotation(rotation)](jk, ik, edge - 1)


def encode_piece(grid: Grid, piece: int, rotation: Rotation) -> np.ndarray:
    """Render a piece as an ``edge x edge`` boolean bitmap under ``rotation``."""

    dims = grid.dimensions
    top, left = dims.piece_origin(piece)
    rows, cols = offset_table(rotation, dims.edge)
    return grid.owned_at(piece, top + rows, left + cols)


def decode_piece(grid: Grid, piece: int, rotation: Rotation, bitmap: np.ndarray) -> int:
    """Claim the grid cells of every set bit of ``bitmap`` for ``piece``.

    Bits are claimed in row-major bitmap order, so the first overlap raises
    :class:`~pbmjigsaw.errors.CollisionError`. Returns the number of claimed
    cells.
    """

    dims = grid.dimensions
    bitmap = np.asarray(bitmap, dtype=bool)
    if bitmap.shape != (dims.edge, dims.edge):
        raise MalformedInputError(
            f"Bitmap for piece {piece} has shape {bitmap.shape}, expected ({dims.edge}, {dims.edge})"
        )
    top, left = dims.piece_origin(piece)
    claimed = 0
    for jk, ik in np.argwhere(bitmap):
        row, col = local_offset(rotation, int(jk), int(ik), dims.edge)
        grid.claim(top + row, left + col, piece)
        claimed += 1
    return claimed


__all__ = [
    "Rotation",
    "local_offset",
    "offset_table",
    "encode_piece",
    "decode_piece",
]

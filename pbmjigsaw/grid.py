"""Shared-border grid model for interlocking jigsaw pieces.

A puzzle of ``width x height`` pieces, each sampled with ``edge`` bits per
side, lives on one grid of ``gw x gh`` cells where::

    gw = width  * (edge - 1) + 1
    gh = height * (edge - 1) + 1

Neighbouring pieces share one row or column of cells (a seam) and four pieces
share the cell where two seams cross. A cell is either unset (``None``) or
owned by the canonical index ``row * width + col`` of one piece.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .errors import AllocationFailureError, CollisionError, InvalidArgumentsError

logger = logging.getLogger(__name__)

MIN_PIECES = 2
MAX_WIDTH = 500
MAX_HEIGHT = 500
MIN_EDGE = 2
MAX_EDGE = 8

Cell = Tuple[int, int]


@dataclass(frozen=True)
class PuzzleDimensions:
    """Puzzle size in pieces plus the edge resolution of every piece."""

    width: int
    height: int
    edge: int

    def __post_init__(self) -> None:
        for name in ("width", "height", "edge"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentsError(f"{name} must be an integer, got {value!r}")
        if not MIN_PIECES <= self.width <= MAX_WIDTH:
            raise InvalidArgumentsError(f"width must be within [{MIN_PIECES}, {MAX_WIDTH}], got {self.width}")
        if not MIN_PIECES <= self.height <= MAX_HEIGHT:
            raise InvalidArgumentsError(f"height must be within [{MIN_PIECES}, {MAX_HEIGHT}], got {self.height}")
        if not MIN_EDGE <= self.edge <= MAX_EDGE:
            raise InvalidArgumentsError(f"edge must be within [{MIN_EDGE}, {MAX_EDGE}], got {self.edge}")

    @property
    def step(self) -> int:
        """Distance between two parallel seams."""

        return self.edge - 1

    @property
    def grid_width(self) -> int:
        return self.width * self.step + 1

    @property
    def grid_height(self) -> int:
        return self.height * self.step + 1

    @property
    def piece_count(self) -> int:
        return self.width * self.height

    def piece_index(self, row: int, col: int) -> int:
        return row * self.width + col

    def piece_position(self, piece: int) -> Tuple[int, int]:
        """Return the ``(row, col)`` of a piece in the puzzle layout."""

        if not 0 <= piece < self.piece_count:
            raise IndexError(f"Piece {piece} is outside [0, {self.piece_count})")
        return divmod(piece, self.width)

    def piece_origin(self, piece: int) -> Cell:
        """Return the grid ``(row, col)`` of the top-left cell of a piece's bounding box."""

        row, col = self.piece_position(piece)
        return row * self.step, col * self.step

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height, "edge": self.edge}


class Grid:
    """Cell-to-piece ownership for one puzzle, owned by a single run."""

    def __init__(self, dimensions: PuzzleDimensions) -> None:
        self.dimensions = dimensions
        shape = (dimensions.grid_height, dimensions.grid_width)
        try:
            self._owner = np.zeros(shape, dtype=np.int32)
            self._assigned = np.zeros(shape, dtype=bool)
        except MemoryError as exc:
            raise AllocationFailureError(f"Unable to allocate a {shape[1]}x{shape[0]} grid") from exc

    @property
    def shape(self) -> Tuple[int, int]:
        """``(rows, cols)`` of the grid."""

        return self._owner.shape

    def __getitem__(self, cell: Cell) -> Optional[int]:
        row, col = cell
        if not self._assigned[row, col]:
            return None
        return int(self._owner[row, col])

    def is_set(self, row: int, col: int) -> bool:
        return bool(self._assigned[row, col])

    def claim(self, row: int, col: int, piece: int) -> None:
        """Give an unset cell to ``piece``; a second claim is a collision."""

        if self._assigned[row, col]:
            raise CollisionError(int(self._owner[row, col]), piece, row, col)
        self._owner[row, col] = piece
        self._assigned[row, col] = True

    def claim_block(self, top: int, left: int, bottom: int, right: int, piece: int) -> None:
        """Claim every cell of the inclusive rectangle ``[top..bottom] x [left..right]``."""

        if bottom < top or right < left:
            return
        block = self._assigned[top : bottom + 1, left : right + 1]
        if block.any():
            r, c = (int(v) for v in np.argwhere(block)[0])
            raise CollisionError(int(self._owner[top + r, left + c]), piece, top + r, left + c)
        self._owner[top : bottom + 1, left : right + 1] = piece
        block[...] = True

    def piece_mask(self, piece: int) -> np.ndarray:
        """Boolean array marking the cells owned by ``piece``."""

        return self._assigned & (self._owner == piece)

    def owned_at(self, piece: int, rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
        """Like :meth:`piece_mask`, restricted to the cells named by ``rows`` and ``cols``."""

        return self._assigned[rows, cols] & (self._owner[rows, cols] == piece)

    def cells_of(self, piece: int) -> List[Cell]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.piece_mask(piece))]

    def unset_cells(self) -> Iterator[Cell]:
        """Yield unset cells in row-major order."""

        for r, c in np.argwhere(~self._assigned):
            yield int(r), int(c)

    def first_unset(self) -> Optional[Cell]:
        return next(self.unset_cells(), None)

    def is_complete(self) -> bool:
        return bool(self._assigned.all())

    def touching_pieces(self, row: int, col: int) -> List[int]:
        """Pieces whose ``edge x edge`` bounding box contains the cell."""

        dims = self.dimensions
        rows = _bands(row, dims.step, dims.height)
        cols = _bands(col, dims.step, dims.width)
        return [dims.piece_index(r, c) for r in rows for c in cols]

    def snapshot(self) -> List[List[Optional[int]]]:
        return [[self[(r, c)] for c in range(self.shape[1])] for r in range(self.shape[0])]

    def format(self) -> str:
        """Text dump of the grid with ``?`` for unset cells."""

        lines = []
        for r in range(self.shape[0]):
            cells = []
            for c in range(self.shape[1]):
                value = self[(r, c)]
                cells.append(" ?" if value is None else f"{value:2d}")
            lines.append(" ".join(cells))
        return "\n".join(lines)


def _bands(offset: int, step: int, count: int) -> List[int]:
    band = offset // step
    if offset % step == 0:
        candidates = [band - 1, band]
    else:
        candidates = [band]
    return [b for b in candidates if 0 <= b < count]


def build_initial_grid(dimensions: PuzzleDimensions) -> Grid:
    """Create a grid with every uncontested cell set to its single owner.

    Seam rows and columns between neighbouring pieces, and the cells where
    seams cross, are left unset for the interlock resolver. The outer border
    of the puzzle is set here wherever a single piece touches it.
    """

    grid = Grid(dimensions)
    step = dimensions.step
    for row in range(dimensions.height):
        top = row * step + (1 if row > 0 else 0)
        bottom = (row + 1) * step - (1 if row < dimensions.height - 1 else 0)
        for col in range(dimensions.width):
            left = col * step + (1 if col > 0 else 0)
            right = (col + 1) * step - (1 if col < dimensions.width - 1 else 0)
            grid.claim_block(top, left, bottom, right, dimensions.piece_index(row, col))
    logger.debug(
        "Initialized %dx%d grid for %dx%d pieces (edge %d)",
        dimensions.grid_width,
        dimensions.grid_height,
        dimensions.width,
        dimensions.height,
        dimensions.edge,
    )
    return grid


__all__ = [
    "Cell",
    "Grid",
    "PuzzleDimensions",
    "build_initial_grid",
    "MAX_WIDTH",
    "MAX_HEIGHT",
    "MAX_EDGE",
    "MIN_EDGE",
    "MIN_PIECES",
]

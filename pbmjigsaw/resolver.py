"""Random resolution of the contested seam and intersection cells."""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .grid import Cell, Grid

logger = logging.getLogger(__name__)


def seam_cells(grid: Grid) -> List[Cell]:
    """Contested cells lying on exactly one seam (two candidate pieces)."""

    return [cell for cell in grid.unset_cells() if len(grid.touching_pieces(*cell)) == 2]


def intersection_cells(grid: Grid) -> List[Cell]:
    """Contested cells where four pieces meet."""

    return [cell for cell in grid.unset_cells() if len(grid.touching_pieces(*cell)) == 4]


def resolve_interlocks(grid: Grid, rng: Optional[random.Random] = None) -> Grid:
    """Assign every unset cell of an initialized grid to one adjacent piece.

    The edge pass gives each seam cell to one of its two pieces with a single
    random bit. The intersection pass then copies the owner of one of the four
    already resolved neighbours (left, right, below, above).
    """

    rng = rng or random.Random()
    seams = seam_cells(grid)
    intersections = intersection_cells(grid)

    for row, col in seams:
        first, second = grid.touching_pieces(row, col)
        grid.claim(row, col, first if rng.getrandbits(1) == 0 else second)

    for row, col in intersections:
        grid.claim(row, col, _pick_intersection_owner(grid, row, col, rng))

    logger.debug("Resolved %d seam cells and %d intersections", len(seams), len(intersections))
    if not grid.is_complete():
        # Only reachable for a grid that was not built by build_initial_grid.
        raise RuntimeError(f"Grid cell {grid.first_unset()} left unresolved")
    return grid


def _pick_intersection_owner(grid: Grid, row: int, col: int, rng: random.Random) -> int:
    meeting = grid.touching_pieces(row, col)
    candidates = []
    for dr, dc in ((0, -1), (0, 1), (1, 0), (-1, 0)):
        owner = grid[(row + dr, col + dc)]
        # With edge 2 a neighbour can be another intersection.
        if owner is not None and owner in meeting:
            candidates.append(owner)
    if not candidates:
        candidates = meeting
    return candidates[rng.randrange(len(candidates))]


__all__ = ["resolve_interlocks", "seam_cells", "intersection_cells"]

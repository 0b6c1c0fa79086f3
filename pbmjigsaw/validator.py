"""Jigsaw validator replaying a solution record onto an empty grid."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .base import AbstractPuzzleEvaluator, PathLike
from .codec import decode_piece
from .errors import (
    CollisionError,
    IncompleteError,
    InvalidArgumentsError,
    JigsawError,
    MalformedInputError,
    ValidationFailure,
)
from .grid import Grid, PuzzleDimensions
from .pbm import read_pbm
from .solution import SOLUTION_FILENAME, SolutionEntry, read_solution

logger = logging.getLogger(__name__)

VALID_MESSAGE = "valid"


@dataclass
class PiecePlacement:
    position: int
    filename: str
    rotation: int
    claimed_cells: int

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "filename": self.filename,
            "rotation": self.rotation,
            "claimed_cells": self.claimed_cells,
        }


@dataclass
class JigsawValidationResult:
    valid: bool
    message: str
    fault: Optional[str] = None
    colliding_pieces: Optional[Tuple[int, int]] = None
    location: Optional[Tuple[int, int]] = None
    placements: List[PiecePlacement] = field(default_factory=list)
    puzzle_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "puzzle_id": self.puzzle_id,
            "valid": self.valid,
            "message": self.message,
            "fault": self.fault,
            "colliding_pieces": list(self.colliding_pieces) if self.colliding_pieces else None,
            "location": list(self.location) if self.location else None,
            "placements": [placement.to_dict() for placement in self.placements],
        }


class JigsawValidator:
    """Check that a solution places every piece without gaps or overlaps.

    Pieces are placed in solution order onto a grid whose cells all start
    unset. The first collision ends the replay; afterwards the first unset
    cell, if any, makes the solution incomplete.
    """

    def __init__(self, dimensions: PuzzleDimensions) -> None:
        self.dimensions = dimensions

    def validate(
        self,
        solution_path: PathLike = SOLUTION_FILENAME,
        *,
        piece_dir: Optional[PathLike] = None,
    ) -> JigsawValidationResult:
        solution = Path(solution_path)
        entries = read_solution(solution)
        directory = Path(piece_dir) if piece_dir is not None else solution.parent
        return self.validate_entries(entries, directory)

    def validate_entries(self, entries: Sequence[SolutionEntry], piece_dir: PathLike) -> JigsawValidationResult:
        dims = self.dimensions
        if len(entries) > dims.piece_count:
            raise MalformedInputError(
                f"Solution lists {len(entries)} pieces but the puzzle has {dims.piece_count}"
            )
        directory = Path(piece_dir)
        grid = Grid(dims)
        placements: List[PiecePlacement] = []
        try:
            for position, entry in enumerate(entries):
                bitmap = read_pbm(directory / entry.filename, dims.edge)
                claimed = decode_piece(grid, position, entry.rotation, bitmap)
                placements.append(
                    PiecePlacement(
                        position=position,
                        filename=entry.filename,
                        rotation=int(entry.rotation),
                        claimed_cells=claimed,
                    )
                )
                logger.debug("Placed %s at position %d (%d cells)", entry.filename, position, claimed)
            missing = grid.first_unset()
            if missing is not None:
                raise IncompleteError(*missing)
        except ValidationFailure as exc:
            logger.info("Solution rejected: %s", exc)
            return self._invalid(exc, placements)
        logger.info("Solution valid: %d pieces placed", len(placements))
        return JigsawValidationResult(valid=True, message=VALID_MESSAGE, placements=placements)

    @staticmethod
    def _invalid(failure: ValidationFailure, placements: List[PiecePlacement]) -> JigsawValidationResult:
        result = JigsawValidationResult(
            valid=False,
            message=str(failure),
            fault=failure.kind,
            placements=placements,
        )
        if isinstance(failure, CollisionError):
            result.colliding_pieces = (failure.existing, failure.piece)
            result.location = (failure.row, failure.col)
        elif isinstance(failure, IncompleteError):
            result.location = (failure.row, failure.col)
        return result


class JigsawEvaluator(AbstractPuzzleEvaluator):
    """Validate stored or candidate solutions for puzzles listed in a metadata file."""

    def evaluate(
        self,
        puzzle_id: str,
        solution_path: Optional[PathLike] = None,
        *,
        piece_dir: Optional[PathLike] = None,
    ) -> JigsawValidationResult:
        record = self.get_record(puzzle_id)
        try:
            dimensions = PuzzleDimensions(int(record["width"]), int(record["height"]), int(record["edge"]))
            stored_solution = record["solution_path"]
            stored_pieces = record["piece_dir"]
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedInputError(f"Puzzle record '{puzzle_id}' is incomplete: {exc}", path=self.metadata_path) from exc

        solution = Path(solution_path) if solution_path is not None else self.resolve_path(stored_solution)
        pieces = Path(piece_dir) if piece_dir is not None else self.resolve_path(stored_pieces)
        result = JigsawValidator(dimensions).validate(solution, piece_dir=pieces)
        result.puzzle_id = puzzle_id
        return result


__all__ = ["JigsawValidator", "JigsawEvaluator", "JigsawValidationResult", "PiecePlacement"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate a jigsaw solution against its PBM pieces")
    parser.add_argument("width", type=int, help="Puzzle width in pieces (2-500)")
    parser.add_argument("height", type=int, help="Puzzle height in pieces (2-500)")
    parser.add_argument("edge", type=int, help="Bits per piece edge (2-8)")
    parser.add_argument("--solution", type=Path, default=Path(SOLUTION_FILENAME), help="Solution record to check")
    parser.add_argument(
        "--piece-dir",
        type=Path,
        default=None,
        help="Directory holding the .pbm pieces (defaults to the solution's directory)",
    )
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every placed piece")
    return parser


def _parse_args(argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, PuzzleDimensions]:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        dimensions = PuzzleDimensions(args.width, args.height, args.edge)
    except InvalidArgumentsError as exc:
        parser.error(str(exc))
    return args, dimensions


def main(argv: Optional[List[str]] = None) -> None:
    args, dimensions = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        result = JigsawValidator(dimensions).validate(args.solution, piece_dir=args.piece_dir)
    except JigsawError as exc:
        print(exc)
        raise SystemExit(exc.exit_code) from exc

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(result.message)
    raise SystemExit(0 if result.valid else 1)


if __name__ == "__main__":
    main()

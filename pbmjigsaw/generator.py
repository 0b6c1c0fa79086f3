"""Jigsaw generator writing one plain PBM bitmap per interlocking piece."""

from __future__ import annotations

import argparse
import logging
import random
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .base import METADATA_FILENAME, AbstractPuzzleGenerator, PathLike
from .codec import Rotation, encode_piece
from .errors import AllocationFailureError, InvalidArgumentsError, IOFailureError, JigsawError
from .grid import Grid, PuzzleDimensions, build_initial_grid
from .pbm import piece_filename, write_pbm
from .render import MAX_PREVIEW_SIDE, fit_cell_size, render_png, render_svg
from .resolver import resolve_interlocks
from .solution import SOLUTION_FILENAME, SolutionEntry, write_solution

logger = logging.getLogger(__name__)

OUTLINE_FILENAME = "solution.svg"
PREVIEW_FILENAME = "solution.png"


@dataclass
class PieceRecord:
    position: int
    identifier: int
    filename: str
    rotation: int

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "identifier": self.identifier,
            "filename": self.filename,
            "rotation": self.rotation,
        }


@dataclass
class JigsawPuzzleRecord:
    id: str
    width: int
    height: int
    edge: int
    grid_size: Tuple[int, int]
    pieces: List[PieceRecord]
    piece_dir: str
    solution_path: str
    outline_svg_path: Optional[str]
    preview_image_path: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "width": self.width,
            "height": self.height,
            "edge": self.edge,
            "grid_size": list(self.grid_size),
            "pieces": [piece.to_dict() for piece in self.pieces],
            "piece_dir": self.piece_dir,
            "solution_path": self.solution_path,
            "outline_svg_path": self.outline_svg_path,
            "preview_image_path": self.preview_image_path,
        }


class JigsawGenerator(AbstractPuzzleGenerator[JigsawPuzzleRecord]):
    """Generate interlocking jigsaw puzzles as shuffled, rotated PBM pieces."""

    def __init__(
        self,
        output_dir: PathLike = ".",
        *,
        width: int = 10,
        height: int = 8,
        edge: int = 7,
        cell_size: int = 16,
        outline_svg: bool = True,
        preview_png: bool = True,
        preview_max_side: int = MAX_PREVIEW_SIDE,
        seed: Optional[int] = None,
    ) -> None:
        self.dimensions = PuzzleDimensions(width, height, edge)
        super().__init__(output_dir)
        self.cell_size = cell_size
        self.outline_svg = outline_svg
        self.preview_png = preview_png
        self.preview_max_side = preview_max_side
        self._rng = random.Random(seed)

    def build_grid(self) -> Grid:
        """Initialize the grid and randomly resolve every contested cell."""

        grid = build_initial_grid(self.dimensions)
        resolve_interlocks(grid, self._rng)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Resolved grid:\n%s", grid.format())
        return grid

    def assign_outputs(self) -> Tuple[List[int], List[Rotation]]:
        """Draw the file identifier permutation and one rotation per piece."""

        count = self.dimensions.piece_count
        identifiers = list(range(count))
        self._rng.shuffle(identifiers)
        rotations = [Rotation.from_quarter_turns(self._rng.randrange(4)) for _ in range(count)]
        return identifiers, rotations

    def create_puzzle(
        self,
        *,
        puzzle_id: Optional[str] = None,
        directory: Optional[PathLike] = None,
        grid: Optional[Grid] = None,
    ) -> JigsawPuzzleRecord:
        puzzle_uuid = puzzle_id or str(uuid.uuid4())
        piece_dir = Path(directory) if directory is not None else self.output_dir / puzzle_uuid
        try:
            piece_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailureError(f"Unable to create {piece_dir}: {exc}", path=piece_dir) from exc

        if grid is None:
            grid = self.build_grid()
        elif grid.dimensions != self.dimensions:
            raise InvalidArgumentsError(f"Grid is for {grid.dimensions}, generator expects {self.dimensions}")
        elif not grid.is_complete():
            raise InvalidArgumentsError(f"Grid cell {grid.first_unset()} is unresolved")

        identifiers, rotations = self.assign_outputs()
        pieces: List[PieceRecord] = []
        entries: List[SolutionEntry] = []
        for position, (identifier, rotation) in enumerate(zip(identifiers, rotations)):
            filename = piece_filename(identifier)
            write_pbm(piece_dir / filename, encode_piece(grid, position, rotation))
            entries.append(SolutionEntry(filename=filename, rotation=rotation))
            pieces.append(
                PieceRecord(position=position, identifier=identifier, filename=filename, rotation=int(rotation))
            )
            logger.debug("Piece %d -> %s rotated %d", position, filename, int(rotation))
        solution_path = write_solution(piece_dir / SOLUTION_FILENAME, entries)

        outline_path = None
        if self.outline_svg:
            outline_path = piece_dir / OUTLINE_FILENAME
            try:
                outline_path.write_text(render_svg(grid), encoding="utf-8")
            except OSError as exc:
                raise IOFailureError(f"Unable to write {outline_path}: {exc}", path=outline_path) from exc

        preview_path = None
        if self.preview_png:
            preview_path = piece_dir / PREVIEW_FILENAME
            cell_size = fit_cell_size(grid.shape, self.cell_size, self.preview_max_side)
            if cell_size < self.cell_size:
                logger.info("Preview cell size reduced from %d to %d pixels", self.cell_size, cell_size)
            try:
                render_png(grid, cell_size=cell_size).save(preview_path)
            except MemoryError as exc:
                raise AllocationFailureError(f"Unable to allocate the preview for {preview_path}") from exc
            except OSError as exc:
                raise IOFailureError(f"Unable to write {preview_path}: {exc}", path=preview_path) from exc

        logger.info(
            "Puzzle %s: %d pieces of edge %d written to %s",
            puzzle_uuid,
            len(pieces),
            self.dimensions.edge,
            piece_dir,
        )
        return JigsawPuzzleRecord(
            id=puzzle_uuid,
            width=self.dimensions.width,
            height=self.dimensions.height,
            edge=self.dimensions.edge,
            grid_size=(self.dimensions.grid_width, self.dimensions.grid_height),
            pieces=pieces,
            piece_dir=self.relativize_path(piece_dir),
            solution_path=self.relativize_path(solution_path),
            outline_svg_path=self.relativize_path(outline_path) if outline_path else None,
            preview_image_path=self.relativize_path(preview_path) if preview_path else None,
        )

    def create_random_puzzle(self) -> JigsawPuzzleRecord:
        return self.create_puzzle()


__all__ = ["JigsawGenerator", "JigsawPuzzleRecord", "PieceRecord"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate interlocking jigsaw puzzles as PBM pieces")
    parser.add_argument("width", type=int, help="Puzzle width in pieces (2-500)")
    parser.add_argument("height", type=int, help="Puzzle height in pieces (2-500)")
    parser.add_argument("edge", type=int, help="Bits per piece edge (2-8)")
    parser.add_argument("--output-dir", type=Path, default=Path("."), help="Where to save pieces and solution")
    parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of puzzles; more than one puts each puzzle in its own subdirectory",
    )
    parser.add_argument("--cell-size", type=int, default=16, help="Pixels per grid cell in the PNG preview")
    parser.add_argument("--no-svg", action="store_true", help="Skip the SVG outline")
    parser.add_argument("--no-png", action="store_true", help="Skip the PNG preview")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress and dump the resolved grid")
    return parser


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        PuzzleDimensions(args.width, args.height, args.edge)
    except InvalidArgumentsError as exc:
        parser.error(str(exc))
    if args.count < 1:
        parser.error("count must be at least 1")
    if args.cell_size < 2:
        parser.error("cell-size must be at least 2")
    return args


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        generator = JigsawGenerator(
            output_dir=args.output_dir,
            width=args.width,
            height=args.height,
            edge=args.edge,
            cell_size=args.cell_size,
            outline_svg=not args.no_svg,
            preview_png=not args.no_png,
            seed=args.seed,
        )
        metadata_path = generator.output_dir / METADATA_FILENAME
        if args.count == 1:
            record = generator.create_puzzle(directory=generator.output_dir)
            generator.write_metadata([record], metadata_path, append=False)
        else:
            generator.generate_dataset(args.count, metadata_path=metadata_path)
    except JigsawError as exc:
        print(exc)
        raise SystemExit(exc.exit_code) from exc


if __name__ == "__main__":
    main()

"""Interlocking jigsaw generation and validation with plain PBM pieces."""

__all__ = [
    "AbstractPuzzleGenerator",
    "AbstractPuzzleEvaluator",
    "PuzzleDimensions",
    "Grid",
    "build_initial_grid",
    "resolve_interlocks",
    "Rotation",
    "encode_piece",
    "decode_piece",
    "JigsawGenerator",
    "JigsawPuzzleRecord",
    "PieceRecord",
    "JigsawValidator",
    "JigsawEvaluator",
    "JigsawValidationResult",
    "PiecePlacement",
    "SolutionEntry",
    "JigsawError",
    "InvalidArgumentsError",
    "AllocationFailureError",
    "IOFailureError",
    "MalformedInputError",
    "ValidationFailure",
    "CollisionError",
    "IncompleteError",
]

from .base import AbstractPuzzleGenerator, AbstractPuzzleEvaluator
from .codec import Rotation, decode_piece, encode_piece
from .errors import (
    AllocationFailureError,
    CollisionError,
    IncompleteError,
    InvalidArgumentsError,
    IOFailureError,
    JigsawError,
    MalformedInputError,
    ValidationFailure,
)
from .generator import JigsawGenerator, JigsawPuzzleRecord, PieceRecord
from .grid import Grid, PuzzleDimensions, build_initial_grid
from .resolver import resolve_interlocks
from .solution import SolutionEntry
from .validator import JigsawEvaluator, JigsawValidationResult, JigsawValidator, PiecePlacement

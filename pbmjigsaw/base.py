"""Generator and evaluator scaffolding shared through a ``puzzles.json`` index."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar, Union

from .errors import IOFailureError, MalformedInputError

PathLike = Union[str, Path]
RecordT = TypeVar("RecordT")

METADATA_FILENAME = "puzzles.json"

logger = logging.getLogger(__name__)


def _load_record_list(path: Path) -> List[Dict[str, Any]]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise IOFailureError(f"Unable to read {path}: {exc}", path=path) from exc
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"{path} is not valid JSON: {exc}", path=path) from exc
    if not isinstance(raw, list):
        raise MalformedInputError(f"{path} does not hold a list of puzzle records", path=path)
    return raw


class AbstractPuzzleGenerator(ABC, Generic[RecordT]):
    """Writes puzzle files under ``output_dir`` and returns one record per puzzle.

    Records must provide ``to_dict()``; that is what lands in the metadata file.
    """

    def __init__(self, output_dir: PathLike) -> None:
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailureError(f"Unable to create {self.output_dir}: {exc}", path=self.output_dir) from exc

    @abstractmethod
    def create_puzzle(self, *args, **kwargs) -> RecordT:
        """Create a puzzle and write its files."""

    @abstractmethod
    def create_random_puzzle(self) -> RecordT:
        """Create a single randomized puzzle instance."""

    def generate_dataset(
        self,
        count: int,
        *,
        metadata_path: Optional[PathLike] = None,
        append: bool = True,
    ) -> List[RecordT]:
        records = [self.create_random_puzzle() for _ in range(count)]
        if metadata_path is not None:
            self.write_metadata(records, metadata_path, append=append)
        return records

    def write_metadata(
        self,
        records: Iterable[RecordT],
        metadata_path: PathLike,
        *,
        append: bool = True,
    ) -> None:
        """Store records as a JSON list, after any list already in the file when ``append``."""

        path = Path(metadata_path)
        payload = [record.to_dict() for record in records]
        existing = _load_record_list(path) if append and path.exists() else []
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(existing + payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise IOFailureError(f"Unable to update {path}: {exc}", path=path) from exc
        logger.info("Wrote %d puzzle record(s) to %s", len(payload), path)

    def relativize_path(self, path: Path) -> str:
        """Path relative to ``output_dir`` when it lies inside it, else unchanged."""

        try:
            return path.relative_to(self.output_dir).as_posix()
        except ValueError:
            return path.as_posix()


class AbstractPuzzleEvaluator(ABC):
    """Looks puzzles up by id in a metadata file written by a generator."""

    def __init__(self, metadata_path: PathLike, *, base_dir: Optional[PathLike] = None) -> None:
        self.metadata_path = Path(metadata_path)
        if not self.metadata_path.exists():
            raise IOFailureError(f"Metadata file not found: {self.metadata_path}", path=self.metadata_path)
        self.base_dir = Path(base_dir) if base_dir is not None else self.metadata_path.parent
        self._records: Dict[str, Dict[str, Any]] = {}
        for record in _load_record_list(self.metadata_path):
            puzzle_id = record.get("id") if isinstance(record, dict) else None
            if not puzzle_id:
                raise MalformedInputError("Each puzzle record must include an 'id'", path=self.metadata_path)
            self._records[str(puzzle_id)] = record

    def get_record(self, puzzle_id: str) -> Dict[str, Any]:
        try:
            return self._records[puzzle_id]
        except KeyError as exc:
            raise KeyError(f"Puzzle id '{puzzle_id}' not found in metadata") from exc

    def resolve_path(self, path_value: object) -> Path:
        """Stored paths are relative to ``base_dir``."""

        candidate = Path(str(path_value))
        return candidate if candidate.is_absolute() else self.base_dir / candidate

    @abstractmethod
    def evaluate(self, puzzle_id: str, *args, **kwargs):
        """Evaluate a candidate solution for the given puzzle."""


__all__ = [
    "AbstractPuzzleGenerator",
    "AbstractPuzzleEvaluator",
    "METADATA_FILENAME",
    "PathLike",
]

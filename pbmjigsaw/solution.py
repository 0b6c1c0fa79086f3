"""Reading and writing ``solution.txt`` records."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from .codec import Rotation
from .errors import IOFailureError, MalformedInputError

PathLike = Union[str, Path]

SOLUTION_FILENAME = "solution.txt"


@dataclass(frozen=True)
class SolutionEntry:
    """One placed piece: its bitmap file and the rotation it was written with."""

    filename: str
    rotation: Rotation

    def to_line(self) -> str:
        return f"{self.filename} {int(self.rotation)}"

    def to_dict(self) -> dict:
        return {"filename": self.filename, "rotation": int(self.rotation)}


def write_solution(path: PathLike, entries: Iterable[SolutionEntry]) -> Path:
    target = Path(path)
    body = "".join(entry.to_line() + "\n" for entry in entries)
    try:
        target.write_text(body, encoding="utf-8")
    except OSError as exc:
        raise IOFailureError(f"Unable to write {target}: {exc.strerror or exc}", path=target) from exc
    return target


def parse_solution(text: str, *, source: str = SOLUTION_FILENAME) -> List[SolutionEntry]:
    """Parse ``<file> <degrees>`` lines, ignoring blank lines."""

    entries: List[SolutionEntry] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 2:
            raise MalformedInputError(f"{source}:{lineno}: expected '<file> <degrees>', found {line!r}", path=source)
        filename, degrees = fields
        try:
            rotation = Rotation.from_degrees(int(degrees))
        except ValueError as exc:
            raise MalformedInputError(f"{source}:{lineno}: {exc}", path=source) from exc
        entries.append(SolutionEntry(filename=filename, rotation=rotation))
    return entries


def read_solution(path: PathLike) -> List[SolutionEntry]:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOFailureError(f"Unable to read {source}: {exc.strerror or exc}", path=source) from exc
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"{source.name} is not a text file", path=source) from exc
    return parse_solution(text, source=source.name)


__all__ = [
    "SOLUTION_FILENAME",
    "SolutionEntry",
    "write_solution",
    "parse_solution",
    "read_solution",
]

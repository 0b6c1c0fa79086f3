"""Plain (``P1``) portable bitmap files holding one piece each."""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import numpy as np

from .errors import IOFailureError, MalformedInputError

PathLike = Union[str, Path]

MAGIC = "P1"
PIECE_NAME_FORMAT = "p{:04d}.pbm"


def piece_filename(identifier: int) -> str:
    """File name of the piece with the given output identifier."""

    return PIECE_NAME_FORMAT.format(identifier)


def format_pbm(bitmap: np.ndarray, name: str) -> str:
    rows, cols = bitmap.shape
    lines = [MAGIC, f"# {name}", f"{cols} {rows}"]
    lines.extend("".join("1" if bit else "0" for bit in row) for row in bitmap)
    return "\n".join(lines) + "\n"


def write_pbm(path: PathLike, bitmap: np.ndarray) -> Path:
    """Write ``bitmap`` to ``path`` with the file name as the header comment."""

    target = Path(path)
    try:
        target.write_text(format_pbm(np.asarray(bitmap, dtype=bool), target.name), encoding="ascii")
    except OSError as exc:
        raise IOFailureError(f"Unable to write {target}: {exc.strerror or exc}", path=target) from exc
    return target


def parse_pbm(text: str, edge: int, *, source: str = "<bitmap>") -> np.ndarray:
    """Parse a plain PBM body whose dimensions must be ``edge x edge``."""

    lines: List[str] = [line.rstrip("\r") for line in text.split("\n")]
    if not lines or lines[0].strip() != MAGIC:
        raise MalformedInputError(f"Error processing file {source}: missing {MAGIC} header", path=source)

    index = 1
    while index < len(lines) and lines[index].startswith("#"):
        index += 1
    if index >= len(lines):
        raise MalformedInputError(f"Error processing file {source}: missing dimensions", path=source)

    size = lines[index].split()
    if len(size) != 2 or size != [str(edge), str(edge)]:
        raise MalformedInputError(
            f"Error processing file {source}: expected dimensions {edge} {edge}, found {lines[index]!r}",
            path=source,
        )
    index += 1

    rows = lines[index : index + edge]
    if len(rows) < edge:
        raise MalformedInputError(f"Error processing file {source}: expected {edge} rows", path=source)
    bitmap = np.zeros((edge, edge), dtype=bool)
    for r, row in enumerate(rows):
        if len(row) != edge or any(ch not in "01" for ch in row):
            raise MalformedInputError(
                f"Error processing file {source}: row {r} must hold {edge} '0'/'1' samples, found {row!r}",
                path=source,
            )
        bitmap[r] = [ch == "1" for ch in row]

    trailing = [line for line in lines[index + edge :] if line.strip()]
    if trailing:
        raise MalformedInputError(f"Error processing file {source}: unexpected data after the last row", path=source)
    return bitmap


def read_pbm(path: PathLike, edge: int) -> np.ndarray:
    source = Path(path)
    try:
        raw = source.read_bytes()
    except FileNotFoundError as exc:
        raise MalformedInputError(f"No piece file for {source.name}", path=source) from exc
    except OSError as exc:
        raise IOFailureError(f"Unable to read {source}: {exc.strerror or exc}", path=source) from exc
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"Error processing file {source.name}: non-ASCII data", path=source) from exc
    return parse_pbm(text, edge, source=source.name)


__all__ = [
    "MAGIC",
    "piece_filename",
    "format_pbm",
    "write_pbm",
    "parse_pbm",
    "read_pbm",
]

"""Outline drawings of a resolved puzzle grid."""

from __future__ import annotations

from typing import List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw

from .grid import Grid

MM_PER_CELL = 10
BORDER_MM = 20
# 3501 cells (500 pieces of edge 8) still get two pixels each.
MAX_PREVIEW_SIDE = 8192

LINE_COLOR = (0, 0, 0)
UNSET_COLOR = (255, 255, 255)


def render_svg(grid: Grid) -> str:
    """SVG with the puzzle outline and a cut line wherever the owning piece changes."""

    cells = grid.snapshot()
    rows, cols = grid.shape
    size_w = cols * MM_PER_CELL + 2 * BORDER_MM
    size_h = rows * MM_PER_CELL + 2 * BORDER_MM
    bw = BORDER_MM
    right = bw + cols * MM_PER_CELL
    bottom = bw + rows * MM_PER_CELL

    out: List[str] = [
        f"<svg width='{size_w}mm' height='{size_h}mm'",
        f"viewBox='0 0 {size_w} {size_h}'",
        "stroke-width='1' stroke='rgb(0,0,0)'>",
        "",
        _svg_line(bw, bw, right, bw),
        _svg_line(bw, bottom, right, bottom),
        _svg_line(bw, bw, bw, bottom),
        _svg_line(right, bw, right, bottom),
        "",
    ]

    for r in range(rows):
        for c in range(cols - 1):
            if cells[r][c] != cells[r][c + 1]:
                x = bw + (c + 1) * MM_PER_CELL
                y = bw + r * MM_PER_CELL
                out.append(_svg_line(x, y, x, y + MM_PER_CELL))

    for c in range(cols):
        for r in range(rows - 1):
            if cells[r][c] != cells[r + 1][c]:
                x = bw + c * MM_PER_CELL
                y = bw + (r + 1) * MM_PER_CELL
                out.append(_svg_line(x, y, x + MM_PER_CELL, y))

    out.append("</svg>")
    return "\n".join(out) + "\n"


def _svg_line(x1: int, y1: int, x2: int, y2: int) -> str:
    return f"<line x1='{x1}' y1='{y1}' x2='{x2}' y2='{y2}'/>"


def piece_color(piece: int) -> Tuple[int, int, int]:
    # Golden-angle hue spacing keeps neighbouring indices apart.
    hue = (piece * 137) % 360
    lightness = 55 + (piece % 3) * 10
    return ImageColor.getrgb(f"hsl({hue}, 65%, {lightness}%)")


def fit_cell_size(shape: Tuple[int, int], cell_size: int, max_side: int = MAX_PREVIEW_SIDE) -> int:
    """Largest cell size up to ``cell_size`` keeping the preview within ``max_side`` pixels."""

    return max(2, min(cell_size, max_side // max(shape)))


def render_png(grid: Grid, *, cell_size: int = 16, line_width: Optional[int] = None) -> Image.Image:
    """Raster preview of the solved puzzle with one colour per piece."""

    if cell_size < 2:
        raise ValueError("cell_size must be at least 2")
    cells = grid.snapshot()
    rows, cols = grid.shape
    width = cols * cell_size
    height = rows * cell_size
    thickness = line_width or max(1, cell_size // 8)
    image = Image.new("RGB", (width, height), UNSET_COLOR)
    draw = ImageDraw.Draw(image)

    for r in range(rows):
        for c in range(cols):
            owner = cells[r][c]
            if owner is None:
                continue
            x0 = c * cell_size
            y0 = r * cell_size
            draw.rectangle((x0, y0, x0 + cell_size - 1, y0 + cell_size - 1), fill=piece_color(owner))

    for r in range(rows):
        for c in range(cols):
            x0 = c * cell_size
            y0 = r * cell_size
            if c + 1 < cols and cells[r][c] != cells[r][c + 1]:
                x = x0 + cell_size
                draw.line((x, y0, x, y0 + cell_size), fill=LINE_COLOR, width=thickness)
            if r + 1 < rows and cells[r][c] != cells[r + 1][c]:
                y = y0 + cell_size
                draw.line((x0, y, x0 + cell_size, y), fill=LINE_COLOR, width=thickness)

    draw.rectangle((0, 0, width - 1, height - 1), outline=LINE_COLOR, width=thickness)
    return image


__all__ = [
    "render_svg",
    "render_png",
    "fit_cell_size",
    "piece_color",
    "MM_PER_CELL",
    "BORDER_MM",
    "MAX_PREVIEW_SIDE",
]

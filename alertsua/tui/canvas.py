"""
Braille dot canvas.

Each terminal cell holds a 2×4 grid of braille dots, so a ``cols × rows``
canvas has ``2·cols × 4·rows`` addressable dots.  Lon/lat coordinates are
scaled linearly onto the dot grid (no projection).

Usage
-----
    canvas = BrailleCanvas(60, 20, geo.bounding_rect().padded(0.5))
    canvas.paint_line(geo.boundary().exterior.coords)
    lines = canvas.rows_text()
    col, row = canvas.cell_for(30.52, 50.45)
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..geo.geo_index import BoundingRect

# Unicode braille bit for the dot at (row-in-cell, column-in-cell)
_DOT_BITS = np.array([
    [0x01, 0x08],
    [0x02, 0x10],
    [0x04, 0x20],
    [0x40, 0x80],
], dtype=np.uint16)

_BRAILLE_BASE = 0x2800


class BrailleCanvas:
    def __init__(self, cols: int, rows: int, bounds: BoundingRect):
        self.cols = max(0, cols)
        self.rows = max(0, rows)
        self._bounds = bounds
        self._dots = np.zeros((self.rows * 4, self.cols * 2), dtype=bool)

    @property
    def resolution(self) -> Tuple[int, int]:
        """Dot grid size as (width, height)."""
        return (self.cols * 2, self.rows * 4)

    def _to_dots(self, x: float, y: float) -> Tuple[float, float]:
        w, h = self.resolution
        b = self._bounds
        dx = (x - b.min_x) / b.width * (w - 1) if b.width else 0.0
        dy = (b.max_y - y) / b.height * (h - 1) if b.height else 0.0
        return dx, dy

    def dot_for(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Dot (column, row) for a coordinate, or None outside the canvas."""
        w, h = self.resolution
        if w == 0 or h == 0:
            return None
        b = self._bounds
        if not (b.min_x <= x <= b.max_x and b.min_y <= y <= b.max_y):
            return None
        dx, dy = self._to_dots(x, y)
        return int(round(dx)), int(round(dy))

    def cell_for(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Terminal cell (column, row) holding a coordinate."""
        dot = self.dot_for(x, y)
        if dot is None:
            return None
        return dot[0] // 2, dot[1] // 4

    def paint_line(self, coords: Iterable[Sequence[float]]) -> None:
        """Paint a polyline through the given (x, y) coordinates."""
        w, h = self.resolution
        if w == 0 or h == 0:
            return
        points = [self._to_dots(c[0], c[1]) for c in coords]
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            steps = int(max(abs(x1 - x0), abs(y1 - y0))) + 1
            xs = np.rint(np.linspace(x0, x1, steps + 1)).astype(int)
            ys = np.rint(np.linspace(y0, y1, steps + 1)).astype(int)
            inside = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)
            self._dots[ys[inside], xs[inside]] = True

    def rows_text(self) -> List[str]:
        """One string per terminal row; empty cells are spaces."""
        if self.cols == 0 or self.rows == 0:
            return []
        blocks = self._dots.reshape(self.rows, 4, self.cols, 2).astype(np.uint16)
        codes = np.einsum("rycx,yx->rc", blocks, _DOT_BITS)
        return [
            "".join(chr(_BRAILLE_BASE + int(c)) if c else " " for c in row)
            for row in codes
        ]

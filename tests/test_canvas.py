from __future__ import annotations

from alertsua.geo.geo_index import BoundingRect
from alertsua.tui.canvas import BrailleCanvas

SQUARE = BoundingRect(0.0, 0.0, 3.0, 3.0)


def test_diagonal_runs_corner_to_corner() -> None:
    canvas = BrailleCanvas(2, 1, SQUARE)
    assert canvas.resolution == (4, 4)

    canvas.paint_line([(0.0, 3.0), (3.0, 0.0)])   # top left to bottom right

    assert canvas.rows_text() == ["⠑⢄"]


def test_horizontal_line_fills_top_row() -> None:
    canvas = BrailleCanvas(2, 1, SQUARE)
    canvas.paint_line([(0.0, 3.0), (3.0, 3.0)])
    assert canvas.rows_text() == ["⠉⠉"]


def test_blank_cells_are_spaces() -> None:
    canvas = BrailleCanvas(3, 2, SQUARE)
    assert canvas.rows_text() == ["   ", "   "]


def test_cell_for_and_outside_points() -> None:
    canvas = BrailleCanvas(10, 5, SQUARE)
    assert canvas.cell_for(0.0, 3.0) == (0, 0)
    assert canvas.cell_for(3.0, 0.0) == (9, 4)
    assert canvas.cell_for(-1.0, 1.0) is None

    canvas.paint_line([(5.0, 5.0), (6.0, 6.0)])
    assert all(line.strip() == "" for line in canvas.rows_text())


def test_zero_sized_canvas() -> None:
    canvas = BrailleCanvas(0, 0, SQUARE)
    canvas.paint_line([(0.0, 0.0), (3.0, 3.0)])
    assert canvas.rows_text() == []
    assert canvas.cell_for(1.0, 1.0) is None

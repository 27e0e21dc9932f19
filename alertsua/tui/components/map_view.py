"""
Map view — national outline in braille dots with one marker per region.

The outline is rasterized once per canvas size and cached; markers are
overlaid on every render from the current region statuses.  Markers sit
at the location centroids from the geo index, scaled linearly onto the
canvas.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from ...geo.geo_index import GeoIndex
from ...state.locking import SharedRegionStore
from ...state.region_store import Locale
from ...state.status_codec import AlertStatus
from .. import actions
from ..canvas import BrailleCanvas
from ..layout import Placement, Rect
from .base import Component

log = logging.getLogger(__name__)

OUTLINE_STYLE = "green"
SELECTED_STYLE = "reverse bold"

_MARKER_CHARS = {
    AlertStatus.ACTIVE: "●",
    AlertStatus.PARTIAL: "◐",
    AlertStatus.NONE: "·",
}

_TITLES = {Locale.UK: "Мапа тривог", Locale.EN: "Alert map"}


class MapView(Component):
    placement = Placement.MAP

    def __init__(self, store: SharedRegionStore, geo: GeoIndex, pad: float = 0.3):
        super().__init__()
        self._store = store
        self._geo = geo
        self._bounds = geo.bounding_rect().padded(pad)
        self._outline: Dict[Tuple[int, int], List[str]] = {}

    def update(self, action: actions.Action) -> Optional[actions.Action]:
        if isinstance(action, (actions.Refresh, *actions.SELECTION_ACTIONS)):
            return actions.Render()
        return None

    def canvas(self, cols: int, rows: int) -> BrailleCanvas:
        canvas = BrailleCanvas(cols, rows, self._bounds)
        boundary = self._geo.boundary()
        canvas.paint_line(boundary.exterior.coords)
        for interior in boundary.interiors:
            canvas.paint_line(interior.coords)
        return canvas

    def _outline_rows(self, cols: int, rows: int) -> List[str]:
        key = (cols, rows)
        if key not in self._outline:
            self._outline = {key: self.canvas(cols, rows).rows_text()}
        return self._outline[key]

    def render(self, area: Rect) -> RenderableType:
        cols, rows = area.inner_width, area.inner_height
        grid = [list(line) for line in self._outline_rows(cols, rows)]
        canvas = BrailleCanvas(cols, rows, self._bounds)
        marks: Dict[Tuple[int, int], str] = {}

        with self._store.read() as store:
            regions = store.regions
            selected = store.selected
            locale = store.locale

        label_at: Optional[Tuple[int, int, str]] = None
        for region, location in zip(regions, self._geo.locations):
            cell = canvas.cell_for(*location.lonlat)
            if cell is None:
                continue
            col, row = cell
            grid[row][col] = _MARKER_CHARS[region.status]
            marks[(row, col)] = region.status.style
            if region.ordinal == selected:
                label_at = (row, col, region.name(locale))

        # selected label last so no other marker lands on it
        if label_at is not None:
            row, col, name = label_at
            marks[(row, col)] = SELECTED_STYLE
            label = f" {name}"[: max(0, cols - col - 1)]
            for i, ch in enumerate(label, start=col + 1):
                grid[row][i] = ch
                marks[(row, i)] = SELECTED_STYLE

        lines = [Text("".join(chars), style=OUTLINE_STYLE) for chars in grid]
        for (r, c), style in marks.items():
            lines[r].stylize(style, c, c + 1)

        return Panel(Text("\n").join(lines), title=_TITLES[locale],
                     border_style="blue", padding=0)

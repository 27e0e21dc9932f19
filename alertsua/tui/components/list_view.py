"""Selectable list of the 27 regions with their alert markers."""
from __future__ import annotations

from typing import Optional

from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from ...state.locking import SharedRegionStore
from ...state.region_store import Locale
from .. import actions
from ..layout import Placement, Rect
from ..terminal import Event, EventKind
from .base import Component

SELECTED_STYLE = "reverse"

_TITLES = {Locale.UK: "Області", Locale.EN: "Regions"}

# List-local keys; the global ones (arrows, q, u, ...) are mapped by the controller
_KEY_ACTIONS = {
    "home": actions.SelectTop,
    "g": actions.SelectTop,
    "end": actions.SelectBottom,
    "G": actions.SelectBottom,
    "left": actions.Unselect,
    "backspace": actions.Unselect,
}


class ListView(Component):
    placement = Placement.LIST

    def __init__(self, store: SharedRegionStore):
        super().__init__()
        self._store = store

    def handle_input(self, event: Event) -> Optional[actions.Action]:
        if event.kind is not EventKind.KEY or event.key is None or event.key.ctrl:
            return None
        factory = _KEY_ACTIONS.get(event.key.code)
        return factory() if factory else None

    def update(self, action: actions.Action) -> Optional[actions.Action]:
        if isinstance(action, (actions.Refresh, *actions.SELECTION_ACTIONS)):
            return actions.Render()
        return None

    def render(self, area: Rect) -> RenderableType:
        with self._store.read() as store:
            items = store.items
            offset = store.offset
            selected = store.selected
            locale = store.locale

        visible = items[offset: offset + area.inner_height]
        lines = []
        for item in visible:
            style = item.status.style
            if item.ordinal == selected:
                style = f"{style} {SELECTED_STYLE}"
            lines.append(Text(item.label[: area.inner_width], style=style))

        return Panel(Text("\n").join(lines), title=_TITLES[locale],
                     border_style="blue", padding=0)

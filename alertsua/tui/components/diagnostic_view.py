"""
Diagnostics panel — loop rates, last key, fetch counters, recent errors.

Rates are counted over one-second windows: every Tick and Render action
seen bumps a counter, and when a window closes the counts become the
displayed ticks/s and frames/s.
"""
from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque, Optional

from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from .. import actions
from ..layout import Placement, Rect
from .base import Component

RATE_WINDOW_S = 1.0
MAX_ERRORS = 3


class DiagnosticView(Component):
    placement = Placement.DIAGNOSTICS

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self._clock = clock
        self._window_start = clock()
        self._ticks = 0
        self._frames = 0

        self.tick_rate = 0.0
        self.frame_rate = 0.0
        self.last_key = ""
        self.fetches = 0
        self.fetch_ok = 0
        self.fetch_failed = 0
        self.errors: Deque[str] = deque(maxlen=MAX_ERRORS)

    def update(self, action: actions.Action) -> Optional[actions.Action]:
        if isinstance(action, actions.Tick):
            self._ticks += 1
        elif isinstance(action, actions.Render):
            self._frames += 1
        elif isinstance(action, actions.KeyInput):
            self.last_key = "+".join(sorted(action.modifiers) + [action.code])
        elif isinstance(action, actions.Fetch):
            self.fetches += 1
        elif isinstance(action, (actions.FetchCompleted, actions.AlertsCompleted)):
            self.fetch_ok += 1
        elif isinstance(action, actions.FetchFailed):
            self.fetch_failed += 1
        elif isinstance(action, actions.Error):
            self.errors.append(action.message)
        self._roll_window()
        return None

    def _roll_window(self) -> None:
        now = self._clock()
        elapsed = now - self._window_start
        if elapsed < RATE_WINDOW_S:
            return
        self.tick_rate = self._ticks / elapsed
        self.frame_rate = self._frames / elapsed
        self._ticks = 0
        self._frames = 0
        self._window_start = now

    def render(self, area: Rect) -> RenderableType:
        width = area.inner_width
        lines = [
            Text(f"tick {self.tick_rate:4.1f}/s  fps {self.frame_rate:4.1f}"),
            Text(f"key  {self.last_key or '-'}"),
            Text(f"fetch {self.fetches} ok {self.fetch_ok} "
                 f"fail {self.fetch_failed}"),
        ]
        for message in self.errors:
            lines.append(Text(message[:width], style="red"))
        lines = lines[: area.inner_height]
        for line in lines:
            line.truncate(width)
        return Panel(Text("\n").join(lines), title="Diagnostics",
                     border_style="blue", padding=0)

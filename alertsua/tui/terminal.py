"""
Terminal session — full-screen rich display plus an asyncio event source.

Events come from four places and land in one asyncio queue:

  tick timer    → Event(TICK)     every 1/tick_rate s
  frame timer   → Event(RENDER)   every 1/frame_rate s
  stdin reader  → Event(KEY)      (cbreak mode, escape sequences decoded)
  SIGWINCH      → Event(RESIZE)
  SIGINT/TERM   → Event(QUIT)

:meth:`Terminal.next_event` is the only place the controller loop waits.

POSIX only: relies on termios, ``loop.add_reader`` and signal handlers.
"""
from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import termios
import tty
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.live import Live

from .layout import Placement, split_areas

log = logging.getLogger(__name__)

CTRL = "ctrl"


class EventKind(Enum):
    TICK = "tick"
    RENDER = "render"
    RESIZE = "resize"
    KEY = "key"
    QUIT = "quit"


@dataclass(frozen=True)
class Key:
    code: str                                  # "q", "up", "esc", "enter", ...
    modifiers: FrozenSet[str] = frozenset()

    @property
    def ctrl(self) -> bool:
        return CTRL in self.modifiers


@dataclass(frozen=True)
class Event:
    kind: EventKind
    width: int = 0
    height: int = 0
    key: Optional[Key] = None


# ── Key decoding ──────────────────────────────────────────────────────

_ESCAPES = {
    "\x1b[A": "up", "\x1b[B": "down", "\x1b[C": "right", "\x1b[D": "left",
    "\x1bOA": "up", "\x1bOB": "down", "\x1bOC": "right", "\x1bOD": "left",
    "\x1b[H": "home", "\x1b[F": "end", "\x1bOH": "home", "\x1bOF": "end",
    "\x1b[1~": "home", "\x1b[4~": "end", "\x1b[7~": "home", "\x1b[8~": "end",
    "\x1b[5~": "pageup", "\x1b[6~": "pagedown", "\x1b[3~": "delete",
}
_ESCAPE_KEYS = sorted(_ESCAPES, key=len, reverse=True)


def decode_keys(data: str) -> List[Key]:
    """Split raw terminal input into keys."""
    keys: List[Key] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            seq = next((s for s in _ESCAPE_KEYS if data.startswith(s, i)), None)
            if seq is not None:
                keys.append(Key(_ESCAPES[seq]))
                i += len(seq)
                continue
            keys.append(Key("esc"))
        elif ch in ("\r", "\n"):
            keys.append(Key("enter"))
        elif ch == "\t":
            keys.append(Key("tab"))
        elif ch in ("\x7f", "\x08"):
            keys.append(Key("backspace"))
        elif "\x01" <= ch <= "\x1a":
            keys.append(Key(chr(ord(ch) + 96), frozenset({CTRL})))
        else:
            keys.append(Key(ch))
        i += 1
    return keys


# ── Terminal session ──────────────────────────────────────────────────

class Terminal:
    """One full-screen session; create a new one after a suspend."""

    def __init__(
        self,
        tick_rate: float = 1.0,
        frame_rate: float = 4.0,
        console: Optional[Console] = None,
    ):
        self.tick_rate = tick_rate
        self.frame_rate = frame_rate
        self.console = console or Console()
        self._events: Optional[asyncio.Queue] = None
        self._tasks: List[asyncio.Task] = []
        self._live: Optional[Live] = None
        self._fd: Optional[int] = None
        self._old_settings: Any = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def size(self) -> Tuple[int, int]:
        width, height = self.console.size
        return width, height

    def enter(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._events = asyncio.Queue()

        if sys.stdin.isatty():
            self._fd = sys.stdin.fileno()
            self._old_settings = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
            self._loop.add_reader(self._fd, self._on_stdin)

        self._loop.add_signal_handler(signal.SIGWINCH, self._on_resize)
        self._loop.add_signal_handler(signal.SIGINT, self._put, Event(EventKind.QUIT))
        self._loop.add_signal_handler(signal.SIGTERM, self._put, Event(EventKind.QUIT))

        self._live = Live(console=self.console, screen=True,
                          auto_refresh=False, transient=True)
        self._live.start()

        self._tasks = [
            self._loop.create_task(self._interval(1.0 / self.tick_rate, EventKind.TICK)),
            self._loop.create_task(self._interval(1.0 / self.frame_rate, EventKind.RENDER)),
        ]
        self._on_resize()
        log.info("Terminal entered (%dx%d, tick %.1f/s, frame %.1f/s)",
                 *self.size(), self.tick_rate, self.frame_rate)

    def exit(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks = []
        if self._loop is not None:
            for sig in (signal.SIGWINCH, signal.SIGINT, signal.SIGTERM):
                self._loop.remove_signal_handler(sig)
            if self._fd is not None:
                self._loop.remove_reader(self._fd)
        if self._live is not None:
            self._live.stop()
            self._live = None
        if self._fd is not None and self._old_settings is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
        self._fd = None
        self._old_settings = None
        log.info("Terminal restored")

    def suspend(self) -> None:
        """Restore the terminal and stop the process until SIGCONT."""
        self.exit()
        os.kill(os.getpid(), signal.SIGTSTP)

    async def next_event(self) -> Event:
        assert self._events is not None, "enter() first"
        return await self._events.get()

    def draw(self, frames: Dict[Placement, RenderableType]) -> None:
        if self._live is None:
            return
        areas = split_areas(*self.size())
        root = Layout()
        side = Layout(name="side")
        root.split_row(
            Layout(frames.get(Placement.MAP, ""), name="map",
                   size=areas[Placement.MAP].width),
            side,
        )
        side.split_column(
            Layout(frames.get(Placement.LIST, ""), name="list"),
            Layout(frames.get(Placement.DIAGNOSTICS, ""), name="diagnostics",
                   size=areas[Placement.DIAGNOSTICS].height),
        )
        self._live.update(root, refresh=True)

    # ── Event sources ─────────────────────────────────────────────────

    def _put(self, event: Event) -> None:
        if self._events is not None:
            self._events.put_nowait(event)

    async def _interval(self, period: float, kind: EventKind) -> None:
        while True:
            await asyncio.sleep(period)
            self._put(Event(kind))

    def _on_resize(self) -> None:
        width, height = self.size()
        self._put(Event(EventKind.RESIZE, width=width, height=height))

    def _on_stdin(self) -> None:
        try:
            data = os.read(self._fd, 64)
        except OSError as exc:
            log.warning("stdin read failed: %s", exc)
            return
        for key in decode_keys(data.decode("utf-8", "ignore")):
            self._put(Event(EventKind.KEY, key=key))

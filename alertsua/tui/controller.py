"""
App controller — the dispatch loop.

One asyncio loop thread owns everything that touches the screen:

  Terminal.next_event()          (the only place the loop waits)
    → translate to Actions       (key map, tick, render, resize, quit)
    → Component.handle_input()   (component-local keys)
    → ActionBus.drain()          (everything queued so far, FIFO)
        → controller state / RegionStore writes (write lock)
        → Component.update()     (derived actions go back on the bus)
    → render every component once if a Render or Resize was seen

Fetching runs beside the loop: a scheduler task sends ``Fetch`` every
``fetch_interval`` seconds, and each ``Fetch`` spawns a detached task that
awaits the data port and posts ``FetchCompleted`` / ``AlertsCompleted`` /
``FetchFailed`` back onto the bus.  Results are picked up on the next
terminal event, at the latest on the next tick.

Usage
-----
    controller = AppController(shared, geo, port, fetch_interval=30.0)
    asyncio.run(controller.run())
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..geo.geo_index import GeoIndex
from ..ingest.data_port import DataPort
from ..ingest.errors import FetchError
from ..state.locking import SharedRegionStore
from ..state.region_store import Locale
from ..state.status_codec import AlertStatus
from . import actions
from .bus import ActionBus
from .components import Component, DiagnosticView, ListView, MapView
from .layout import Placement, split_areas
from .terminal import Event, EventKind, Key, Terminal

log = logging.getLogger(__name__)

FEED_STATUS = "status"
FEED_ALERTS = "alerts"


class AppState(Enum):
    RUNNING = "running"
    SUSPENDED = "suspended"
    QUITTING = "quitting"


KEY_MAP: Dict[str, Callable[[], actions.Action]] = {
    "q": actions.Quit,
    "esc": actions.Quit,
    "down": lambda: actions.Select(1),
    "up": lambda: actions.Select(-1),
    "u": actions.Fetch,
    "l": actions.Locale,
    "r": actions.Refresh,
    "z": actions.Suspend,
}


def key_action(key: Key) -> Optional[actions.Action]:
    """Global action bound to a key, if any."""
    if key.ctrl:
        return actions.Quit() if key.code == "c" else None
    factory = KEY_MAP.get(key.code)
    return factory() if factory else None


def translate(event: Event) -> List[actions.Action]:
    """Actions produced by one terminal event."""
    if event.kind is EventKind.TICK:
        return [actions.Tick()]
    if event.kind is EventKind.RENDER:
        return [actions.Render()]
    if event.kind is EventKind.RESIZE:
        return [actions.Resize(event.width, event.height)]
    if event.kind is EventKind.QUIT:
        return [actions.Quit()]
    if event.kind is EventKind.KEY and event.key is not None:
        out: List[actions.Action] = [
            actions.KeyInput(event.key.code, event.key.modifiers)
        ]
        mapped = key_action(event.key)
        if mapped is not None:
            out.append(mapped)
        return out
    return []


class AppController:
    def __init__(
        self,
        store: SharedRegionStore,
        geo: GeoIndex,
        data_port: DataPort,
        *,
        tick_rate: float = 1.0,
        frame_rate: float = 4.0,
        fetch_interval: float = 30.0,
        initial_fetch_delay: float = 2.0,
        feed: str = FEED_STATUS,
        locale: Locale = Locale.UK,
        terminal_factory: Optional[Callable[[], Terminal]] = None,
        components: Optional[Sequence[Component]] = None,
    ):
        if feed not in (FEED_STATUS, FEED_ALERTS):
            raise ValueError(f"unknown feed {feed!r}")
        self.store = store
        self.geo = geo
        self.data_port = data_port
        self.tick_rate = tick_rate
        self.frame_rate = frame_rate
        self.fetch_interval = fetch_interval
        self.initial_fetch_delay = initial_fetch_delay
        self.feed = feed

        self._terminal_factory = terminal_factory or (
            lambda: Terminal(tick_rate=tick_rate, frame_rate=frame_rate)
        )
        self._terminal: Optional[Terminal] = None
        self._size: Tuple[int, int] = (0, 0)

        self.state = AppState.RUNNING
        self.bus = ActionBus()
        self._tx = self.bus.sender()

        if components is None:
            components = [MapView(store, geo), ListView(store), DiagnosticView()]
        self.components: List[Component] = list(components)
        for component in self.components:
            component.register_action_sender(self.bus.sender())

        self._fetch_task: Optional[asyncio.Task] = None
        self._scheduler: Optional[asyncio.Task] = None

        with store.write() as s:
            s.set_locale(locale)

    # ── Main loop ─────────────────────────────────────────────────────

    async def run(self) -> None:
        """Run until a Quit action is processed."""
        try:
            self._enter_terminal()
            for component in self.components:
                component.init(self._size)
            self._scheduler = asyncio.get_running_loop().create_task(
                self._schedule_fetches()
            )
            log.info("Controller running (feed=%s, fetch every %.0f s)",
                     self.feed, self.fetch_interval)
            while self.state is not AppState.QUITTING:
                event = await self._terminal.next_event()
                self.handle_event(event)
                self.drain_actions()
        finally:
            if self._scheduler is not None:
                self._scheduler.cancel()
            if self._terminal is not None:
                self._terminal.exit()
            log.info("Controller stopped")

    def handle_event(self, event: Event) -> None:
        for action in translate(event):
            self._tx.send(action)
        for component in self.components:
            try:
                derived = component.handle_input(event)
            except Exception as exc:
                log.exception("%s failed handling %s", type(component).__name__, event)
                derived = actions.Error(f"{type(component).__name__}: {exc}")
            if derived is not None:
                self._tx.send(derived)

    def drain_actions(self) -> None:
        """Process one cycle: every action queued so far, in order."""
        needs_render = False
        for action in self.bus.drain():
            if not action.noisy:
                log.debug("Action %s", action)
            if isinstance(action, (actions.Render, actions.Resize)):
                needs_render = True

            try:
                self.dispatch(action)
            except Exception as exc:
                log.exception("Failed handling %s", action)
                self._tx.send(actions.Error(f"{type(action).__name__}: {exc}"))
            if self.state is AppState.QUITTING:
                return

            for component in self.components:
                try:
                    derived = component.update(action)
                except Exception as exc:
                    log.exception("%s failed on %s", type(component).__name__, action)
                    derived = actions.Error(f"{type(component).__name__}: {exc}")
                if derived is not None:
                    self._tx.send(derived)

        if needs_render and self.state is AppState.RUNNING:
            self.render()

    def render(self) -> None:
        areas = split_areas(*self._size)
        frames = {}
        for component in self.components:
            try:
                frames[component.placement] = component.render(areas[component.placement])
            except Exception as exc:
                log.exception("%s failed to render", type(component).__name__)
                self._tx.send(actions.Error(f"{type(component).__name__}: {exc}"))
        self._terminal.draw(frames)

    # ── Action handling ───────────────────────────────────────────────

    def dispatch(self, action: actions.Action) -> None:
        """Apply one action to controller and domain state."""
        if isinstance(action, actions.Quit):
            self.state = AppState.QUITTING
        elif isinstance(action, actions.Suspend):
            self._suspend()
        elif isinstance(action, actions.Resume):
            self.state = AppState.RUNNING
        elif isinstance(action, actions.Resize):
            self._size = (action.width, action.height)
            rows = split_areas(*self._size)[Placement.LIST].inner_height
            with self.store.write() as store:
                store.set_page_size(rows)
        elif isinstance(action, actions.Select):
            with self.store.write() as store:
                step = store.select_next if action.delta > 0 else store.select_previous
                for _ in range(abs(action.delta)):
                    step()
        elif isinstance(action, actions.SelectTop):
            with self.store.write() as store:
                store.select_top()
        elif isinstance(action, actions.SelectBottom):
            with self.store.write() as store:
                store.select_bottom()
        elif isinstance(action, actions.Unselect):
            with self.store.write() as store:
                store.unselect()
        elif isinstance(action, actions.Locale):
            with self.store.write() as store:
                store.set_locale(store.locale.toggled())
                log.info("Locale switched to %s", store.locale.value)
            self._tx.send(actions.Refresh())
        elif isinstance(action, actions.Fetch):
            self._spawn_fetch()
        elif isinstance(action, actions.FetchCompleted):
            with self.store.write() as store:
                store.apply_status(action.status)
            log.info("Status applied: %s (%d active, %d partial)", action.status,
                     action.status.count(AlertStatus.ACTIVE),
                     action.status.count(AlertStatus.PARTIAL))
            self._tx.send(actions.Refresh())
        elif isinstance(action, actions.AlertsCompleted):
            with self.store.write() as store:
                store.apply_alerts(action.alerts)
            log.info("Alerts applied: %d active", len(action.alerts))
            self._tx.send(actions.Refresh())
        elif isinstance(action, actions.FetchFailed):
            log.warning("Fetch failed: %s", action.error)
            self._tx.send(actions.Error(f"fetch failed: {action.error}"))
        elif isinstance(action, actions.Error):
            log.error("%s", action.message)

    def _suspend(self) -> None:
        self.state = AppState.SUSPENDED
        log.info("Suspending")
        try:
            self._terminal.suspend()
        finally:
            # back after SIGCONT, or straight back if the handover failed
            self._enter_terminal()
            self._tx.send(actions.Resume())

    def _enter_terminal(self) -> None:
        self._terminal = self._terminal_factory()
        self._terminal.enter()
        self._size = self._terminal.size()

    # ── Fetching ──────────────────────────────────────────────────────

    @property
    def fetch_in_flight(self) -> bool:
        return self._fetch_task is not None and not self._fetch_task.done()

    def _spawn_fetch(self) -> None:
        if self.fetch_in_flight:
            log.debug("Fetch skipped: previous fetch still running")
            return
        self._fetch_task = asyncio.get_running_loop().create_task(self._fetch())

    async def _fetch(self) -> None:
        try:
            if self.feed == FEED_ALERTS:
                alerts = await self.data_port.fetch_alerts()
                self._tx.send(actions.AlertsCompleted(tuple(alerts)))
            else:
                status = await self.data_port.fetch_status()
                self._tx.send(actions.FetchCompleted(status))
        except FetchError as exc:
            self._tx.send(actions.FetchFailed(str(exc), exc.kind))
        except Exception as exc:
            log.exception("Unexpected fetch failure")
            self._tx.send(actions.FetchFailed(f"{type(exc).__name__}: {exc}"))

    async def _schedule_fetches(self) -> None:
        await asyncio.sleep(self.initial_fetch_delay)
        while True:
            self._tx.send(actions.Fetch())
            await asyncio.sleep(self.fetch_interval)

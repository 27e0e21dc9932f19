from __future__ import annotations

import io

from rich.console import Console, RenderableType

from alertsua.geo.geo_index import GeoIndex
from alertsua.state.locking import SharedRegionStore
from alertsua.state.region_store import Locale
from alertsua.state.status_codec import decode
from alertsua.tui import actions
from alertsua.tui.components import DiagnosticView, ListView, MapView
from alertsua.tui.layout import Placement, Rect, split_areas
from alertsua.tui.terminal import Event, EventKind, Key

from .conftest import SAMPLE_STATUS


def _text(renderable: RenderableType, width: int) -> str:
    out = io.StringIO()
    console = Console(file=out, width=width, color_system=None, legacy_windows=False)
    console.print(renderable)
    return out.getvalue()


def test_split_areas_cover_the_screen() -> None:
    areas = split_areas(100, 40)
    assert areas[Placement.MAP] == Rect(0, 0, 75, 40)
    assert areas[Placement.LIST].width == 25
    assert areas[Placement.LIST].height + areas[Placement.DIAGNOSTICS].height == 40


def test_list_view_shows_visible_rows(shared: SharedRegionStore) -> None:
    with shared.write() as store:
        store.apply_status(decode(SAMPLE_STATUS))
        store.set_locale(Locale.EN)
        store.set_page_size(5)
        for _ in range(8):
            store.select_next()

    view = ListView(shared)
    text = _text(view.render(Rect(0, 0, 40, 7)), 40)

    assert "Regions" in text
    assert "7) Zaporizhzhia" in text
    assert "3) Dnipropetrovsk" in text
    assert "0) Autonomous" not in text
    assert "8) Ivano" not in text


def test_list_view_keys(shared: SharedRegionStore) -> None:
    view = ListView(shared)

    def key(code: str) -> Event:
        return Event(EventKind.KEY, key=Key(code))

    assert view.handle_input(key("home")) == actions.SelectTop()
    assert view.handle_input(key("g")) == actions.SelectTop()
    assert view.handle_input(key("end")) == actions.SelectBottom()
    assert view.handle_input(key("G")) == actions.SelectBottom()
    assert view.handle_input(key("left")) == actions.Unselect()
    assert view.handle_input(key("backspace")) == actions.Unselect()
    assert view.handle_input(key("q")) is None
    assert view.handle_input(Event(EventKind.TICK)) is None


def test_views_ask_for_render_on_refresh_and_selection(
    shared: SharedRegionStore, geo: GeoIndex,
) -> None:
    for view in (ListView(shared), MapView(shared, geo)):
        assert view.update(actions.Refresh()) == actions.Render()
        assert view.update(actions.Select(1)) == actions.Render()
        assert view.update(actions.Unselect()) == actions.Render()
        assert view.update(actions.Tick()) is None


def test_map_view_draws_outline_and_selected_label(
    shared: SharedRegionStore, geo: GeoIndex,
) -> None:
    with shared.write() as store:
        store.apply_status(decode(SAMPLE_STATUS))
        store.set_locale(Locale.EN)
        for _ in range(14):
            store.select_next()     # ordinal 13, Lviv

    view = MapView(shared, geo)
    text = _text(view.render(Rect(0, 0, 100, 30)), 100)

    assert "Alert map" in text
    assert "Lviv Oblast" in text
    assert "●" in text              # active regions
    assert any("⠁" <= ch <= "⣿" for ch in text)


def test_map_view_handles_tiny_area(shared: SharedRegionStore, geo: GeoIndex) -> None:
    view = MapView(shared, geo)
    _text(view.render(Rect(0, 0, 2, 2)), 10)


def test_diagnostics_counts_rates_and_errors() -> None:
    now = [0.0]
    view = DiagnosticView(clock=lambda: now[0])

    for _ in range(3):
        view.update(actions.Tick())
    for _ in range(4):
        view.update(actions.Render())
    now[0] = 1.0
    view.update(actions.KeyInput("c", frozenset({"ctrl"})))

    assert view.tick_rate == 3.0
    assert view.frame_rate == 4.0
    assert view.last_key == "ctrl+c"

    view.update(actions.Fetch())
    view.update(actions.FetchFailed("network: boom"))
    view.update(actions.Error("fetch failed: network: boom"))

    text = _text(view.render(Rect(0, 0, 40, 7)), 40)
    assert "fetch 1 ok 0 fail 1" in text
    assert "fetch failed: network: boom" in text

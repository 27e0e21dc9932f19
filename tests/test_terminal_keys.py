from __future__ import annotations

from alertsua.tui import actions
from alertsua.tui.controller import key_action, translate
from alertsua.tui.terminal import CTRL, Event, EventKind, Key, decode_keys


def test_plain_and_arrow_keys() -> None:
    keys = decode_keys("q\x1b[A\x1b[Bl")
    assert [k.code for k in keys] == ["q", "up", "down", "l"]


def test_home_end_variants() -> None:
    keys = decode_keys("\x1b[H\x1b[1~\x1bOF\x1b[4~")
    assert [k.code for k in keys] == ["home", "home", "end", "end"]


def test_lone_escape_and_control_keys() -> None:
    keys = decode_keys("\x1b\x03\r\x7f")
    assert keys[0] == Key("esc")
    assert keys[1] == Key("c", frozenset({CTRL}))
    assert keys[1].ctrl
    assert keys[2] == Key("enter")
    assert keys[3] == Key("backspace")


def test_key_map() -> None:
    assert key_action(Key("q")) == actions.Quit()
    assert key_action(Key("esc")) == actions.Quit()
    assert key_action(Key("c", frozenset({CTRL}))) == actions.Quit()
    assert key_action(Key("down")) == actions.Select(1)
    assert key_action(Key("up")) == actions.Select(-1)
    assert key_action(Key("u")) == actions.Fetch()
    assert key_action(Key("l")) == actions.Locale()
    assert key_action(Key("r")) == actions.Refresh()
    assert key_action(Key("z")) == actions.Suspend()
    assert key_action(Key("x")) is None
    assert key_action(Key("u", frozenset({CTRL}))) is None


def test_translate_key_event_adds_key_input() -> None:
    out = translate(Event(EventKind.KEY, key=Key("down")))
    assert out == [actions.KeyInput("down"), actions.Select(1)]


def test_translate_timer_and_resize_events() -> None:
    assert translate(Event(EventKind.TICK)) == [actions.Tick()]
    assert translate(Event(EventKind.RENDER)) == [actions.Render()]
    assert translate(Event(EventKind.RESIZE, 80, 24)) == [actions.Resize(80, 24)]
    assert translate(Event(EventKind.QUIT)) == [actions.Quit()]

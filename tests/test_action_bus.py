from __future__ import annotations

import threading

from alertsua.tui import actions
from alertsua.tui.bus import ActionBus


def test_drain_returns_fifo_order() -> None:
    bus = ActionBus()
    tx = bus.sender()
    tx.send(actions.Tick())
    tx.send(actions.Select(1))
    tx.send(actions.Quit())

    assert bus.drain() == [actions.Tick(), actions.Select(1), actions.Quit()]
    assert bus.drain() == []


def test_actions_sent_during_processing_wait_for_next_drain() -> None:
    bus = ActionBus()
    tx = bus.sender()
    tx.send(actions.Refresh())

    seen = []
    for action in bus.drain():
        seen.append(action)
        # a component answering Refresh with Render
        tx.send(actions.Render())

    assert seen == [actions.Refresh()]
    assert bus.drain() == [actions.Render()]
    assert bus.drain() == []


def test_per_producer_order_across_threads() -> None:
    bus = ActionBus()

    def produce(sign: int) -> None:
        tx = bus.sender()
        for i in range(1, 201):
            tx.send(actions.Select(sign * i))

    threads = [threading.Thread(target=produce, args=(s,)) for s in (1, -1)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    drained = bus.drain()
    assert len(drained) == 400
    ups = [a.delta for a in drained if a.delta > 0]
    downs = [-a.delta for a in drained if a.delta < 0]
    assert ups == list(range(1, 201))
    assert downs == list(range(1, 201))


def test_actions_are_hashable_values() -> None:
    assert actions.Select(1) == actions.Select(1)
    assert actions.Select(1) != actions.Select(-1)
    assert len({actions.Tick(), actions.Tick(), actions.Render()}) == 2
    assert actions.Tick().noisy and not actions.Fetch().noisy

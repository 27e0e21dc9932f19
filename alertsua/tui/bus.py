"""
Action bus — unbounded multi-producer / single-consumer FIFO.

Producers (terminal input, timers, fetch tasks, components) only ever get
an :class:`ActionSender`.  The controller is the single consumer: each
cycle it calls :meth:`ActionBus.drain`, which hands back everything queued
at that moment.  Actions sent while that batch is being processed stay on
the bus for the next cycle, so one cycle can never feed itself forever.

Usage
-----
    bus = ActionBus()
    tx = bus.sender()
    tx.send(Fetch())
    for action in bus.drain():
        ...
"""
from __future__ import annotations

import logging
import queue
from typing import List

from .actions import Action

log = logging.getLogger(__name__)


class ActionSender:
    """Send-only handle; cheap to copy and safe from any thread."""

    def __init__(self, q: "queue.SimpleQueue[Action]"):
        self._q = q

    def send(self, action: Action) -> None:
        self._q.put(action)


class ActionBus:
    def __init__(self) -> None:
        self._q: "queue.SimpleQueue[Action]" = queue.SimpleQueue()

    def sender(self) -> ActionSender:
        return ActionSender(self._q)

    def drain(self) -> List[Action]:
        """Take every action queued right now, oldest first."""
        batch: List[Action] = []
        for _ in range(self._q.qsize()):
            try:
                batch.append(self._q.get_nowait())
            except queue.Empty:
                break
        return batch

"""Base class for everything the controller draws."""
from __future__ import annotations

from typing import Optional, Tuple

from rich.console import RenderableType

from ..actions import Action
from ..bus import ActionSender
from ..layout import Placement, Rect
from ..terminal import Event


class Component:
    """A render/update unit with its own view state.

    Subclasses override what they need; the defaults do nothing.  A
    component may read the shared region store but never writes it, and
    never talks to another component directly.  Anything it wants done
    is returned as an :class:`Action` or sent through its sender.
    """

    placement: Placement = Placement.MAP

    def __init__(self) -> None:
        self._sender: Optional[ActionSender] = None
        self._size: Tuple[int, int] = (0, 0)

    def register_action_sender(self, sender: ActionSender) -> None:
        self._sender = sender

    def send(self, action: Action) -> None:
        if self._sender is not None:
            self._sender.send(action)

    def init(self, size: Tuple[int, int]) -> None:
        self._size = size

    def handle_input(self, event: Event) -> Optional[Action]:
        return None

    def update(self, action: Action) -> Optional[Action]:
        return None

    def render(self, area: Rect) -> RenderableType:
        raise NotImplementedError

"""
Actions — the values that flow through the dispatch loop.

Every action is a frozen dataclass: hashable, comparable, and safe to hand
to several components.  The set is closed; the controller and components
dispatch on the concrete type.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from ..ingest.alerts_client import AlertRecord
from ..ingest.errors import FetchErrorKind
from ..state.status_codec import AlertStatusString


class Action:
    """Base of all actions."""

    # Tick and Render fire several times a second; keep them out of the log
    noisy = False


@dataclass(frozen=True)
class Tick(Action):
    noisy = True


@dataclass(frozen=True)
class Render(Action):
    noisy = True


@dataclass(frozen=True)
class Resize(Action):
    width: int
    height: int


@dataclass(frozen=True)
class KeyInput(Action):
    code: str
    modifiers: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Select(Action):
    delta: int


@dataclass(frozen=True)
class SelectTop(Action):
    pass


@dataclass(frozen=True)
class SelectBottom(Action):
    pass


@dataclass(frozen=True)
class Unselect(Action):
    pass


@dataclass(frozen=True)
class Fetch(Action):
    pass


@dataclass(frozen=True)
class FetchCompleted(Action):
    status: AlertStatusString


@dataclass(frozen=True)
class AlertsCompleted(Action):
    alerts: Tuple[AlertRecord, ...]


@dataclass(frozen=True)
class FetchFailed(Action):
    error: str
    kind: Optional[FetchErrorKind] = None


@dataclass(frozen=True)
class Locale(Action):
    pass


@dataclass(frozen=True)
class Refresh(Action):
    pass


@dataclass(frozen=True)
class Suspend(Action):
    pass


@dataclass(frozen=True)
class Resume(Action):
    pass


@dataclass(frozen=True)
class Quit(Action):
    pass


@dataclass(frozen=True)
class Error(Action):
    message: str


SELECTION_ACTIONS = (Select, SelectTop, SelectBottom, Unselect)

"""
Alert status codec.

The feed reports the state of all 27 regions as one fixed-width string,
one character per region ordinal:

    A  active alert
    P  partial alert (some communities of the region)
    N  no alert

Example
-------
    status = decode('"ANNAANNANNNPANANANNNNAANNNN"')
    status[0]    # AlertStatus.ACTIVE
    status[11]   # AlertStatus.PARTIAL
    encode(status)  # "ANNAANNANNNPANANANNNNAANNNN"
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Tuple

log = logging.getLogger(__name__)

REGION_COUNT = 27


class AlertStatus(Enum):
    """Alert state of one region."""

    ACTIVE = "A"
    PARTIAL = "P"
    NONE = "N"

    @classmethod
    def from_char(cls, char: str) -> "AlertStatus":
        """Map one status character; anything unrecognised is NONE."""
        try:
            return cls(char)
        except ValueError:
            return cls.NONE

    @property
    def marker(self) -> str:
        return _MARKERS[self]

    @property
    def style(self) -> str:
        return _STYLES[self]


_MARKERS = {
    AlertStatus.ACTIVE: "⊙",
    AlertStatus.PARTIAL: "◐",
    AlertStatus.NONE: "",
}

_STYLES = {
    AlertStatus.ACTIVE: "bold red",
    AlertStatus.PARTIAL: "yellow",
    AlertStatus.NONE: "default",
}


class DecodeError(ValueError):
    """Raised when a status string cannot be decoded."""


class WrongLengthError(DecodeError):
    def __init__(self, actual: int, expected: int = REGION_COUNT):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"status string must be {expected} characters long, got {actual}"
        )


@dataclass(frozen=True)
class AlertStatusString:
    """Decoded status of all regions, indexed by region ordinal."""

    statuses: Tuple[AlertStatus, ...]
    raw: str = ""

    def __post_init__(self) -> None:
        if len(self.statuses) != REGION_COUNT:
            raise WrongLengthError(len(self.statuses))

    def __len__(self) -> int:
        return len(self.statuses)

    def __getitem__(self, ordinal: int) -> AlertStatus:
        return self.statuses[ordinal]

    def __iter__(self) -> Iterator[AlertStatus]:
        return iter(self.statuses)

    def __str__(self) -> str:
        return encode(self.statuses)

    def count(self, status: AlertStatus) -> int:
        return sum(1 for s in self.statuses if s is status)


def decode(raw: str) -> AlertStatusString:
    """Decode a raw feed response into an :class:`AlertStatusString`.

    Surrounding whitespace and double quotes are trimmed first; the rest
    must be exactly 27 characters long.  Characters other than ``A``,
    ``P`` and ``N`` are read as NONE for their ordinal instead of failing
    the whole update.

    Raises
    ------
    WrongLengthError
        If the trimmed text is not 27 characters long.
    """
    text = raw.strip().strip('"')
    if len(text) != REGION_COUNT:
        raise WrongLengthError(len(text))

    statuses = tuple(AlertStatus.from_char(c) for c in text)
    unknown = sum(1 for c in text if c not in "APN")
    if unknown:
        log.warning("Status string %r: %d unknown character(s) read as 'N'",
                    text, unknown)
    return AlertStatusString(statuses=statuses, raw=text)


def encode(statuses: Iterable[AlertStatus]) -> str:
    """Render statuses back to the fixed-width feed form."""
    return "".join(s.value for s in statuses)


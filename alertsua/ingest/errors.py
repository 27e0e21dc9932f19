"""Fetch error taxonomy shared by the HTTP client and the DataPort."""
from __future__ import annotations

from enum import Enum


class FetchErrorKind(Enum):
    NETWORK = "network"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    DECODE = "decode"


class FetchError(RuntimeError):
    """A feed request failed; ``kind`` says how."""

    def __init__(self, kind: FetchErrorKind, message: str):
        self.kind = kind
        super().__init__(f"{kind.value}: {message}")


def kind_for_status(status_code: int) -> FetchErrorKind:
    """Classify an HTTP error status."""
    if status_code in (401, 403):
        return FetchErrorKind.UNAUTHORIZED
    if status_code == 429:
        return FetchErrorKind.RATE_LIMITED
    return FetchErrorKind.SERVER_ERROR

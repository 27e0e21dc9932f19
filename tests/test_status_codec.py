from __future__ import annotations

import logging

import pytest

from alertsua.state.status_codec import (
    REGION_COUNT,
    AlertStatus,
    AlertStatusString,
    DecodeError,
    WrongLengthError,
    decode,
    encode,
)

from .conftest import SAMPLE_STATUS


def test_decode_sample_string() -> None:
    status = decode(SAMPLE_STATUS)

    assert len(status) == REGION_COUNT
    assert status[0] is AlertStatus.ACTIVE
    assert status[1] is AlertStatus.NONE
    assert status[3] is AlertStatus.ACTIVE
    assert status[11] is AlertStatus.PARTIAL
    assert status.count(AlertStatus.PARTIAL) == 1
    assert str(status) == SAMPLE_STATUS


def test_decode_trims_quotes_and_whitespace() -> None:
    status = decode(f'  "{SAMPLE_STATUS}"\n')
    assert status.raw == SAMPLE_STATUS
    assert encode(status) == SAMPLE_STATUS


@pytest.mark.parametrize("raw", [SAMPLE_STATUS[:-1], SAMPLE_STATUS + "N", "", '""'])
def test_decode_wrong_length(raw: str) -> None:
    with pytest.raises(WrongLengthError) as excinfo:
        decode(raw)
    assert excinfo.value.expected == REGION_COUNT
    assert excinfo.value.actual == len(raw.strip('"'))
    assert isinstance(excinfo.value, DecodeError)


def test_unknown_characters_read_as_none(caplog: pytest.LogCaptureFixture) -> None:
    raw = "X" + SAMPLE_STATUS[1:-1] + "a"
    with caplog.at_level(logging.WARNING):
        status = decode(raw)

    assert status[0] is AlertStatus.NONE
    assert status[26] is AlertStatus.NONE
    assert status[3] is AlertStatus.ACTIVE
    assert "2 unknown" in caplog.text


def test_status_string_requires_full_length() -> None:
    with pytest.raises(WrongLengthError):
        AlertStatusString(statuses=(AlertStatus.NONE,) * 5)


def test_markers() -> None:
    assert AlertStatus.ACTIVE.marker == "⊙"
    assert AlertStatus.PARTIAL.marker == "◐"
    assert AlertStatus.NONE.marker == ""

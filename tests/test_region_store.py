from __future__ import annotations

import dataclasses
from typing import List

import pytest

from alertsua.ingest.alerts_client import AlertRecord
from alertsua.state.region_store import Locale, Region, RegionCountError, RegionStore
from alertsua.state.status_codec import REGION_COUNT, AlertStatus, decode

from .conftest import SAMPLE_STATUS


def _alert(oblast_uid: int, alert_id: int = 1) -> AlertRecord:
    return AlertRecord(
        id=alert_id,
        location_title="test",
        location_type="oblast",
        started_at="2024-01-01T00:00:00Z",
        finished_at=None,
        updated_at="2024-01-01T00:00:00Z",
        alert_type="air_raid",
        location_oblast="test",
        location_uid=str(oblast_uid),
        location_oblast_uid=oblast_uid,
    )


def test_apply_status_sets_every_ordinal(store: RegionStore) -> None:
    status = decode(SAMPLE_STATUS)
    store.apply_status(status)

    for i, region in enumerate(store.regions):
        assert region.status is status[i]
    assert store.status_snapshot() == SAMPLE_STATUS


def test_list_items_carry_markers(store: RegionStore) -> None:
    store.apply_status(decode(SAMPLE_STATUS))
    items = store.items

    assert len(items) == REGION_COUNT
    assert items[0].label.endswith("⊙")
    assert items[11].label.endswith("◐")
    assert items[1].label == f"1) {store.regions[1].local_name}"


def test_locale_switches_labels(store: RegionStore) -> None:
    store.set_locale(Locale.EN)
    assert store.items[9].label == "9) Kyiv City"
    store.set_locale(store.locale.toggled())
    assert store.locale is Locale.UK
    assert store.items[9].label == "9) м. Київ"


def test_replace_regions_rejects_wrong_count(regions: List[Region]) -> None:
    store = RegionStore()
    with pytest.raises(RegionCountError):
        store.replace_regions(regions[:-1])
    assert len(store) == 0


def test_replace_regions_rejects_out_of_order(regions: List[Region]) -> None:
    swapped = list(regions)
    swapped[0], swapped[1] = swapped[1], swapped[0]
    with pytest.raises(RegionCountError):
        RegionStore(swapped)


def test_apply_alerts_is_full_replace_and_idempotent(store: RegionStore) -> None:
    store.apply_status(decode("P" * REGION_COUNT))
    kyiv = store.regions[9]
    alerts = [_alert(kyiv.admin_id), _alert(kyiv.admin_id, alert_id=2)]

    store.apply_alerts(alerts)
    first = store.status_snapshot()
    store.apply_alerts(alerts)

    assert store.status_snapshot() == first
    assert store.regions[9].status is AlertStatus.ACTIVE
    assert first.count("A") == 1
    assert first.count("P") == 0


def test_select_next_wraps_around(store: RegionStore) -> None:
    store.select_next()
    start = store.selected
    for _ in range(REGION_COUNT):
        store.select_next()
    assert store.selected == start == 0


def test_select_previous_from_top_wraps_to_bottom(store: RegionStore) -> None:
    assert store.selected is None
    store.select_top()
    store.select_previous()
    assert store.selected == REGION_COUNT - 1


def test_unselect_keeps_offset_and_resumes(store: RegionStore) -> None:
    store.set_page_size(10)
    store.select_bottom()
    offset = store.offset
    assert offset == REGION_COUNT - 10

    store.unselect()
    assert store.selected is None
    assert store.offset == offset

    store.select_next()
    assert store.selected == REGION_COUNT - 1


def test_second_unselect_keeps_last_selection(store: RegionStore) -> None:
    store.select_top()
    store.select_next()
    store.select_next()

    store.unselect()
    store.unselect()
    store.select_previous()

    assert store.selected == 2


def test_selection_scrolls_into_view(store: RegionStore) -> None:
    store.set_page_size(5)
    for _ in range(7):
        store.select_next()
    assert store.selected == 6
    assert store.offset <= 6 < store.offset + 5

    store.select_top()
    assert store.offset == 0


def test_selection_on_empty_store_is_noop() -> None:
    store = RegionStore()
    store.select_next()
    store.select_previous()
    store.select_top()
    store.select_bottom()
    store.unselect()
    assert store.selected is None


def test_status_does_not_touch_metadata(store: RegionStore) -> None:
    before = [dataclasses.replace(r, status=AlertStatus.NONE) for r in store.regions]
    store.apply_status(decode(SAMPLE_STATUS))
    after = [dataclasses.replace(r, status=AlertStatus.NONE) for r in store.regions]
    assert before == after

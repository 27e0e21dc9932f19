from __future__ import annotations

import time
from pathlib import Path
from typing import List

from alertsua.state.region_store import Region
from alertsua.storage.region_db import RegionDB

from .conftest import SAMPLE_STATUS


def test_regions_round_trip(tmp_path: Path, regions: List[Region]) -> None:
    db = RegionDB(tmp_path / "nested" / "alertsua.sqlite")
    assert db.load_regions() == []

    db.save_regions(regions)
    db.save_regions(regions)    # replace, not append
    loaded = db.load_regions()
    db.close()

    assert loaded == regions


def test_status_history_newest_first(tmp_path: Path) -> None:
    db = RegionDB(tmp_path / "alertsua.sqlite")
    db.record_status("N" * 27, fetched_at=100.0)
    db.record_status(SAMPLE_STATUS, fetched_at=200.0)

    recent = db.recent_statuses(limit=5)
    assert [r["status"] for r in recent] == [SAMPLE_STATUS, "N" * 27]
    assert db.recent_statuses(limit=1)[0]["fetched_at"] == 200.0
    db.close()


def test_prune_old_history(tmp_path: Path) -> None:
    db = RegionDB(tmp_path / "alertsua.sqlite")
    db.record_status("N" * 27, fetched_at=time.time() - 40 * 86400)
    db.record_status(SAMPLE_STATUS)

    db.prune_old(days=30)

    assert [r["status"] for r in db.recent_statuses()] == [SAMPLE_STATUS]
    db.close()


def test_reopen_keeps_data(tmp_path: Path, regions: List[Region]) -> None:
    path = tmp_path / "alertsua.sqlite"
    db = RegionDB(path)
    db.save_regions(regions)
    db.record_status(SAMPLE_STATUS)
    db.close()

    db = RegionDB(path)
    assert len(db.load_regions()) == 27
    assert db.recent_statuses()[0]["status"] == SAMPLE_STATUS
    db.close()

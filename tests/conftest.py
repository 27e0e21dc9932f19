from __future__ import annotations

from typing import List

import pytest

from alertsua.geo.geo_index import GeoIndex
from alertsua.ingest.data_port import regions_from_geo
from alertsua.state.locking import SharedRegionStore
from alertsua.state.region_store import Region, RegionStore

SAMPLE_STATUS = "ANNAANNANNNPANANANNNNAANNNN"


@pytest.fixture(scope="session")
def geo() -> GeoIndex:
    return GeoIndex.load()


@pytest.fixture
def regions(geo: GeoIndex) -> List[Region]:
    return regions_from_geo(geo)


@pytest.fixture
def store(regions: List[Region]) -> RegionStore:
    return RegionStore(regions)


@pytest.fixture
def shared(store: RegionStore) -> SharedRegionStore:
    return SharedRegionStore(store)

"""
DataPort — the controller's only view of the outside world.

The controller awaits these coroutines from detached tasks; nothing here
may run on the render path.  :class:`AlertsDataPort` is the production
implementation: blocking HTTP and SQLite work is pushed to a worker
thread with ``asyncio.to_thread``.

Data flow
─────────
  startup            → fetch_regions()  → RegionDB (seeded from GeoIndex)
  startup            → last_status()    → RegionDB history (newest entry)
  Fetch action       → fetch_status()   → AlertsClient → decode() → RegionDB history
  Fetch (alert feed) → fetch_alerts()   → AlertsClient
"""
from __future__ import annotations

import abc
import asyncio
import logging
from typing import List, Optional

from ..geo.geo_index import GeoIndex
from ..state.region_store import Region
from ..state.status_codec import AlertStatusString, DecodeError, decode
from ..storage.region_db import RegionDB
from .alerts_client import AlertRecord, AlertsClient
from .errors import FetchError, FetchErrorKind

log = logging.getLogger(__name__)


class DataPort(abc.ABC):
    """Region metadata and alert status source."""

    @abc.abstractmethod
    async def fetch_regions(self) -> List[Region]:
        """Return the 27 regions in ordinal order (called once at startup)."""

    @abc.abstractmethod
    async def fetch_status(self) -> AlertStatusString:
        """Return the current decoded status string.

        Raises
        ------
        FetchError
        """

    async def fetch_alerts(self) -> List[AlertRecord]:
        """Return the active alert list.

        Raises
        ------
        FetchError
        """
        raise FetchError(FetchErrorKind.SERVER_ERROR,
                         f"{type(self).__name__} has no alert list feed")

    async def last_status(self) -> Optional[AlertStatusString]:
        """Most recent status recorded by an earlier run, if any."""
        return None


def regions_from_geo(geo: GeoIndex) -> List[Region]:
    """Build region metadata from the embedded location registry."""
    return [
        Region(
            ordinal=loc.ordinal,
            admin_id=loc.location_uid,
            external_id=loc.iso_code,
            local_name=loc.name,
            romanized_name=loc.name_en,
            geometry=loc.centroid.wkt,
        )
        for loc in geo.locations
    ]


class AlertsDataPort(DataPort):
    """alerts.in.ua feed backed by an optional SQLite store."""

    def __init__(
        self,
        client: AlertsClient,
        geo: GeoIndex,
        db: Optional[RegionDB] = None,
    ):
        self._client = client
        self._geo = geo
        self._db = db

    async def fetch_regions(self) -> List[Region]:
        return await asyncio.to_thread(self._load_regions)

    def _load_regions(self) -> List[Region]:
        if self._db is None:
            return regions_from_geo(self._geo)
        regions = self._db.load_regions()
        if not regions:
            regions = regions_from_geo(self._geo)
            self._db.save_regions(regions)
            log.info("Seeded region table from the location registry")
        return regions

    async def fetch_status(self) -> AlertStatusString:
        return await asyncio.to_thread(self._fetch_status)

    def _fetch_status(self) -> AlertStatusString:
        raw = self._client.fetch_status_string()
        try:
            status = decode(raw)
        except DecodeError as exc:
            raise FetchError(FetchErrorKind.DECODE, str(exc)) from exc
        if self._db is not None:
            self._db.record_status(str(status))
        return status

    async def fetch_alerts(self) -> List[AlertRecord]:
        return await asyncio.to_thread(self._client.fetch_active_alerts)

    async def last_status(self) -> Optional[AlertStatusString]:
        if self._db is None:
            return None
        return await asyncio.to_thread(self._last_status)

    def _last_status(self) -> Optional[AlertStatusString]:
        recent = self._db.recent_statuses(limit=1)
        if not recent:
            return None
        try:
            return decode(recent[0]["status"])
        except DecodeError as exc:
            log.warning("Ignoring unreadable recorded status: %s", exc)
            return None

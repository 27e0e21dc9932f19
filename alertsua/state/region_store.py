"""
Region store — the canonical state of the 27 regions.

Holds the ordered regions with their alert status overlay, the list rows
derived from them and the list selection.  Every container is indexed by
region ordinal (0..26); regions are never reordered, added or removed
after :meth:`RegionStore.replace_regions`.

The store itself does no locking.  It is shared through
:class:`~alertsua.state.locking.SharedRegionStore`; only the controller
writes, and only while holding the write lock.

Example
-------
    store = RegionStore(regions)
    store.apply_status(decode("ANNAANNANNNPANANANNNNAANNNN"))
    store.status_snapshot()   # "ANNAANNANNNPANANANNNNAANNNN"
    store.select_top()
    store.select_previous()
    store.selected            # 26
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from .status_codec import REGION_COUNT, AlertStatus, AlertStatusString, encode

if TYPE_CHECKING:
    from ..ingest.alerts_client import AlertRecord

log = logging.getLogger(__name__)


class Locale(Enum):
    UK = "uk"
    EN = "en"

    def toggled(self) -> "Locale":
        return Locale.EN if self is Locale.UK else Locale.UK


class RegionCountError(ValueError):
    """Region metadata does not describe exactly 27 ordered regions."""


@dataclass(frozen=True)
class Region:
    """One administrative region."""

    ordinal: int                 # 0..26, position in every container
    admin_id: int                # feed oblast uid (location_oblast_uid)
    external_id: str             # ISO 3166-2 code, e.g. "UA-43"
    local_name: str
    romanized_name: str
    geometry: str = ""           # WKT; canonical shape lives in GeoIndex
    status: AlertStatus = AlertStatus.NONE

    def name(self, locale: Locale) -> str:
        return self.local_name if locale is Locale.UK else self.romanized_name


@dataclass(frozen=True)
class ListItem:
    """One row of the region list."""

    ordinal: int
    label: str
    status: AlertStatus


class RegionStore:
    """Ordered regions plus status, list rows and selection."""

    def __init__(
        self,
        regions: Optional[Sequence[Region]] = None,
        locale: Locale = Locale.UK,
    ):
        self._regions: Tuple[Region, ...] = ()
        self._items: Tuple[ListItem, ...] = ()
        self._locale = locale

        self._selected: Optional[int] = None
        self._last_selected: Optional[int] = None
        self._offset = 0
        self._page_size = REGION_COUNT

        if regions is not None:
            self.replace_regions(regions)

    # ── Read access ───────────────────────────────────────────────────

    @property
    def regions(self) -> Tuple[Region, ...]:
        return self._regions

    @property
    def items(self) -> Tuple[ListItem, ...]:
        return self._items

    @property
    def locale(self) -> Locale:
        return self._locale

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def page_size(self) -> int:
        return self._page_size

    def __len__(self) -> int:
        return len(self._regions)

    def status_snapshot(self) -> str:
        """Current status of all regions in the fixed-width feed form."""
        return encode(r.status for r in self._regions)

    # ── Domain writes ─────────────────────────────────────────────────

    def replace_regions(self, regions: Sequence[Region]) -> None:
        """Install the full region set (startup hydration).

        Raises
        ------
        RegionCountError
            Unless exactly 27 regions with ordinals 0..26, in order, are given.
        """
        regions = tuple(regions)
        if len(regions) != REGION_COUNT:
            raise RegionCountError(
                f"expected {REGION_COUNT} regions, got {len(regions)}"
            )
        for i, region in enumerate(regions):
            if region.ordinal != i:
                raise RegionCountError(
                    f"region {region.external_id!r} has ordinal "
                    f"{region.ordinal}, expected {i}"
                )
        self._regions = regions
        self._rebuild_items()
        log.info("Region store hydrated with %d regions", len(regions))

    def apply_status(self, status: AlertStatusString) -> None:
        """Overlay a decoded status string, ordinal by ordinal."""
        if not self._regions:
            log.warning("Status %s ignored: region store is empty", status)
            return
        self._regions = tuple(
            dataclasses.replace(region, status=status[region.ordinal])
            for region in self._regions
        )
        self._rebuild_items()

    def apply_alerts(self, alerts: Iterable["AlertRecord"]) -> None:
        """Set status from an alert list; regions without an alert are cleared."""
        alerted = {
            a.location_oblast_uid for a in alerts
            if a.location_oblast_uid is not None
        }
        self._regions = tuple(
            dataclasses.replace(
                region,
                status=(AlertStatus.ACTIVE if region.admin_id in alerted
                        else AlertStatus.NONE),
            )
            for region in self._regions
        )
        self._rebuild_items()

    def set_locale(self, locale: Locale) -> None:
        self._locale = locale
        self._rebuild_items()

    def _rebuild_items(self) -> None:
        items: List[ListItem] = []
        for region in self._regions:
            label = f"{region.ordinal}) {region.name(self._locale)}"
            if region.status.marker:
                label = f"{label} {region.status.marker}"
            items.append(ListItem(region.ordinal, label, region.status))
        self._items = tuple(items)

    # ── Selection ─────────────────────────────────────────────────────

    def set_page_size(self, rows: int) -> None:
        """Number of list rows visible at once."""
        self._page_size = max(1, rows)
        self._scroll_to_selection()

    def select_next(self) -> None:
        if not self._items:
            return
        if self._selected is None:
            i = self._last_selected or 0
        elif self._selected >= len(self._items) - 1:
            i = 0
        else:
            i = self._selected + 1
        self._select(i)

    def select_previous(self) -> None:
        if not self._items:
            return
        if self._selected is None:
            i = self._last_selected or 0
        elif self._selected == 0:
            i = len(self._items) - 1
        else:
            i = self._selected - 1
        self._select(i)

    def select_top(self) -> None:
        if self._items:
            self._select(0)

    def select_bottom(self) -> None:
        if self._items:
            self._select(len(self._items) - 1)

    def unselect(self) -> None:
        """Clear the selection, keeping the scroll offset."""
        if self._selected is not None:
            self._last_selected = self._selected
        self._selected = None

    def _select(self, index: int) -> None:
        self._selected = index
        self._scroll_to_selection()
        log.debug("Selected region %d", index)

    def _scroll_to_selection(self) -> None:
        if self._selected is None:
            return
        if self._selected < self._offset:
            self._offset = self._selected
        elif self._selected >= self._offset + self._page_size:
            self._offset = self._selected - self._page_size + 1

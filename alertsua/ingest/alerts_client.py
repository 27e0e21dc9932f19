"""
alerts.in.ua API client.

Two endpoints are used:

1. **Status string** — one character per region, in region ordinal order.
   Cheap, meant for frequent polling.
   GET /v1/iot/active_air_raid_alerts_by_oblast.json  →  "ANNAANN..."

2. **Active alerts** — the structured alert list.
   GET /v1/alerts/active.json  →  {"alerts": [{...}, ...]}

Every request carries the API token as a bearer credential and is bounded
by the client timeout.  Failures are raised as :class:`FetchError` with a
classified ``kind``.

Usage
-----
    client = AlertsClient(token="...")
    raw = client.fetch_status_string()     # "ANNAANNANNNPANANANNNNAANNNN"
    alerts = client.fetch_active_alerts()
    for a in alerts:
        print(a.location_title, a.alert_type)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from . import fetch_with_retry
from .errors import FetchError, FetchErrorKind, kind_for_status

log = logging.getLogger(__name__)

API_BASE_URL = "https://api.alerts.in.ua"
API_VERSION = "/v1"
API_ALERTS_ACTIVE = "/alerts/active.json"
API_ALERTS_BY_REGION_STRING = "/iot/active_air_raid_alerts_by_oblast.json"


@dataclass(frozen=True)
class AlertRecord:
    """One active alert from the alert list endpoint."""
    id: int
    location_title: str
    location_type: str          # "oblast", "raion", "hromada", "city"
    started_at: str
    finished_at: Optional[str]
    updated_at: str
    alert_type: str             # "air_raid", "artillery_shelling", ...
    location_oblast: str
    location_uid: str
    notes: Optional[str] = None
    location_oblast_uid: Optional[int] = None


def _parse_alert(item: dict) -> Optional[AlertRecord]:
    """Parse one entry of ``alerts[]``; None if it is malformed."""
    try:
        oblast_uid = item.get("location_oblast_uid")
        return AlertRecord(
            id=int(item["id"]),
            location_title=item.get("location_title", "") or "",
            location_type=item.get("location_type", "") or "",
            started_at=item.get("started_at", "") or "",
            finished_at=item.get("finished_at"),
            updated_at=item.get("updated_at", "") or "",
            alert_type=item.get("alert_type", "") or "",
            location_oblast=item.get("location_oblast", "") or "",
            location_uid=str(item.get("location_uid", "") or ""),
            notes=item.get("notes"),
            location_oblast_uid=int(oblast_uid) if oblast_uid is not None else None,
        )
    except (KeyError, TypeError, ValueError) as exc:
        log.debug("Failed to parse alert entry: %s", exc)
        return None


class AlertsClient:
    """Blocking HTTP client; call it from a worker thread."""

    def __init__(
        self,
        token: str,
        base_url: str = API_BASE_URL,
        timeout: float = 10.0,
        retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retries = retries
        self._session = session or requests.Session()

    def api_url(self, path: str) -> str:
        return f"{self._base_url}{API_VERSION}{path}"

    def _get_json(self, path: str):
        url = self.api_url(path)
        try:
            resp = fetch_with_retry(
                url,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout,
                retries=self._retries,
                session=self._session,
            )
        except requests.HTTPError as exc:
            code = exc.response.status_code if exc.response is not None else 0
            raise FetchError(kind_for_status(code), f"HTTP {code} from {path}") from exc
        except requests.RequestException as exc:
            raise FetchError(FetchErrorKind.NETWORK, str(exc)) from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(FetchErrorKind.DECODE,
                             f"invalid JSON from {path}: {exc}") from exc

    # ── Public API ────────────────────────────────────────────────────

    def fetch_status_string(self) -> str:
        """Fetch the per-region status string (not yet decoded)."""
        data = self._get_json(API_ALERTS_BY_REGION_STRING)
        if not isinstance(data, str):
            raise FetchError(FetchErrorKind.DECODE,
                             f"expected a JSON string, got {type(data).__name__}")
        log.info("Fetched alerts as string: %s, length: %d", data, len(data))
        return data

    def fetch_active_alerts(self) -> List[AlertRecord]:
        """Fetch the list of active alerts.

        Entries that cannot be parsed are skipped.
        """
        data = self._get_json(API_ALERTS_ACTIVE)
        if not isinstance(data, dict) or not isinstance(data.get("alerts"), list):
            raise FetchError(FetchErrorKind.DECODE, "response has no 'alerts' list")

        alerts: List[AlertRecord] = []
        for item in data["alerts"]:
            if not isinstance(item, dict):
                continue
            alert = _parse_alert(item)
            if alert is not None:
                alerts.append(alert)

        log.info("Fetched %d alerts (%d entries)", len(alerts), len(data["alerts"]))
        return alerts

    def close(self) -> None:
        self._session.close()

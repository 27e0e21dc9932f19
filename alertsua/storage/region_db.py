"""
SQLite-backed storage for region metadata and status history.

Region metadata is seeded once from the embedded location registry and
read back at startup.  Every fetched status string is appended to a
history table so past snapshots can be inspected.

Usage
-----
    db = RegionDB(Path("alertsua.sqlite"))
    if not db.load_regions():
        db.save_regions(regions)
    db.record_status("ANNAANNANNNPANANANNNNAANNNN")
    db.recent_statuses(limit=10)
"""
from __future__ import annotations

import logging
import sqlite3
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..state.region_store import Region

log = logging.getLogger(__name__)


class RegionDB:
    """Persistent storage for regions and status snapshots.

    Thread-safe: uses check_same_thread=False and serialises writes
    through a lock so fetch worker threads can call record_status().
    """

    def __init__(self, db_path: Path):
        self._path = Path(db_path)
        if str(self._path) != ":memory:":
            self._path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(self._path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._write_lock = threading.Lock()
        self._create_tables()
        log.info("RegionDB opened: %s", self._path)

    def _create_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS regions (
                ordinal         INTEGER PRIMARY KEY,
                admin_id        INTEGER NOT NULL,
                external_id     TEXT    NOT NULL,
                local_name      TEXT    NOT NULL,
                romanized_name  TEXT    NOT NULL,
                geometry        TEXT    NOT NULL DEFAULT ''
            );

            CREATE TABLE IF NOT EXISTS statuses (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                fetched_at  REAL    NOT NULL,
                status      TEXT    NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_statuses_ts
                ON statuses(fetched_at);
        """)
        self._conn.commit()

    def save_regions(self, regions: Sequence[Region]) -> None:
        """Replace the stored region metadata."""
        with self._write_lock:
            self._conn.execute("DELETE FROM regions")
            self._conn.executemany(
                "INSERT INTO regions (ordinal, admin_id, external_id, "
                "local_name, romanized_name, geometry) VALUES (?, ?, ?, ?, ?, ?)",
                [
                    (r.ordinal, r.admin_id, r.external_id,
                     r.local_name, r.romanized_name, r.geometry)
                    for r in regions
                ],
            )
            self._conn.commit()
        log.info("Stored %d regions", len(regions))

    def load_regions(self) -> List[Region]:
        """Stored regions ordered by ordinal (empty if never seeded)."""
        rows = self._conn.execute(
            "SELECT ordinal, admin_id, external_id, local_name, "
            "romanized_name, geometry FROM regions ORDER BY ordinal"
        ).fetchall()
        return [
            Region(
                ordinal=r[0], admin_id=r[1], external_id=r[2],
                local_name=r[3], romanized_name=r[4], geometry=r[5],
            )
            for r in rows
        ]

    def record_status(self, status: str, fetched_at: Optional[float] = None) -> None:
        """Append a fetched status string to the history (thread-safe)."""
        with self._write_lock:
            self._conn.execute(
                "INSERT INTO statuses (fetched_at, status) VALUES (?, ?)",
                (fetched_at if fetched_at is not None else time.time(), status),
            )
            self._conn.commit()

    def recent_statuses(self, limit: int = 20) -> List[Dict]:
        """Most recent status snapshots, newest first."""
        rows = self._conn.execute(
            "SELECT fetched_at, status FROM statuses "
            "ORDER BY fetched_at DESC, id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [{"fetched_at": r[0], "status": r[1]} for r in rows]

    def prune_old(self, days: float = 30.0) -> None:
        """Remove status history older than *days*."""
        cutoff = time.time() - days * 86400
        with self._write_lock:
            self._conn.execute(
                "DELETE FROM statuses WHERE fetched_at < ?", (cutoff,)
            )
            self._conn.commit()

    def close(self) -> None:
        with self._write_lock:
            self._conn.close()

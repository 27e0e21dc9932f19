from __future__ import annotations

import argparse
import asyncio
import logging
import sqlite3
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ENV_TOKEN, AppConfig, ConfigError, load_config
from .geo.geo_index import GeoDataError, GeoIndex
from .ingest.alerts_client import AlertsClient
from .ingest.data_port import AlertsDataPort
from .logger import setup_logging
from .state.locking import SharedRegionStore
from .state.region_store import Locale, RegionCountError, RegionStore
from .storage.region_db import RegionDB
from .tui.controller import AppController

log = logging.getLogger(__name__)

STATUS_HISTORY_DAYS = 30.0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alertsua",
        description=(
            "Terminal air-raid alert dashboard for the regions of Ukraine.\n"
            "Keys: q/Esc quit, Up/Down select, Home/End jump, Left clear,\n"
            "      u fetch now, l switch language, r redraw, z suspend"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--token",
        help=f"alerts.in.ua API token (default: ${ENV_TOKEN}).",
    )
    parser.add_argument("--base-url", help="API base URL.")
    parser.add_argument(
        "--locale",
        choices=["uk", "en"],
        help="Language of region names and panel titles.",
    )
    parser.add_argument("--tick-rate", type=float, help="Ticks per second.")
    parser.add_argument("--frame-rate", type=float, help="Frames per second.")
    parser.add_argument(
        "--fetch-interval",
        type=float,
        help="Seconds between automatic fetches.",
    )
    parser.add_argument(
        "--feed",
        choices=["status", "alerts"],
        help="'status' polls the per-region status string, "
             "'alerts' the structured alert list.",
    )
    parser.add_argument("--db-path", type=Path, help="SQLite database file.")
    parser.add_argument(
        "--no-db",
        action="store_true",
        help="Do not persist regions or status history.",
    )
    parser.add_argument("--config", type=Path, help="JSON config file.")
    parser.add_argument("--log-dir", type=Path, help="Directory for alertsua.log.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging (every non-timer action is logged).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config)
    config = config.merge({
        "token": args.token,
        "base_url": args.base_url,
        "locale": args.locale,
        "tick_rate": args.tick_rate,
        "frame_rate": args.frame_rate,
        "fetch_interval": args.fetch_interval,
        "feed": args.feed,
        "db_path": args.db_path,
        "log_dir": args.log_dir,
        "use_db": False if args.no_db else None,
        "verbose": True if args.verbose else None,
    })
    config.validate()
    if not config.token:
        raise ConfigError(
            f"no API token: pass --token or set {ENV_TOKEN}"
        )
    return config


async def run_app(config: AppConfig) -> None:
    geo = GeoIndex.load()

    db: Optional[RegionDB] = None
    if config.use_db:
        db = RegionDB(config.db_path)
        db.prune_old(STATUS_HISTORY_DAYS)

    client = AlertsClient(
        token=config.token,
        base_url=config.base_url,
        timeout=config.request_timeout,
    )
    port = AlertsDataPort(client, geo, db)
    try:
        regions = await port.fetch_regions()
        store = SharedRegionStore(RegionStore(regions))
        last = await port.last_status()
        if last is not None:
            with store.write() as s:
                s.apply_status(last)
            log.info("Restored last recorded status %s", last)

        controller = AppController(
            store,
            geo,
            port,
            tick_rate=config.tick_rate,
            frame_rate=config.frame_rate,
            fetch_interval=config.fetch_interval,
            initial_fetch_delay=config.initial_fetch_delay,
            feed=config.feed,
            locale=Locale(config.locale),
        )
        await controller.run()
    finally:
        client.close()
        if db is not None:
            db.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigError as exc:
        print(f"alertsua: {exc}", file=sys.stderr)
        return 1

    try:
        logfile = setup_logging(config.log_dir, config.verbose)
    except OSError as exc:
        print(f"alertsua: cannot open log in {config.log_dir}: {exc}", file=sys.stderr)
        return 1
    log.info("alertsua %s starting (log: %s)", __version__, logfile)

    try:
        asyncio.run(run_app(config))
    except (GeoDataError, RegionCountError, sqlite3.Error, OSError) as exc:
        log.error("Fatal: %s", exc)
        print(f"alertsua: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    log.info("alertsua exited")
    return 0


if __name__ == "__main__":
    sys.exit(main())

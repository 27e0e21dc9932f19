from __future__ import annotations

import logging
from pathlib import Path

LOG_FILE = "alertsua.log"


def setup_logging(log_dir: Path, verbose: bool = False) -> Path:
    # File only: the full-screen display owns stdout/stderr while running
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / LOG_FILE
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(logfile, encoding="utf-8"),
        ],
        force=True,
    )
    return logfile

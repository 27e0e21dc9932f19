"""Alert feed ingestion: HTTP access and the DataPort collaborator."""
from __future__ import annotations

import logging
import time
from typing import Dict, Optional

import requests

log = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10  # seconds


def fetch_with_retry(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[dict] = None,
    timeout: float = _DEFAULT_TIMEOUT,
    retries: int = 2,
    backoff: float = 1.0,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """GET *url* with automatic retry on transient failures.

    Retries on connection errors, timeouts, and 5xx responses.
    Raises on non-retryable errors (4xx) immediately.  When every attempt
    ends in a 5xx, the last response's HTTPError is raised.
    """
    get = session.get if session is not None else requests.get
    last_exc: Optional[Exception] = None
    for attempt in range(1, retries + 2):  # 1 initial + retries
        try:
            resp = get(url, headers=headers, params=params, timeout=timeout)
            if resp.status_code < 500:
                resp.raise_for_status()
                return resp
            log.warning("HTTP %d from %s (attempt %d/%d)",
                        resp.status_code, url[:80], attempt, retries + 1)
            last_exc = requests.HTTPError(
                f"{resp.status_code} Server Error for url: {url}", response=resp,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            last_exc = exc
            log.warning("Network error on %s (attempt %d/%d): %s",
                        url[:80], attempt, retries + 1, exc)
        except requests.HTTPError:
            raise

        if attempt <= retries:
            wait = backoff * attempt
            time.sleep(wait)

    raise last_exc or requests.ConnectionError(f"Failed after {retries + 1} attempts")

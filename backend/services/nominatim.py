"""Forward place search helpers using OpenStreetMap Nominatim.

Requests share one session, one set of identifying headers and a global
minimum interval between calls, as the Nominatim usage policy asks.
"""

from __future__ import annotations

import logging
import os
import re
import threading
import time
from typing import Any

import requests

NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org").rstrip("/")
logger = logging.getLogger(__name__)
_session = requests.Session()
_last_request_ts: float = 0.0
_lock = threading.Lock()
_MIN_INTERVAL_SEC = float(os.getenv("NOMINATIM_MIN_INTERVAL", "1.1"))
_logged_ua = False
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT")
NOMINATIM_REFERER = os.getenv("NOMINATIM_REFERER")
NOMINATIM_TIMEOUT_SEC = 5.0

FALLBACK_UA = "globe-flight/0.1 (contact: example@example.com)"


def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)


_ua_value = NOMINATIM_USER_AGENT or FALLBACK_UA
NOMINATIM_HEADERS = {
    "User-Agent": _ua_value,
}
if NOMINATIM_REFERER:
    NOMINATIM_HEADERS["Referer"] = NOMINATIM_REFERER


def _throttled_get(
    url: str,
    *,
    params: dict[str, Any],
    headers: dict[str, str],
    timeout: float,
) -> requests.Response:
    """Perform a GET request with a simple global rate limit."""
    global _last_request_ts, _logged_ua
    if not _logged_ua:
        if NOMINATIM_USER_AGENT is None:
            logger.warning(
                "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
                "This may violate Nominatim usage policy."
            )
        logger.debug("Nominatim User-Agent: %s", _redact_email(_ua_value))
        _logged_ua = True
    with _lock:
        now = time.time()
        delta = now - _last_request_ts
        if delta < _MIN_INTERVAL_SEC:
            time.sleep(_MIN_INTERVAL_SEC - delta)
        _last_request_ts = time.time()
    return _session.get(url, params=params, headers=headers, timeout=timeout)


def _get_json_list(path: str, params: dict[str, Any]) -> list[dict]:
    resp = _throttled_get(
        f"{NOMINATIM_BASE_URL}/{path}",
        params=params,
        headers=NOMINATIM_HEADERS,
        timeout=NOMINATIM_TIMEOUT_SEC,
    )
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, list):
        raise ValueError(f"unexpected Nominatim {path} payload: {type(data).__name__}")
    return [item for item in data if isinstance(item, dict)]


def search_places(text: str, limit: int = 5) -> list[dict]:
    """Free-text search; returns raw jsonv2 result dicts.

    Raises requests.RequestException on transport/HTTP errors and ValueError on
    payloads that are not a JSON list.
    """
    return _get_json_list(
        "search",
        {
            "q": text,
            "format": "jsonv2",
            "limit": str(limit),
            "addressdetails": "0",
        },
    )


def lookup_place(osm_ids: str) -> list[dict]:
    """Look up places by OSM id ("N123", "W456", "R789", comma separated)."""
    return _get_json_list(
        "lookup",
        {
            "osm_ids": osm_ids,
            "format": "jsonv2",
        },
    )


def osm_token(item: dict) -> str | None:
    """Build the lookup id for a search result, e.g. relation 62422 -> 'R62422'."""
    osm_type = str(item.get("osm_type") or "").strip().lower()
    osm_id = item.get("osm_id")
    if not osm_type or osm_id in (None, ""):
        return None
    prefix = {"node": "N", "way": "W", "relation": "R"}.get(osm_type)
    if prefix is None:
        return None
    return f"{prefix}{osm_id}"

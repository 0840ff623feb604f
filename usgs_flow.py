"""
usgs_flow.py

Instantaneous discharge from the USGS Water Data OGC API.

    https://api.waterdata.usgs.gov/ogcapi/v0/collections/continuous/items

One GET per gauge returns a GeoJSON FeatureCollection. Each feature carries
the reading under its properties object:

    {"type": "Feature",
     "properties": {"time": "2025-06-01T14:15:00+00:00",
                    "value": "1230",
                    "unit_of_measure": "ft^3/s", ...}}

parse_usgs_response() turns that payload into a flow series: a list of
FlowSample sorted by timestamp with one sample per timestamp. Anything
that does not look like the payload above yields an empty list.
"""

from datetime import datetime
from typing import NamedTuple

import numpy as np
import pandas as pd
import requests

# ── USGS OGC API ──────────────────────────────────────────────────────────────
USGS_OGC_URL     = "https://api.waterdata.usgs.gov/ogcapi/v0/collections/continuous/items"
LOCATION_PREFIX  = "USGS-"
DISCHARGE_CODE   = "00060"   # discharge, cubic feet per second
HISTORY_WINDOW   = "PT48H"   # ISO-8601 duration: last 48 hours
MAX_OBSERVATIONS = 500       # 15-minute data over 48 h is 192 rows
REQUEST_TIMEOUT  = 30        # seconds


class FlowSample(NamedTuple):
    timestamp: datetime   # timezone-aware, UTC
    flow: float           # cfs


def build_query(gauge_id: str) -> dict[str, str]:
    """Query parameters for the last 48 hours of discharge at one gauge."""
    return {
        "monitoring_location_id": f"{LOCATION_PREFIX}{gauge_id}",
        "parameter_code":         DISCHARGE_CODE,
        "time":                   HISTORY_WINDOW,
        "limit":                  str(MAX_OBSERVATIONS),
    }


def fetch_usgs_payload(gauge_id: str, session=requests,
                       timeout: float = REQUEST_TIMEOUT) -> dict:
    """
    Issue the GET and return the decoded JSON body.

    Raises requests.RequestException on connection errors, timeouts and
    non-2xx responses, and ValueError when the body is not JSON.
    """
    resp = session.get(
        USGS_OGC_URL,
        params=build_query(gauge_id),
        headers={"Accept": "application/geo+json, application/json"},
        timeout=timeout,
    )
    resp.raise_for_status()
    return resp.json()


# ── Normalisation ─────────────────────────────────────────────────────────────

def safe_float(val) -> float | None:
    try:
        return float(val)
    except (ValueError, TypeError, OverflowError):
        return None


def _raw_records(payload) -> list[tuple[str, float]]:
    """(time, flow) pairs for every feature with a time string and a numeric value."""
    if not isinstance(payload, dict):
        return []
    features = payload.get("features")
    if not isinstance(features, list):
        return []

    records = []
    for feature in features:
        props = feature.get("properties") if isinstance(feature, dict) else None
        if not isinstance(props, dict):
            continue
        ts  = props.get("time")
        val = props.get("value")
        if not isinstance(ts, str) or not ts:
            continue
        if val is None or isinstance(val, bool):
            continue
        flow = safe_float(val)
        if flow is None:
            continue
        records.append((ts, flow))
    return records


def deduplicate(samples: list[FlowSample]) -> list[FlowSample]:
    """Sort by timestamp and collapse duplicate timestamps (keep last occurrence)."""
    latest: dict[datetime, FlowSample] = {}
    for sample in sorted(samples, key=lambda s: s.timestamp):
        latest[sample.timestamp] = sample
    return list(latest.values())


def parse_usgs_response(payload) -> list[FlowSample]:
    """
    Convert a USGS FeatureCollection into an ascending flow series.

    Features without a parseable time or a numeric value are dropped, as are
    negative readings (USGS uses -999999 for "no data"). Values arrive as
    strings, so numeric strings are accepted.
    """
    records = _raw_records(payload)
    if not records:
        return []

    frame = pd.DataFrame(records, columns=["time", "value"])
    frame["time"]  = pd.to_datetime(frame["time"], utc=True, errors="coerce",
                                    format="ISO8601")
    values = frame["value"].to_numpy(dtype=float)
    keep = frame["time"].notna().to_numpy() & np.isfinite(values) & (values >= 0)
    frame = frame[keep]

    samples = [
        FlowSample(ts.to_pydatetime(), float(val))
        for ts, val in zip(frame["time"], frame["value"])
    ]
    return deduplicate(samples)

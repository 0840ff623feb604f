#!/usr/bin/env python3
"""
live_check.py

Smoke test against the real USGS Water Data API for one gauge.
The unit tests never touch the network; run this by hand when the API
changes or a gauge starts showing "No Data".

Usage:
    python live_check.py
    python live_check.py --gauge 03189600
"""

import argparse
import asyncio
import sys

import requests

from gauge_provider import SOURCE_REMOTE, GaugeDataProvider
from usgs_flow import fetch_usgs_payload, parse_usgs_response

DEFAULT_GAUGE = "03081500"   # Youghiogheny River at Ohiopyle, reports year-round

PASS = "PASS"
FAIL = "FAIL"


def check(label, ok, detail=""):
    icon = PASS if ok else FAIL
    print(f"  [{icon}] {label}" + (f" - {detail}" if detail else ""))
    return ok


def check_endpoint(gauge_id: str) -> bool:
    print(f"\n-- USGS OGC API (gauge {gauge_id}) ---------------------------")
    try:
        payload = fetch_usgs_payload(gauge_id)
    except (requests.RequestException, ValueError) as exc:
        return check("API reachable", False, str(exc))
    check("API reachable", True)

    features = payload.get("features") if isinstance(payload, dict) else None
    check("FeatureCollection returned", isinstance(features, list),
          f"{len(features)} feature(s)" if isinstance(features, list) else type(payload).__name__)

    series = parse_usgs_response(payload)
    if not check("Usable readings", bool(series), f"{len(series)} sample(s)"):
        return False
    check("Ascending timestamps",
          all(a.timestamp < b.timestamp for a, b in zip(series, series[1:])))
    latest = series[-1]
    return check("Latest reading", latest.flow >= 0,
                 f"{latest.flow:.0f} cfs at {latest.timestamp.isoformat()}")


def check_provider(gauge_id: str) -> bool:
    print(f"\n-- Provider cascade (gauge {gauge_id}) ------------------------")
    provider = GaugeDataProvider()

    async def twice():
        first = await provider.fetch_with_source(gauge_id)
        second = await provider.fetch_with_source(gauge_id)
        return first, second

    first, second = asyncio.run(twice())
    ok = check("First call hit USGS", first.source == SOURCE_REMOTE, first.source)
    ok &= check("Second call served from cache", second.series is first.series, second.source)
    return ok


def main():
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--gauge", default=DEFAULT_GAUGE, help="USGS site number")
    args = parser.parse_args()

    results = [check_endpoint(args.gauge), check_provider(args.gauge)]

    print(f"\n{'=' * 60}")
    print(f" {sum(results)}/{len(results)} checks passed")
    print(f"{'=' * 60}")
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())

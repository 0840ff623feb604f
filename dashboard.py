#!/usr/bin/env python3
"""
dashboard.py

Current runnability of every river in the catalog.

Fetches the flow history for each river's gauge concurrently (one USGS
request per gauge, cached for five minutes), takes the latest reading and
classifies it against the river's runnable range. A river whose fetch
produced no data at all is reported as "No Data" rather than failing the
whole dashboard.

Rivers are listed highest first by where the flow sits within the runnable
range (0 % = at the minimum, 100 % = at the maximum).

Usage:
    python dashboard.py
    python dashboard.py --runnable-only
    python dashboard.py --rivers my_rivers.json -v
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import NamedTuple

from gauge_provider import GaugeDataProvider
from rivers_config import RiverProfile, load_rivers
from stage import StageStatus, classify, flow_percentage, status_label

log = logging.getLogger(__name__)


class RiverReading(NamedTuple):
    river: RiverProfile
    flow: float | None
    observed_at: datetime | None
    status: StageStatus
    source: str | None      # provider cascade stage, None when the fetch raised


def reading_from_result(river: RiverProfile, result) -> RiverReading:
    """Turn one provider result (or the exception it raised) into a reading."""
    if isinstance(result, BaseException):
        log.error("%s: flow fetch failed: %s", river.name, result)
        return RiverReading(river, None, None, StageStatus.UNKNOWN, None)
    if not result.series:
        return RiverReading(river, None, None, StageStatus.UNKNOWN, result.source)
    latest = result.series[-1]
    return RiverReading(
        river,
        latest.flow,
        latest.timestamp,
        classify(latest.flow, river.runnable),
        result.source,
    )


async def load_dashboard(rivers: list[RiverProfile],
                         provider: GaugeDataProvider) -> list[RiverReading]:
    """One fetch per river, all in flight at once. Results keep catalog order."""
    results = await asyncio.gather(
        *(provider.fetch_with_source(r.gauge_id) for r in rivers),
        return_exceptions=True,
    )
    return [reading_from_result(r, res) for r, res in zip(rivers, results)]


def reading_percentage(reading: RiverReading) -> float:
    flow = reading.flow if reading.flow is not None else 0.0
    return flow_percentage(flow, reading.river.runnable)


def displayed_readings(readings: list[RiverReading],
                       runnable_only: bool = False) -> list[RiverReading]:
    if runnable_only:
        readings = [r for r in readings if r.status is StageStatus.RUNNABLE]
    return sorted(readings, key=reading_percentage, reverse=True)


def format_reading(reading: RiverReading) -> str:
    river = reading.river
    flow  = f"{reading.flow:.0f}" if reading.flow is not None else "-"
    return (
        f"  {river.name:<28} {flow:>7} cfs  "
        f"{status_label(reading.status):<9} "
        f"({river.runnable.min:.0f}-{river.runnable.max:.0f})"
    )


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--runnable-only", action="store_true",
                        help="Only list rivers that are currently runnable")
    parser.add_argument("--rivers", type=Path, default=None,
                        help="JSON catalog to use instead of rivers_config.RIVERS")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log cache and USGS activity")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    rivers = load_rivers(args.rivers)
    print(f"Fetching flows for {len(rivers)} river(s) ...")
    readings = asyncio.run(load_dashboard(rivers, GaugeDataProvider()))
    shown = displayed_readings(readings, runnable_only=args.runnable_only)

    print(f"\n{'=' * 60}")
    print(" River runnability")
    print(f"{'=' * 60}")
    for reading in shown:
        print(format_reading(reading))
    if not shown:
        print("  Nothing runnable right now.")

    missing = sum(1 for r in readings if r.status is StageStatus.UNKNOWN)
    if missing:
        print(f"\n  WARNING: no data for {missing} river(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
flow_chart.py

48-hour flow chart for one river: the discharge line drawn over three
shaded bands (too low / runnable / too high).

project() works out everything the chart needs from the series and the
river's runnable range:
  - time domain   first to last sample
  - value domain  runnable range padded 20 % each side, widened when the
                  series runs outside it, never below zero
  - bands         below / inside / above the runnable range
  - nearest()     the sample closest to a pointer position, for tooltips

Usage:
    python flow_chart.py lower-yough
    python flow_chart.py lower-yough -o yough.png --rivers my_rivers.json

Output: {river_id}_flow.png unless -o is given.
"""

import argparse
import asyncio
import logging
import sys
from bisect import bisect_left
from datetime import datetime
from pathlib import Path
from typing import NamedTuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.dates as mdates
import matplotlib.pyplot as plt

from gauge_provider import GaugeDataProvider
from rivers_config import RiverProfile, RunnableRange, find_river, load_rivers
from stage import StageStatus, classify, status_colour, status_label
from usgs_flow import FlowSample

# ── Value-domain padding ──────────────────────────────────────────────────────
RANGE_PAD_LOW   = 0.8    # lower bound = runnable.min * 0.8
RANGE_PAD_HIGH  = 1.2    # upper bound = runnable.max * 1.2
SERIES_PAD_LOW  = 0.9    # widened lower bound = series min * 0.9
SERIES_PAD_HIGH = 1.1    # widened upper bound = series max * 1.1

LINE_COLOUR = "#00d4ff"
BAND_ALPHA  = {StageStatus.TOO_LOW: 0.10, StageStatus.RUNNABLE: 0.15, StageStatus.TOO_HIGH: 0.10}


class Band(NamedTuple):
    status: StageStatus
    lower: float
    upper: float


class ChartProjection(NamedTuple):
    series: list[FlowSample]
    time_domain: tuple[datetime, datetime] | None
    value_domain: tuple[float, float]
    bands: list[Band]

    def nearest(self, position: datetime) -> FlowSample | None:
        """Sample whose timestamp is closest to `position`. Ties go to the earlier sample."""
        if not self.series:
            return None
        times = [s.timestamp for s in self.series]
        i = bisect_left(times, position)
        if i == 0:
            return self.series[0]
        if i == len(self.series):
            return self.series[-1]
        before, after = self.series[i - 1], self.series[i]
        if position - before.timestamp <= after.timestamp - position:
            return before
        return after

    def position_at(self, x: float, width: float) -> datetime | None:
        """Invert the time axis: pixel offset `x` on a chart `width` wide → instant."""
        if self.time_domain is None or width <= 0:
            return None
        start, end = self.time_domain
        return start + (end - start) * (x / width)


def value_bounds(series: list[FlowSample], runnable: RunnableRange) -> tuple[float, float]:
    lower = runnable.min * RANGE_PAD_LOW
    upper = runnable.max * RANGE_PAD_HIGH
    if series:
        flows = [s.flow for s in series]
        lowest, highest = min(flows), max(flows)
        if lowest < lower:
            lower = lowest * SERIES_PAD_LOW
        if highest > upper:
            upper = highest * SERIES_PAD_HIGH
    return max(0.0, lower), upper


def status_bands(lower: float, upper: float, runnable: RunnableRange) -> list[Band]:
    """Three contiguous bands covering [lower, upper]."""
    low_edge  = min(max(runnable.min, lower), upper)
    high_edge = min(max(runnable.max, low_edge), upper)
    return [
        Band(StageStatus.TOO_LOW,  lower,     low_edge),
        Band(StageStatus.RUNNABLE, low_edge,  high_edge),
        Band(StageStatus.TOO_HIGH, high_edge, upper),
    ]


def project(series: list[FlowSample], runnable: RunnableRange) -> ChartProjection:
    time_domain = (series[0].timestamp, series[-1].timestamp) if series else None
    lower, upper = value_bounds(series, runnable)
    return ChartProjection(
        series=series,
        time_domain=time_domain,
        value_domain=(lower, upper),
        bands=status_bands(lower, upper, runnable),
    )


# ── Rendering ─────────────────────────────────────────────────────────────────

def plot_flow_chart(river: RiverProfile, series: list[FlowSample], path: Path) -> Path:
    """Draw the 48-hour chart for `river` and save it as a PNG."""
    proj = project(series, river.runnable)

    fig, ax = plt.subplots(figsize=(10, 5))

    for band in proj.bands:
        ax.axhspan(band.lower, band.upper, color=status_colour(band.status),
                   alpha=BAND_ALPHA[band.status], linewidth=0)

    ax.axhline(river.runnable.min, color=status_colour(StageStatus.RUNNABLE),
               linestyle="--", alpha=0.5)
    ax.axhline(river.runnable.max, color=status_colour(StageStatus.TOO_HIGH),
               linestyle="--", alpha=0.5)

    if series:
        ax.plot([s.timestamp for s in series], [s.flow for s in series],
                color=LINE_COLOUR, linewidth=2.5, marker="o", markersize=3)
    else:
        ax.text(0.5, 0.5, "No data", transform=ax.transAxes,
                ha="center", va="center", color="#6c757d")

    ax.set_ylim(*proj.value_domain)
    if proj.time_domain and proj.time_domain[0] < proj.time_domain[1]:
        ax.set_xlim(*proj.time_domain)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%H:%M %d %b"))
    ax.set_xlabel("Time (Last 48 Hours)")
    ax.set_ylabel("Flow (cfs)")
    ax.set_title(f"{river.name}, {river.location}")
    fig.autofmt_xdate()

    path = Path(path)
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return path


def format_flow_time(ts: datetime) -> str:
    return ts.astimezone().strftime("%H:%M %a %d %b")


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("river_id", help="River id from rivers_config.py (e.g. lower-yough)")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="PNG path (default: {river_id}_flow.png)")
    parser.add_argument("--rivers", type=Path, default=None,
                        help="JSON catalog to use instead of rivers_config.RIVERS")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log cache and USGS activity")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    river = find_river(load_rivers(args.rivers), args.river_id)
    if river is None:
        print(f"ERROR: river '{args.river_id}' not found in catalog.")
        return 1

    result = asyncio.run(GaugeDataProvider().fetch_with_source(river.gauge_id))
    series = result.series

    print(f"\n{'-' * 60}")
    print(f"{river.name} ({river.location})  USGS {river.gauge_id}")
    print(f"{'-' * 60}")
    print(f"  Runnable: {river.runnable.min:.0f}-{river.runnable.max:.0f} cfs")
    if series:
        latest = series[-1]
        status = classify(latest.flow, river.runnable)
        print(f"  Current:  {latest.flow:.0f} cfs at {format_flow_time(latest.timestamp)}")
        print(f"  Status:   {status_label(status)}")
    else:
        print(f"  Status:   {status_label(StageStatus.UNKNOWN)}")
    print(f"  Source:   {result.source} ({len(series)} samples)")

    out = plot_flow_chart(river, series, args.output or Path(f"{river.id}_flow.png"))
    print(f"  Chart -> {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

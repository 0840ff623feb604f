"""
synthetic_flow.py

Placeholder flow history for when USGS has nothing to give us and there is
no cached reading either. The numbers only need to look like a river so the
dashboard and chart stay populated; they say nothing about the real gauge.

Model per hourly sample i (0 = 47 h ago, 47 = now):
    base + sin(i / 10) * 300 + U(0, 200), floored at SYNTHETIC_FLOOR
with base drawn once per call from U(1500, 2000).
"""

import logging
from datetime import datetime, timedelta, timezone

import numpy as np

from usgs_flow import FlowSample

log = logging.getLogger(__name__)

SYNTHETIC_HOURS = 48
SYNTHETIC_FLOOR = 500.0    # cfs
BASE_FLOW_LOW   = 1500.0
BASE_FLOW_SPAN  = 500.0
WAVE_AMPLITUDE  = 300.0
WAVE_PERIOD     = 10.0     # sin(i / WAVE_PERIOD)
NOISE_SPAN      = 200.0


def generate_synthetic_series(gauge_id: str, now: datetime | None = None,
                              rng: np.random.Generator | None = None) -> list[FlowSample]:
    """
    Return SYNTHETIC_HOURS hourly samples ending at `now`.

    Pass a seeded numpy Generator for reproducible output.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if rng is None:
        rng = np.random.default_rng()

    hours = np.arange(SYNTHETIC_HOURS)
    base  = BASE_FLOW_LOW + rng.random() * BASE_FLOW_SPAN
    wave  = np.sin(hours / WAVE_PERIOD) * WAVE_AMPLITUDE
    noise = rng.random(SYNTHETIC_HOURS) * NOISE_SPAN
    flows = np.maximum(SYNTHETIC_FLOOR, base + wave + noise)

    log.debug("synthetic series for gauge %s: base %.0f cfs", gauge_id, base)
    return [
        FlowSample(now - timedelta(hours=int(SYNTHETIC_HOURS - 1 - i)), float(flow))
        for i, flow in zip(hours, flows)
    ]

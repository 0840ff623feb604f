"""
rivers_config.py

Single source of truth for the rivers shown on the dashboard.
dashboard.py and flow_chart.py load their catalog from here.

To add a river: append a dict to RIVERS following the same structure.
The dict layout matches the JSON catalog document accepted by
load_rivers(), so an entry can be moved between the two unchanged:

    {"rivers": [{"id": ..., "name": ..., "location": ..., "gaugeId": ...,
                 "runnable": {"min": ..., "max": ...},
                 "description": ...}]}

Runnable ranges are in cubic feet per second (cfs) at the listed USGS gauge.
They are community guidebook numbers for intermediate paddlers, not safety
guarantees.

Gauges (USGS site numbers):
    03081500  Youghiogheny River at Ohiopyle, PA       Lower Yough
    03189600  Gauley River below Summersville Dam, WV  Upper Gauley
    03185400  New River at Thurmond, WV                New River Gorge
    03505550  Nantahala River near Hewitt, NC          Nantahala gorge
    01646500  Potomac River near Wash, DC Little Falls Mather Gorge
    07091200  Arkansas River near Nathrop, CO          Browns Canyon
"""

import json
from pathlib import Path
from typing import NamedTuple


class RunnableRange(NamedTuple):
    min: float
    max: float


class RiverProfile(NamedTuple):
    id: str
    name: str
    location: str
    gauge_id: str
    runnable: RunnableRange
    description: str


RIVERS = [
    {
        # ── Lower Yough ──────────────────────────────────────────────────────
        "id":          "lower-yough",
        "name":        "Lower Youghiogheny",
        "location":    "Ohiopyle, PA",
        "gaugeId":     "03081500",
        "runnable":    {"min": 700, "max": 2500},
        "description": "Classic class III-IV pool-drop run below Ohiopyle Falls.",
    },
    {
        # ── Upper Gauley (dam release) ───────────────────────────────────────
        # Fall release schedule runs ~2800 cfs; lower flows are boney.
        "id":          "upper-gauley",
        "name":        "Upper Gauley",
        "location":    "Summersville, WV",
        "gaugeId":     "03189600",
        "runnable":    {"min": 1000, "max": 5000},
        "description": "Big-water class V below Summersville Dam.",
    },
    {
        # ── New River Gorge ──────────────────────────────────────────────────
        "id":          "new-river-gorge",
        "name":        "New River Gorge",
        "location":    "Thurmond, WV",
        "gaugeId":     "03185400",
        "runnable":    {"min": 1200, "max": 12000},
        "description": "Large-volume class III-IV through the gorge to Fayette Station.",
    },
    {
        # ── Nantahala ────────────────────────────────────────────────────────
        "id":          "nantahala",
        "name":        "Nantahala River",
        "location":    "Bryson City, NC",
        "gaugeId":     "03505550",
        "runnable":    {"min": 400, "max": 1500},
        "description": "Cold, continuous class II-III with Nantahala Falls at the takeout.",
    },
    {
        # ── Mather Gorge ─────────────────────────────────────────────────────
        # Little Falls gauge sits downstream of Great Falls; lag is a few hours.
        "id":          "mather-gorge",
        "name":        "Potomac - Mather Gorge",
        "location":    "Great Falls, MD/VA",
        "gaugeId":     "01646500",
        "runnable":    {"min": 1500, "max": 20000},
        "description": "Class II-III gorge below Great Falls with easy access from both banks.",
    },
    {
        # ── Browns Canyon ────────────────────────────────────────────────────
        "id":          "browns-canyon",
        "name":        "Arkansas - Browns Canyon",
        "location":    "Nathrop, CO",
        "gaugeId":     "07091200",
        "runnable":    {"min": 600, "max": 3000},
        "description": "Granite-walled class III canyon, runnable through most of summer.",
    },
]


def river_from_dict(entry: dict) -> RiverProfile:
    """Build a RiverProfile from one catalog record. Missing fields raise KeyError."""
    runnable = entry["runnable"]
    return RiverProfile(
        id=str(entry["id"]),
        name=entry["name"],
        location=entry.get("location", ""),
        gauge_id=str(entry["gaugeId"]),
        runnable=RunnableRange(float(runnable["min"]), float(runnable["max"])),
        description=entry.get("description", ""),
    )


def load_rivers(path: Path | None = None) -> list[RiverProfile]:
    """
    Load the river catalog.

    With no path, returns the built-in RIVERS. Otherwise reads a JSON
    document of the form {"rivers": [...]} from disk.
    """
    if path is None:
        entries = RIVERS
    else:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
        if not isinstance(document, dict) or not isinstance(document.get("rivers"), list):
            raise ValueError(f"{path}: expected an object with a 'rivers' array")
        entries = document["rivers"]
    return [river_from_dict(e) for e in entries]


def find_river(rivers: list[RiverProfile], river_id: str) -> RiverProfile | None:
    return next((r for r in rivers if r.id == river_id), None)

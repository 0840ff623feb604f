"""
stage.py

Is the river runnable right now? Compares a flow reading against a river's
runnable range. Both ends of the range count as runnable.
"""

from enum import Enum

from rivers_config import RunnableRange


class StageStatus(str, Enum):
    TOO_LOW  = "tooLow"
    RUNNABLE = "runnable"
    TOO_HIGH = "tooHigh"
    UNKNOWN  = "unknown"    # no reading at all; never returned by classify()


STATUS_LABELS = {
    StageStatus.TOO_LOW:  "Too Low",
    StageStatus.RUNNABLE: "Runnable",
    StageStatus.TOO_HIGH: "Too High",
    StageStatus.UNKNOWN:  "No Data",
}

STATUS_COLOURS = {
    StageStatus.TOO_LOW:  "#dc3545",   # red
    StageStatus.RUNNABLE: "#28a745",   # green
    StageStatus.TOO_HIGH: "#ffc107",   # yellow
    StageStatus.UNKNOWN:  "#6c757d",   # grey
}


def classify(flow: float, runnable: RunnableRange) -> StageStatus:
    if flow < runnable.min:
        return StageStatus.TOO_LOW
    if flow > runnable.max:
        return StageStatus.TOO_HIGH
    return StageStatus.RUNNABLE


def status_label(status: StageStatus) -> str:
    return STATUS_LABELS[status]


def status_colour(status: StageStatus) -> str:
    return STATUS_COLOURS[status]


def flow_percentage(flow: float, runnable: RunnableRange) -> float:
    """
    Position of `flow` within the runnable range: 0 at min, 100 at max.
    Below min goes negative, above max goes past 100. A zero-width range
    reports 0.
    """
    width = runnable.max - runnable.min
    if width <= 0:
        return 0.0
    return (flow - runnable.min) / width * 100

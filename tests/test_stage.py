"""
tests/test_stage.py

Runnable-range classification, labels and range percentage.
"""

import pytest

from rivers_config import RunnableRange
from stage import (
    StageStatus,
    classify,
    flow_percentage,
    status_colour,
    status_label,
)

YOUGH = RunnableRange(700, 2500)


class TestClassify:
    def test_below_min(self):
        assert classify(699.9, YOUGH) is StageStatus.TOO_LOW

    def test_above_max(self):
        assert classify(2500.1, YOUGH) is StageStatus.TOO_HIGH

    def test_inside(self):
        assert classify(1200, YOUGH) is StageStatus.RUNNABLE

    def test_boundaries_are_runnable(self):
        assert classify(700, YOUGH) is StageStatus.RUNNABLE
        assert classify(2500, YOUGH) is StageStatus.RUNNABLE

    def test_zero_width_range(self):
        rng = RunnableRange(500, 500)
        assert classify(500, rng) is StageStatus.RUNNABLE
        assert classify(499, rng) is StageStatus.TOO_LOW
        assert classify(501, rng) is StageStatus.TOO_HIGH

    @pytest.mark.parametrize("flow", [0, 100, 699, 700, 1500, 2500, 2501, 10000])
    def test_matches_interval_definition(self, flow):
        status = classify(flow, YOUGH)
        assert (status is StageStatus.TOO_LOW) == (flow < 700)
        assert (status is StageStatus.TOO_HIGH) == (flow > 2500)
        assert (status is StageStatus.RUNNABLE) == (700 <= flow <= 2500)
        assert status is not StageStatus.UNKNOWN


class TestLabels:
    def test_labels(self):
        assert status_label(StageStatus.TOO_LOW) == "Too Low"
        assert status_label(StageStatus.RUNNABLE) == "Runnable"
        assert status_label(StageStatus.TOO_HIGH) == "Too High"
        assert status_label(StageStatus.UNKNOWN) == "No Data"

    def test_every_status_has_a_colour(self):
        for status in StageStatus:
            assert status_colour(status).startswith("#")

    def test_status_values(self):
        assert StageStatus.TOO_LOW.value == "tooLow"
        assert StageStatus("runnable") is StageStatus.RUNNABLE


class TestFlowPercentage:
    def test_at_min_and_max(self):
        assert flow_percentage(700, YOUGH) == 0
        assert flow_percentage(2500, YOUGH) == pytest.approx(100)

    def test_midpoint(self):
        assert flow_percentage(1600, YOUGH) == pytest.approx(50)

    def test_outside_range(self):
        assert flow_percentage(0, YOUGH) < 0
        assert flow_percentage(3400, YOUGH) == pytest.approx(150)

    def test_zero_width_range(self):
        assert flow_percentage(1000, RunnableRange(500, 500)) == 0

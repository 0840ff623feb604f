"""
Shared fakes for the provider and dashboard tests.
No network: FakeSession stands in for the requests module.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import requests

# Allow imports from the project root
sys.path.insert(0, str(Path(__file__).parent.parent))


def usgs_payload(*records):
    """FeatureCollection with one feature per (time, value) pair."""
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"time": t, "value": v}}
            for t, v in records
        ],
    }


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """
    Replays queued outcomes in order; the last one repeats once the queue
    runs dry. An outcome is a FakeResponse or an exception to raise.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeClock:
    def __init__(self, now=datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()

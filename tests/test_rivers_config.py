"""
tests/test_rivers_config.py

Built-in river catalog and JSON catalog loading.
"""

import json

import pytest

from rivers_config import RIVERS, RiverProfile, RunnableRange, find_river, load_rivers


class TestBuiltInCatalog:
    def test_loads(self):
        rivers = load_rivers()
        assert len(rivers) == len(RIVERS) > 0
        assert all(isinstance(r, RiverProfile) for r in rivers)

    def test_ids_unique(self):
        ids = [r.id for r in load_rivers()]
        assert len(ids) == len(set(ids))

    def test_gauge_ids_are_usgs_site_numbers(self):
        for r in load_rivers():
            assert r.gauge_id.isdigit() and len(r.gauge_id) >= 8, r.gauge_id

    def test_runnable_ranges_ordered(self):
        for r in load_rivers():
            assert 0 <= r.runnable.min <= r.runnable.max, r.id


class TestLoadRiversFromFile:
    DOC = {
        "rivers": [{
            "id": "lower-yough",
            "name": "Lower Youghiogheny",
            "location": "Ohiopyle, PA",
            "gaugeId": "03081500",
            "runnable": {"min": 700, "max": 2500},
            "description": "Pool-drop",
        }]
    }

    def test_reads_json_document(self, tmp_path):
        path = tmp_path / "rivers.json"
        path.write_text(json.dumps(self.DOC), encoding="utf-8")
        (river,) = load_rivers(path)
        assert river.gauge_id == "03081500"
        assert river.runnable == RunnableRange(700.0, 2500.0)
        assert river.description == "Pool-drop"

    def test_missing_rivers_array(self, tmp_path):
        path = tmp_path / "rivers.json"
        path.write_text(json.dumps({"items": []}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_rivers(path)

    def test_missing_gauge_raises(self, tmp_path):
        doc = {"rivers": [{"id": "x", "name": "X", "runnable": {"min": 1, "max": 2}}]}
        path = tmp_path / "rivers.json"
        path.write_text(json.dumps(doc), encoding="utf-8")
        with pytest.raises(KeyError):
            load_rivers(path)


class TestFindRiver:
    def test_found_and_missing(self):
        rivers = load_rivers()
        assert find_river(rivers, "lower-yough").gauge_id == "03081500"
        assert find_river(rivers, "no-such-river") is None

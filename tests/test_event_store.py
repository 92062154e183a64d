"""
Tests for the append-only event log and its rotation.
"""
import json
import threading
from datetime import datetime, timedelta

import pytest
from conftest import make_event

from rotator_app.exceptions import EventLogError
from rotator_app.storage.event_store import EventStore
from rotator_app.storage.log_reader import LogReader


def ticking_clock(start=datetime(2026, 10, 19, 14, 3, 0)):
    """Clock that advances one second per call, so every rotation gets its own name"""
    state = {"now": start}

    def clock():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    return clock


class TestAppend:
    """Writing events"""

    def test_round_trip(self, store, reader):
        """Test writing and reading back events"""
        written = [make_event(url=f"https://a.example.com/{i}", country="FR") for i in range(25)]

        for event in written:
            store.append(event)

        assert reader.read() == written

    def test_one_json_object_per_line(self, store, log_path):
        """Test one json object per line"""
        store.append(make_event(url="https://a.example.com", ip="203.0.113.7", city="Paris"))

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert list(record) == ["timestamp", "url", "ip", "user_agent", "referer", "country", "city"]
        assert record["city"] == "Paris"

    def test_creates_missing_directory(self, tmp_path):
        """Test creates missing directory"""
        path = tmp_path / "nested" / "logs" / "redirections.log"

        EventStore(path).append(make_event())

        assert path.exists()

    def test_write_failure_raises(self, tmp_path):
        """Test write failure raises"""
        # A directory where the live segment should be makes open() fail
        path = tmp_path / "redirections.log"
        path.mkdir()

        with pytest.raises(EventLogError):
            EventStore(path).append(make_event())

    def test_concurrent_appends_keep_whole_lines(self, store, reader, log_path):
        """Test concurrent appends keep whole lines"""
        per_thread = 50
        threads = [
            threading.Thread(
                target=lambda n=n: [
                    store.append(make_event(url=f"https://t{n}.example.com/{i}", user_agent="x" * 500))
                    for i in range(per_thread)
                ]
            )
            for n in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        events = reader.read()
        assert len(events) == 8 * per_thread
        assert reader.skipped_lines == 0
        assert len(log_path.read_text(encoding="utf-8").splitlines()) == 8 * per_thread


class TestRotation:
    """Size-triggered rotation"""

    def test_no_rotation_below_threshold(self, store):
        """Test no rotation below threshold"""
        store.append(make_event())

        assert store.rotate_if_oversized() is None

    def test_missing_live_segment_is_not_rotated(self, store):
        """Test missing live segment is not rotated"""
        assert store.rotate_if_oversized() is None

    def test_rotation_name(self, log_path):
        """Test the rotated segment name"""
        store = EventStore(log_path)

        name = store.rotated_segment_path(datetime(2026, 10, 19, 14, 3, 0, 123456)).name

        assert name == "redirections.log.2026-10-19_14-03-00-123456.bak"

    def test_rotation_keeps_every_event(self, log_path):
        """Test rotation keeps every event"""
        store = EventStore(log_path, max_bytes=400, clock=ticking_clock())
        written = [
            make_event(url=f"https://a.example.com/{i}", timestamp=f"2026-10-19T10:{i:02d}:00+00:00")
            for i in range(20)
        ]

        for event in written:
            store.append(event)

        reader = LogReader(log_path)
        rotated = reader.segments()[:-1]
        assert len(rotated) >= 2
        assert sorted(reader.read(), key=lambda event: event.url) == sorted(written, key=lambda event: event.url)
        assert reader.read(chronological=True) == written

    def test_rotated_segments_are_not_modified(self, log_path):
        """Test rotated segments are not modified"""
        store = EventStore(log_path, max_bytes=100, clock=ticking_clock())
        store.append(make_event(url="https://first.example.com"))
        store.append(make_event(url="https://second.example.com"))

        rotated = LogReader(log_path).segments()[0]
        before = rotated.read_bytes()

        store.append(make_event(url="https://third.example.com"))

        assert rotated.read_bytes() == before

    def test_name_collision_keeps_rotation_order(self, log_path):
        """Test that rotations within the same microsecond still sort newest first"""
        frozen = datetime(2026, 10, 19, 14, 3, 0)
        store = EventStore(log_path, max_bytes=10, clock=lambda: frozen)

        store.append(make_event(url="first"))
        store.append(make_event(url="second"))
        store.append(make_event(url="third"))

        reader = LogReader(log_path)
        assert [path.name for path in reader.segments()] == [
            "redirections.log.2026-10-19_14-03-00-000001.bak",
            "redirections.log.2026-10-19_14-03-00-000000.bak",
            "redirections.log",
        ]
        assert [event.url for event in reader.read()] == ["second", "first", "third"]

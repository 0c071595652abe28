"""Tests for the in-memory event store."""
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch
from uuid import uuid4

import pytest

from event_tracker.errors import EventNotFound, NotFound, StorageError
from event_tracker.models import EventQuery
from event_tracker.storage.base import EventStore
from event_tracker.storage.memory import InMemoryEventStore
from tests.conftest import make_draft


class TestInsertAndGet:
    """Basic CRUD behaviour"""

    def test_insert_assigns_id(self, store):
        event = store.insert(make_draft())

        assert event.id is not None
        assert event.id.version == 4
        assert event.event_type == "login"
        assert event.payload == {"user_id": 1}
        assert store.count() == 1
        assert len(store) == 1

    def test_round_trip(self, store):
        event = store.insert(make_draft(payload={"nested": {"list": [1, 2, 3]}}))
        assert store.get(event.id) == event

    def test_get_unknown_id_raises_not_found(self, store):
        store.insert(make_draft())
        with pytest.raises(EventNotFound) as exc_info:
            store.get(uuid4())
        assert isinstance(exc_info.value, NotFound)

    def test_get_on_empty_store(self, store):
        with pytest.raises(NotFound):
            store.get(uuid4())

    def test_repeated_gets_identical(self, store):
        event = store.insert(make_draft(payload={"k": "v"}))
        first = store.get(event.id)
        for _ in range(5):
            assert store.get(event.id) == first

    def test_stored_content_not_shared_with_caller(self, store):
        payload = {"items": [1]}
        event = store.insert(make_draft(payload=payload))

        payload["items"].append(2)
        event.payload["items"].append(3)
        store.get(event.id).payload["items"].append(4)
        store.list_events(EventQuery())[0].payload["items"].append(5)

        assert store.get(event.id).payload == {"items": [1]}

    def test_health_check(self, store):
        assert store.health_check() is True

    def test_is_event_store(self, store):
        assert isinstance(store, EventStore)

    def test_memory_error_becomes_storage_error(self, store):
        with patch("event_tracker.storage.memory.uuid.uuid4", side_effect=MemoryError):
            with pytest.raises(StorageError):
                store.insert(make_draft())
        assert store.count() == 0


class TestListEvents:
    """Listing with filters"""

    def test_list_by_type(self, store):
        store.insert(make_draft("login", "2025-01-01T12:00:00Z"))
        store.insert(make_draft("logout", "2025-01-01T13:00:00Z"))

        results = store.list_events(EventQuery(event_type="login"))

        assert len(results) == 1
        assert results[0].event_type == "login"

    def test_list_by_time_range(self, store):
        store.insert(make_draft("test", "2025-01-01T10:00:00Z"))
        middle = store.insert(make_draft("test", "2025-01-01T11:00:00Z"))
        store.insert(make_draft("test", "2025-01-01T12:00:00Z"))

        results = store.list_events(EventQuery(start="2025-01-01T10:30:00Z", end="2025-01-01T11:30:00Z"))

        assert results == [middle]

    def test_list_no_match(self, store):
        assert store.list_events(EventQuery(event_type="nonexistent")) == []

    def test_list_everything(self, store):
        inserted = {store.insert(make_draft(f"type-{i}")).id for i in range(10)}
        assert {e.id for e in store.list_events(EventQuery())} == inserted

    def test_start_after_end(self, store):
        store.insert(make_draft())
        query = EventQuery(start="2025-02-01T00:00:00Z", end="2025-01-01T00:00:00Z")
        assert store.list_events(query) == []


class TestConcurrency:
    """Concurrent access through the read/write lock"""

    def test_concurrent_inserts_get_distinct_ids(self):
        store = InMemoryEventStore()
        n = 200

        with ThreadPoolExecutor(max_workers=16) as pool:
            events = list(pool.map(lambda i: store.insert(make_draft(f"t{i % 5}")), range(n)))

        ids = [e.id for e in events]
        assert len(set(ids)) == n
        assert store.count() == n
        for event in events:
            assert store.get(event.id) == event

    def test_concurrent_reads_steady_state(self):
        store = InMemoryEventStore()
        inserted = [store.insert(make_draft("login" if i % 2 else "logout")) for i in range(50)]
        expected_logins = {e.id for e in inserted if e.event_type == "login"}

        def read(i):
            listed = {e.id for e in store.list_events(EventQuery(event_type="login"))}
            fetched = store.get(inserted[i % len(inserted)].id)
            return listed, fetched

        with ThreadPoolExecutor(max_workers=32) as pool:
            results = list(pool.map(read, range(500)))

        for i, (listed, fetched) in enumerate(results):
            assert listed == expected_logins
            assert fetched == inserted[i % len(inserted)]

    def test_reads_during_writes_see_completed_inserts(self):
        store = InMemoryEventStore()
        completed = []
        completed_lock = threading.Lock()
        stop = threading.Event()
        failures = []

        def writer():
            for i in range(100):
                event = store.insert(make_draft(payload={"i": i}))
                with completed_lock:
                    completed.append(event.id)

        def reader():
            while not stop.is_set():
                with completed_lock:
                    done_before = set(completed)
                seen = {e.id for e in store.list_events(EventQuery())}
                if not done_before <= seen:
                    failures.append(done_before - seen)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        writers = [threading.Thread(target=writer) for _ in range(4)]
        for t in readers + writers:
            t.start()
        for t in writers:
            t.join(timeout=30)
        stop.set()
        for t in readers:
            t.join(timeout=30)

        assert failures == []
        assert store.count() == 400

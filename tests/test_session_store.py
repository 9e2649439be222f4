"""
SessionStore tests
==================

Lifecycle of a car session and the locking discipline of the store.
"""

import threading

import pytest

from cloud_errors import SessionStateError, ValidationError
from cloud_session import SessionStore, check_client_id, check_timestamp
from pride_group import GroupElement


class TestSessionStore:

    @pytest.fixture
    def store(self):
        return SessionStore()

    def test_open_creates_started_session(self, store):
        store.open(7)
        session = store.get(7)

        assert session.started
        assert session.commitments == {}
        assert session.aggregate_v == GroupElement.identity()
        assert session.aggregate_a == GroupElement.identity()
        assert 7 in store
        assert len(store) == 1

    def test_open_twice_fails(self, store):
        store.open(7)
        with pytest.raises(SessionStateError, match="already active"):
            store.open(7)

    def test_open_twice_keeps_state(self, store):
        store.open(7)
        session = store.get(7)
        session.aggregate_v = GroupElement.generator()

        with pytest.raises(SessionStateError):
            store.open(7)
        assert store.get(7).aggregate_v == GroupElement.generator()

    def test_get_unknown_session_fails(self, store):
        with pytest.raises(SessionStateError, match="not started"):
            store.get(42)
        assert 42 not in store

    def test_unstarted_entry_is_reinitialized_on_open(self, store):
        entry = store._entry(9)
        entry.commitments[1] = object()
        assert 9 not in store

        with pytest.raises(SessionStateError):
            store.get(9)

        store.open(9)
        assert store.get(9) is entry
        assert entry.started
        assert entry.commitments == {}

    def test_locked_holds_session_lock(self, store):
        store.open(3)
        acquired = []

        with store.locked(3) as session:
            t = threading.Thread(target=lambda: acquired.append(session.lock.acquire(timeout=0.05)))
            t.start()
            t.join()

        assert acquired == [False]

    def test_concurrent_open_same_id_single_winner(self, store):
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            try:
                store.open(11)
                results.append("ok")
            except SessionStateError:
                results.append("err")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("err") == 7

    def test_distinct_ids_not_blocked_by_held_session(self, store):
        store.open(1)
        done = threading.Event()

        with store.locked(1):
            t = threading.Thread(target=lambda: (store.open(2), done.set()))
            t.start()
            assert done.wait(timeout=2)
            t.join()

        assert sorted(store.client_ids()) == [1, 2]


class TestIdentifierValidation:

    @pytest.mark.parametrize("value", [0, None, True, "7", 7.0, -1, 2 ** 64])
    def test_bad_client_id(self, value):
        with pytest.raises(ValidationError):
            check_client_id(value)

    def test_client_id_bounds(self):
        assert check_client_id(1) == 1
        assert check_client_id(2 ** 64 - 1) == 2 ** 64 - 1

    @pytest.mark.parametrize("value", [0, None, False, "1", 2 ** 63])
    def test_bad_timestamp(self, value):
        with pytest.raises(ValidationError):
            check_timestamp(value)

    def test_negative_timestamp_allowed(self):
        assert check_timestamp(-5) == -5

"""
Session Store
=============

Per-car protocol state held by the cloud.

Each car (identified by a non-zero unsigned 64-bit id) owns one Session:
the commitments it has submitted, keyed by timestamp, and the two running
aggregates Pi_V and Pi_A.

Concurrency:
------------
- The store-wide guard only protects the id -> Session dictionary
- Every Session carries its own lock; all reads and writes of a session's
  commitments and aggregates happen while holding it
- Requests for different cars never wait on each other's session lock
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from cloud_errors import SessionStateError, ValidationError
from pride_group import GroupElement

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2 ** 64 - 1
MIN_TIMESTAMP = -(2 ** 63)
MAX_TIMESTAMP = 2 ** 63 - 1


def _require_int(value, name: str) -> int:
    if value is None:
        raise ValidationError(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer")
    if value == 0:
        raise ValidationError(f"{name} is required")
    return value


def check_client_id(client_id) -> int:
    """Validate a car id: a non-zero unsigned 64-bit integer."""
    client_id = _require_int(client_id, "CarID")
    if not 0 < client_id <= MAX_CLIENT_ID:
        raise ValidationError("CarID is out of range")
    return client_id


def check_timestamp(timestamp) -> int:
    """Validate a commitment timestamp: a non-zero signed 64-bit integer."""
    timestamp = _require_int(timestamp, "timestamp")
    if not MIN_TIMESTAMP <= timestamp <= MAX_TIMESTAMP:
        raise ValidationError("timestamp is out of range")
    return timestamp


@dataclass(frozen=True)
class Commitment:
    point_v: GroupElement
    point_a: GroupElement
    timestamp: int


@dataclass
class Session:
    """State of one car. Only touch it while holding ``lock``."""

    commitments: Dict[int, Commitment] = field(default_factory=dict)
    aggregate_v: GroupElement = field(default_factory=GroupElement.identity)
    aggregate_a: GroupElement = field(default_factory=GroupElement.identity)
    started: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def start(self):
        self.commitments = {}
        self.aggregate_v = GroupElement.identity()
        self.aggregate_a = GroupElement.identity()
        self.started = True


class SessionStore:
    """
    Holds one Session per car for the lifetime of the process.

    Sessions are created on first use and never removed.
    """

    def __init__(self):
        self._sessions: Dict[int, Session] = {}
        self._guard = threading.Lock()

    def _entry(self, client_id: int) -> Session:
        with self._guard:
            session = self._sessions.get(client_id)
            if session is None:
                session = Session()
                self._sessions[client_id] = session
            return session

    def open(self, client_id: int) -> None:
        """
        Start the session of ``client_id``.

        Raises
        ------
        SessionStateError
            If the session is already active.
        """
        session = self._entry(client_id)
        with session.lock:
            if session.started:
                raise SessionStateError("Session already active.")
            session.start()
        logger.info("NewSession carID = %d", client_id)

    def get(self, client_id: int) -> Session:
        """
        Return the started session of ``client_id``.

        Raises
        ------
        SessionStateError
            If no session was opened for this car.
        """
        with self._guard:
            session = self._sessions.get(client_id)
        if session is None or not session.started:
            raise SessionStateError("session is not started")
        return session

    @contextmanager
    def locked(self, client_id: int) -> Iterator[Session]:
        """Yield the started session of ``client_id`` while holding its lock."""
        session = self.get(client_id)
        with session.lock:
            yield session

    def client_ids(self) -> List[int]:
        with self._guard:
            return [cid for cid, s in self._sessions.items() if s.started]

    def __contains__(self, client_id) -> bool:
        with self._guard:
            session = self._sessions.get(client_id)
        return session is not None and session.started

    def __len__(self) -> int:
        return len(self.client_ids())

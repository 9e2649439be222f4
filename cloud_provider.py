"""
Cloud Provider (Protocol Service)
=================================

The cloud is the aggregation authority of the PRIDE protocol. Cars talk to
it in three steps:

1. NewSession: open a session for the car id
2. Commit: submit timestamped commitments (Ṽ_t, Ã_t), any number of times
3. Sign: present the claimed aggregates (Pi_V, Pi_A); the cloud answers
   "OK" iff they equal Σ Ṽ_t and Σ Ã_t

State Machine:
--------------
- Uninitialized -> Started via open_session; a session never leaves Started
- commit and verify are only valid on a started session
- verify is read-only and is evaluated against the aggregates at call time

Failures:
---------
Protocol failures are raised as ProtocolError subclasses and leave the
session unchanged. Anything else raised inside an operation is converted to
InternalFatal so a collaborator bug cannot take the server down.
"""

import functools
import logging
import time
from typing import Callable

from cloud_aggregator import CommitmentAggregator
from cloud_errors import InternalFatal, ProtocolError
from cloud_session import SessionStore, check_client_id, check_timestamp
from cloud_verifier import ProofVerifier

logger = logging.getLogger(__name__)


def _guarded(operation):
    """Log protocol errors and wrap unexpected ones into InternalFatal."""
    name = operation.__name__

    @functools.wraps(operation)
    def wrapper(self, *args, **kwargs):
        logger.info("[%s] Incoming", name)
        try:
            return operation(self, *args, **kwargs)
        except ProtocolError as e:
            logger.warning("[%s] %s: %s", name, e.code, e.message)
            raise
        except Exception as e:
            logger.exception("[%s] unexpected failure", name)
            raise InternalFatal(f"[CloudFatal] {e}") from e

    return wrapper


class CloudProvider:
    """
    Orchestrates the protocol operations on top of a SessionStore.

    Parameters
    ----------
    store : SessionStore, optional
        Session storage; a fresh in-memory store if omitted
    aggregator : CommitmentAggregator, optional
    verifier : ProofVerifier, optional
    clock : callable, optional
        Returns the current unix time in seconds (float or int)
    """

    def __init__(self, store: SessionStore = None, aggregator: CommitmentAggregator = None,
                 verifier: ProofVerifier = None, clock: Callable[[], float] = time.time):
        self.store = store if store is not None else SessionStore()
        self.aggregator = aggregator if aggregator is not None else CommitmentAggregator()
        self.verifier = verifier if verifier is not None else ProofVerifier()
        self.clock = clock

    def time(self) -> int:
        """Current unix timestamp in whole seconds."""
        return int(self.clock())

    @_guarded
    def open_session(self, client_id) -> None:
        client_id = check_client_id(client_id)
        self.store.open(client_id)

    @_guarded
    def commit(self, client_id, timestamp, point_v, point_a) -> None:
        client_id = check_client_id(client_id)
        timestamp = check_timestamp(timestamp)
        with self.store.locked(client_id) as session:
            commitment = self.aggregator.add_commitment(session, timestamp, point_v, point_a)
        logger.info("[Commit] time=%d, car=%d", commitment.timestamp, client_id)

    @_guarded
    def verify(self, client_id, claimed_v, claimed_a) -> str:
        client_id = check_client_id(client_id)
        with self.store.locked(client_id) as session:
            ack = self.verifier.verify(session, claimed_v, claimed_a)
        logger.info("[Sign] %s car=%d", ack, client_id)
        return ack

    # JSON-RPC method names: Cloud.NewSession, Cloud.Sign
    new_session = open_session
    sign = verify

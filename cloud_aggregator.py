"""
Commitment Aggregator
=====================

Folds the timestamped commitments (Ṽ, Ã) of a car into the running
aggregates of its session:

    Pi_V = O + Σ_t Ṽ_t
    Pi_A = O + Σ_t Ã_t

where O is the identity of G1. Addition in G1 is commutative, so the
aggregates do not depend on submission order; each timestamp is accepted
once, so no commitment is ever counted twice.

Security:
---------
- A car can only present a matching (Pi_V, Pi_A) later if it knows the
  exact commitments it submitted
- Re-submitting a timestamp is rejected, which makes client retries safe
"""

import logging

from cloud_errors import DuplicateCommitmentError
from cloud_session import Commitment, Session, check_timestamp
from pride_group import GroupElement

logger = logging.getLogger(__name__)


class CommitmentAggregator:
    """Validates commitments and adds them into a session."""

    def add_commitment(self, session: Session, timestamp, raw_v, raw_a) -> Commitment:
        """
        Add one commitment to ``session``.

        Parameters
        ----------
        session : Session
            A started session
        timestamp : int
            Non-zero commitment timestamp
        raw_v, raw_a : sequence
            Affine coordinate pairs [x, y] of Ṽ and Ã

        Returns
        -------
        Commitment
            The stored commitment

        Raises
        ------
        ValidationError
            If the timestamp is zero or missing.
        InvalidPointError
            If either pair is not a point of G1.
        DuplicateCommitmentError
            If the session already holds a commitment for ``timestamp``.

        Notes
        -----
        Both aggregates are computed before anything is assigned, so a
        failure at any step leaves the session untouched.
        """
        timestamp = check_timestamp(timestamp)
        point_v = GroupElement.from_pair(raw_v)
        point_a = GroupElement.from_pair(raw_a)

        with session.lock:
            if timestamp in session.commitments:
                raise DuplicateCommitmentError(
                    "the commitment of the given timestamp already exist")

            new_v = session.aggregate_v + point_v
            new_a = session.aggregate_a + point_a
            commitment = Commitment(point_v=point_v, point_a=point_a, timestamp=timestamp)

            session.commitments[timestamp] = commitment
            session.aggregate_v = new_v
            session.aggregate_a = new_a

        logger.debug("commitment %d folded, %d stored", timestamp, len(session.commitments))
        return commitment

"""
Aggregate Proof Verifier
========================

A car proves it knows the aggregate of its commitments by sending the
claimed (Pi_V, Pi_A). The cloud accepts iff both equal its own
accumulated aggregates, compared by affine coordinates.

The acknowledgment is the fixed string "OK"; no signature is produced.
"""

from cloud_errors import MismatchError
from cloud_session import Session
from pride_group import GroupElement

ACKNOWLEDGMENT = "OK"


class ProofVerifier:

    def verify(self, session: Session, claimed_v, claimed_a) -> str:
        """
        Check a claimed aggregate pair against ``session``.

        Raises
        ------
        InvalidPointError
            If either claim does not parse as a G1 point.
        MismatchError
            If either claim differs from the accumulated aggregate.
        """
        pi_v = GroupElement.from_pair(claimed_v)
        pi_a = GroupElement.from_pair(claimed_a)

        with session.lock:
            aggregate_v = session.aggregate_v
            aggregate_a = session.aggregate_a

        if pi_v != aggregate_v:
            raise MismatchError("PiV is not equal")
        if pi_a != aggregate_a:
            raise MismatchError("PiA is not equal")
        return ACKNOWLEDGMENT

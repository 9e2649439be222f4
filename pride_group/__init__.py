"""
PRIDE Group Arithmetic
======================

Elliptic-curve group used by the PRIDE commitment protocol: G1 of the
BN254 (alt_bn128) curve, backed by py_ecc.

Modules:
--------
- points: GroupElement (addition, identity, canonical equality, parsing)

Usage:
------
    from pride_group import GroupElement, sum_points

    p = GroupElement.generator() * 5
    q = GroupElement.from_xy(*p.to_xy())
    assert sum_points([p, q]) == p * 2
"""

__version__ = "0.1.0"

from .points import GroupElement, sum_points, IDENTITY_XY

__all__ = ['GroupElement', 'sum_points', 'IDENTITY_XY']

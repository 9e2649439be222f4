"""
BN254 G1 Group Elements
=======================

This module wraps the G1 group of the BN254 (alt_bn128) curve provided by
py_ecc. It is the same curve as the ``bn256`` package used by the cars, so
affine coordinates sent on the wire can be parsed directly.

Curve:
------
- E: y^2 = x^3 + 3 over F_p, p = field_modulus
- G1 has cofactor 1, so every on-curve point is a group element
- The point at infinity (identity) is encoded as (0, 0), as bn256 does

According to py_ecc:
- Points are affine tuples (FQ, FQ), the identity is None (Z1)
- add(p1, p2) handles the identity and doubling cases
- multiply(pt, n) expects a non-negative scalar
"""

from functools import reduce
from typing import Iterable, Tuple

from py_ecc.bn128 import FQ
from py_ecc.bn128.bn128_curve import (
    G1,
    Z1,
    add,
    b,
    curve_order,
    field_modulus,
    is_on_curve,
    multiply,
    neg,
)

from cloud_errors import InvalidPointError


IDENTITY_XY = (0, 0)


def _parse_coordinate(value, name: str) -> int:
    """Turn a wire coordinate (int or decimal string) into an int in [0, p)."""
    if isinstance(value, bool):
        raise InvalidPointError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        coordinate = value
    elif isinstance(value, str):
        try:
            coordinate = int(value.strip(), 10)
        except ValueError:
            raise InvalidPointError(f"{name} is not a decimal integer: {value!r}") from None
    else:
        raise InvalidPointError(f"{name} must be an integer, got {type(value).__name__}")

    if not 0 <= coordinate < field_modulus:
        raise InvalidPointError(f"{name} is outside the base field")
    return coordinate


class GroupElement:
    """
    Immutable element of BN254 G1.

    Equality is exact equality of the affine coordinates, which are
    canonical for this representation.
    """

    __slots__ = ('_point',)

    def __init__(self, point=Z1):
        self._point = point

    @classmethod
    def identity(cls) -> 'GroupElement':
        return cls(Z1)

    @classmethod
    def generator(cls) -> 'GroupElement':
        return cls(G1)

    @classmethod
    def from_xy(cls, x, y) -> 'GroupElement':
        """
        Parse an affine coordinate pair.

        Parameters
        ----------
        x, y : int or str
            Affine coordinates, each in [0, p). (0, 0) is the identity.

        Returns
        -------
        GroupElement

        Raises
        ------
        InvalidPointError
            If a coordinate is not an integer in range, or the pair is not
            on the curve.
        """
        x = _parse_coordinate(x, 'x')
        y = _parse_coordinate(y, 'y')
        if (x, y) == IDENTITY_XY:
            return cls.identity()

        point = (FQ(x), FQ(y))
        if not is_on_curve(point, b):
            raise InvalidPointError(f"({x}, {y}) is not on the curve")
        return cls(point)

    @classmethod
    def from_pair(cls, pair) -> 'GroupElement':
        """Parse a two-element sequence [x, y] as sent by the cars."""
        if not isinstance(pair, (list, tuple)):
            raise InvalidPointError("point must be a pair of coordinates")
        if len(pair) != 2:
            raise InvalidPointError(f"point must have 2 coordinates, got {len(pair)}")
        return cls.from_xy(pair[0], pair[1])

    def to_xy(self) -> Tuple[int, int]:
        if self._point is None:
            return IDENTITY_XY
        x, y = self._point
        return (int(x.n), int(y.n))

    def is_identity(self) -> bool:
        return self._point is None

    def __add__(self, other):
        if not isinstance(other, GroupElement):
            return NotImplemented
        return GroupElement(add(self._point, other._point))

    def __neg__(self):
        return GroupElement(neg(self._point))

    def __sub__(self, other):
        if not isinstance(other, GroupElement):
            return NotImplemented
        return self + (-other)

    def __mul__(self, scalar):
        if isinstance(scalar, bool) or not isinstance(scalar, int):
            return NotImplemented
        if self._point is None:
            return self
        # py_ecc recurses forever on negative scalars
        return GroupElement(multiply(self._point, scalar % curve_order))

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, GroupElement):
            return NotImplemented
        return self.to_xy() == other.to_xy()

    def __hash__(self):
        return hash(self.to_xy())

    def __repr__(self):
        if self._point is None:
            return "GroupElement(identity)"
        x, y = self.to_xy()
        return f"GroupElement(x={x}, y={y})"


def sum_points(points: Iterable[GroupElement]) -> GroupElement:
    """Identity plus the sum of ``points``."""
    return reduce(lambda acc, p: acc + p, points, GroupElement.identity())

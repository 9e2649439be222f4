"""
BN254 G1 wrapper tests
======================

Parsing of wire coordinates, identity handling and the group law.
"""

import pytest
from py_ecc.bn128.bn128_curve import field_modulus

from cloud_errors import InvalidPointError
from pride_group import GroupElement, IDENTITY_XY, sum_points


class TestGroupElement:

    @pytest.fixture
    def g(self):
        return GroupElement.generator()

    def test_generator_coordinates(self, g):
        assert g.to_xy() == (1, 2)
        assert GroupElement.from_xy(1, 2) == g

    def test_identity_encoding(self):
        identity = GroupElement.identity()
        assert identity.is_identity()
        assert identity.to_xy() == IDENTITY_XY
        assert GroupElement.from_xy(0, 0) == identity

    def test_round_trip_through_decimal_strings(self, g):
        p = g * 12345
        x, y = p.to_xy()
        assert GroupElement.from_xy(str(x), str(y)) == p
        assert GroupElement.from_pair([str(x), y]) == p

    def test_off_curve_point_rejected(self):
        with pytest.raises(InvalidPointError):
            GroupElement.from_xy(1, 3)

    def test_coordinate_outside_field_rejected(self, g):
        # x + p reduces to the same field element but is not canonical
        x, y = g.to_xy()
        with pytest.raises(InvalidPointError):
            GroupElement.from_xy(x + field_modulus, y)
        with pytest.raises(InvalidPointError):
            GroupElement.from_xy(-1, y)

    @pytest.mark.parametrize("value", [True, 1.0, None, "0x01", "one", b"1"])
    def test_non_integer_coordinate_rejected(self, value):
        with pytest.raises(InvalidPointError):
            GroupElement.from_xy(value, 2)

    @pytest.mark.parametrize("pair", [[1], [1, 2, 3], "12", {"x": 1, "y": 2}, None, 7])
    def test_malformed_pair_rejected(self, pair):
        with pytest.raises(InvalidPointError):
            GroupElement.from_pair(pair)

    def test_group_law(self, g):
        p, q = g * 3, g * 5
        assert p + q == q + p == g * 8
        assert p + GroupElement.identity() == p
        assert p + (-p) == GroupElement.identity()
        assert q - p == g * 2
        assert 2 * p == p + p

    def test_negative_scalar(self, g):
        assert g * -1 == -g

    def test_equality_and_hash(self, g):
        a = g * 7
        b = GroupElement.from_xy(*a.to_xy())
        assert a == b
        assert hash(a) == hash(b)
        assert a != g
        assert a != a.to_xy()

    def test_sum_points(self, g):
        assert sum_points([]) == GroupElement.identity()
        assert sum_points([g * k for k in range(1, 5)]) == g * 10

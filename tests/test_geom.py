"""Test module for point geometries in arcbez.geom

The tests are run using pytest.
"""

import math

import numpy as np
import pytest

from arcbez.common import InvalidControlPointsError
from arcbez.geom import AvPoint, AvPointProperties, GeomMath

###############################################################################
# GeomMath Tests
###############################################################################


class TestGeomMath:
    """Test the static vector helpers."""

    def test_magnitude(self):
        """Magnitude is the Euclidean length."""
        assert GeomMath.magnitude(3.0, 4.0) == pytest.approx(5.0)

    def test_normalize(self):
        """Normalization scales to unit length."""
        x, y = GeomMath.normalize(3.0, -4.0)
        assert (x, y) == pytest.approx((0.6, -0.8))

    def test_normalize_zero_vector(self):
        """A zero vector stays zero instead of dividing by zero."""
        assert GeomMath.normalize(0.0, 0.0) == (0.0, 0.0)

    def test_normalize_tiny_vector(self):
        """Very short vectors still normalize."""
        x, y = GeomMath.normalize(1e-300, 1e-300)
        assert math.hypot(x, y) == pytest.approx(1.0)


###############################################################################
# AvPoint Tests
###############################################################################


class TestAvPoint:
    """Test the immutable point value."""

    def test_from_sequence(self):
        """Tuples, lists and arrays are accepted."""
        assert AvPoint.from_sequence((1, 2)) == AvPoint(1.0, 2.0)
        assert AvPoint.from_sequence([1.5, -2.5]) == AvPoint(1.5, -2.5)
        assert AvPoint.from_sequence(np.array([3.0, 4.0])) == AvPoint(3.0, 4.0)
        point = AvPoint(7.0, 8.0)
        assert AvPoint.from_sequence(point) is point

    @pytest.mark.parametrize("value", [(1.0,), (1.0, 2.0, 3.0), (math.nan, 1.0), (1.0, -math.inf), 5, "xy"])
    def test_from_sequence_invalid(self, value):
        """Malformed and non-finite input is rejected."""
        with pytest.raises(InvalidControlPointsError):
            AvPoint.from_sequence(value)

    def test_from_sequence_rejects_strings(self):
        """Two-character strings are not read digit by digit."""
        with pytest.raises(InvalidControlPointsError):
            AvPoint.from_sequence("12")
        with pytest.raises(InvalidControlPointsError):
            AvPoint.from_sequence(b"12")

    def test_from_dict_missing_key(self):
        """Missing coordinates raise instead of defaulting to zero."""
        with pytest.raises(InvalidControlPointsError):
            AvPoint.from_dict({})
        with pytest.raises(InvalidControlPointsError):
            AvPoint.from_dict({"x": 1.0})

    def test_immutable(self):
        """Points cannot be modified."""
        point = AvPoint(1.0, 2.0)
        with pytest.raises(AttributeError):
            point.x = 5.0  # type: ignore[misc]

    def test_vector_helpers(self):
        """Magnitude, normalization, unpacking and tuple form."""
        point = AvPoint(3.0, 4.0)
        assert point.magnitude == pytest.approx(5.0)
        assert point.normalized().approx_equal(AvPoint(0.6, 0.8))
        assert AvPoint(0.0, 0.0).normalized() == AvPoint(0.0, 0.0)
        x, y = point
        assert (x, y) == (3.0, 4.0)
        assert point.as_tuple() == (3.0, 4.0)

    def test_approx_equal(self):
        """Tolerance applies per coordinate."""
        point = AvPoint(1.0, 1.0)
        assert point.approx_equal(AvPoint(1.0 + 1e-12, 1.0))
        assert not point.approx_equal(AvPoint(1.001, 1.0))
        assert point.approx_equal(AvPoint(1.001, 1.0), atol=1e-2)

    def test_dict_conversion(self):
        """Points survive a dictionary conversion."""
        point = AvPoint(-1.5, 2.25)
        assert AvPoint.from_dict(point.to_dict()) == point
        assert str(point) == "AvPoint(x=-1.5, y=2.25)"


###############################################################################
# AvPointProperties Tests
###############################################################################


class TestAvPointProperties:
    """Test the position and tangent aggregate."""

    def test_accessors(self):
        """Position and tangent are available as points."""
        props = AvPointProperties(x=1.0, y=2.0, tangent_x=0.0, tangent_y=1.0)
        assert props.point == AvPoint(1.0, 2.0)
        assert props.tangent == AvPoint(0.0, 1.0)
        assert props.to_dict() == {"x": 1.0, "y": 2.0, "tangent_x": 0.0, "tangent_y": 1.0}

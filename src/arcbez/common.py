"""Central module containing types, enums and exceptions for Bezier segment handling."""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Tuple, Union

###############################################################################
# Types
###############################################################################


Coordinate = Union[int, float]

PointLike = Union[Tuple[Coordinate, Coordinate], Sequence[Coordinate]]


###############################################################################
# Enums
###############################################################################


class BezierKind(Enum):
    """Enum to define the supported Bezier curve variants.

    The value is the number of control points of the variant.
    """

    QUADRATIC = 3
    CUBIC = 4

    @classmethod
    def from_point_count(cls, count: int) -> BezierKind:
        """Resolve the curve variant from the number of control points.

        Args:
            count: Number of supplied control points (3 or 4)

        Returns:
            BezierKind: QUADRATIC for 3 points, CUBIC for 4 points

        Raises:
            InvalidControlPointsError: If count is neither 3 nor 4
        """
        for kind in cls:
            if kind.value == count:
                return kind
        raise InvalidControlPointsError(f"A Bezier segment needs 3 or 4 control points, got {count}.")


###############################################################################
# Exceptions
###############################################################################


class BezierError(ValueError):
    """Base exception for Bezier segment errors."""


class InvalidControlPointsError(BezierError):
    """Raised when control points are missing, surplus or not finite."""


class InvalidSettingsError(BezierError):
    """Raised when arc-length settings are out of their valid range."""

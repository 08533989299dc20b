"""Handling 2D point geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from arcbez.common import InvalidControlPointsError, PointLike
from arcbez.consts import POINT_EQUALITY_TOLERANCE


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def magnitude(x: float, y: float) -> float:
        """Euclidean length of the vector (x, y)."""
        return math.hypot(x, y)

    @staticmethod
    def normalize(x: float, y: float) -> Tuple[float, float]:
        """
        Scale the vector (x, y) to unit length.

        A vector of exactly zero length has no direction. In that case the zero
        vector is returned instead of dividing by zero.

        Args:
            x (float): x-component of the vector
            y (float): y-component of the vector

        Returns:
            Tuple[float, float]: the unit vector, or (0.0, 0.0) for a zero vector
        """
        length = math.hypot(x, y)
        if length > 0.0:
            return (x / length, y / length)
        return (0.0, 0.0)


###############################################################################
# AvPoint
###############################################################################
@dataclass(frozen=True)
class AvPoint:
    """
    Represents an immutable 2D point or direction vector.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    @classmethod
    def from_sequence(cls, point: PointLike) -> AvPoint:
        """Create an AvPoint from an (x, y) pair, an AvPoint or a 2-element array.

        Raises:
            InvalidControlPointsError: If the input has not exactly two finite coordinates
        """
        if isinstance(point, AvPoint):
            return point
        if isinstance(point, (str, bytes)):
            raise InvalidControlPointsError(f"Point {point!r} is a string, not a sequence of numbers.")
        try:
            coords = [float(value) for value in point]
        except (TypeError, ValueError) as err:
            raise InvalidControlPointsError(f"Point {point!r} is not a sequence of numbers.") from err
        if len(coords) != 2:
            raise InvalidControlPointsError(f"Point {point!r} must have exactly 2 coordinates, got {len(coords)}.")
        if not (math.isfinite(coords[0]) and math.isfinite(coords[1])):
            raise InvalidControlPointsError(f"Point {point!r} has non-finite coordinates.")
        return cls(coords[0], coords[1])

    @property
    def magnitude(self) -> float:
        """float: Euclidean length of the point taken as a vector."""
        return GeomMath.magnitude(self.x, self.y)

    def as_tuple(self) -> Tuple[float, float]:
        """The point as Tuple (x, y)."""
        return (self.x, self.y)

    def normalized(self) -> AvPoint:
        """Unit vector in the direction of this point, or the zero vector."""
        return AvPoint(*GeomMath.normalize(self.x, self.y))

    def approx_equal(self, other: AvPoint, atol: float = POINT_EQUALITY_TOLERANCE) -> bool:
        """Check whether both coordinates differ by no more than atol."""
        return abs(self.x - other.x) <= atol and abs(self.y - other.y) <= atol

    def __iter__(self):
        yield self.x
        yield self.y

    def __str__(self):
        return f"AvPoint(x={self.x}, y={self.y})"

    def to_dict(self) -> dict:
        """Convert the AvPoint instance to a dictionary."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> AvPoint:
        """Create an AvPoint instance from a dictionary."""
        try:
            return cls.from_sequence((data["x"], data["y"]))
        except KeyError as err:
            raise InvalidControlPointsError(f"Point dictionary {data!r} lacks key {err}.") from err


###############################################################################
# AvPointProperties
###############################################################################
@dataclass(frozen=True)
class AvPointProperties:
    """
    Position and unit tangent at a location on a curve.

    Attributes:
        x (float): The x-coordinate of the position.
        y (float): The y-coordinate of the position.
        tangent_x (float): The x-component of the unit tangent.
        tangent_y (float): The y-component of the unit tangent.
    """

    x: float
    y: float
    tangent_x: float
    tangent_y: float

    @property
    def point(self) -> AvPoint:
        """AvPoint: The position."""
        return AvPoint(self.x, self.y)

    @property
    def tangent(self) -> AvPoint:
        """AvPoint: The unit tangent (zero vector at a stationary point)."""
        return AvPoint(self.tangent_x, self.tangent_y)

    def to_dict(self) -> dict:
        """Convert the AvPointProperties instance to a dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "tangent_x": self.tangent_x,
            "tangent_y": self.tangent_y,
        }

"""Bezier segment with arc-length parameterization"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from arcbez.arc_length import DEFAULT_SETTINGS, ArcLengthSettings, arc_length, t_at_length
from arcbez.bezier import BezierCurveBase, create_bezier
from arcbez.common import BezierKind, InvalidControlPointsError, PointLike
from arcbez.geom import AvPoint, AvPointProperties, GeomMath

logger = logging.getLogger(__name__)


###############################################################################
# AvBezierSegment
###############################################################################
class AvBezierSegment:
    """
    A single quadratic or cubic Bezier segment addressable by arc length.

    The variant follows from the number of control points: three points give a
    quadratic segment, four points a cubic one. The total length is integrated
    once on construction and never recomputed; the segment is immutable and
    may be queried from several threads without locking.
    """

    __slots__ = ("_control_points", "_curve", "_settings", "_total_length")

    def __init__(
        self,
        p0: PointLike,
        p1: PointLike,
        p2: PointLike,
        p3: Optional[PointLike] = None,
        settings: Optional[ArcLengthSettings] = None,
    ):
        """Initialize the segment from its control points.

        Args:
            p0: Start point
            p1: First control point
            p2: End point of a quadratic segment, second control point of a cubic one
            p3: End point of a cubic segment; None for a quadratic segment
            settings: Quadrature and search calibration, DEFAULT_SETTINGS if None

        Raises:
            InvalidControlPointsError: If a point is malformed or not finite
        """
        raw_points = (p0, p1, p2) if p3 is None else (p0, p1, p2, p3)
        self._control_points: Tuple[AvPoint, ...] = tuple(AvPoint.from_sequence(pt) for pt in raw_points)
        self._settings: ArcLengthSettings = settings if settings is not None else DEFAULT_SETTINGS
        self._curve: BezierCurveBase = create_bezier(
            [pt.x for pt in self._control_points], [pt.y for pt in self._control_points]
        )
        self._total_length: float = arc_length(self._curve, 1.0, self._settings.order)
        logger.debug("Created %s segment with total length %g", self._curve.kind.name.lower(), self._total_length)

    @classmethod
    def from_points(
        cls, points: Sequence[PointLike], settings: Optional[ArcLengthSettings] = None
    ) -> AvBezierSegment:
        """Create a segment from a sequence of 3 (quadratic) or 4 (cubic) points.

        Raises:
            InvalidControlPointsError: If fewer than 3 or more than 4 points are given,
                or any of them is malformed
        """
        BezierKind.from_point_count(len(points))
        checked = [AvPoint.from_sequence(pt) for pt in points]
        return cls(*checked, settings=settings)

    @property
    def kind(self) -> BezierKind:
        """BezierKind: The curve variant of the segment."""
        return self._curve.kind

    @property
    def control_points(self) -> Tuple[AvPoint, ...]:
        """Tuple[AvPoint, ...]: The 3 or 4 control points."""
        return self._control_points

    @property
    def start_point(self) -> AvPoint:
        """AvPoint: The first control point."""
        return self._control_points[0]

    @property
    def end_point(self) -> AvPoint:
        """AvPoint: The last control point."""
        return self._control_points[-1]

    @property
    def settings(self) -> ArcLengthSettings:
        """ArcLengthSettings: The calibration used by this segment."""
        return self._settings

    @property
    def curve(self) -> BezierCurveBase:
        """BezierCurveBase: The evaluator of the segment."""
        return self._curve

    @property
    def total_length(self) -> float:
        """float: The arc length of the whole segment."""
        return self._total_length

    def get_total_length(self) -> float:
        """Return the cached arc length of the whole segment."""
        return self._total_length

    ###########################################################################
    # Parameter based queries
    ###########################################################################
    def point_at(self, t: float) -> AvPoint:
        """Position at curve parameter t."""
        return AvPoint(*self._curve.point(t))

    def derivative_at(self, t: float) -> AvPoint:
        """Velocity vector (not normalized) at curve parameter t."""
        return AvPoint(*self._curve.derivative(t))

    def length_at(self, t: float) -> float:
        """Arc length from the start of the segment up to curve parameter t."""
        if t == 1.0:
            return self._total_length
        return arc_length(self._curve, t, self._settings.order)

    ###########################################################################
    # Length based queries
    ###########################################################################
    def t_at_length(self, pos: float) -> float:
        """Curve parameter at arc length pos, clamped to [0, 1]."""
        return t_at_length(
            lambda t: arc_length(self._curve, t, self._settings.order),
            self._curve.speed,
            pos,
            self._total_length,
            self._settings,
        )

    def point_at_length(self, pos: float) -> AvPoint:
        """Position at arc length pos."""
        return self.point_at(self.t_at_length(pos))

    def tangent_at_length(self, pos: float) -> AvPoint:
        """Unit tangent at arc length pos; the zero vector at a stationary point."""
        dx, dy = self._curve.derivative(self.t_at_length(pos))
        return AvPoint(*GeomMath.normalize(dx, dy))

    def properties_at_length(self, pos: float) -> AvPointProperties:
        """Position and unit tangent at arc length pos, sharing one parameter search."""
        t = self.t_at_length(pos)
        x, y = self._curve.point(t)
        tangent_x, tangent_y = GeomMath.normalize(*self._curve.derivative(t))
        return AvPointProperties(x=x, y=y, tangent_x=tangent_x, tangent_y=tangent_y)

    def sample_by_length(self, count: int) -> NDArray[np.float64]:
        """
        Sample the segment at positions evenly spaced in arc length.

        Args:
            count: Number of samples, at least 2 (start and end)

        Returns:
            NDArray[np.float64] of shape (count, 4) with columns x, y, tangent_x, tangent_y

        Raises:
            ValueError: If count is smaller than 2
        """
        if count < 2:
            raise ValueError(f"Sampling by length needs at least 2 samples, got {count}.")
        result = np.empty((count, 4), dtype=np.float64)
        for index, pos in enumerate(np.linspace(0.0, self._total_length, count)):
            props = self.properties_at_length(float(pos))
            result[index] = (props.x, props.y, props.tangent_x, props.tangent_y)
        return result

    ###########################################################################
    # Conversion
    ###########################################################################
    def __str__(self):
        points = ", ".join(f"({pt.x}, {pt.y})" for pt in self._control_points)
        return f"AvBezierSegment(kind={self.kind.name}, points=[{points}], total_length={self._total_length})"

    def to_dict(self) -> dict:
        """Convert the AvBezierSegment instance to a dictionary."""
        return {
            "points": [pt.to_dict() for pt in self._control_points],
            "settings": self._settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> AvBezierSegment:
        """Create an AvBezierSegment instance from a dictionary."""
        if "points" not in data:
            raise InvalidControlPointsError("Dictionary has no 'points' entry.")
        points = [AvPoint.from_dict(item) for item in data["points"]]
        settings = ArcLengthSettings.from_dict(data["settings"]) if "settings" in data else None
        return cls.from_points(points, settings=settings)

"""Bezier curve evaluation for quadratic and cubic segments.

Each curve variant is a separate evaluator class with its own closed-form
position and derivative formulas. The variant is picked once, when the
evaluator is created, so the numeric code itself never branches on the kind.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import ClassVar, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from arcbez.common import BezierKind, InvalidControlPointsError

ParamArray = Union[Sequence[float], NDArray[np.float64]]


class BezierCurveBase(ABC):
    """Common interface of the quadratic and cubic Bezier evaluators.

    The control points are stored as separate abscissa and ordinate tuples.
    Scalar methods accept any real t, including values slightly outside
    [0, 1] which occur while searching a parameter numerically.
    """

    KIND: ClassVar[BezierKind]

    __slots__ = ("_xs", "_ys", "_breakpoints")

    def __init__(self, xs: Sequence[float], ys: Sequence[float]):
        """Initialize the evaluator with the control point coordinates.

        Args:
            xs: x-coordinates of the control points
            ys: y-coordinates of the control points

        Raises:
            InvalidControlPointsError: If the number of coordinates does not match
                the variant or a coordinate is not finite
        """
        count = self.KIND.value
        if len(xs) != count or len(ys) != count:
            raise InvalidControlPointsError(
                f"{type(self).__name__} needs {count} x- and y-coordinates, got {len(xs)} and {len(ys)}."
            )
        self._xs: Tuple[float, ...] = tuple(float(x) for x in xs)
        self._ys: Tuple[float, ...] = tuple(float(y) for y in ys)
        if not all(math.isfinite(value) for value in self._xs + self._ys):
            raise InvalidControlPointsError("Control point coordinates must be finite.")
        self._breakpoints: NDArray[np.float64] = self._find_breakpoints()

    @property
    def kind(self) -> BezierKind:
        """BezierKind: The curve variant of this evaluator."""
        return self.KIND

    @property
    def xs(self) -> Tuple[float, ...]:
        """Tuple[float, ...]: x-coordinates of the control points."""
        return self._xs

    @property
    def ys(self) -> Tuple[float, ...]:
        """Tuple[float, ...]: y-coordinates of the control points."""
        return self._ys

    @abstractmethod
    def point(self, t: float) -> Tuple[float, float]:
        """Position B(t) of the curve."""

    @abstractmethod
    def derivative(self, t: float) -> Tuple[float, float]:
        """Velocity vector B'(t) of the curve (not normalized)."""

    @abstractmethod
    def points(self, t_values: ParamArray) -> NDArray[np.float64]:
        """Positions for an array of parameters, shape (n, 2)."""

    @abstractmethod
    def derivatives(self, t_values: ParamArray) -> NDArray[np.float64]:
        """Velocity vectors for an array of parameters, shape (n, 2)."""

    @abstractmethod
    def derivative_coefficients(self) -> NDArray[np.float64]:
        """Power-basis coefficients of B'(t), highest degree first, one row per coordinate."""

    @property
    def breakpoints(self) -> NDArray[np.float64]:
        """NDArray[np.float64]: Sorted parameters in (0, 1) where the speed may have a kink.

        The speed |B'(t)| is only non-smooth where dx and dy vanish together
        (cusps, reversals of direction). Each such parameter is a root of both
        coordinate derivatives, so all real roots of dx and dy are collected,
        together with the vertex of a quadratic derivative to catch double roots.
        Splitting there costs at most a few extra quadrature pieces.
        """
        return self._breakpoints

    def _find_breakpoints(self) -> NDArray[np.float64]:
        candidates = []
        for coeffs in self.derivative_coefficients():
            for root in np.roots(coeffs):
                if abs(root.imag) <= 1e-12 * max(1.0, abs(root.real)):
                    candidates.append(float(root.real))
            if len(coeffs) == 3 and coeffs[0] != 0.0:
                candidates.append(float(-coeffs[1] / (2.0 * coeffs[0])))
        inner = [t for t in candidates if 0.0 < t < 1.0]
        result = np.unique(np.asarray(inner, dtype=np.float64))
        result.setflags(write=False)
        return result

    def speed(self, t: float) -> float:
        """Magnitude of the velocity vector |B'(t)|."""
        dx, dy = self.derivative(t)
        return math.hypot(dx, dy)

    def speeds(self, t_values: ParamArray) -> NDArray[np.float64]:
        """Magnitudes of the velocity vectors for an array of parameters, shape (n,)."""
        derivs = self.derivatives(t_values)
        return np.hypot(derivs[:, 0], derivs[:, 1])

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        """
        Sample the curve at evenly spaced parameters.

        Args:
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) with the sampled (x, y) points

        Raises:
            ValueError: If steps is smaller than 1
        """
        if steps < 1:
            raise ValueError(f"Polygonization needs at least 1 step, got {steps}.")
        return self.points(np.linspace(0.0, 1.0, steps + 1, dtype=np.float64))


class QuadraticBezier(BezierCurveBase):
    """Evaluator for quadratic Bezier curves with control points P0, P1, P2."""

    KIND = BezierKind.QUADRATIC

    __slots__ = ()

    def point(self, t: float) -> Tuple[float, float]:
        # B(t) = (1-t)^2*P0 + 2*(1-t)*t*P1 + t^2*P2
        p0x, p1x, p2x = self._xs
        p0y, p1y, p2y = self._ys
        omt = 1.0 - t
        w0 = omt * omt
        w1 = 2.0 * omt * t
        w2 = t * t
        return (w0 * p0x + w1 * p1x + w2 * p2x, w0 * p0y + w1 * p1y + w2 * p2y)

    def derivative(self, t: float) -> Tuple[float, float]:
        # B'(t) = 2*(1-t)*(P1-P0) + 2*t*(P2-P1)
        p0x, p1x, p2x = self._xs
        p0y, p1y, p2y = self._ys
        a = 2.0 * (1.0 - t)
        b = 2.0 * t
        return (a * (p1x - p0x) + b * (p2x - p1x), a * (p1y - p0y) + b * (p2y - p1y))

    def points(self, t_values: ParamArray) -> NDArray[np.float64]:
        t = np.asarray(t_values, dtype=np.float64)
        omt = 1.0 - t
        weights = np.stack((omt * omt, 2.0 * omt * t, t * t), axis=-1)
        return weights @ np.column_stack((self._xs, self._ys))

    def derivatives(self, t_values: ParamArray) -> NDArray[np.float64]:
        t = np.asarray(t_values, dtype=np.float64)
        ctrl = np.column_stack((self._xs, self._ys))
        weights = np.stack((2.0 * (1.0 - t), 2.0 * t), axis=-1)
        return weights @ np.diff(ctrl, axis=0)

    def derivative_coefficients(self) -> NDArray[np.float64]:
        # B'(t) = 2*(P1-P0) + 2*t*((P2-P1) - (P1-P0))
        ctrl = np.column_stack((self._xs, self._ys))
        a, b = np.diff(ctrl, axis=0)
        return np.stack((2.0 * (b - a), 2.0 * a), axis=-1)


class CubicBezier(BezierCurveBase):
    """Evaluator for cubic Bezier curves with control points P0, P1, P2, P3."""

    KIND = BezierKind.CUBIC

    __slots__ = ()

    def point(self, t: float) -> Tuple[float, float]:
        # B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*P1 + 3*(1-t)*t^2*P2 + t^3*P3
        p0x, p1x, p2x, p3x = self._xs
        p0y, p1y, p2y, p3y = self._ys
        omt = 1.0 - t
        omt2 = omt * omt
        t2 = t * t
        w0 = omt2 * omt
        w1 = 3.0 * omt2 * t
        w2 = 3.0 * omt * t2
        w3 = t2 * t
        return (
            w0 * p0x + w1 * p1x + w2 * p2x + w3 * p3x,
            w0 * p0y + w1 * p1y + w2 * p2y + w3 * p3y,
        )

    def derivative(self, t: float) -> Tuple[float, float]:
        # B'(t) = 3*(1-t)^2*(P1-P0) + 6*(1-t)*t*(P2-P1) + 3*t^2*(P3-P2)
        p0x, p1x, p2x, p3x = self._xs
        p0y, p1y, p2y, p3y = self._ys
        omt = 1.0 - t
        a = 3.0 * omt * omt
        b = 6.0 * omt * t
        c = 3.0 * t * t
        return (
            a * (p1x - p0x) + b * (p2x - p1x) + c * (p3x - p2x),
            a * (p1y - p0y) + b * (p2y - p1y) + c * (p3y - p2y),
        )

    def points(self, t_values: ParamArray) -> NDArray[np.float64]:
        t = np.asarray(t_values, dtype=np.float64)
        omt = 1.0 - t
        omt2 = omt * omt
        t2 = t * t
        weights = np.stack((omt2 * omt, 3.0 * omt2 * t, 3.0 * omt * t2, t2 * t), axis=-1)
        return weights @ np.column_stack((self._xs, self._ys))

    def derivatives(self, t_values: ParamArray) -> NDArray[np.float64]:
        t = np.asarray(t_values, dtype=np.float64)
        omt = 1.0 - t
        ctrl = np.column_stack((self._xs, self._ys))
        weights = np.stack((3.0 * omt * omt, 6.0 * omt * t, 3.0 * t * t), axis=-1)
        return weights @ np.diff(ctrl, axis=0)

    def derivative_coefficients(self) -> NDArray[np.float64]:
        # B'(t) = 3*(P1-P0) + 6*t*(b-a) + 3*t^2*(a-2b+c) with a, b, c the control point differences
        ctrl = np.column_stack((self._xs, self._ys))
        a, b, c = np.diff(ctrl, axis=0)
        return np.stack((3.0 * (a - 2.0 * b + c), 6.0 * (b - a), 3.0 * a), axis=-1)


_EVALUATORS = {cls.KIND: cls for cls in (QuadraticBezier, CubicBezier)}


def create_bezier(xs: Sequence[float], ys: Sequence[float]) -> BezierCurveBase:
    """Create the evaluator matching the number of control points.

    Args:
        xs: x-coordinates of 3 (quadratic) or 4 (cubic) control points
        ys: y-coordinates, same count as xs

    Returns:
        BezierCurveBase: a QuadraticBezier or CubicBezier instance

    Raises:
        InvalidControlPointsError: If the counts differ or are neither 3 nor 4
    """
    if len(xs) != len(ys):
        raise InvalidControlPointsError(f"Got {len(xs)} x-coordinates but {len(ys)} y-coordinates.")
    return _EVALUATORS[BezierKind.from_point_count(len(xs))](xs, ys)


def bezier_point(xs: Sequence[float], ys: Sequence[float], t: float) -> Tuple[float, float]:
    """Position at parameter t of the curve given by its control point coordinates."""
    return create_bezier(xs, ys).point(t)


def bezier_derivative(xs: Sequence[float], ys: Sequence[float], t: float) -> Tuple[float, float]:
    """Velocity vector at parameter t of the curve given by its control point coordinates."""
    return create_bezier(xs, ys).derivative(t)

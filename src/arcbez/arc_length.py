"""Arc-length integration and length-to-parameter inversion for Bezier curves.

The arc length L(t) is the integral of the speed |B'(u)| from 0 to t. It is
evaluated with a fixed-order Gauss-Legendre rule mapped onto [0, t], which is
accurate for the short smooth segments found in glyph and SVG outlines and
needs no adaptive step control. The rule is applied piecewise between the
zero-speed kinks of the curve (cusps, reversals), where the speed is not smooth.

The inverse mapping (length to parameter) searches the monotonic function
L(t) - pos with a Newton step safeguarded by bisection.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from arcbez.bezier import BezierCurveBase, create_bezier
from arcbez.common import InvalidSettingsError
from arcbez.consts import (
    GAUSS_LEGENDRE_MAX_ORDER,
    GAUSS_LEGENDRE_MIN_ORDER,
    GAUSS_LEGENDRE_ORDER,
    T2LENGTH_MAX_ITERATIONS,
    T2LENGTH_TOLERANCE,
)

logger = logging.getLogger(__name__)


###############################################################################
# ArcLengthSettings
###############################################################################
@dataclass(frozen=True)
class ArcLengthSettings:
    """
    Calibration of the arc-length integrator and the length-to-parameter search.

    Attributes:
        order (int): Number of Gauss-Legendre nodes.
        tolerance (float): Residual tolerance of the search, relative to max(total_length, 1).
        max_iterations (int): Iteration cap of the search.
    """

    order: int = GAUSS_LEGENDRE_ORDER
    tolerance: float = T2LENGTH_TOLERANCE
    max_iterations: int = T2LENGTH_MAX_ITERATIONS

    def __post_init__(self):
        if not GAUSS_LEGENDRE_MIN_ORDER <= self.order <= GAUSS_LEGENDRE_MAX_ORDER:
            raise InvalidSettingsError(
                f"Quadrature order must be within [{GAUSS_LEGENDRE_MIN_ORDER}, {GAUSS_LEGENDRE_MAX_ORDER}], "
                f"got {self.order}."
            )
        if not (math.isfinite(self.tolerance) and self.tolerance > 0.0):
            raise InvalidSettingsError(f"Search tolerance must be a positive number, got {self.tolerance}.")
        if self.max_iterations < 1:
            raise InvalidSettingsError(f"Search needs at least 1 iteration, got {self.max_iterations}.")

    @classmethod
    def from_dict(cls, data: dict) -> ArcLengthSettings:
        """Create an ArcLengthSettings instance from a dictionary."""
        return cls(
            order=int(data.get("order", GAUSS_LEGENDRE_ORDER)),
            tolerance=float(data.get("tolerance", T2LENGTH_TOLERANCE)),
            max_iterations=int(data.get("max_iterations", T2LENGTH_MAX_ITERATIONS)),
        )

    def to_dict(self) -> dict:
        """Convert the ArcLengthSettings instance to a dictionary."""
        return {
            "order": self.order,
            "tolerance": self.tolerance,
            "max_iterations": self.max_iterations,
        }


DEFAULT_SETTINGS = ArcLengthSettings()


###############################################################################
# Integration
###############################################################################
@lru_cache(maxsize=None)
def gauss_legendre_nodes(order: int) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Nodes and weights of the Gauss-Legendre rule on [-1, 1].

    The arrays are shared between callers and therefore read-only.
    """
    nodes, weights = np.polynomial.legendre.leggauss(order)
    nodes.setflags(write=False)
    weights.setflags(write=False)
    return nodes, weights


def arc_length(curve: BezierCurveBase, t: float, order: int = GAUSS_LEGENDRE_ORDER) -> float:
    """
    Arc length of the curve from parameter 0 to t.

    [0, t] is split at the curve breakpoints (zero-speed kinks) so that every
    piece [a, b] has a smooth integrand, and the Gauss-Legendre nodes are mapped
    from [-1, 1] onto each piece:
        L = sum over pieces of (b-a)/2 * sum(w_i * |B'((b-a)/2 * x_i + (a+b)/2)|)

    Args:
        curve (BezierCurveBase): the evaluator of the curve
        t (float): upper integration bound, normally within [0, 1]
        order (int): number of quadrature nodes per piece

    Returns:
        float: the arc length, 0.0 for t == 0
    """
    if t == 0.0:
        return 0.0
    breaks = curve.breakpoints
    inner = breaks[(breaks > 0.0) & (breaks < t)]
    bounds = np.concatenate(([0.0], inner, [t]))
    nodes, weights = gauss_legendre_nodes(order)
    half_widths = 0.5 * np.diff(bounds)
    centers = bounds[:-1] + half_widths
    params = half_widths[:, np.newaxis] * nodes + centers[:, np.newaxis]
    speeds = curve.speeds(params.ravel()).reshape(params.shape)
    return float(np.dot(half_widths, speeds @ weights))


def bezier_arc_length(
    xs: Sequence[float], ys: Sequence[float], t: float, order: int = GAUSS_LEGENDRE_ORDER
) -> float:
    """Arc length from 0 to t of the curve given by its control point coordinates."""
    return arc_length(create_bezier(xs, ys), t, order)


###############################################################################
# Inversion
###############################################################################
def t_at_length(
    length_func: Callable[[float], float],
    speed_func: Callable[[float], float],
    pos: float,
    total_length: float,
    settings: ArcLengthSettings = DEFAULT_SETTINGS,
) -> float:
    """
    Find the parameter t whose arc length L(t) equals pos.

    Lengths outside [0, total_length] are clamped to t = 0 and t = 1. Inside,
    the bracket [0, 1] is narrowed by the sign of L(t) - pos while Newton steps
    (slope = speed) are taken whenever they stay strictly inside the bracket;
    otherwise the bracket is bisected. Flat stretches of L (zero speed) fall
    back to bisection. When the iteration cap is reached the midpoint of the
    remaining bracket is returned.

    Args:
        length_func: arc length from 0 to t
        speed_func: derivative of length_func, i.e. |B'(t)|
        pos: the requested arc length
        total_length: L(1)
        settings: tolerance and iteration cap of the search

    Returns:
        float: the parameter t within [0, 1]

    Raises:
        ValueError: If pos is NaN
    """
    if math.isnan(pos):
        raise ValueError("Arc length position must be a number, got NaN.")
    if pos <= 0.0:
        return 0.0
    if pos >= total_length:
        return 1.0

    tolerance = settings.tolerance * max(total_length, 1.0)
    lower, upper = 0.0, 1.0
    t = pos / total_length
    for _ in range(settings.max_iterations):
        residual = length_func(t) - pos
        if abs(residual) <= tolerance:
            return t
        if residual < 0.0:
            lower = t
        else:
            upper = t

        speed = speed_func(t)
        if speed > 0.0:
            candidate = t - residual / speed
            if lower < candidate < upper:
                t = candidate
                continue
        t = 0.5 * (lower + upper)

    t = 0.5 * (lower + upper)
    logger.debug(
        "Length-to-parameter search stopped after %d iterations at t=%.17g (pos=%g, bracket width=%g)",
        settings.max_iterations,
        t,
        pos,
        upper - lower,
    )
    return t
